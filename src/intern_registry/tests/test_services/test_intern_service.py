import pytest

from intern_registry.exceptions.base import DuplicateEmailError, NotFoundError, RepositoryError
from intern_registry.schemas.intern import InternPayload


def make_payload(**overrides) -> InternPayload:
    data = {"name": "Alice", "email": "alice@x.com", "department": "Engineering"}
    data.update(overrides)
    return InternPayload(**data)


@pytest.mark.asyncio
class TestInternServiceCreate:

    async def test_create_with_fresh_email_assigns_new_id(self, intern_service, multiple_interns):
        """
        Behavior:
                - save_intern() without an id creates a row.
                - The id it gets was not used by any existing intern.
        """
        existing_ids = {i.id for i in multiple_interns}

        intern = await intern_service.save_intern(make_payload())

        assert intern.id is not None
        assert intern.id not in existing_ids

    async def test_create_then_get_returns_same_values(self, intern_service):
        created = await intern_service.save_intern(make_payload(name="Bertrand", email="bert@x.com", department="Ops"))

        fetched = await intern_service.get_intern(created.id)

        assert (fetched.name, fetched.email, fetched.department) == ("Bertrand", "bert@x.com", "Ops")

    async def test_create_duplicate_email_raises_and_adds_nothing(self, intern_service, intern_repository):
        """
        Behavior:
                - A second create with an email already on file raises DuplicateEmailError.
                - The store still holds exactly one row.

        Importance:
                - The pre-check must stop the write, not just report after the fact.
        """
        await intern_service.save_intern(make_payload())

        with pytest.raises(DuplicateEmailError) as exc_info:
            await intern_service.save_intern(make_payload(name="Bobby"))

        assert exc_info.value.to_payload() == {"email": "Email already exists"}
        assert len(await intern_repository.get_all()) == 1

    async def test_create_duplicate_email_ignores_case(self, intern_service):
        await intern_service.save_intern(make_payload())

        with pytest.raises(DuplicateEmailError):
            await intern_service.save_intern(make_payload(name="Bobby", email="ALICE@x.com"))

    async def test_store_constraint_backs_up_the_pre_check(self, intern_service, intern_repository, monkeypatch):
        """
        Behavior:
                - Make the email pre-check always answer "free" (as in a race between
                  two requests) and create a duplicate.
                - The unique index rejects the insert and the caller still gets
                  DuplicateEmailError.
        """
        await intern_service.save_intern(make_payload())

        async def always_free(email):
            return False

        monkeypatch.setattr(intern_repository, "email_exists", always_free)

        with pytest.raises(DuplicateEmailError) as exc_info:
            await intern_service.save_intern(make_payload(name="Bobby"))

        assert exc_info.value.to_payload() == {"email": "Email already exists"}
        assert len(await intern_repository.get_all()) == 1


@pytest.mark.asyncio
class TestInternServiceUpdate:

    async def test_update_missing_id_raises_not_found(self, intern_service):
        with pytest.raises(NotFoundError) as exc_info:
            await intern_service.save_intern(make_payload(), intern_id=99)

        assert exc_info.value.to_payload() == {"general": "Intern not found"}

    async def test_update_to_email_of_other_intern_raises_and_keeps_original(self, intern_service):
        alice = await intern_service.save_intern(make_payload())
        bob = await intern_service.save_intern(make_payload(name="Bobby", email="bob@x.com"))

        with pytest.raises(DuplicateEmailError):
            await intern_service.save_intern(make_payload(name="Bobby", email="alice@x.com"), intern_id=bob.id)

        unchanged = await intern_service.get_intern(bob.id)
        assert unchanged.email == "bob@x.com"
        assert (await intern_service.get_intern(alice.id)).email == "alice@x.com"

    async def test_update_keeping_own_email_is_allowed(self, intern_service):
        """
        Behavior:
                - Re-saving an intern with its own email (even in a different case)
                  must not be treated as a duplicate.
        """
        alice = await intern_service.save_intern(make_payload())

        updated = await intern_service.save_intern(
            make_payload(name="Alice Liddell", email="ALICE@x.com", department="Research"),
            intern_id=alice.id,
        )

        assert updated.id == alice.id
        assert updated.name == "Alice Liddell"
        assert updated.email == "alice@x.com"
        assert updated.department == "Research"

    async def test_update_to_free_email(self, intern_service):
        alice = await intern_service.save_intern(make_payload())

        updated = await intern_service.save_intern(make_payload(email="bob@x.com"), intern_id=alice.id)

        assert updated.id == alice.id
        assert updated.email == "bob@x.com"

    async def test_path_id_wins_over_body_id(self, intern_service, intern_repository):
        alice = await intern_service.save_intern(make_payload())

        updated = await intern_service.save_intern(make_payload(id=12345, name="Alicia"), intern_id=alice.id)

        assert updated.id == alice.id
        assert len(await intern_repository.get_all()) == 1


@pytest.mark.asyncio
class TestInternServiceReadDelete:

    async def test_list_interns_ordered_by_id(self, intern_service, multiple_interns):
        interns = await intern_service.list_interns()

        assert [i.id for i in interns] == sorted(i.id for i in multiple_interns)

    async def test_get_missing_raises_not_found(self, intern_service):
        with pytest.raises(NotFoundError):
            await intern_service.get_intern(424242)

    async def test_delete_existing(self, intern_service, created_intern):
        assert await intern_service.delete_intern(created_intern.id) is True
        assert await intern_service.list_interns() == []

    async def test_delete_missing_is_silent(self, intern_service, multiple_interns, intern_repository):
        """
        Behavior:
                - Deleting an unknown id neither raises nor touches other rows.
        """
        assert await intern_service.delete_intern(999_999) is False
        assert len(await intern_repository.get_all()) == len(multiple_interns)


@pytest.mark.asyncio
async def test_unexpected_store_failure_becomes_generic_error(intern_service, monkeypatch):
    """
    A non-integrity driver failure during a write surfaces as a RepositoryError
    with a generic message; the driver text never reaches the caller.
    """
    async def broken_flush(*args, **kwargs):
        raise RuntimeError("connection reset by peer")

    monkeypatch.setattr(intern_service.db, "flush", broken_flush)

    with pytest.raises(RepositoryError) as exc_info:
        await intern_service.save_intern(make_payload())

    assert "connection reset" not in exc_info.value.message
    assert exc_info.value.to_payload() == {"general": "Failed to operate on Intern"}
