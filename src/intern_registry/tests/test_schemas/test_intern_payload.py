import pytest
from pydantic import ValidationError

from intern_registry.schemas.intern import InternPayload, InternRead
from intern_registry.models.intern import Intern


def errors_by_field(exc: ValidationError) -> dict[str, str]:
    return {str(e["loc"][-1]): e["msg"] for e in exc.errors()}


class TestInternPayload:

    def test_valid_payload_is_normalized(self):
        payload = InternPayload(name="  Alice ", email=" Alice@X.com ", department=" Engineering ")

        assert payload.name == "Alice"
        assert payload.email == "alice@x.com"
        assert payload.department == "Engineering"
        assert payload.id is None

    def test_column_values_never_include_id(self):
        payload = InternPayload(id=7, name="Alice", email="alice@x.com", department="Engineering")

        assert payload.column_values() == {"name": "Alice", "email": "alice@x.com", "department": "Engineering"}

    @pytest.mark.parametrize(
        "field, value, message",
        [
            ("name", "", "Name is required"),
            ("name", "   ", "Name is required"),
            ("name", None, "Name is required"),
            ("name", "Bob", "Name must be at least 4 characters"),
            ("email", "", "Email is required"),
            ("email", "alice-at-x.com", "Invalid email format"),
            ("email", "alice@", "Invalid email format"),
            ("department", " ", "Department is required"),
        ],
    )
    def test_field_rules(self, field, value, message):
        data = {"name": "Alice", "email": "alice@x.com", "department": "Engineering", field: value}

        with pytest.raises(ValidationError) as exc_info:
            InternPayload(**data)

        assert errors_by_field(exc_info.value) == {field: message}

    def test_all_failures_reported_together(self):
        with pytest.raises(ValidationError) as exc_info:
            InternPayload(name="Al", email="nope", department="")

        assert errors_by_field(exc_info.value) == {
            "name": "Name must be at least 4 characters",
            "email": "Invalid email format",
            "department": "Department is required",
        }

    def test_name_of_exactly_four_characters_is_accepted(self):
        assert InternPayload(name="Anna", email="anna@x.com", department="HR").name == "Anna"

    def test_numbers_are_read_as_text(self):
        payload = InternPayload(name=12345, email="num@x.com", department=42)

        assert payload.name == "12345"
        assert payload.department == "42"

    def test_booleans_are_not_text(self):
        with pytest.raises(ValidationError) as exc_info:
            InternPayload(name=True, email="alice@x.com", department="Engineering")

        assert errors_by_field(exc_info.value) == {"name": "Name is required"}


def test_intern_read_from_orm_object():
    intern = Intern(id=3, name="Alice", email="alice@x.com", department="Engineering")

    read = InternRead.model_validate(intern)

    assert read.model_dump() == {"id": 3, "name": "Alice", "email": "alice@x.com", "department": "Engineering"}
