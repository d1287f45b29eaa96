"""
Intern service: create/update validation and email-uniqueness enforcement.

The service runs after boundary validation has accepted the payload, so it
only deals with the cross-record rule a single request cannot check: no two
interns may share an email.

The uniqueness check is a pre-check followed by a write. Two concurrent
requests can both pass the pre-check; the unique index on `interns.email`
then rejects the second write and the repository maps that rejection to the
same `DuplicateEmailError`, so callers see one error for both paths.
"""

import logging

from intern_registry.exceptions.base import DuplicateEmailError
from intern_registry.exceptions.mapper import db_error_handler
from intern_registry.models.intern import Intern
from intern_registry.repositories.intern_repository import InternRepository, normalize_email
from intern_registry.schemas.intern import InternPayload

logger = logging.getLogger(__name__)


class InternService:
    """
    Business rules for intern records. Owns the transaction: one commit per
    successful write, a rollback (through `db_error_handler`) on failure.
    """

    def __init__(self, repository: InternRepository):
        self.repository = repository
        self.db = repository.db

    async def list_interns(self) -> list[Intern]:
        logger.debug("Fetching all interns")
        return await self.repository.get_all(order_by="id")

    async def get_intern(self, intern_id: int) -> Intern:
        """
        Raises:
            NotFoundError: no intern has this id
        """
        logger.debug("Finding intern by ID: %s", intern_id)
        return await self.repository.get_by_id_or_raise(intern_id)

    async def save_intern(self, candidate: InternPayload, intern_id: int | None = None) -> Intern:
        """
        Create the intern when `intern_id` is None, otherwise replace the
        intern with that id.

        Raises:
            NotFoundError: update of an id that does not exist
            DuplicateEmailError: the email belongs to another intern
        """
        if intern_id is None:
            return await self.create_intern(candidate)
        return await self.update_intern(intern_id, candidate)

    async def create_intern(self, candidate: InternPayload) -> Intern:
        logger.debug("Attempting to create intern", extra={"email": candidate.email})

        if await self.repository.email_exists(candidate.email):
            logger.info("service.create.duplicate_email", extra={"email": candidate.email})
            raise DuplicateEmailError()

        async with db_error_handler(self.db, "Intern"):
            intern = await self.repository.create_intern(**candidate.column_values())
            await self.db.commit()

        logger.info("Saved intern", extra={"id": intern.id})
        return intern

    async def update_intern(self, intern_id: int, candidate: InternPayload) -> Intern:
        logger.debug("Processing update for intern", extra={"id": intern_id, "email": candidate.email})

        existing = await self.repository.get_by_id_or_raise(intern_id)

        # Keeping one's own email is never a conflict; only a change is checked.
        email_changed = existing.email != normalize_email(candidate.email)
        if email_changed and await self.repository.email_exists(candidate.email):
            logger.info("service.update.duplicate_email", extra={"id": intern_id, "email": candidate.email})
            raise DuplicateEmailError()

        async with db_error_handler(self.db, "Intern"):
            intern = await self.repository.replace_intern(existing, **candidate.column_values())
            await self.db.commit()

        logger.info("Updated intern", extra={"id": intern.id})
        return intern

    async def delete_intern(self, intern_id: int) -> bool:
        """
        Remove the intern if present. A missing id is not an error.

        Returns:
            True if a row was deleted, False if there was nothing to delete
        """
        logger.info("Deleting intern", extra={"id": intern_id})
        async with db_error_handler(self.db, "Intern"):
            deleted = await self.repository.delete(intern_id)
            await self.db.commit()
        return deleted
