"""
Intern repository: intern-specific queries on top of BaseRepository.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from intern_registry.models.intern import Intern
from .base_repository import BaseRepository, RepositoryError

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    # Emails are stored lower-cased, so lookups must compare lower-cased too.
    return email.strip().lower()


class InternRepository(BaseRepository[Intern]):
    """
    Repository for Intern rows.

    Adds the email lookups the service needs for its uniqueness pre-check and
    wraps create/replace with input normalization.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Intern, db)

    # =================================================================================================================
    # Create / Replace
    # =================================================================================================================

    async def create_intern(self, name: str, email: str, department: str) -> Intern:
        """
        Insert a new intern. The database assigns the id.

        Raises:
            DuplicateEmailError: the unique index on email rejected the row
            RepositoryError: any other database failure
        """
        logger.info("Creating intern", extra={"email": email})
        return await self.create(
            name=name.strip(),
            email=normalize_email(email),
            department=department.strip(),
        )

    async def replace_intern(self, intern: Intern, name: str, email: str, department: str) -> Intern:
        """
        Overwrite name, email and department of a loaded intern (full replace).
        """
        logger.info("Replacing intern", extra={"id": intern.id, "email": email})
        return await self.replace(
            intern,
            name=name.strip(),
            email=normalize_email(email),
            department=department.strip(),
        )

    # =================================================================================================================
    # Email lookups
    # =================================================================================================================

    async def email_exists(self, email: str) -> bool:
        """
        True when any intern already holds this email.
        """
        try:
            result = await self.db.execute(
                select(Intern.id).where(Intern.email == normalize_email(email)).limit(1)
            )
            taken = result.scalar() is not None
            logger.debug("repo.email_exists", extra={"email": email, "taken": taken})
            return taken
        except Exception as e:
            logger.error(f"Error checking intern email: {e}")
            raise RepositoryError("Failed to check intern email") from e
