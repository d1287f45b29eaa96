"""
Base repository class providing common database operations.

A reusable foundation for repositories that talk to the database through
SQLAlchemy async sessions. Model-specific repositories inherit the generic
CRUD below and add their own queries.

Repositories never commit: they `flush()` so generated ids are available and
leave the transaction boundary to the service layer.
"""
from intern_registry.exceptions.base import RepositoryError, NotFoundError
from intern_registry.exceptions.mapper import db_error_handler
from intern_registry.validators.exception_validators import find_unknown_model_kwargs, get_required_columns

import time
from typing import TypeVar, Generic, Type
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
import logging

from intern_registry.database.base import Base

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: The SQLAlchemy model class (not an instance), e.g. Intern
            db: The async database session shared with the service for this request
        """
        self.model = model
        self.db = db

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def create(self, **kwargs) -> ModelType:
        """
        Insert a new entity and return it with its generated id.

        Raises:
            RepositoryError: unknown or missing fields, or any DB failure
            DuplicateEmailError: the store rejected a duplicate email
        """
        model_name = self.model.__name__
        logger.debug(
            "repo.create.start",
            extra={"model": model_name, "provided_keys": sorted(kwargs)},
        )

        unknown = find_unknown_model_kwargs(self.model, kwargs)
        if unknown:
            logger.info("repo.create.invalid_fields", extra={"model": model_name, "invalid_fields": sorted(unknown)})
            raise RepositoryError(f"Unknown field(s) for {model_name}: {', '.join(unknown)}", fields=unknown)

        missing = [c for c in get_required_columns(self.model) if kwargs.get(c) is None]
        if missing:
            logger.info("repo.create.missing_required", extra={"model": model_name, "missing_fields": sorted(missing)})
            raise RepositoryError(f"Missing required field(s): {', '.join(missing)} for {model_name}", fields=missing)

        start = time.perf_counter()
        async with db_error_handler(self.db, model_name):
            entity = self.model(**kwargs)
            self.db.add(entity)
            # flush sends the INSERT so the unique index is checked and the id is assigned
            await self.db.flush()
            await self.db.refresh(entity)

        logger.info(
            "repo.create.success",
            extra={
                "model": model_name,
                "id": getattr(entity, "id", None),
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return entity

    # =================================================================================================================
    # Read (single entity)
    # =================================================================================================================

    async def get_by_id(self, entity_id: int) -> ModelType | None:
        """
        Return the entity with this primary key, or None.
        """
        try:
            result = await self.db.execute(
                select(self.model).where(self.model.id == entity_id)
            )
            entity = result.scalar_one_or_none()
            logger.debug(f"Retrieved {self.model.__name__} by ID {entity_id}: {entity is not None}")
            return entity
        except Exception as e:
            logger.error(f"Error retrieving {self.model.__name__} by ID {entity_id}: {e}")
            raise RepositoryError(f"Failed to retrieve {self.model.__name__}") from e

    async def get_by_id_or_raise(self, entity_id: int) -> ModelType:
        """
        Like `get_by_id`, but a missing row raises NotFoundError ("<Model> not found").
        """
        entity = await self.get_by_id(entity_id)
        if entity is None:
            logger.info("repo.get.not_found", extra={"model": self.model.__name__, "id": entity_id})
            raise NotFoundError(f"{self.model.__name__} not found")
        return entity

    # =================================================================================================================
    # Read (multiple entities)
    # =================================================================================================================

    async def get_all(self, order_by: str | None = None) -> list[ModelType]:
        """
        Return every entity ordered by `order_by` (primary key when omitted or unknown).
        """
        try:
            query = select(self.model)

            if order_by and hasattr(self.model, order_by):
                query = query.order_by(getattr(self.model, order_by))
            else:
                if order_by:
                    logger.warning(
                        f"Ignored invalid 'order_by' field: '{order_by}' does not exist on {self.model.__name__}")
                query = query.order_by(self.model.id)

            result = await self.db.execute(query)
            entities = list(result.scalars().all())
            logger.debug(f"Retrieved {len(entities)} {self.model.__name__} entities")
            return entities

        except Exception as e:
            logger.error(f"Error retrieving all {self.model.__name__}: {e}")
            raise RepositoryError(f"Failed to retrieve {self.model.__name__} entities") from e

    # =================================================================================================================
    # Update
    # =================================================================================================================

    async def replace(self, entity: ModelType, **kwargs) -> ModelType:
        """
        Overwrite the given columns on an already-loaded entity and flush.

        Every provided value is written, including ones equal to the current
        value: this is a full replace, not a partial patch.

        Raises:
            RepositoryError: unknown fields or DB failure
            DuplicateEmailError: the store rejected a duplicate email
        """
        model_name = self.model.__name__
        unknown = find_unknown_model_kwargs(self.model, kwargs)
        if unknown or "id" in kwargs:
            fields = sorted(set(unknown) | ({"id"} & set(kwargs)))
            raise RepositoryError(f"Cannot write field(s) for {model_name}: {', '.join(fields)}", fields=fields)

        async with db_error_handler(self.db, model_name):
            for field, value in kwargs.items():
                setattr(entity, field, value)
            await self.db.flush()
            await self.db.refresh(entity)

        logger.debug("repo.replace.success", extra={"model": model_name, "id": entity.id})
        return entity

    # =================================================================================================================
    # Delete
    # =================================================================================================================

    async def delete(self, entity_id: int) -> bool:
        """
        Delete the entity with this id.

        Returns:
            True if a row was removed, False if no such row existed
        """
        async with db_error_handler(self.db, self.model.__name__):
            result = await self.db.execute(
                delete(self.model).where(self.model.id == entity_id)
            )

        if result.rowcount > 0:
            logger.debug(f"Deleted {self.model.__name__} with ID: {entity_id}")
            return True

        logger.info(f"{self.model.__name__} with ID {entity_id} not found for deletion")
        return False
