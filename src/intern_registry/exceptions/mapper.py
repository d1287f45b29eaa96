import re
import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .integrity_classifier import (
    classify_integrity_error,
    UniqueConstraintError,
    NotNullConstraintError,
)
from .base import DuplicateEmailError, RepositoryError

logger = logging.getLogger(__name__)

# -----------------------
# Column extraction helpers
# -----------------------

def _extract_columns_postgres(msg: str) -> list[str] | None:
    """
    Postgres messages:
      - 'null value in column "email" violates not-null constraint'
      - 'DETAIL:  Key (email)=(a@b.com) already exists.'
    """
    m = re.search(r'null value in column "(?P<col>[^"]+)"', msg, flags=re.IGNORECASE)
    if m:
        return [m.group("col")]

    m = re.search(r'key \((?P<cols>[^)]+)\)=', msg, flags=re.IGNORECASE)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]

    return None


def _extract_columns_sqlite(msg: str) -> list[str] | None:
    # SQLite: 'UNIQUE constraint failed: interns.email' / 'NOT NULL constraint failed: interns.name'
    m = re.search(r'(?:UNIQUE|NOT NULL) constraint failed: (?P<cols>.+)$', msg, flags=re.IGNORECASE | re.MULTILINE)
    if m:
        return [c.split('.')[-1].strip() for c in re.split(r',\s*', m.group("cols"))]
    return None


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """
    Best-effort extraction of the involved column names from the driver message.
    """
    msg = str(exc.orig) if exc.orig is not None else str(exc)
    if not msg:
        return None
    return _extract_columns_postgres(msg) or _extract_columns_sqlite(msg)


def _is_email_conflict(columns: list[str] | None, constraint_name: str | None) -> bool:
    if columns and "email" in columns:
        return True
    return bool(constraint_name and "email" in constraint_name.lower())


# -----------------------
# Mapper
# -----------------------

def map_integrity_error(exc: IntegrityError, model_name: str | None = None) -> RepositoryError:
    """
    Translate a SQLAlchemy IntegrityError into the app-level error to raise.

    A unique violation on the email column becomes `DuplicateEmailError`,
    the same error the service pre-check produces.
    """
    exc_cls, constraint_name = classify_integrity_error(exc)
    columns = extract_columns_from_integrity(exc)
    model_part = model_name or "Record"

    if exc_cls is UniqueConstraintError:
        # INFO: duplicates are an expected client-level outcome (race with the pre-check).
        logger.info(
            "mapper.duplicate_detected",
            extra={"model": model_part, "fields": columns, "constraint": constraint_name},
        )
        if _is_email_conflict(columns, constraint_name):
            return DuplicateEmailError(constraint=constraint_name)
        if columns:
            return RepositoryError(f"{model_part} already exists for field(s): {', '.join(columns)}",
                                   fields=columns, constraint=constraint_name)
        return RepositoryError(f"{model_part} already exists", constraint=constraint_name)

    if exc_cls is NotNullConstraintError:
        logger.info(
            "mapper.not_null_violation",
            extra={"model": model_part, "fields": columns, "constraint": constraint_name},
        )
        if columns:
            return RepositoryError(f"Missing required field(s): {', '.join(columns)}",
                                   fields=columns, constraint=constraint_name)
        return RepositoryError(f"Missing required field for {model_part}", constraint=constraint_name)

    logger.warning(
        "mapper.unknown_integrity_error",
        extra={"model": model_part, "constraint": constraint_name},
    )
    logger.debug("mapper.unknown_integrity_raw", extra={"model": model_part, "raw": str(exc.orig)})
    return RepositoryError(f"{model_part} database integrity error")


def raise_mapped_integrity_error(exc: IntegrityError, model_name: str | None = None) -> None:
    raise map_integrity_error(exc, model_name) from exc


# -----------------------
# Async context manager used around every repository/service write
# -----------------------
@asynccontextmanager
async def db_error_handler(db: AsyncSession, model_name: str | None = None):
    """
    Usage:
        async with db_error_handler(self.db, self.model.__name__):
            ... statements that may raise IntegrityError ...
    Rolls the session back on any failure and raises an app-level error.
    App-level errors raised inside the block pass through untouched.
    """
    try:
        yield
    except RepositoryError:
        await _safe_rollback(db, model_name)
        raise
    except IntegrityError as exc:
        await _safe_rollback(db, model_name)
        raise_mapped_integrity_error(exc, model_name)
    except Exception as exc:
        await _safe_rollback(db, model_name)
        logger.exception("Unexpected DB error for %s", model_name, extra={"model": model_name})
        # Generic message: driver text never reaches the client.
        raise RepositoryError(f"Failed to operate on {model_name or 'database'}") from exc


async def _safe_rollback(db: AsyncSession, model_name: str | None) -> None:
    try:
        await db.rollback()
    except Exception:
        logger.exception("Failed to rollback session", extra={"model": model_name})
