"""
Classify a SQLAlchemy IntegrityError by the constraint that failed.

These classes are internal labels only. `mapper.py` turns them into the
app-level errors from `base.py`; they are never raised to callers.
"""

import logging
from enum import Enum
from typing import Type

from sqlalchemy.exc import IntegrityError

from .base import RepositoryError

logger = logging.getLogger(__name__)


class ConstraintViolationError(RepositoryError):
    """Base for integrity/constraint violations."""


class UniqueConstraintError(ConstraintViolationError):
    """Unique constraint / duplicate value."""


class NotNullConstraintError(ConstraintViolationError):
    """NOT NULL violation (missing required column)."""


class UnknownIntegrityError(ConstraintViolationError):
    """Integrity error we could not classify."""


# https://www.postgresql.org/docs/current/errcodes-appendix.html
class PostgresErrorCodes(str, Enum):
    UNIQUE_VIOLATION = "23505"
    NOT_NULL_VIOLATION = "23502"


PGCODE_EXCEPTION_MAP = {
    PostgresErrorCodes.UNIQUE_VIOLATION.value: UniqueConstraintError,
    PostgresErrorCodes.NOT_NULL_VIOLATION.value: NotNullConstraintError,
}

# Keyword fallbacks for drivers without SQLSTATE diagnostics (SQLite, MySQL).
MESSAGE_KEYWORDS: list[tuple[Type[ConstraintViolationError], tuple[str, ...]]] = [
    (UniqueConstraintError, ("unique constraint", "unique failed", "unique violation", "duplicate")),
    (NotNullConstraintError, ("not null constraint", "not null", "null value in column")),
]


def _pgcode_of(orig) -> str | None:
    # psycopg exposes `pgcode`; asyncpg (through SQLAlchemy's adapter) exposes `sqlstate`.
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _constraint_name_of(orig) -> str | None:
    diag = getattr(orig, "diag", None)
    if diag is not None and getattr(diag, "constraint_name", None):
        return diag.constraint_name
    # asyncpg keeps the original driver exception on `__cause__`
    cause = getattr(orig, "__cause__", None)
    return getattr(cause, "constraint_name", None)


def _classify_from_postgres_diag(orig) -> tuple[Type[ConstraintViolationError] | None, str | None]:
    pgcode = _pgcode_of(orig)
    if not pgcode:
        return None, None

    constraint_name = _constraint_name_of(orig)
    exception_class = PGCODE_EXCEPTION_MAP.get(pgcode)
    if exception_class:
        logger.debug(
            "integrity.postgres_diagnostic",
            extra={"pgcode": pgcode, "constraint_name": constraint_name},
        )
        return exception_class, constraint_name

    logger.warning(
        "integrity.unknown_pgcode",
        extra={"pgcode": pgcode, "constraint_name": constraint_name},
    )
    return UnknownIntegrityError, constraint_name


def _classify_from_generic_message(msg: str) -> tuple[Type[ConstraintViolationError], None]:
    normalized = (msg or "").lower()
    for exception_class, keywords in MESSAGE_KEYWORDS:
        if any(keyword in normalized for keyword in keywords):
            return exception_class, None

    logger.warning("integrity.unknown_message", extra={"message_snippet": normalized[:200]})
    return UnknownIntegrityError, None


def classify_integrity_error(exc: IntegrityError) -> tuple[Type[ConstraintViolationError], str | None]:
    """
    Return (constraint class, constraint name if the driver reported one).

    Postgres SQLSTATE codes are authoritative; message keywords are the fallback.
    """
    exception_class, constraint_name = _classify_from_postgres_diag(exc.orig)
    if exception_class is not None:
        return exception_class, constraint_name
    return _classify_from_generic_message(str(exc.orig) if exc.orig is not None else str(exc))
