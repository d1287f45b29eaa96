# src/intern_registry/api/error_handlers.py
"""
FastAPI exception handlers: every failure becomes a 400 with a flat
`{field: message}` JSON body.

    - RequestValidationError  -> one entry per invalid field
    - DuplicateEmailError     -> {"email": "Email already exists"}
    - NotFoundError           -> {"general": "Intern not found"}
    - RepositoryError         -> {"general": "..."}
    - IntegrityError          -> mapped like the repository does (safety net)

The response key comes from each error's ErrorKind (see exceptions/base.py).
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from intern_registry.exceptions.base import (
    RepositoryError,
    DuplicateEmailError,
    NotFoundError,
    FieldValidationError,
)
from intern_registry.exceptions.mapper import map_integrity_error
from intern_registry.schemas.intern import InternPayload
from intern_registry.validators.intern_validators import REQUIRED_MESSAGES

# Keys a client can see in a validation body besides "general".
REPORTED_FIELDS = frozenset(InternPayload.model_fields) | {"intern_id"}

logger = logging.getLogger(__name__)


def field_errors_from_validation(exc: RequestValidationError) -> FieldValidationError:
    """
    Collapse pydantic errors into field -> message. The first error reported
    for a field wins; a field that is absent gets its "... is required" text.
    Errors not tied to a known field (unparseable JSON, a null body) are
    reported under "general".
    """
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("body",)
        field = str(loc[-1]) if str(loc[-1]) in REPORTED_FIELDS else "general"
        if error.get("type") == "missing" and field in REQUIRED_MESSAGES:
            message = REQUIRED_MESSAGES[field]
        else:
            message = error.get("msg", "Invalid value")
        errors.setdefault(field, message)
    return FieldValidationError(errors)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await field_validation_handler(request, field_errors_from_validation(exc))


async def field_validation_handler(request: Request, exc: FieldValidationError) -> JSONResponse:
    logger.warning("Validation failed for %s %s: fields=%s", request.method, request.url.path, sorted(exc.errors))
    for field, message in exc.errors.items():
        logger.debug("Field '%s' error: %s", field, message)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def duplicate_email_handler(request: Request, exc: DuplicateEmailError) -> JSONResponse:
    logger.info("DuplicateEmailError for %s %s", request.method, request.url.path)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.info("NotFoundError for %s %s", request.method, request.url.path)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    logger.warning("RepositoryError for %s %s: %s", request.method, request.url.path, str(exc))
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """
    Safety net only: every write in the service runs inside db_error_handler,
    so this fires only for an IntegrityError raised outside it. It is mapped
    with the same rules, so a duplicate email still reads
    {"email": "Email already exists"}.
    """
    logger.error("Database integrity violation on %s %s", request.method, request.url.path)
    mapped = map_integrity_error(exc, "Intern")
    return JSONResponse(status_code=mapped.http_status(), content=mapped.to_payload())


def register_exception_handlers(app):
    # Starlette resolves handlers through the exception MRO, so subclasses
    # reach their own handler before the RepositoryError fallback.
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(FieldValidationError, field_validation_handler)
    app.add_exception_handler(DuplicateEmailError, duplicate_email_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(RepositoryError, repository_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
