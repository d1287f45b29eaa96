"""
App-level exceptions raised by the repository and service layers.

Every error carries an explicit `ErrorKind`; the HTTP layer decides the
response shape from the kind alone, never from the message text.
"""

from enum import Enum
from typing import Iterable


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    DUPLICATE_EMAIL = "duplicate_email"
    OTHER = "other"


# Response key used for each kind: email problems are shown next to the
# email input, everything else is a general form error.
KIND_TO_FIELD = {
    ErrorKind.DUPLICATE_EMAIL: "email",
    ErrorKind.NOT_FOUND: "general",
    ErrorKind.OTHER: "general",
}


class RepositoryError(Exception):
    """
    Base exception for repository/service errors.

    - message: human-friendly message (safe to show to clients)
    - fields: optional list of related field names (e.g. ['email'])
    - constraint: optional DB constraint name (for logs only)
    - kind: the ErrorKind that drives the response shape
    """

    kind: ErrorKind = ErrorKind.OTHER

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, kind: ErrorKind | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.constraint = constraint
        if kind is not None:
            self.kind = kind

    def __str__(self) -> str:
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.constraint:
            parts.append(f"constraint: {self.constraint}")
        parts.append(f"kind: {self.kind.value}")
        return f"{self.message} ({'; '.join(parts)})"

    def to_payload(self) -> dict[str, str]:
        """
        JSON body for the client: a one-entry `{field: message}` mapping.
            {"email": "Email already exists"}
            {"general": "Intern not found"}
        The constraint name is deliberately left out.
        """
        return {KIND_TO_FIELD[self.kind]: self.message}

    def http_status(self) -> int:
        # Every failure of the intern API is reported as a bad request.
        return 400


class NotFoundError(RepositoryError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "Intern not found", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields)


class DuplicateEmailError(RepositoryError):
    kind = ErrorKind.DUPLICATE_EMAIL

    def __init__(self, message: str = "Email already exists", *, constraint: str | None = None):
        super().__init__(message, fields=["email"], constraint=constraint)


class FieldValidationError(Exception):
    """
    One or more request fields failed boundary validation.

    `errors` maps field name -> violation message; several fields may fail at once.
    """

    def __init__(self, errors: dict[str, str]):
        super().__init__(", ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = dict(errors)

    def to_payload(self) -> dict[str, str]:
        return dict(self.errors)

    def http_status(self) -> int:
        return 400


__all__ = [
    "ErrorKind",
    "RepositoryError",
    "NotFoundError",
    "DuplicateEmailError",
    "FieldValidationError",
]
