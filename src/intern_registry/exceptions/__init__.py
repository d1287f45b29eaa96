
# exceptions/
# ├── base.py                    # App-level errors (RepositoryError, NotFoundError, DuplicateEmailError, ...)
# ├── integrity_classifier.py    # Internal labels for DB constraint failures
# └── mapper.py                  # IntegrityError -> app-level error, db_error_handler()

from .base import (
    ErrorKind,
    RepositoryError,
    NotFoundError,
    DuplicateEmailError,
    FieldValidationError,
)

__all__ = [
    "ErrorKind",
    "RepositoryError",
    "NotFoundError",
    "DuplicateEmailError",
    "FieldValidationError",
]
