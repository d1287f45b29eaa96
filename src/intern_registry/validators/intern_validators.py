"""
Field rules for intern payloads.

Each rule raises `PydanticCustomError` so the message reaches the client
exactly as written here (pydantic would otherwise prefix "Value error, ").
"""

from email_validator import EmailNotValidError, validate_email
from pydantic_core import PydanticCustomError

NAME_MIN_LENGTH = 4

# Message used when a field is absent from the body altogether.
REQUIRED_MESSAGES = {
    "name": "Name is required",
    "email": "Email is required",
    "department": "Department is required",
}


def _require_text(value, field: str) -> str:
    # JSON numbers are read as their text, e.g. {"name": 12345} -> "12345".
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if value is None or not isinstance(value, str) or not value.strip():
        raise PydanticCustomError("blank", REQUIRED_MESSAGES[field])
    return value.strip()


def check_name(value) -> str:
    name = _require_text(value, "name")
    if len(name) < NAME_MIN_LENGTH:
        raise PydanticCustomError(
            "too_short",
            "Name must be at least {min_length} characters",
            {"min_length": NAME_MIN_LENGTH},
        )
    return name


def check_email(value) -> str:
    email = _require_text(value, "email")
    try:
        # Syntax only: deliverability would need DNS lookups at request time.
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise PydanticCustomError("email_format", "Invalid email format")
    return email.lower()


def check_department(value) -> str:
    return _require_text(value, "department")
