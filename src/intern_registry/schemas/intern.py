"""
Pydantic schemas for the intern HTTP surface.

`InternPayload` is the boundary check for create/update bodies: a request
that fails it never reaches the service. `InternRead` is the response shape.
"""

from pydantic import BaseModel, ConfigDict, field_validator

from intern_registry.validators.intern_validators import (
    check_department,
    check_email,
    check_name,
)


class InternPayload(BaseModel):
    """Body of POST /newIntern and PUT /{id}."""

    # Accepted for compatibility with clients that echo the record back;
    # the path parameter decides which row an update targets.
    id: int | None = None
    name: str
    email: str
    department: str

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        return check_name(v)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v):
        return check_email(v)

    @field_validator("department", mode="before")
    @classmethod
    def validate_department(cls, v):
        return check_department(v)

    def column_values(self) -> dict[str, str]:
        """Column values to persist (the id is never written from a body)."""
        return {"name": self.name, "email": self.email, "department": self.department}


class InternRead(BaseModel):
    """Stored intern as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    department: str
