from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class OrganizationStatus(str, Enum):
    ACTIVE = "active"
    BLOCKED = "blocked"
    INACTIVE = "inactive"


class UserRole(str, Enum):
    ADMIN = "admin"
    COORDINATOR = "coordinator"


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Persist enum *values* (lowercase) rather than member names."""
    return [member.value for member in enum_cls]


class CamelModel(BaseModel):
    """Accept and emit camelCase keys while keeping snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class DeleteResponse(BaseModel):
    message: str
    id: int


def require_text(value):
    """Reject null and blank-only input; non-blank text is kept as sent."""
    if value is None:
        raise ValueError("Value cannot be null")
    if isinstance(value, str) and not value.strip():
        raise ValueError("Value cannot be empty")
    return value


def blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value
