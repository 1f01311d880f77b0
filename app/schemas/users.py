from datetime import datetime

from pydantic import field_validator

from app.schemas.common import CamelModel, UserRole, require_text


class UserCreate(CamelModel):
    name: str
    role: UserRole | None = None

    @field_validator("name", mode="before")
    @classmethod
    def non_empty(cls, v):
        return require_text(v)


class UserUpdate(CamelModel):
    name: str | None = None
    role: UserRole | None = None

    @field_validator("name", "role", mode="before")
    @classmethod
    def reject_null(cls, v):
        return require_text(v)


class UserOut(CamelModel):
    id: int
    name: str
    role: UserRole
    organization_id: int
    created_at: datetime
    updated_at: datetime
