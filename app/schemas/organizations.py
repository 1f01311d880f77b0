from datetime import datetime

from pydantic import Field, field_validator

from app.schemas.common import CamelModel, OrganizationStatus, blank_to_none, require_text


class OrganizationCreate(CamelModel):
    name: str
    slug: str
    email: str
    phone: str | None = None
    website: str | None = None
    avatar: str | None = None
    status: OrganizationStatus | None = None
    pending_requests: int | None = Field(default=None, ge=0)

    @field_validator("name", "slug", "email", mode="before")
    @classmethod
    def non_empty(cls, v):
        return require_text(v)

    # An empty status falls back to the default like any other blank optional.
    @field_validator("phone", "website", "avatar", "status", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return blank_to_none(v)


class OrganizationUpdate(CamelModel):
    name: str | None = None
    slug: str | None = None
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    avatar: str | None = None
    status: OrganizationStatus | None = None
    pending_requests: int | None = Field(default=None, ge=0)

    # Validators only run for keys present in the body, so an explicit null on a
    # NOT NULL column is rejected while an absent key is left untouched.
    @field_validator("name", "slug", "email", "status", "pending_requests", mode="before")
    @classmethod
    def reject_null(cls, v):
        return require_text(v)

    @field_validator("phone", "website", "avatar", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return blank_to_none(v)


class OrganizationOut(CamelModel):
    id: int
    name: str
    slug: str
    avatar: str | None = None
    email: str
    phone: str | None = None
    website: str | None = None
    status: OrganizationStatus
    pending_requests: int
    created_at: datetime
    updated_at: datetime
