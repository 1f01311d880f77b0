from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.schemas.common import OrganizationStatus, enum_values


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Organization(Base):
    __tablename__ = "organizations"
    __table_args__ = (UniqueConstraint("slug", name="uq_organizations_slug"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    slug = Column(String(255), nullable=False)
    avatar = Column(Text, nullable=True)
    email = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=True)
    website = Column(Text, nullable=True)
    status = Column(
        Enum(
            OrganizationStatus,
            name="organization_status",
            values_callable=enum_values,
            create_constraint=True,
            validate_strings=True,
        ),
        nullable=False,
        default=OrganizationStatus.ACTIVE,
        server_default=OrganizationStatus.ACTIVE.value,
    )
    pending_requests = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )

    # Children are removed by the ON DELETE CASCADE foreign key, not by the ORM.
    users = relationship(
        "User",
        back_populates="organization",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
