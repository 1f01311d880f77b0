import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.organization import Organization, utcnow
from app.schemas.common import OrganizationStatus
from app.schemas.organizations import OrganizationCreate, OrganizationUpdate
from app.services.exceptions import ConflictError, NotFoundError, is_unique_violation

logger = logging.getLogger(__name__)

SLUG_CONFLICT_MESSAGE = "Organization with this slug already exists"
NOT_FOUND_MESSAGE = "Organization not found"


def _not_found(org_id: int) -> NotFoundError:
    return NotFoundError(NOT_FOUND_MESSAGE, entity="organization", entity_id=org_id)


async def _flush_or_conflict(db: AsyncSession) -> None:
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        if is_unique_violation(exc):
            raise ConflictError(SLUG_CONFLICT_MESSAGE, field="slug") from exc
        raise


async def list_organizations(db: AsyncSession) -> list[Organization]:
    stmt = select(Organization).order_by(Organization.created_at.desc(), Organization.id.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def find_organization(db: AsyncSession, org_id: int) -> Organization | None:
    stmt = select(Organization).where(Organization.id == org_id)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_organization(db: AsyncSession, org_id: int) -> Organization:
    org = await find_organization(db, org_id)
    if org is None:
        raise _not_found(org_id)
    return org


async def create_organization(db: AsyncSession, payload: OrganizationCreate) -> Organization:
    org = Organization(
        name=payload.name,
        slug=payload.slug,
        email=payload.email,
        phone=payload.phone,
        website=payload.website,
        avatar=payload.avatar,
        status=payload.status or OrganizationStatus.ACTIVE,
        pending_requests=payload.pending_requests if payload.pending_requests is not None else 0,
    )
    db.add(org)
    await _flush_or_conflict(db)
    await db.refresh(org)
    await db.commit()
    logger.info("Created organization id=%s slug=%s", org.id, org.slug)
    return org


async def update_organization(
    db: AsyncSession, org_id: int, payload: OrganizationUpdate
) -> Organization:
    org = await get_organization(db, org_id)

    updates = payload.model_dump(exclude_unset=True)
    for field, value in updates.items():
        setattr(org, field, value)
    org.updated_at = utcnow()

    await _flush_or_conflict(db)
    await db.refresh(org)
    await db.commit()
    logger.info("Updated organization id=%s fields=%s", org.id, sorted(updates))
    return org


async def delete_organization(db: AsyncSession, org_id: int) -> int:
    org = await get_organization(db, org_id)
    # Users go with it through the ON DELETE CASCADE foreign key.
    await db.delete(org)
    await db.commit()
    logger.info("Deleted organization id=%s", org_id)
    return org_id
