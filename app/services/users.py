import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.organization import utcnow
from app.models.user import User
from app.schemas.common import UserRole
from app.schemas.users import UserCreate, UserUpdate
from app.services import organizations as organization_service
from app.services.exceptions import NotFoundError, is_foreign_key_violation

logger = logging.getLogger(__name__)


def _organization_not_found(org_id: int) -> NotFoundError:
    return NotFoundError(
        organization_service.NOT_FOUND_MESSAGE, entity="organization", entity_id=org_id
    )


async def _get_user(db: AsyncSession, user_id: int) -> User:
    stmt = select(User).where(User.id == user_id)
    user = (await db.execute(stmt)).scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found", entity="user", entity_id=user_id)
    return user


async def list_users_by_organization(db: AsyncSession, org_id: int) -> list[User]:
    stmt = (
        select(User)
        .where(User.organization_id == org_id)
        .order_by(User.created_at.desc(), User.id.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def create_user(db: AsyncSession, org_id: int, payload: UserCreate) -> User:
    # Checked up front so a missing parent reads as 404 rather than an FK failure.
    if await organization_service.find_organization(db, org_id) is None:
        raise _organization_not_found(org_id)

    user = User(
        name=payload.name,
        role=payload.role or UserRole.COORDINATOR,
        organization_id=org_id,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        # The organization was removed after the check above.
        if is_foreign_key_violation(exc):
            raise _organization_not_found(org_id) from exc
        raise
    await db.refresh(user)
    await db.commit()
    logger.info("Created user id=%s organization_id=%s", user.id, org_id)
    return user


async def update_user(db: AsyncSession, user_id: int, payload: UserUpdate) -> User:
    user = await _get_user(db, user_id)
    updates = payload.model_dump(exclude_unset=True)
    for field, value in updates.items():
        setattr(user, field, value)
    user.updated_at = utcnow()

    await db.flush()
    await db.refresh(user)
    await db.commit()
    logger.info("Updated user id=%s fields=%s", user.id, sorted(updates))
    return user


async def delete_user(db: AsyncSession, user_id: int) -> int:
    user = await _get_user(db, user_id)
    await db.delete(user)
    await db.commit()
    logger.info("Deleted user id=%s", user_id)
    return user_id
