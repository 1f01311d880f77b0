import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.db.session import get_db
from app.schemas.common import DeleteResponse
from app.schemas.users import UserCreate, UserOut, UserUpdate
from app.services import users as user_service
from app.services.exceptions import NotFoundError

router = APIRouter(tags=["users"])
logger = logging.getLogger(__name__)


def _internal_error(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


@router.get(
    "/organizations/{org_id}/users",
    response_model=list[UserOut],
    summary="List users of an organization",
)
async def list_organization_users(
    org_id: int = Depends(deps.parse_organization_id),
    db: AsyncSession = Depends(get_db),
) -> list[UserOut]:
    try:
        return await user_service.list_users_by_organization(db, org_id)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching users for organization id=%s", org_id)
        raise _internal_error("Failed to fetch users") from exc


@router.post(
    "/organizations/{org_id}/users",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user in an organization",
)
async def create_organization_user(
    payload: UserCreate,
    org_id: int = Depends(deps.parse_organization_id),
    db: AsyncSession = Depends(get_db),
) -> UserOut:
    try:
        return await user_service.create_user(db, org_id, payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    except SQLAlchemyError as exc:
        logger.exception("Error creating user for organization id=%s", org_id)
        raise _internal_error("Failed to create user") from exc


@router.put("/users/{user_id}", response_model=UserOut, summary="Update a user")
async def update_user(
    payload: UserUpdate,
    user_id: int = Depends(deps.parse_user_id),
    db: AsyncSession = Depends(get_db),
) -> UserOut:
    try:
        return await user_service.update_user(db, user_id, payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    except SQLAlchemyError as exc:
        logger.exception("Error updating user id=%s", user_id)
        raise _internal_error("Failed to update user") from exc


@router.delete("/users/{user_id}", response_model=DeleteResponse, summary="Delete a user")
async def delete_user(
    user_id: int = Depends(deps.parse_user_id),
    db: AsyncSession = Depends(get_db),
) -> DeleteResponse:
    try:
        deleted_id = await user_service.delete_user(db, user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    except SQLAlchemyError as exc:
        logger.exception("Error deleting user id=%s", user_id)
        raise _internal_error("Failed to delete user") from exc
    return DeleteResponse(message="User deleted successfully", id=deleted_id)
