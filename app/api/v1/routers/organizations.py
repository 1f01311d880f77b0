import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.db.session import get_db
from app.schemas.common import DeleteResponse
from app.schemas.organizations import OrganizationCreate, OrganizationOut, OrganizationUpdate
from app.services import organizations as organization_service
from app.services.exceptions import ConflictError, NotFoundError

router = APIRouter(prefix="/organizations", tags=["organizations"])
logger = logging.getLogger(__name__)


def _internal_error(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


@router.get("", response_model=list[OrganizationOut], summary="List organizations")
async def list_organizations(db: AsyncSession = Depends(get_db)) -> list[OrganizationOut]:
    try:
        return await organization_service.list_organizations(db)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching organizations")
        raise _internal_error("Failed to fetch organizations") from exc


@router.get("/{org_id}", response_model=OrganizationOut, summary="Get an organization")
async def get_organization(
    org_id: int = Depends(deps.parse_organization_id),
    db: AsyncSession = Depends(get_db),
) -> OrganizationOut:
    try:
        return await organization_service.get_organization(db, org_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    except SQLAlchemyError as exc:
        logger.exception("Error fetching organization id=%s", org_id)
        raise _internal_error("Failed to fetch organization") from exc


@router.post(
    "",
    response_model=OrganizationOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create an organization",
)
async def create_organization(
    payload: OrganizationCreate,
    db: AsyncSession = Depends(get_db),
) -> OrganizationOut:
    try:
        return await organization_service.create_organization(db, payload)
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.message) from exc
    except SQLAlchemyError as exc:
        logger.exception("Error creating organization slug=%s", payload.slug)
        raise _internal_error("Failed to create organization") from exc


@router.put("/{org_id}", response_model=OrganizationOut, summary="Update an organization")
async def update_organization(
    payload: OrganizationUpdate,
    org_id: int = Depends(deps.parse_organization_id),
    db: AsyncSession = Depends(get_db),
) -> OrganizationOut:
    try:
        return await organization_service.update_organization(db, org_id, payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.message) from exc
    except SQLAlchemyError as exc:
        logger.exception("Error updating organization id=%s", org_id)
        raise _internal_error("Failed to update organization") from exc


@router.delete("/{org_id}", response_model=DeleteResponse, summary="Delete an organization")
async def delete_organization(
    org_id: int = Depends(deps.parse_organization_id),
    db: AsyncSession = Depends(get_db),
) -> DeleteResponse:
    try:
        deleted_id = await organization_service.delete_organization(db, org_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    except SQLAlchemyError as exc:
        logger.exception("Error deleting organization id=%s", org_id)
        raise _internal_error("Failed to delete organization") from exc
    return DeleteResponse(message="Organization deleted successfully", id=deleted_id)
