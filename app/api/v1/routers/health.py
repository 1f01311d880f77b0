from fastapi import APIRouter

from app.core.health import live_payload, ready_payload

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live", summary="Service liveness check")
async def health_live() -> dict:
    return await live_payload()


@router.get("/ready", summary="Service readiness check")
async def health_ready() -> dict:
    return await ready_payload()
