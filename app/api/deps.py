from fastapi import HTTPException, Path, status


def _parse_id(raw: str, message: str) -> int:
    value = raw.strip()
    if not value.isdigit() or int(value) <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
    return int(value)


async def parse_organization_id(
    org_id: str = Path(..., description="Numeric organization id"),
) -> int:
    return _parse_id(org_id, "Invalid organization ID")


async def parse_user_id(user_id: str = Path(..., description="Numeric user id")) -> int:
    return _parse_id(user_id, "Invalid user ID")
