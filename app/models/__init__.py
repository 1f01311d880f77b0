from app.models.organization import Organization
from app.models.user import User

__all__ = [
    "Organization",
    "User",
]
