from app.client.api import (
    ApiClientError,
    ConsoleClient,
    OrganizationsApi,
    OrganizationView,
    UsersApi,
    UserView,
    format_organization,
)

__all__ = [
    "ApiClientError",
    "ConsoleClient",
    "OrganizationsApi",
    "OrganizationView",
    "UsersApi",
    "UserView",
    "format_organization",
]
