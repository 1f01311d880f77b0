"""Async adapter over the console REST API.

Raw entity JSON is converted into view models: each organization embeds its
user list (fetched with a secondary call) and users are narrowed to
``{id, name, role}``. Any non-2xx response raises :class:`ApiClientError`.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import OrganizationStatus, UserRole


class ApiClientError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UserView(BaseModel):
    id: int
    name: str
    role: UserRole


class OrganizationView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    slug: str
    avatar: str | None = None
    pending_requests: int = Field(alias="pendingRequests")
    status: OrganizationStatus
    email: str
    phone: str | None = None
    website: str | None = None
    users: list[UserView] = Field(default_factory=list)


def format_organization(raw: dict[str, Any], users: list[dict[str, Any]] | None = None) -> OrganizationView:
    return OrganizationView(
        id=raw["id"],
        name=raw["name"],
        slug=raw["slug"],
        avatar=raw.get("avatar"),
        pending_requests=raw.get("pendingRequests", 0),
        status=raw["status"],
        email=raw["email"],
        phone=raw.get("phone"),
        website=raw.get("website"),
        users=[UserView(id=u["id"], name=u["name"], role=u["role"]) for u in users or []],
    )


def _raise_for_status(response: httpx.Response, fallback: str) -> None:
    if response.is_success:
        return
    message = fallback
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error") or fallback
    raise ApiClientError(message, status_code=response.status_code)


class UsersApi:
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def get_by_organization(self, organization_id: int) -> list[dict[str, Any]]:
        response = await self._client.get(f"/api/organizations/{organization_id}/users")
        _raise_for_status(response, "Failed to fetch users")
        return response.json()

    async def create(self, organization_id: int, data: dict[str, Any]) -> dict[str, Any]:
        response = await self._client.post(f"/api/organizations/{organization_id}/users", json=data)
        _raise_for_status(response, "Failed to create user")
        return response.json()

    async def update(self, user_id: int, data: dict[str, Any]) -> dict[str, Any]:
        response = await self._client.put(f"/api/users/{user_id}", json=data)
        _raise_for_status(response, "Failed to update user")
        return response.json()

    async def delete(self, user_id: int) -> None:
        response = await self._client.delete(f"/api/users/{user_id}")
        _raise_for_status(response, "Failed to delete user")


class OrganizationsApi:
    def __init__(self, client: httpx.AsyncClient, users: UsersApi | None = None) -> None:
        self._client = client
        self._users = users or UsersApi(client)

    async def get_all(self) -> list[OrganizationView]:
        response = await self._client.get("/api/organizations")
        _raise_for_status(response, "Failed to fetch organizations")
        raw_orgs = response.json()
        user_lists = await asyncio.gather(
            *(self._users.get_by_organization(org["id"]) for org in raw_orgs)
        )
        return [format_organization(org, users) for org, users in zip(raw_orgs, user_lists)]

    async def get_by_id(self, organization_id: int) -> OrganizationView:
        org_response, users_response = await asyncio.gather(
            self._client.get(f"/api/organizations/{organization_id}"),
            self._client.get(f"/api/organizations/{organization_id}/users"),
        )
        _raise_for_status(org_response, "Organization not found")
        _raise_for_status(users_response, "Failed to fetch users")
        return format_organization(org_response.json(), users_response.json())

    async def create(self, data: dict[str, Any]) -> OrganizationView:
        response = await self._client.post("/api/organizations", json=data)
        _raise_for_status(response, "Failed to create organization")
        return format_organization(response.json(), [])

    async def update(self, organization_id: int, data: dict[str, Any]) -> OrganizationView:
        response = await self._client.put(f"/api/organizations/{organization_id}", json=data)
        _raise_for_status(response, "Failed to update organization")
        users = await self._users.get_by_organization(organization_id)
        return format_organization(response.json(), users)

    async def delete(self, organization_id: int) -> None:
        response = await self._client.delete(f"/api/organizations/{organization_id}")
        _raise_for_status(response, "Failed to delete organization")


class ConsoleClient:
    """Bundle of both APIs sharing one ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_url: str = "",
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_client = client is None
        self.http = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self.users = UsersApi(self.http)
        self.organizations = OrganizationsApi(self.http, self.users)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http.aclose()

    async def __aenter__(self) -> "ConsoleClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
