"""Global test fixtures and shared test infrastructure.

Provides:
- Environment variable defaults (must be set before any app import)
- A per-test SQLite engine with foreign keys enforced, so unique-slug and
  cascade-delete behaviour is exercised against a real store
- ``db`` session and ``client`` (httpx ``AsyncClient`` over ASGI) fixtures
- FakeAsyncSession for driving store-failure paths
- Factories for organization/user rows
"""

from __future__ import annotations

import os

# Environment defaults. Must be set before importing the app, which triggers
# pydantic Settings validation on import.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

from typing import Any, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.organization import Organization
from app.models.user import User
from app.schemas.common import OrganizationStatus, UserRole


# ---------------------------------------------------------------------------
# Real store: SQLite
# ---------------------------------------------------------------------------


def _enable_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest_asyncio.fixture
async def engine(tmp_path):
    # File-backed so concurrent requests get their own connections.
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'console.db'}")
    event.listen(test_engine.sync_engine, "connect", _enable_foreign_keys)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """API client with ``get_db`` bound to the test store."""

    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.pop(get_db, None)


# ---------------------------------------------------------------------------
# FakeAsyncSession: store failures a real database won't produce on demand
# ---------------------------------------------------------------------------


class FakeAsyncSession:
    """Fake ``AsyncSession`` whose ``execute``/``flush`` can be made to fail."""

    def __init__(self, *, execute_error: Exception | None = None, flush_error: Exception | None = None) -> None:
        self.execute_error = execute_error
        self.flush_error = flush_error
        self.execute_calls = 0
        self.added: list[Any] = []
        self.rolled_back = False
        self.committed = False

    async def execute(self, stmt, *args, **kwargs):
        self.execute_calls += 1
        if self.execute_error is not None:
            raise self.execute_error
        raise AssertionError("FakeAsyncSession.execute called without a configured error")

    def add(self, obj: Any) -> None:
        self.added.append(obj)

    async def flush(self) -> None:
        if self.flush_error is not None:
            raise self.flush_error

    async def rollback(self) -> None:
        self.rolled_back = True

    async def commit(self) -> None:
        self.committed = True

    async def refresh(self, obj: Any) -> None:
        pass


@pytest.fixture
def fake_db_client() -> Callable[[FakeAsyncSession], AsyncClient]:
    """Build an API client whose ``get_db`` yields the given fake session."""
    def _build(session: FakeAsyncSession) -> AsyncClient:
        async def _override_get_db():
            yield session

        app.dependency_overrides[get_db] = _override_get_db
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    yield _build
    app.dependency_overrides.pop(get_db, None)


# ---------------------------------------------------------------------------
# Model factories
# ---------------------------------------------------------------------------


async def make_organization(db: AsyncSession, *, slug: str = "acme", **overrides: Any) -> Organization:
    defaults: dict[str, Any] = dict(
        name="Acme Corp",
        slug=slug,
        email=f"{slug}@example.com",
        status=OrganizationStatus.ACTIVE,
        pending_requests=0,
    )
    defaults.update(overrides)
    org = Organization(**defaults)
    db.add(org)
    await db.commit()
    await db.refresh(org)
    return org


async def make_user(db: AsyncSession, org: Organization, **overrides: Any) -> User:
    defaults: dict[str, Any] = dict(
        name="Taylor Jones",
        role=UserRole.COORDINATOR,
        organization_id=org.id,
    )
    defaults.update(overrides)
    user = User(**defaults)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user
