import asyncio
import logging
import random
import re
from urllib.parse import quote

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from app.db.base import Base
from app.db.session import AsyncSessionLocal, engine
from app.models.organization import Organization
from app.models.user import User
from app.schemas.common import OrganizationStatus, UserRole

logger = logging.getLogger(__name__)

ORG_NAMES = [
    "Aurora Labs",
    "Nimbus Co",
    "Vertex Solutions",
    "Heliotrope Systems",
    "Meridian Works",
    "Cobalt Collective",
    "Pioneer Labs",
]

PERSON_NAMES = [
    "Dave Richards",
    "Abhishek Hari",
    "Nishta Gupta",
    "Taylor Jones",
    "Sana Khan",
    "Liam Smith",
]

AVATAR_URL = "https://api.dicebear.com/6.x/identicon/svg?seed={seed}"


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower())


def build_seed_organization(name: str, rng: random.Random) -> Organization:
    slug = slugify(name)
    return Organization(
        name=name,
        slug=slug,
        email=f"{slug}@example.com",
        phone=f"+91 {rng.randint(7000000000, 9999999999)}",
        website=f"{slug}.com",
        avatar=AVATAR_URL.format(seed=quote(name, safe="")),
        status=rng.choice(list(OrganizationStatus)),
        pending_requests=rng.randint(0, 120),
    )


def build_seed_users(org_id: int, rng: random.Random) -> list[User]:
    return [
        User(
            name=rng.choice(PERSON_NAMES),
            role=UserRole.ADMIN if rng.random() > 0.6 else UserRole.COORDINATOR,
            organization_id=org_id,
        )
        for _ in range(rng.randint(2, 4))
    ]


async def create_schema(bind: AsyncEngine = engine) -> None:
    """Create tables directly from metadata (local runs and tests; prod uses Alembic)."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_demo_data(session: AsyncSession, rng: random.Random | None = None) -> int:
    """
    Insert the demo organizations with two to four users each.

    Organizations whose slug already exists are skipped. Returns the number created.
    """
    rng = rng or random.Random()
    created = 0
    for name in ORG_NAMES:
        stmt = select(Organization.id).where(Organization.slug == slugify(name))
        if (await session.execute(stmt)).scalar_one_or_none() is not None:
            logger.info("Organization %s already seeded", name)
            continue

        org = build_seed_organization(name, rng)
        session.add(org)
        await session.flush()
        session.add_all(build_seed_users(org.id, rng))
        created += 1
    await session.commit()
    return created


async def init_db() -> None:
    async with AsyncSessionLocal() as session:
        logger.info("Seeding database...")
        created = await seed_demo_data(session)
        logger.info("Database seeded: %s organizations created", created)


if __name__ == "__main__":
    from app.core.logging import configure_logging

    configure_logging()
    asyncio.run(init_db())
