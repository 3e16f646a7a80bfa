"""
Database seeding of reference data.

Seeds the source types the inventory collectors know about. Source types are
global (not tenant scoped) and seeding is idempotent.

Usage:
  python -m src.db.run_migrations upgrade head
  python -m src.db.seed
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import SourceType
from src.db.session import get_async_session, without_tenant

logger = logging.getLogger(__name__)

SOURCE_TYPES: List[Dict[str, str]] = [
    {"name": "openshift", "product_name": "OpenShift", "vendor": "Red Hat"},
    {"name": "amazon", "product_name": "Amazon Web Services", "vendor": "Amazon"},
    {"name": "azure", "product_name": "Microsoft Azure", "vendor": "Microsoft"},
]


async def seed_source_types(session: AsyncSession) -> int:
    """Insert the missing source types; returns how many were created."""
    existing = set((await session.execute(select(SourceType.name))).scalars())
    created = 0
    for attrs in SOURCE_TYPES:
        if attrs["name"] in existing:
            continue
        session.add(SourceType(**attrs))
        created += 1
    await session.commit()
    return created


# PUBLIC_INTERFACE
async def seed_all() -> None:
    """Seed the database with the reference data."""
    async for session in get_async_session():
        async with without_tenant(session):
            created = await seed_source_types(session)
        logger.info("Seeded %d source type(s)", created)


if __name__ == "__main__":
    asyncio.run(seed_all())
