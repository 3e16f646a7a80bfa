from __future__ import annotations

import pytest_asyncio
from sqlalchemy import select

from src.core.deps import find_or_create_tenant
from src.db.models import Source, SourceType, Tenant
from src.db.session import current_tenant_id, tenant_context, without_tenant


@pytest_asyncio.fixture
async def two_tenants_sources(session, tenant, other_tenant, source_type):
    session.add_all(
        [
            Source(name="mine", source_type_id=source_type.id, tenant_id=tenant.id),
            Source(name="theirs", source_type_id=source_type.id, tenant_id=other_tenant.id),
        ]
    )
    await session.commit()


async def source_names(session):
    return sorted(s.name for s in (await session.execute(select(Source))).scalars())


async def test_scoped_session_only_sees_its_tenant(session, tenant, other_tenant, two_tenants_sources):
    async with tenant_context(session, tenant.id):
        assert current_tenant_id(session) == tenant.id
        assert [s.name for s in (await session.execute(select(Source))).scalars()] == ["mine"]
    async with tenant_context(session, other_tenant.id):
        assert await source_names(session) == ["theirs"]


async def test_unscoped_session_sees_everything(session, tenant, two_tenants_sources):
    assert await source_names(session) == ["mine", "theirs"]
    async with tenant_context(session, tenant.id):
        async with without_tenant(session):
            assert current_tenant_id(session) is None
            assert await source_names(session) == ["mine", "theirs"]
        assert current_tenant_id(session) == tenant.id
    assert current_tenant_id(session) is None


async def test_global_models_are_not_scoped(session, tenant, source_type):
    async with tenant_context(session, tenant.id):
        types = (await session.execute(select(SourceType))).scalars().all()
    assert [t.name for t in types] == ["openshift"]


async def test_new_rows_are_stamped_with_the_tenant(session, tenant, source_type):
    async with tenant_context(session, tenant.id):
        source = Source(name="stamped", source_type_id=source_type.id)
        session.add(source)
        await session.commit()
    assert source.tenant_id == tenant.id


async def test_find_or_create_tenant(session, tenant):
    assert (await find_or_create_tenant(session, tenant.external_tenant)).id == tenant.id

    created = await find_or_create_tenant(session, "9999999")
    assert created.id != tenant.id
    count = len((await session.execute(select(Tenant))).scalars().all())
    assert count == 2
