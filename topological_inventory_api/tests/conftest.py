"""Shared fixtures: in-memory database, ASGI client and identity headers.

The app runs against a single in-memory SQLite connection (StaticPool) so the
test session and the request sessions see the same data. Kafka is replaced by
a recording fake.
"""
from __future__ import annotations

import os
from typing import Any, AsyncGenerator, Dict, List, Tuple

# Must be set before the app (and its settings) are imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.pop("BYPASS_TENANCY", None)
os.environ.pop("PATH_PREFIX", None)
os.environ.pop("APP_NAME", None)

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.api.main import app
from src.core import deps
from src.core.identity import encode_identity
from src.db.base import Base
from src.db.models import (
    ContainerImage,
    ContainerImageTag,
    Source,
    SourceType,
    Tag,
    Tenant,
)
from src.db.session import get_async_session

ACCOUNT = "0000001"
OTHER_ACCOUNT = "0000002"


class FakeMessagingClient:
    """Records published messages instead of talking to Kafka."""

    def __init__(self) -> None:
        self.published: List[Tuple[str, str, Dict[str, Any]]] = []
        self.fail_with: Exception | None = None

    async def publish_message(self, service: str, message: str, payload: Dict[str, Any]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.published.append((service, message, payload))

    async def close(self) -> None:
        return None


def make_identity(account: str | None = ACCOUNT, entitled: bool = True) -> Dict[str, Any]:
    identity: Dict[str, Any] = {
        "identity": {
            "type": "User",
            "user": {"username": "jdoe", "email": "jdoe@example.com", "is_org_admin": False},
        },
        "entitlements": {
            "hybrid_cloud": {"is_entitled": entitled},
            "insights": {"is_entitled": False},
        },
    }
    if account is not None:
        identity["identity"]["account_number"] = account
    return identity


def identity_headers(account: str | None = ACCOUNT, entitled: bool = True) -> Dict[str, str]:
    return {"x-rh-identity": encode_identity(make_identity(account, entitled))}


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture
def messaging() -> FakeMessagingClient:
    return FakeMessagingClient()


@pytest_asyncio.fixture
async def client(session_maker, messaging) -> AsyncGenerator[AsyncClient, None]:
    """ASGI client with the database and messaging dependencies overridden."""

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[deps.get_messaging_client] = lambda: messaging

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def headers() -> Dict[str, str]:
    return identity_headers()


@pytest.fixture
def make_headers():
    """Factory for identity headers of other accounts or entitlements."""
    return identity_headers


@pytest_asyncio.fixture
async def tenant(session) -> Tenant:
    tenant = Tenant(external_tenant=ACCOUNT)
    session.add(tenant)
    await session.commit()
    return tenant


@pytest_asyncio.fixture
async def other_tenant(session) -> Tenant:
    tenant = Tenant(external_tenant=OTHER_ACCOUNT)
    session.add(tenant)
    await session.commit()
    return tenant


@pytest_asyncio.fixture
async def source_type(session) -> SourceType:
    source_type = SourceType(name="openshift", product_name="OpenShift", vendor="Red Hat")
    session.add(source_type)
    await session.commit()
    return source_type


@pytest_asyncio.fixture
async def source(session, tenant, source_type) -> Source:
    source = Source(name="ocp-prod", uid="uid-1", source_type_id=source_type.id, tenant_id=tenant.id)
    session.add(source)
    await session.commit()
    return source


@pytest_asyncio.fixture
async def tagged_image(session, tenant, source) -> Tuple[ContainerImage, List[Tag]]:
    """A container image with two tags, plus a third tag on nothing."""
    image = ContainerImage(name="nginx", tag="1.25", source_id=source.id, tenant_id=tenant.id)
    arch = Tag(name="architecture", namespace="openshift", value="x86_64", tenant_id=tenant.id)
    env = Tag(name="environment", namespace="openshift", value="prod", tenant_id=tenant.id)
    unused = Tag(name="unused", namespace="", value="", tenant_id=tenant.id)
    session.add_all([image, arch, env, unused])
    await session.flush()
    session.add_all(
        [
            ContainerImageTag(container_image_id=image.id, tag_id=arch.id, tenant_id=tenant.id),
            ContainerImageTag(container_image_id=image.id, tag_id=env.id, tenant_id=tenant.id),
        ]
    )
    await session.commit()
    return image, [arch, env]
