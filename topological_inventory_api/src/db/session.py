from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import ORMExecuteState, Session, with_loader_criteria

from .base import TenantMixin
from .config import get_settings

# Key under Session.info holding the id of the tenant the session is scoped to
TENANT_KEY = "tenant_id"

_ENGINE: AsyncEngine | None = None
_SESSION_MAKER: async_sessionmaker[AsyncSession] | None = None


def _ensure_engine_initialized() -> None:
    """
    Lazily initialize the AsyncEngine and session maker.
    """
    global _ENGINE, _SESSION_MAKER
    if _ENGINE is None:
        settings = get_settings()
        _ENGINE = create_async_engine(
            settings.async_database_url,
            echo=settings.SQL_ECHO,
            pool_pre_ping=True,
        )
    if _SESSION_MAKER is None:
        _SESSION_MAKER = async_sessionmaker(
            bind=_ENGINE, expire_on_commit=False, autoflush=False, autocommit=False
        )


# PUBLIC_INTERFACE
def get_engine() -> AsyncEngine:
    """Return the global AsyncEngine instance."""
    _ensure_engine_initialized()
    assert _ENGINE is not None
    return _ENGINE


# PUBLIC_INTERFACE
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield an AsyncSession suitable for FastAPI dependency injection.
    Ensures engine/session factory is initialized.
    """
    _ensure_engine_initialized()
    assert _SESSION_MAKER is not None
    async with _SESSION_MAKER() as session:
        yield session


# PUBLIC_INTERFACE
def current_tenant_id(session: AsyncSession | Session) -> Optional[int]:
    """Return the tenant id the session is scoped to, if any."""
    return session.info.get(TENANT_KEY)


# PUBLIC_INTERFACE
@asynccontextmanager
async def tenant_context(
    session: AsyncSession, tenant_id: Optional[int]
) -> AsyncGenerator[AsyncSession, None]:
    """
    Async context manager that scopes the session to a tenant.

    Usage:
        async with tenant_context(session, tenant.id):
            # ORM selects on tenant-scoped models only see this tenant's rows,
            # and new rows are stamped with it
            ...

    A tenant_id of None runs the block unscoped. The previous scope is restored on exit.
    """
    previous = session.info.get(TENANT_KEY)
    if tenant_id is None:
        session.info.pop(TENANT_KEY, None)
    else:
        session.info[TENANT_KEY] = tenant_id
    try:
        yield session
    finally:
        if previous is None:
            session.info.pop(TENANT_KEY, None)
        else:
            session.info[TENANT_KEY] = previous


# PUBLIC_INTERFACE
def without_tenant(session: AsyncSession):
    """Run a block with tenant scoping switched off."""
    return tenant_context(session, None)


@event.listens_for(Session, "do_orm_execute")
def _scope_to_tenant(execute_state: ORMExecuteState) -> None:
    tenant_id = execute_state.session.info.get(TENANT_KEY)
    if tenant_id is None or not execute_state.is_select or execute_state.is_column_load:
        return
    execute_state.statement = execute_state.statement.options(
        with_loader_criteria(
            TenantMixin,
            lambda cls: cls.tenant_id == tenant_id,
            include_aliases=True,
        )
    )


@event.listens_for(Session, "before_flush")
def _stamp_tenant(session: Session, flush_context, instances) -> None:
    tenant_id = session.info.get(TENANT_KEY)
    if tenant_id is None:
        return
    for obj in session.new:
        if isinstance(obj, TenantMixin) and obj.tenant_id is None:
            obj.tenant_id = tenant_id
