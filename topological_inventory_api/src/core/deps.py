from __future__ import annotations

import logging
from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import EntitlementError
from src.core.identity import request_is_entitled
from src.core.logging import tenant_var
from src.core.request import CurrentRequest
from src.core.settings import get_app_settings
from src.db.models import Tenant
from src.db.session import get_async_session, tenant_context, without_tenant
from src.services.messaging import MessagingClient, get_messaging_client as _messaging_client

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def get_current_request(request: Request) -> CurrentRequest:
    """Identity-related view of the incoming request."""
    return CurrentRequest.from_request(request)


async def find_or_create_tenant(session: AsyncSession, external_tenant: str) -> Tenant:
    """Return the tenant of an account number, creating it on first sight."""
    async with without_tenant(session):
        stmt = select(Tenant).where(Tenant.external_tenant == external_tenant)
        tenant = (await session.execute(stmt)).scalar_one_or_none()
        if tenant is not None:
            return tenant

        tenant = Tenant(external_tenant=external_tenant)
        session.add(tenant)
        try:
            await session.commit()
        except IntegrityError:
            # Created concurrently by another request
            await session.rollback()
            tenant = (await session.execute(stmt)).scalar_one()
        else:
            logger.info("Created tenant for account %s", external_tenant)
        return tenant


# PUBLIC_INTERFACE
async def get_tenant_session(
    current: CurrentRequest = Depends(get_current_request),
    session: AsyncSession = Depends(get_async_session),
) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield an AsyncSession scoped to the tenant of the request's identity.

    With tenancy enabled and an authenticated path, the identity must carry one
    of the required entitlements and an account number; ORM queries then only
    see that tenant's rows. Otherwise the session runs unscoped.

    Raises:
        IdentityError: 401 for a missing or undecodable identity.
        EntitlementError: 403 when no required entitlement is granted.
    """
    settings = get_app_settings()
    if settings.tenancy_enabled and current.required_auth:
        if not request_is_entitled(current.entitlement):
            raise EntitlementError()
        tenant = await find_or_create_tenant(session, current.user.tenant)
        tenant_var.set(tenant.external_tenant)
        async with tenant_context(session, tenant.id):
            yield session
    else:
        async with without_tenant(session):
            yield session


# PUBLIC_INTERFACE
def get_messaging_client() -> MessagingClient:
    """Messaging client used to hand requests over to other services."""
    return _messaging_client()
