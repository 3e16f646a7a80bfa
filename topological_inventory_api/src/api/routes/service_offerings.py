from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api import mixins
from src.core.deps import get_tenant_session
from src.db.models import ServiceInstance, ServiceOffering, ServicePlan
from src.schemas.common import CollectionResponse

router = APIRouter(prefix="/service_offerings", tags=["ServiceOfferings"])


# PUBLIC_INTERFACE
@router.get("", response_model=CollectionResponse, summary="List ServiceOfferings")
async def list_service_offerings(request: Request, session: AsyncSession = Depends(get_tenant_session)):
    return await mixins.index(request, session, ServiceOffering)


# PUBLIC_INTERFACE
@router.get("/{id}", response_model=Dict[str, Any], summary="Show an existing ServiceOffering")
async def show_service_offering(
    request: Request,
    id: str = Path(..., description="ID of the service offering"),
    session: AsyncSession = Depends(get_tenant_session),
) -> Dict[str, Any]:
    return await mixins.show(request, session, ServiceOffering, id)


mixins.add_subcollection_route(router, "service_offering", "service_instances", ServiceInstance)
mixins.add_subcollection_route(router, "service_offering", "service_plans", ServicePlan)
