from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api import mixins
from src.core.deps import get_tenant_session
from src.db.models import ServiceInstance
from src.schemas.common import CollectionResponse

router = APIRouter(prefix="/service_instances", tags=["ServiceInstances"])


# PUBLIC_INTERFACE
@router.get("", response_model=CollectionResponse, summary="List ServiceInstances")
async def list_service_instances(request: Request, session: AsyncSession = Depends(get_tenant_session)):
    return await mixins.index(request, session, ServiceInstance)


# PUBLIC_INTERFACE
@router.get("/{id}", response_model=Dict[str, Any], summary="Show an existing ServiceInstance")
async def show_service_instance(
    request: Request,
    id: str = Path(..., description="ID of the service instance"),
    session: AsyncSession = Depends(get_tenant_session),
) -> Dict[str, Any]:
    return await mixins.show(request, session, ServiceInstance, id)
