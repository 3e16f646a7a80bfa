from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api import mixins
from src.core.deps import get_tenant_session
from src.db.models import (
    Authentication,
    ContainerImage,
    Endpoint,
    Flavor,
    ServiceInstance,
    ServiceOffering,
    ServicePlan,
    Source,
    Task,
    Vm,
)
from src.schemas.common import CollectionResponse

router = APIRouter(prefix="/sources", tags=["Sources"])


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=CollectionResponse,
    summary="List Sources",
    description="Paginated list of the tenant's sources; accepts filter[<attribute>][<comparator>] parameters.",
)
async def list_sources(request: Request, session: AsyncSession = Depends(get_tenant_session)):
    return await mixins.index(request, session, Source)


# PUBLIC_INTERFACE
@router.post("", status_code=201, response_model=Dict[str, Any], summary="Create a new Source")
async def create_source(request: Request, session: AsyncSession = Depends(get_tenant_session)):
    return await mixins.create(request, session, Source)


# PUBLIC_INTERFACE
@router.get("/{id}", response_model=Dict[str, Any], summary="Show an existing Source")
async def show_source(
    request: Request,
    id: str = Path(..., description="ID of the source"),
    session: AsyncSession = Depends(get_tenant_session),
) -> Dict[str, Any]:
    return await mixins.show(request, session, Source, id)


# PUBLIC_INTERFACE
@router.patch("/{id}", status_code=204, summary="Update an existing Source")
@router.put("/{id}", status_code=204, include_in_schema=False)
async def update_source(
    request: Request,
    id: str = Path(..., description="ID of the source"),
    session: AsyncSession = Depends(get_tenant_session),
):
    return await mixins.update(request, session, Source, id)


# PUBLIC_INTERFACE
@router.delete("/{id}", status_code=204, summary="Delete an existing Source")
async def delete_source(
    request: Request,
    id: str = Path(..., description="ID of the source"),
    session: AsyncSession = Depends(get_tenant_session),
):
    return await mixins.destroy(request, session, Source, id)


# Authentications are owned polymorphically (resource_type/resource_id)
mixins.add_subcollection_route(router, "source", "authentications", Authentication)
mixins.add_subcollection_route(router, "source", "container_images", ContainerImage)
mixins.add_subcollection_route(router, "source", "endpoints", Endpoint)
mixins.add_subcollection_route(router, "source", "flavors", Flavor)
mixins.add_subcollection_route(router, "source", "service_instances", ServiceInstance)
mixins.add_subcollection_route(router, "source", "service_offerings", ServiceOffering)
mixins.add_subcollection_route(router, "source", "service_plans", ServicePlan)
mixins.add_subcollection_route(router, "source", "tasks", Task)
mixins.add_subcollection_route(router, "source", "vms", Vm)
