from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api import mixins
from src.core.deps import get_tenant_session
from src.db.models import Authentication, Endpoint
from src.schemas.common import CollectionResponse

router = APIRouter(prefix="/endpoints", tags=["Endpoints"])


# PUBLIC_INTERFACE
@router.get("", response_model=CollectionResponse, summary="List Endpoints")
async def list_endpoints(request: Request, session: AsyncSession = Depends(get_tenant_session)):
    return await mixins.index(request, session, Endpoint)


# PUBLIC_INTERFACE
@router.post(
    "",
    status_code=201,
    response_model=Dict[str, Any],
    summary="Create a new Endpoint",
    description="Creates an endpoint of an existing source; source_id is required.",
)
async def create_endpoint(request: Request, session: AsyncSession = Depends(get_tenant_session)):
    return await mixins.create(request, session, Endpoint)


# PUBLIC_INTERFACE
@router.get("/{id}", response_model=Dict[str, Any], summary="Show an existing Endpoint")
async def show_endpoint(
    request: Request,
    id: str = Path(..., description="ID of the endpoint"),
    session: AsyncSession = Depends(get_tenant_session),
) -> Dict[str, Any]:
    return await mixins.show(request, session, Endpoint, id)


# PUBLIC_INTERFACE
@router.patch("/{id}", status_code=204, summary="Update an existing Endpoint")
@router.put("/{id}", status_code=204, include_in_schema=False)
async def update_endpoint(
    request: Request,
    id: str = Path(..., description="ID of the endpoint"),
    session: AsyncSession = Depends(get_tenant_session),
):
    return await mixins.update(request, session, Endpoint, id)


# PUBLIC_INTERFACE
@router.delete("/{id}", status_code=204, summary="Delete an existing Endpoint")
async def delete_endpoint(
    request: Request,
    id: str = Path(..., description="ID of the endpoint"),
    session: AsyncSession = Depends(get_tenant_session),
):
    return await mixins.destroy(request, session, Endpoint, id)


mixins.add_subcollection_route(router, "endpoint", "authentications", Authentication)
