from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api import mixins
from src.core.deps import get_tenant_session
from src.db.models import Authentication
from src.schemas.common import CollectionResponse

router = APIRouter(prefix="/authentications", tags=["Authentications"])


# PUBLIC_INTERFACE
@router.get("", response_model=CollectionResponse, summary="List Authentications")
async def list_authentications(request: Request, session: AsyncSession = Depends(get_tenant_session)):
    return await mixins.index(request, session, Authentication)


# PUBLIC_INTERFACE
@router.post(
    "",
    status_code=201,
    response_model=Dict[str, Any],
    summary="Create a new Authentication",
    description="Credentials for a resource (resource_type/resource_id). The password is never returned.",
)
async def create_authentication(request: Request, session: AsyncSession = Depends(get_tenant_session)):
    return await mixins.create(request, session, Authentication)


# PUBLIC_INTERFACE
@router.get("/{id}", response_model=Dict[str, Any], summary="Show an existing Authentication")
async def show_authentication(
    request: Request,
    id: str = Path(..., description="ID of the authentication"),
    session: AsyncSession = Depends(get_tenant_session),
) -> Dict[str, Any]:
    return await mixins.show(request, session, Authentication, id)


# PUBLIC_INTERFACE
@router.patch("/{id}", status_code=204, summary="Update an existing Authentication")
@router.put("/{id}", status_code=204, include_in_schema=False)
async def update_authentication(
    request: Request,
    id: str = Path(..., description="ID of the authentication"),
    session: AsyncSession = Depends(get_tenant_session),
):
    return await mixins.update(request, session, Authentication, id)


# PUBLIC_INTERFACE
@router.delete("/{id}", status_code=204, summary="Delete an existing Authentication")
async def delete_authentication(
    request: Request,
    id: str = Path(..., description="ID of the authentication"),
    session: AsyncSession = Depends(get_tenant_session),
):
    return await mixins.destroy(request, session, Authentication, id)
