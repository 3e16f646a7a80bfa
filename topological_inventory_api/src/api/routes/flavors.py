from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api import mixins
from src.core.deps import get_tenant_session
from src.db.models import Flavor, Vm
from src.schemas.common import CollectionResponse

router = APIRouter(prefix="/flavors", tags=["Flavors"])


# PUBLIC_INTERFACE
@router.get("", response_model=CollectionResponse, summary="List Flavors")
async def list_flavors(request: Request, session: AsyncSession = Depends(get_tenant_session)):
    return await mixins.index(request, session, Flavor)


# PUBLIC_INTERFACE
@router.get("/{id}", response_model=Dict[str, Any], summary="Show an existing Flavor")
async def show_flavor(
    request: Request,
    id: str = Path(..., description="ID of the flavor"),
    session: AsyncSession = Depends(get_tenant_session),
) -> Dict[str, Any]:
    return await mixins.show(request, session, Flavor, id)


mixins.add_subcollection_route(router, "flavor", "vms", Vm)
