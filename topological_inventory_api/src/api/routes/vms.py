from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api import mixins
from src.core.deps import get_tenant_session
from src.db.models import Vm
from src.schemas.common import CollectionResponse

router = APIRouter(prefix="/vms", tags=["Vms"])


# PUBLIC_INTERFACE
@router.get("", response_model=CollectionResponse, summary="List Vms")
async def list_vms(request: Request, session: AsyncSession = Depends(get_tenant_session)):
    return await mixins.index(request, session, Vm)


# PUBLIC_INTERFACE
@router.get("/{id}", response_model=Dict[str, Any], summary="Show an existing Vm")
async def show_vm(
    request: Request,
    id: str = Path(..., description="ID of the vm"),
    session: AsyncSession = Depends(get_tenant_session),
) -> Dict[str, Any]:
    return await mixins.show(request, session, Vm, id)
