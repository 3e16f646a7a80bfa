from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api import mixins
from src.core.deps import get_tenant_session
from src.db.models import Source, SourceType
from src.schemas.common import CollectionResponse

router = APIRouter(prefix="/source_types", tags=["SourceTypes"])


# PUBLIC_INTERFACE
@router.get("", response_model=CollectionResponse, summary="List SourceTypes")
async def list_source_types(request: Request, session: AsyncSession = Depends(get_tenant_session)):
    return await mixins.index(request, session, SourceType)


# PUBLIC_INTERFACE
@router.get("/{id}", response_model=Dict[str, Any], summary="Show an existing SourceType")
async def show_source_type(
    request: Request,
    id: str = Path(..., description="ID of the source type"),
    session: AsyncSession = Depends(get_tenant_session),
) -> Dict[str, Any]:
    return await mixins.show(request, session, SourceType, id)


mixins.add_subcollection_route(router, "source_type", "sources", Source)
