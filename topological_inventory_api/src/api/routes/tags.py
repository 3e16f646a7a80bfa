from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api import mixins
from src.core.deps import get_tenant_session
from src.db.models import ContainerImage, Tag
from src.schemas.common import CollectionResponse

router = APIRouter(prefix="/tags", tags=["Tags"])


# PUBLIC_INTERFACE
@router.get("", response_model=CollectionResponse, summary="List Tags")
async def list_tags(request: Request, session: AsyncSession = Depends(get_tenant_session)):
    return await mixins.index(request, session, Tag)


# PUBLIC_INTERFACE
@router.get("/{id}", response_model=Dict[str, Any], summary="Show an existing Tag")
async def show_tag(
    request: Request,
    id: str = Path(..., description="ID of the tag"),
    session: AsyncSession = Depends(get_tenant_session),
) -> Dict[str, Any]:
    return await mixins.show(request, session, Tag, id)


# Through container_image_tags
mixins.add_subcollection_route(router, "tag", "container_images", ContainerImage)
