from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api import mixins
from src.core.deps import get_tenant_session
from src.db.models import ContainerImage, Tag
from src.schemas.common import CollectionResponse

router = APIRouter(prefix="/container_images", tags=["ContainerImages"])


# PUBLIC_INTERFACE
@router.get("", response_model=CollectionResponse, summary="List ContainerImages")
async def list_container_images(request: Request, session: AsyncSession = Depends(get_tenant_session)):
    return await mixins.index(request, session, ContainerImage)


# PUBLIC_INTERFACE
@router.get("/{id}", response_model=Dict[str, Any], summary="Show an existing ContainerImage")
async def show_container_image(
    request: Request,
    id: str = Path(..., description="ID of the container image"),
    session: AsyncSession = Depends(get_tenant_session),
) -> Dict[str, Any]:
    return await mixins.show(request, session, ContainerImage, id)


# Through container_image_tags
mixins.add_subcollection_route(router, "container_image", "tags", Tag)
