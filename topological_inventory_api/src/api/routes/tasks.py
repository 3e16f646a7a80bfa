from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api import mixins
from src.core.deps import get_tenant_session
from src.db.models import Task
from src.schemas.common import CollectionResponse

router = APIRouter(prefix="/tasks", tags=["Tasks"])


# PUBLIC_INTERFACE
@router.get("", response_model=CollectionResponse, summary="List Tasks")
async def list_tasks(request: Request, session: AsyncSession = Depends(get_tenant_session)):
    return await mixins.index(request, session, Task)


# PUBLIC_INTERFACE
@router.get("/{id}", response_model=Dict[str, Any], summary="Show an existing Task")
async def show_task(
    request: Request,
    id: str = Path(..., description="ID of the task"),
    session: AsyncSession = Depends(get_tenant_session),
) -> Dict[str, Any]:
    return await mixins.show(request, session, Task, id)


# PUBLIC_INTERFACE
@router.patch(
    "/{id}",
    status_code=204,
    summary="Update an existing Task",
    description="Used by workers to report the progress (state, status, context) of a task.",
)
@router.put("/{id}", status_code=204, include_in_schema=False)
async def update_task(
    request: Request,
    id: str = Path(..., description="ID of the task"),
    session: AsyncSession = Depends(get_tenant_session),
):
    return await mixins.update(request, session, Task, id)
