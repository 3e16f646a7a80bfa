from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api import mixins
from src.api.params import ResourceParams, permit
from src.core.deps import get_current_request, get_messaging_client, get_tenant_session
from src.core.request import CurrentRequest
from src.db.models import ServiceInstance, ServicePlan
from src.schemas.common import CollectionResponse, OrderResponse
from src.services.messaging import MessagingClient
from src.services.orders import ServicePlanOrderService

router = APIRouter(prefix="/service_plans", tags=["ServicePlans"])

ORDER_PARAMETERS = ("service_parameters", "provider_control_parameters")


# PUBLIC_INTERFACE
@router.get("", response_model=CollectionResponse, summary="List ServicePlans")
async def list_service_plans(request: Request, session: AsyncSession = Depends(get_tenant_session)):
    return await mixins.index(request, session, ServicePlan)


# PUBLIC_INTERFACE
@router.get("/{id}", response_model=Dict[str, Any], summary="Show an existing ServicePlan")
async def show_service_plan(
    request: Request,
    id: str = Path(..., description="ID of the service plan"),
    session: AsyncSession = Depends(get_tenant_session),
) -> Dict[str, Any]:
    return await mixins.show(request, session, ServicePlan, id)


# PUBLIC_INTERFACE
@router.post(
    "/{id}/order",
    response_model=OrderResponse,
    summary="Order an existing ServicePlan",
    description=(
        "Creates a pending task and hands the order over to the operations worker of the "
        "plan's source type. Body: {service_parameters: {...}, provider_control_parameters: {...}}."
    ),
)
async def order_service_plan(
    request: Request,
    id: str = Path(..., description="ID of the service plan"),
    session: AsyncSession = Depends(get_tenant_session),
    current: CurrentRequest = Depends(get_current_request),
    messaging: MessagingClient = Depends(get_messaging_client),
) -> OrderResponse:
    body = await ResourceParams(request, ServicePlan).body_params()
    order_params = permit(body, (), hashes=ORDER_PARAMETERS)
    task = await ServicePlanOrderService(session, messaging).order(id, order_params, current.forwardable)
    return OrderResponse(task_id=str(task.id))


mixins.add_subcollection_route(router, "service_plan", "service_instances", ServiceInstance)
