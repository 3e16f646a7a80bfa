from __future__ import annotations

import logging
from typing import Any, Dict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import ServicePlan, Source, SourceType, Task
from src.services.base import BaseService
from src.services.messaging import MessagingClient

logger = logging.getLogger(__name__)

OPERATIONS_TOPIC_PREFIX = "platform.topological-inventory.operations-"
ORDER_MESSAGE = "ServicePlan.order"


class ServicePlanOrderService(BaseService):
    """
    Orders a service plan on the source it was collected from.

    The order itself is carried out by the operations worker of the source
    type; the API only records a pending task and hands the request over.
    """

    def __init__(self, session: AsyncSession, messaging: MessagingClient) -> None:
        super().__init__(session)
        self.messaging = messaging
        self.plans = self.repository(ServicePlan)
        self.tasks = self.repository(Task)

    async def _source_type_name(self, plan: ServicePlan) -> str:
        stmt = (
            select(SourceType)
            .join(Source, Source.source_type_id == SourceType.id)
            .where(Source.id == plan.source_id)
        )
        return (await self.session.execute(stmt)).scalar_one().name

    # PUBLIC_INTERFACE
    async def order(
        self,
        plan_id: Any,
        order_params: Dict[str, Any],
        request_context: Dict[str, str],
    ) -> Task:
        """
        Create the tracking task and publish the order.

        Raises:
            RecordNotFound: when the plan is not visible to the tenant.
        """
        plan = await self.plans.find(plan_id)
        topic = OPERATIONS_TOPIC_PREFIX + await self._source_type_name(plan)

        task = await self.tasks.create(
            {"state": "pending", "status": "ok", "tenant_id": plan.tenant_id}
        )
        payload = {
            "request_context": request_context,
            "params": {
                "order_params": order_params,
                "service_plan_id": str(plan.id),
                "task_id": str(task.id),
            },
        }
        await self.messaging.publish_message(topic, ORDER_MESSAGE, payload)
        logger.info("Ordered service plan %s, task %s", plan.id, task.id)
        return task
