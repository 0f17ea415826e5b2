from __future__ import annotations

from dataclasses import dataclass

import structlog
from returns.result import Failure, Result, Success

from storefront_orders.core.domain.model.errors import StorefrontError, ValidationError
from storefront_orders.core.domain.model.identity import Identity
from storefront_orders.core.domain.model.order import Order, OrderId
from storefront_orders.core.domain.model.status import StatusPolicy, check_transition
from storefront_orders.core.domain.service.access import require_admin
from storefront_orders.core.domain.service.line_items_service import LineItemMaterializer
from storefront_orders.core.ports.inbound.manage_order import (
    DeleteOrderCommand,
    DeleteOrderUseCase,
    UpdateOrderStatusCommand,
    UpdateOrderStatusUseCase,
)
from storefront_orders.core.ports.outbound.events import (
    EventPublisher,
    OrderDeleted,
    OrderEvent,
    OrderStatusChanged,
)
from storefront_orders.core.ports.outbound.orders import OrderRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderLifecycleDeps:
    orders: OrderRepository
    materializer: LineItemMaterializer
    events: EventPublisher
    status_policy: StatusPolicy = StatusPolicy.OPEN


@dataclass(frozen=True)
class OrderLifecycleService(UpdateOrderStatusUseCase, DeleteOrderUseCase):
    deps: OrderLifecycleDeps

    async def update_status(
        self, command: UpdateOrderStatusCommand, caller: Identity
    ) -> Result[Order, StorefrontError]:
        allowed = require_admin(caller)
        if isinstance(allowed, Failure):
            return allowed
        if not command.status.strip():
            return Failure(ValidationError("status is required"))

        order_id = OrderId(command.order_id)
        current = await self.deps.orders.get(order_id)
        if isinstance(current, Failure):
            return current
        previous = current.unwrap().status

        checked = check_transition(self.deps.status_policy, previous, command.status)
        if isinstance(checked, Failure):
            return checked

        updated = await self.deps.orders.update_status(order_id, command.status)
        if isinstance(updated, Success):
            self._publish(OrderStatusChanged(order_id, previous, command.status))
        return updated

    async def delete_order(
        self, command: DeleteOrderCommand, caller: Identity
    ) -> Result[Order, StorefrontError]:
        """Delete the order, then every line item it owns.

        All child deletions are awaited. Items that could not be removed are
        reported through ``PartialCompletion``; the order stays deleted.
        """
        allowed = require_admin(caller)
        if isinstance(allowed, Failure):
            return allowed

        removed = await self.deps.orders.delete(OrderId(command.order_id))
        if isinstance(removed, Failure):
            return removed
        order = removed.unwrap()

        cascaded = await self.deps.materializer.discard(order.items)
        self._publish(OrderDeleted(order.order_id, order.items))
        if isinstance(cascaded, Failure):
            logger.error(
                "order_delete_cascade_incomplete",
                order_id=order.order_id.value,
                error=str(cascaded.failure()),
            )
            return cascaded
        return Success(order)

    def _publish(self, event: OrderEvent) -> None:
        published = self.deps.events.publish(event)
        if isinstance(published, Failure):
            logger.warning("order_event_not_published", error=str(published.failure()))
