from __future__ import annotations

from dataclasses import dataclass

import structlog
from returns.result import Failure, Result, Success

from storefront_orders.core.domain.model.errors import PublishError, StorefrontError
from storefront_orders.core.ports.outbound.events import (
    EventPublisher,
    OrderDeleted,
    OrderEvent,
    OrderPlaced,
    OrderStatusChanged,
)

logger = structlog.get_logger("storefront_orders.events")


@dataclass
class LogEventPublisher(EventPublisher):
    fail: bool = False

    def publish(self, event: OrderEvent) -> Result[None, StorefrontError]:
        if self.fail:
            return Failure(PublishError(message="publisher is down"))

        if isinstance(event, OrderPlaced):
            logger.info(
                "order_placed",
                order_id=event.order_id.value,
                user_id=event.user_id.value,
                total_price=str(event.total_price.amount),
            )
        elif isinstance(event, OrderStatusChanged):
            logger.info(
                "order_status_changed",
                order_id=event.order_id.value,
                previous=event.previous,
                current=event.current,
            )
        elif isinstance(event, OrderDeleted):
            logger.info(
                "order_deleted",
                order_id=event.order_id.value,
                line_items=[i.value for i in event.line_items],
            )
        return Success(None)
