from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Tuple, Union

from returns.result import Result

from storefront_orders.core.domain.model.errors import StorefrontError
from storefront_orders.core.domain.model.order import LineItemId, Money, OrderId, UserId


@dataclass(frozen=True)
class OrderPlaced:
    order_id: OrderId
    user_id: UserId
    total_price: Money


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: OrderId
    previous: str
    current: str


@dataclass(frozen=True)
class OrderDeleted:
    order_id: OrderId
    line_items: Tuple[LineItemId, ...]


OrderEvent = Union[OrderPlaced, OrderStatusChanged, OrderDeleted]


class EventPublisher(Protocol):
    def publish(self, event: OrderEvent) -> Result[None, StorefrontError]: ...
