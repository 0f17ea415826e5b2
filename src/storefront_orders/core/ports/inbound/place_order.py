from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from returns.result import Result

from storefront_orders.core.domain.model.errors import StorefrontError
from storefront_orders.core.domain.model.identity import Identity
from storefront_orders.core.domain.model.order import Order


@dataclass(frozen=True)
class PlaceOrderLine:
    quantity: int
    product_id: str


@dataclass(frozen=True)
class PlaceOrderCommand:
    user_id: str
    lines: Sequence[PlaceOrderLine]
    shipping_address1: str
    city: str
    zip: str
    country: str
    phone: str
    shipping_address2: str = ""
    status: str | None = None


class PlaceOrderUseCase(Protocol):
    async def place_order(
        self, command: PlaceOrderCommand, caller: Identity
    ) -> Result[Order, StorefrontError]: ...
