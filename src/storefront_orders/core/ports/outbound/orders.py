from __future__ import annotations

from typing import Protocol, Sequence

from returns.result import Result

from storefront_orders.core.domain.model.errors import StorefrontError
from storefront_orders.core.domain.model.order import Money, Order, OrderId, UserId


class OrderRepository(Protocol):
    async def save(self, order: Order) -> Result[OrderId, StorefrontError]: ...

    async def get(self, order_id: OrderId) -> Result[Order, StorefrontError]: ...

    async def list_all(self) -> Result[Sequence[Order], StorefrontError]:
        """All orders, most recent ``date_ordered`` first."""
        ...

    async def list_by_user(
        self, user_id: UserId
    ) -> Result[Sequence[Order], StorefrontError]: ...

    async def update_status(
        self, order_id: OrderId, status: str
    ) -> Result[Order, StorefrontError]: ...

    async def delete(self, order_id: OrderId) -> Result[Order, StorefrontError]:
        """Remove the order and return it as it was stored."""
        ...

    async def count(self) -> Result[int, StorefrontError]: ...

    async def total_sales(self) -> Result[Money, StorefrontError]: ...
