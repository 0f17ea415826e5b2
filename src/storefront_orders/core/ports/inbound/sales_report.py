from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from returns.result import Result

from storefront_orders.core.domain.model.errors import StorefrontError
from storefront_orders.core.domain.model.identity import Identity
from storefront_orders.core.domain.model.order import Money, Order


@dataclass(frozen=True)
class OrdersByUserQuery:
    user_id: str


class SalesReportUseCase(Protocol):
    async def count_orders(self, caller: Identity) -> Result[int, StorefrontError]: ...

    async def total_sales(self, caller: Identity) -> Result[Money, StorefrontError]: ...

    async def orders_by_user(
        self, query: OrdersByUserQuery, caller: Identity
    ) -> Result[Sequence[Order], StorefrontError]: ...
