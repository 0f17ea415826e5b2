from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from returns.result import Failure, Result

from storefront_orders.core.domain.model.errors import StorefrontError, ValidationError
from storefront_orders.core.domain.model.identity import Identity
from storefront_orders.core.domain.model.order import Money, Order, UserId
from storefront_orders.core.domain.service.access import (
    require_admin,
    require_owner_or_admin,
)
from storefront_orders.core.ports.inbound.sales_report import (
    OrdersByUserQuery,
    SalesReportUseCase,
)
from storefront_orders.core.ports.outbound.orders import OrderRepository


@dataclass(frozen=True)
class SalesReportDeps:
    orders: OrderRepository


@dataclass(frozen=True)
class SalesReportService(SalesReportUseCase):
    deps: SalesReportDeps

    async def count_orders(self, caller: Identity) -> Result[int, StorefrontError]:
        allowed = require_admin(caller)
        if isinstance(allowed, Failure):
            return allowed
        return await self.deps.orders.count()

    async def total_sales(self, caller: Identity) -> Result[Money, StorefrontError]:
        """Revenue over all orders; zero when there are none."""
        allowed = require_admin(caller)
        if isinstance(allowed, Failure):
            return allowed
        return await self.deps.orders.total_sales()

    async def orders_by_user(
        self, query: OrdersByUserQuery, caller: Identity
    ) -> Result[Sequence[Order], StorefrontError]:
        if not query.user_id.strip():
            return Failure(ValidationError("user id is required"))
        user_id = UserId(query.user_id)
        allowed = require_owner_or_admin(caller, user_id)
        if isinstance(allowed, Failure):
            return allowed
        return await self.deps.orders.list_by_user(user_id)
