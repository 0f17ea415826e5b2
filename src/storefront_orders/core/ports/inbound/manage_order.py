from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from returns.result import Result

from storefront_orders.core.domain.model.errors import StorefrontError
from storefront_orders.core.domain.model.identity import Identity
from storefront_orders.core.domain.model.order import Order


@dataclass(frozen=True)
class UpdateOrderStatusCommand:
    order_id: str
    status: str


@dataclass(frozen=True)
class DeleteOrderCommand:
    order_id: str


class UpdateOrderStatusUseCase(Protocol):
    async def update_status(
        self, command: UpdateOrderStatusCommand, caller: Identity
    ) -> Result[Order, StorefrontError]: ...


class DeleteOrderUseCase(Protocol):
    async def delete_order(
        self, command: DeleteOrderCommand, caller: Identity
    ) -> Result[Order, StorefrontError]: ...
