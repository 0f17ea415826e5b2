from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Sequence

from returns.result import Failure, Result, Success

from storefront_orders.core.domain.model.errors import (
    OrderNotFound,
    PersistenceError,
    StorefrontError,
)
from storefront_orders.core.domain.model.order import (
    Money,
    Order,
    OrderId,
    UserId,
    fold_money,
)
from storefront_orders.core.ports.outbound.orders import OrderRepository


@dataclass
class InMemoryOrderRepository(OrderRepository):
    fail_writes: bool = False
    _store: Dict[str, Order] = field(default_factory=dict)

    async def save(self, order: Order) -> Result[OrderId, StorefrontError]:
        key = order.order_id.value
        if self.fail_writes:
            return Failure(PersistenceError(message="order store is unavailable"))
        if key in self._store:
            return Failure(PersistenceError(message="order id already exists"))
        self._store[key] = order
        return Success(order.order_id)

    async def get(self, order_id: OrderId) -> Result[Order, StorefrontError]:
        order = self._store.get(order_id.value)
        if order is None:
            return Failure(_not_found(order_id))
        return Success(order)

    async def list_all(self) -> Result[Sequence[Order], StorefrontError]:
        orders = sorted(self._store.values(), key=lambda o: o.date_ordered, reverse=True)
        return Success(tuple(orders))

    async def list_by_user(
        self, user_id: UserId
    ) -> Result[Sequence[Order], StorefrontError]:
        return Success(
            tuple(o for o in self._store.values() if o.user_id.value == user_id.value)
        )

    async def update_status(
        self, order_id: OrderId, status: str
    ) -> Result[Order, StorefrontError]:
        order = self._store.get(order_id.value)
        if order is None:
            return Failure(_not_found(order_id))
        updated = replace(order, status=status)
        self._store[order_id.value] = updated
        return Success(updated)

    async def delete(self, order_id: OrderId) -> Result[Order, StorefrontError]:
        order = self._store.pop(order_id.value, None)
        if order is None:
            return Failure(_not_found(order_id))
        return Success(order)

    async def count(self) -> Result[int, StorefrontError]:
        return Success(len(self._store))

    async def total_sales(self) -> Result[Money, StorefrontError]:
        return Success(fold_money(o.total_price for o in self._store.values()))


def _not_found(order_id: OrderId) -> OrderNotFound:
    return OrderNotFound(message="order not found", order_id=order_id.value)
