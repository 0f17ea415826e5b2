from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, Sequence

from returns.result import Result

from storefront_orders.core.domain.model.errors import StorefrontError
from storefront_orders.core.domain.model.identity import Identity
from storefront_orders.core.domain.model.order import Money, OrderId, ShippingAddress


@dataclass(frozen=True)
class CategoryView:
    category_id: str
    name: str


@dataclass(frozen=True)
class ProductView:
    product_id: str
    name: str
    description: str
    category: CategoryView | None


@dataclass(frozen=True)
class LineItemView:
    line_item_id: str
    quantity: int | None
    product: ProductView | None


@dataclass(frozen=True)
class UserView:
    user_id: str
    name: str


@dataclass(frozen=True)
class OrderView:
    """Order with its references expanded.

    ``shipping`` is ``None`` in list projections. Any expanded reference
    whose target no longer exists is ``None``.
    """

    order_id: OrderId
    items: Sequence[LineItemView]
    shipping: ShippingAddress | None
    phone: str
    status: str
    total_price: Money
    user: UserView | None
    date_ordered: datetime


@dataclass(frozen=True)
class GetOrderQuery:
    order_id: str


class GetOrderUseCase(Protocol):
    async def get_order(
        self, query: GetOrderQuery, caller: Identity
    ) -> Result[OrderView, StorefrontError]: ...


class ListOrdersUseCase(Protocol):
    async def list_orders(
        self, caller: Identity
    ) -> Result[Sequence[OrderView], StorefrontError]: ...
