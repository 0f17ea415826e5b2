from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Sequence

from returns.result import Failure, Result, Success

from storefront_orders.core.domain.model.errors import (
    LineItemNotFound,
    OrderNotFound,
    StorefrontError,
)
from storefront_orders.core.domain.model.identity import Identity
from storefront_orders.core.domain.model.order import (
    CategoryId,
    LineItemId,
    Order,
    OrderId,
    ProductId,
    UserId,
)
from storefront_orders.core.domain.service.access import (
    require_admin,
    require_owner_or_admin,
)
from storefront_orders.core.ports.inbound.get_order import (
    CategoryView,
    GetOrderQuery,
    GetOrderUseCase,
    LineItemView,
    ListOrdersUseCase,
    OrderView,
    ProductView,
    UserView,
)
from storefront_orders.core.ports.outbound.catalog import ProductCatalog, UserDirectory
from storefront_orders.core.ports.outbound.line_items import LineItemRepository
from storefront_orders.core.ports.outbound.orders import OrderRepository


@dataclass(frozen=True)
class OrderQueryDeps:
    orders: OrderRepository
    line_items: LineItemRepository
    catalog: ProductCatalog
    users: UserDirectory


@dataclass(frozen=True)
class OrderQueryService(GetOrderUseCase, ListOrdersUseCase):
    deps: OrderQueryDeps

    async def get_order(
        self, query: GetOrderQuery, caller: Identity
    ) -> Result[OrderView, StorefrontError]:
        found = await self.deps.orders.get(OrderId(query.order_id))
        if isinstance(found, Failure):
            return found
        order = found.unwrap()

        # someone else's order is reported exactly like a missing one
        if isinstance(require_owner_or_admin(caller, order.user_id), Failure):
            return Failure(
                OrderNotFound(message="order not found", order_id=query.order_id)
            )

        return await _Expansion(self.deps).expand(order, with_address=True)

    async def list_orders(
        self, caller: Identity
    ) -> Result[Sequence[OrderView], StorefrontError]:
        allowed = require_admin(caller)
        if isinstance(allowed, Failure):
            return allowed

        found = await self.deps.orders.list_all()
        if isinstance(found, Failure):
            return found

        expansion = _Expansion(self.deps)
        views = await asyncio.gather(
            *(expansion.expand(o, with_address=False) for o in found.unwrap())
        )
        for v in views:
            if isinstance(v, Failure):
                return v
        return Success(tuple(v.unwrap() for v in views))


@dataclass
class _Expansion:
    """Resolves Order -> LineItem -> Product -> Category for one request.

    Lookups are memoized so an order list touching the same product many
    times reads it once. Dangling references expand to ``None``.
    """

    deps: OrderQueryDeps
    _products: Dict[str, asyncio.Task] = field(default_factory=dict)
    _categories: Dict[str, asyncio.Task] = field(default_factory=dict)

    async def expand(
        self, order: Order, with_address: bool
    ) -> Result[OrderView, StorefrontError]:
        user, *items = await asyncio.gather(
            self._user(order.user_id), *(self._line_item(i) for i in order.items)
        )
        if isinstance(user, Failure):
            return user
        for it in items:
            if isinstance(it, Failure):
                return it

        return Success(
            OrderView(
                order_id=order.order_id,
                items=tuple(it.unwrap() for it in items),
                shipping=order.shipping if with_address else None,
                phone=order.phone,
                status=order.status,
                total_price=order.total_price,
                user=user.unwrap(),
                date_ordered=order.date_ordered,
            )
        )

    async def _user(self, user_id: UserId) -> Result[UserView | None, StorefrontError]:
        found = await self.deps.users.find_user(user_id)
        return found.map(
            lambda u: None if u is None else UserView(u.user_id.value, u.name)
        )

    async def _line_item(
        self, item_id: LineItemId
    ) -> Result[LineItemView, StorefrontError]:
        found = await self.deps.line_items.get(item_id)
        if isinstance(found, Failure):
            if isinstance(found.failure(), LineItemNotFound):
                return Success(LineItemView(item_id.value, quantity=None, product=None))
            return found
        item = found.unwrap()

        product = await self._product(item.product_id)
        return product.map(
            lambda p: LineItemView(item_id.value, quantity=item.quantity, product=p)
        )

    async def _product(
        self, product_id: ProductId
    ) -> Result[ProductView | None, StorefrontError]:
        key = product_id.value
        if key not in self._products:
            self._products[key] = asyncio.ensure_future(self._load_product(product_id))
        return await self._products[key]

    async def _load_product(
        self, product_id: ProductId
    ) -> Result[ProductView | None, StorefrontError]:
        found = await self.deps.catalog.find_product(product_id)
        if isinstance(found, Failure):
            return found
        product = found.unwrap()
        if product is None:
            return Success(None)

        category = await self._category(product.category_id)
        return category.map(
            lambda c: ProductView(
                product_id=product.product_id.value,
                name=product.name,
                description=product.description,
                category=c,
            )
        )

    async def _category(
        self, category_id: CategoryId
    ) -> Result[CategoryView | None, StorefrontError]:
        key = category_id.value
        if key not in self._categories:
            self._categories[key] = asyncio.ensure_future(
                self._load_category(category_id)
            )
        return await self._categories[key]

    async def _load_category(
        self, category_id: CategoryId
    ) -> Result[CategoryView | None, StorefrontError]:
        found = await self.deps.catalog.find_category(category_id)
        return found.map(
            lambda c: None if c is None else CategoryView(c.category_id.value, c.name)
        )
