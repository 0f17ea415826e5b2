from __future__ import annotations

from typing import Protocol

from returns.result import Result

from storefront_orders.core.domain.model.catalog import Category, Product, UserSummary
from storefront_orders.core.domain.model.errors import StorefrontError
from storefront_orders.core.domain.model.order import CategoryId, ProductId, UserId


class ProductCatalog(Protocol):
    """Read-only view of the product catalog owned by the catalog service."""

    async def find_product(
        self, product_id: ProductId
    ) -> Result[Product | None, StorefrontError]: ...

    async def find_category(
        self, category_id: CategoryId
    ) -> Result[Category | None, StorefrontError]: ...


class UserDirectory(Protocol):
    async def find_user(
        self, user_id: UserId
    ) -> Result[UserSummary | None, StorefrontError]: ...
