from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from returns.result import Result, Success

from storefront_orders.core.domain.model.catalog import Category, Product, UserSummary
from storefront_orders.core.domain.model.errors import StorefrontError
from storefront_orders.core.domain.model.order import CategoryId, ProductId, UserId
from storefront_orders.core.ports.outbound.catalog import ProductCatalog, UserDirectory


@dataclass
class InMemoryProductCatalog(ProductCatalog):
    products: Dict[str, Product] = field(default_factory=dict)
    categories: Dict[str, Category] = field(default_factory=dict)

    def add_category(self, category: Category) -> Category:
        self.categories[category.category_id.value] = category
        return category

    def add_product(self, product: Product) -> Product:
        self.products[product.product_id.value] = product
        return product

    def remove_product(self, product_id: str) -> None:
        self.products.pop(product_id, None)

    def remove_category(self, category_id: str) -> None:
        self.categories.pop(category_id, None)

    async def find_product(
        self, product_id: ProductId
    ) -> Result[Product | None, StorefrontError]:
        return Success(self.products.get(product_id.value))

    async def find_category(
        self, category_id: CategoryId
    ) -> Result[Category | None, StorefrontError]:
        return Success(self.categories.get(category_id.value))


@dataclass
class InMemoryUserDirectory(UserDirectory):
    users: Dict[str, UserSummary] = field(default_factory=dict)

    def add_user(self, user: UserSummary) -> UserSummary:
        self.users[user.user_id.value] = user
        return user

    async def find_user(
        self, user_id: UserId
    ) -> Result[UserSummary | None, StorefrontError]:
        return Success(self.users.get(user_id.value))
