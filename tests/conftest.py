from __future__ import annotations

import asyncio
from dataclasses import replace

import pytest

from storefront_orders.adapters.outbound.in_memory_catalog import (
    InMemoryProductCatalog,
    InMemoryUserDirectory,
)
from storefront_orders.adapters.outbound.in_memory_line_items import (
    InMemoryLineItemRepository,
)
from storefront_orders.adapters.outbound.in_memory_orders import InMemoryOrderRepository
from storefront_orders.adapters.outbound.log_events import LogEventPublisher
from storefront_orders.bootstrap import Adapters, build_usecases
from storefront_orders.config import Settings
from storefront_orders.core.domain.model.catalog import Category, Product, UserSummary
from storefront_orders.core.domain.model.identity import Identity
from storefront_orders.core.domain.model.order import (
    CategoryId,
    Money,
    ProductId,
    UserId,
)
from storefront_orders.core.ports.inbound.place_order import (
    PlaceOrderCommand,
    PlaceOrderLine,
)

SECRET = "test-secret"


def run(coro):
    return asyncio.run(coro)


def place_command(*lines: tuple[int, str], user_id: str = "u-1", **overrides) -> PlaceOrderCommand:
    cmd = PlaceOrderCommand(
        user_id=user_id,
        lines=tuple(PlaceOrderLine(quantity=q, product_id=p) for q, p in lines),
        shipping_address1="Flowers Street , 45",
        shipping_address2="1-B",
        city="Prague",
        zip="00000",
        country="Czech Republic",
        phone="+420702241333",
    )
    return replace(cmd, **overrides)


@pytest.fixture
def catalog() -> InMemoryProductCatalog:
    c = InMemoryProductCatalog()
    c.add_category(Category(CategoryId("cat-1"), name="Shirts", color="#000"))
    c.add_category(Category(CategoryId("cat-2"), name="Shoes"))
    c.add_product(
        Product(
            ProductId("p-1"),
            name="Product 1",
            description="Product 1 Description",
            price=Money.of(10),
            category_id=CategoryId("cat-1"),
            count_in_stock=20,
        )
    )
    c.add_product(
        Product(
            ProductId("p-2"),
            name="Product 2",
            description="Product 2 Description",
            price=Money.of(5),
            category_id=CategoryId("cat-2"),
            count_in_stock=8,
        )
    )
    return c


@pytest.fixture
def users() -> InMemoryUserDirectory:
    d = InMemoryUserDirectory()
    d.add_user(UserSummary(UserId("u-1"), name="user 1"))
    d.add_user(UserSummary(UserId("u-2"), name="user 2"))
    d.add_user(UserSummary(UserId("admin"), name="Admin"))
    return d


@pytest.fixture
def adapters(catalog, users) -> Adapters:
    return Adapters(
        orders=InMemoryOrderRepository(),
        line_items=InMemoryLineItemRepository(),
        catalog=catalog,
        users=users,
        events=LogEventPublisher(),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(jwt_secret=SECRET)


@pytest.fixture
def usecases(adapters, settings):
    return build_usecases(adapters, settings)


@pytest.fixture
def admin() -> Identity:
    return Identity(UserId("admin"), is_admin=True)


@pytest.fixture
def customer() -> Identity:
    return Identity(UserId("u-1"), is_admin=False)
