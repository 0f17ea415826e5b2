from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

from returns.result import Success

from conftest import place_command, run
from storefront_orders.core.domain.model.errors import Forbidden, OrderNotFound
from storefront_orders.core.domain.model.order import (
    LineItemId,
    Money,
    Order,
    OrderId,
    ShippingAddress,
    UserId,
)
from storefront_orders.core.ports.inbound.get_order import GetOrderQuery

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _order(order_id: str, user: str, minutes: int) -> Order:
    return Order(
        order_id=OrderId(order_id),
        items=(),
        shipping=ShippingAddress("a1", "a2", "City", "123", "CZ"),
        phone="555",
        status="Pending",
        total_price=Money.of(1),
        user_id=UserId(user),
        date_ordered=T0 + timedelta(minutes=minutes),
    )


def test_list_is_most_recent_first(usecases, adapters, admin):
    for oid, minutes in [("o-old", 1), ("o-new", 30), ("o-mid", 10)]:
        run(adapters.orders.save(_order(oid, "u-1", minutes)))

    views = run(usecases.queries.list_orders(admin)).unwrap()
    assert [v.order_id.value for v in views] == ["o-new", "o-mid", "o-old"]


def test_list_strips_address_and_expands_references(usecases, admin):
    run(usecases.place_order.place_order(place_command((3, "p-1"), (2, "p-2")), admin))

    [view] = run(usecases.queries.list_orders(admin)).unwrap()
    assert view.shipping is None
    assert view.user is not None and view.user.name == "user 1"
    first, second = view.items
    assert first.quantity == 3
    assert first.product.product_id == "p-1"
    assert first.product.name == "Product 1"
    assert first.product.description == "Product 1 Description"
    assert first.product.category.category_id == "cat-1"
    assert first.product.category.name == "Shirts"
    assert second.product.category.name == "Shoes"


def test_list_empty(usecases, admin):
    assert run(usecases.queries.list_orders(admin)).unwrap() == ()


def test_get_includes_address(usecases, admin):
    order = run(usecases.place_order.place_order(place_command((1, "p-1")), admin)).unwrap()

    view = run(usecases.queries.get_order(GetOrderQuery(order.order_id.value), admin)).unwrap()
    assert view.shipping == order.shipping
    assert view.phone == order.phone
    assert view.total_price == Money.of(10)


def test_get_unknown_order(usecases, admin):
    result = run(usecases.queries.get_order(GetOrderQuery("missing"), admin))
    assert isinstance(result.failure(), OrderNotFound)


def test_dangling_references_expand_to_none(usecases, adapters, catalog, users, admin):
    order = run(usecases.place_order.place_order(place_command((1, "p-1"), (1, "p-2")), admin)).unwrap()

    catalog.remove_product("p-1")
    catalog.remove_category("cat-2")
    users.users.pop("u-1")
    run(adapters.line_items.delete(order.items[1]))

    result = run(usecases.queries.get_order(GetOrderQuery(order.order_id.value), admin))
    assert isinstance(result, Success)
    view = result.unwrap()
    assert view.user is None
    assert view.items[0].product is None
    assert view.items[0].quantity == 1
    assert view.items[1].line_item_id == order.items[1].value
    assert view.items[1].product is None
    assert view.items[1].quantity is None


def test_category_removed_keeps_product(usecases, catalog, admin):
    order = run(usecases.place_order.place_order(place_command((1, "p-2")), admin)).unwrap()
    catalog.remove_category("cat-2")

    view = run(usecases.queries.get_order(GetOrderQuery(order.order_id.value), admin)).unwrap()
    assert view.items[0].product.name == "Product 2"
    assert view.items[0].product.category is None


def test_owner_reads_own_order_only(usecases, adapters, customer):
    run(adapters.orders.save(_order("mine", "u-1", 0)))
    run(adapters.orders.save(_order("theirs", "u-2", 0)))

    assert isinstance(run(usecases.queries.get_order(GetOrderQuery("mine"), customer)), Success)
    other = run(usecases.queries.get_order(GetOrderQuery("theirs"), customer))
    missing = run(usecases.queries.get_order(GetOrderQuery("nope"), customer))
    assert isinstance(other.failure(), OrderNotFound)
    assert type(other.failure()) is type(missing.failure())
    assert str(other.failure()) == str(missing.failure()).replace("nope", "theirs")


def test_list_all_requires_admin(usecases, customer):
    assert isinstance(run(usecases.queries.list_orders(customer)).failure(), Forbidden)


def test_unknown_line_item_ids_are_tolerated(usecases, adapters, admin):
    order = _order("o-1", "u-1", 0)
    order = replace(order, items=(LineItemId("ghost"),))
    run(adapters.orders.save(order))

    [view] = run(usecases.queries.list_orders(admin)).unwrap()
    assert view.items[0].line_item_id == "ghost"
    assert view.items[0].product is None
