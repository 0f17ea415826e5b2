from __future__ import annotations

from conftest import place_command, run
from storefront_orders.core.domain.model.errors import Forbidden, ValidationError
from storefront_orders.core.domain.model.order import Money
from storefront_orders.core.ports.inbound.sales_report import OrdersByUserQuery


def test_count_and_total_over_zero_orders(usecases, admin):
    assert run(usecases.reports.count_orders(admin)).unwrap() == 0
    assert run(usecases.reports.total_sales(admin)).unwrap() == Money.zero()


def test_count_and_total_sales(usecases, admin):
    place = usecases.place_order.place_order
    run(place(place_command((3, "p-1"), (2, "p-2")), admin))
    run(place(place_command((1, "p-2"), user_id="u-2"), admin))

    assert run(usecases.reports.count_orders(admin)).unwrap() == 2
    assert run(usecases.reports.total_sales(admin)).unwrap() == Money.of(45)


def test_orders_by_user(usecases, admin, customer):
    place = usecases.place_order.place_order
    mine = run(place(place_command((1, "p-1"), user_id="u-1"), admin)).unwrap()
    run(place(place_command((1, "p-2"), user_id="u-2"), admin))

    orders = run(usecases.reports.orders_by_user(OrdersByUserQuery("u-1"), customer)).unwrap()
    assert [o.order_id for o in orders] == [mine.order_id]

    assert run(usecases.reports.orders_by_user(OrdersByUserQuery("nobody"), admin)).unwrap() == ()


def test_reports_access(usecases, customer):
    assert isinstance(run(usecases.reports.count_orders(customer)).failure(), Forbidden)
    assert isinstance(run(usecases.reports.total_sales(customer)).failure(), Forbidden)
    other = run(usecases.reports.orders_by_user(OrdersByUserQuery("u-2"), customer))
    assert isinstance(other.failure(), Forbidden)
    blank = run(usecases.reports.orders_by_user(OrdersByUserQuery(" "), customer))
    assert isinstance(blank.failure(), ValidationError)
