from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import List

from returns.result import Success

from conftest import run
from storefront_orders.adapters.outbound.in_memory_line_items import (
    InMemoryLineItemRepository,
)
from storefront_orders.core.domain.model.errors import (
    LineItemNotFound,
    PartialCompletion,
    PersistenceError,
    ProductNotFound,
)
from storefront_orders.core.domain.model.order import LineItem, LineItemId, Money
from storefront_orders.core.domain.service.line_items_service import LineItemMaterializer
from storefront_orders.core.domain.service.pricing import PricingCalculator
from storefront_orders.core.ports.inbound.place_order import PlaceOrderLine


@dataclass
class SlowFirstRepository(InMemoryLineItemRepository):
    """Completes earlier writes later than later ones."""

    completed: List[int] = field(default_factory=list)

    async def save(self, item: LineItem):
        delay = 0.01 * item.quantity
        await asyncio.sleep(delay)
        self.completed.append(item.quantity)
        return await super().save(item)


def test_ids_keep_input_order_when_writes_finish_out_of_order():
    repo = SlowFirstRepository()
    lines = [PlaceOrderLine(quantity=q, product_id=f"p-{q}") for q in (5, 3, 1)]

    ids = run(LineItemMaterializer(repo).materialize(lines)).unwrap()

    assert repo.completed == [1, 3, 5]
    quantities = [run(repo.get(i)).unwrap().quantity for i in ids]
    assert quantities == [5, 3, 1]


def test_materialize_failure_compensates():
    repo = InMemoryLineItemRepository(reject_products={"bad"})
    lines = [PlaceOrderLine(1, "ok"), PlaceOrderLine(1, "bad"), PlaceOrderLine(2, "ok")]

    result = run(LineItemMaterializer(repo).materialize(lines))

    assert isinstance(result.failure(), PersistenceError)
    assert len(repo) == 0


def test_materialize_failure_with_failed_compensation():
    repo = InMemoryLineItemRepository(reject_products={"bad"}, fail_deletes=True)
    lines = [PlaceOrderLine(1, "ok"), PlaceOrderLine(1, "bad")]

    err = run(LineItemMaterializer(repo).materialize(lines)).failure()

    assert isinstance(err, PartialCompletion)
    assert len(err.surviving_ids) == 1


def test_discard_nothing():
    repo = InMemoryLineItemRepository(fail_deletes=True)
    assert run(LineItemMaterializer(repo).discard(())) == Success(None)


def test_pricing_total(adapters):
    materializer = LineItemMaterializer(adapters.line_items)
    ids = run(
        materializer.materialize([PlaceOrderLine(3, "p-1"), PlaceOrderLine(2, "p-2")])
    ).unwrap()

    pricing = PricingCalculator(adapters.line_items, adapters.catalog)
    assert run(pricing.subtotal(ids[0])).unwrap() == Money.of(30)
    assert run(pricing.total(ids)).unwrap() == Money.of(40)
    assert run(pricing.total(())).unwrap() == Money.zero()


def test_pricing_missing_product_fails_explicitly(adapters):
    ids = run(
        LineItemMaterializer(adapters.line_items).materialize([PlaceOrderLine(1, "gone")])
    ).unwrap()

    err = run(PricingCalculator(adapters.line_items, adapters.catalog).total(ids)).failure()
    assert isinstance(err, ProductNotFound)
    assert err.product_id == "gone"


def test_pricing_missing_line_item(adapters):
    pricing = PricingCalculator(adapters.line_items, adapters.catalog)
    err = run(pricing.total((LineItemId("nope"),))).failure()
    assert isinstance(err, LineItemNotFound)
