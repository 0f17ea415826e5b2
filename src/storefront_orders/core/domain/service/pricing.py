from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Sequence

from returns.result import Failure, Result, Success

from storefront_orders.core.domain.model.errors import ProductNotFound, StorefrontError
from storefront_orders.core.domain.model.order import LineItemId, Money, fold_money
from storefront_orders.core.ports.outbound.catalog import ProductCatalog
from storefront_orders.core.ports.outbound.line_items import LineItemRepository


@dataclass(frozen=True)
class PricingCalculator:
    line_items: LineItemRepository
    catalog: ProductCatalog

    async def subtotal(self, item_id: LineItemId) -> Result[Money, StorefrontError]:
        found = await self.line_items.get(item_id)
        if isinstance(found, Failure):
            return found
        item = found.unwrap()

        product = await self.catalog.find_product(item.product_id)
        if isinstance(product, Failure):
            return product
        if product.unwrap() is None:
            return Failure(
                ProductNotFound(
                    message="referenced product not found",
                    product_id=item.product_id.value,
                )
            )
        return Success(product.unwrap().price * item.quantity)

    async def total(
        self, item_ids: Sequence[LineItemId]
    ) -> Result[Money, StorefrontError]:
        """Sum of quantity x current unit price over the given line items."""
        subtotals = await asyncio.gather(*(self.subtotal(i) for i in item_ids))
        for r in subtotals:
            if isinstance(r, Failure):
                return r
        return Success(fold_money(r.unwrap() for r in subtotals))
