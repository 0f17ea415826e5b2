from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Set

from returns.result import Failure, Result, Success

from storefront_orders.core.domain.model.errors import (
    LineItemNotFound,
    PersistenceError,
    StorefrontError,
)
from storefront_orders.core.domain.model.order import LineItem, LineItemId
from storefront_orders.core.ports.outbound.line_items import LineItemRepository


@dataclass
class InMemoryLineItemRepository(LineItemRepository):
    # product ids whose line items are rejected on save, and a switch that
    # makes every delete fail; both simulate store outages
    reject_products: Set[str] = field(default_factory=set)
    fail_deletes: bool = False
    _store: Dict[str, LineItem] = field(default_factory=dict)

    async def save(self, item: LineItem) -> Result[LineItemId, StorefrontError]:
        if item.product_id.value in self.reject_products:
            return Failure(PersistenceError(message="line item write rejected"))
        self._store[item.line_item_id.value] = item
        return Success(item.line_item_id)

    async def get(self, item_id: LineItemId) -> Result[LineItem, StorefrontError]:
        item = self._store.get(item_id.value)
        if item is None:
            return Failure(
                LineItemNotFound(message="line item not found", line_item_id=item_id.value)
            )
        return Success(item)

    async def delete(self, item_id: LineItemId) -> Result[bool, StorefrontError]:
        if self.fail_deletes:
            return Failure(PersistenceError(message="line item delete rejected"))
        return Success(self._store.pop(item_id.value, None) is not None)

    def __len__(self) -> int:
        return len(self._store)
