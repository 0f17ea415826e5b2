from __future__ import annotations

from typing import Protocol

from returns.result import Result

from storefront_orders.core.domain.model.errors import StorefrontError
from storefront_orders.core.domain.model.order import LineItem, LineItemId


class LineItemRepository(Protocol):
    async def save(self, item: LineItem) -> Result[LineItemId, StorefrontError]: ...

    async def get(self, item_id: LineItemId) -> Result[LineItem, StorefrontError]:
        """Failure(LineItemNotFound) when the item does not exist."""
        ...

    async def delete(self, item_id: LineItemId) -> Result[bool, StorefrontError]:
        """Success(False) when there was nothing to delete."""
        ...
