from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Sequence, Tuple

import structlog
from returns.result import Failure, Result, Success

from storefront_orders.core.domain.model.errors import (
    PartialCompletion,
    PersistenceError,
    StorefrontError,
)
from storefront_orders.core.domain.model.order import LineItem, LineItemId, ProductId
from storefront_orders.core.ports.inbound.place_order import PlaceOrderLine
from storefront_orders.core.ports.outbound.line_items import LineItemRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LineItemMaterializer:
    line_items: LineItemRepository

    async def materialize(
        self, lines: Sequence[PlaceOrderLine]
    ) -> Result[Tuple[LineItemId, ...], StorefrontError]:
        """Persist one line item per requested line.

        Writes are dispatched concurrently; the returned ids follow the order
        of ``lines``. If any write fails, the ones that succeeded are deleted
        again before the failure is reported.
        """
        items = [
            LineItem(
                line_item_id=LineItemId.new(),
                product_id=ProductId(ln.product_id),
                quantity=ln.quantity,
            )
            for ln in lines
        ]
        results = await asyncio.gather(*(self.line_items.save(it) for it in items))

        written = tuple(r.unwrap() for r in results if not isinstance(r, Failure))
        failures = [r.failure() for r in results if isinstance(r, Failure)]
        if not failures:
            return Success(written)

        logger.warning(
            "line_item_materialization_failed",
            failed=len(failures),
            written=len(written),
            error=str(failures[0]),
        )
        undo = await self.discard(written)
        if isinstance(undo, Failure):
            return undo
        return Failure(PersistenceError(f"unable to create line items: {failures[0]}"))

    async def discard(
        self, item_ids: Sequence[LineItemId]
    ) -> Result[None, StorefrontError]:
        """Delete line items, awaiting every deletion.

        Reports ``PartialCompletion`` with the ids that could not be removed.
        """
        if not item_ids:
            return Success(None)
        results = await asyncio.gather(*(self.line_items.delete(i) for i in item_ids))
        surviving = tuple(
            item_id.value
            for item_id, r in zip(item_ids, results)
            if isinstance(r, Failure)
        )
        if surviving:
            logger.error("line_item_cleanup_incomplete", surviving=list(surviving))
            return Failure(
                PartialCompletion(
                    message="some line items could not be deleted",
                    surviving_ids=surviving,
                )
            )
        return Success(None)
