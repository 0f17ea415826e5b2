from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Tuple

import structlog
from returns.result import Failure, Result, Success

from storefront_orders.core.domain.model.errors import (
    ProductNotFound,
    StorefrontError,
    ValidationError,
)
from storefront_orders.core.domain.model.identity import Identity
from storefront_orders.core.domain.model.order import (
    LineItemId,
    Money,
    Order,
    OrderId,
    ProductId,
    ShippingAddress,
    UserId,
    now_utc,
)
from storefront_orders.core.domain.model.status import (
    DEFAULT_STATUS,
    StatusPolicy,
    check_initial_status,
)
from storefront_orders.core.domain.service.access import require_owner_or_admin
from storefront_orders.core.domain.service.line_items_service import LineItemMaterializer
from storefront_orders.core.domain.service.pricing import PricingCalculator
from storefront_orders.core.ports.inbound.place_order import (
    PlaceOrderCommand,
    PlaceOrderUseCase,
)
from storefront_orders.core.ports.outbound.catalog import ProductCatalog
from storefront_orders.core.ports.outbound.events import EventPublisher, OrderPlaced
from storefront_orders.core.ports.outbound.orders import OrderRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PlaceOrderDeps:
    materializer: LineItemMaterializer
    pricing: PricingCalculator
    catalog: ProductCatalog
    orders: OrderRepository
    events: EventPublisher
    status_policy: StatusPolicy = StatusPolicy.OPEN


@dataclass(frozen=True)
class PlaceOrderService(PlaceOrderUseCase):
    """Line items -> total price -> order, undoing the line items on failure."""

    deps: PlaceOrderDeps

    async def place_order(
        self, command: PlaceOrderCommand, caller: Identity
    ) -> Result[Order, StorefrontError]:
        v = _validate_command(command)
        if isinstance(v, Failure):
            return v
        cmd = v.unwrap()

        allowed = require_owner_or_admin(caller, UserId(cmd.user_id))
        if isinstance(allowed, Failure):
            return allowed

        status = check_initial_status(
            self.deps.status_policy, cmd.status or DEFAULT_STATUS
        )
        if isinstance(status, Failure):
            return status

        known = await self._check_products(cmd)
        if isinstance(known, Failure):
            return known

        materialized = await self.deps.materializer.materialize(cmd.lines)
        if isinstance(materialized, Failure):
            return materialized
        item_ids = materialized.unwrap()

        priced = await self.deps.pricing.total(item_ids)
        if isinstance(priced, Failure):
            return await self._rollback(item_ids, priced.failure())

        order = _build_order(cmd, item_ids, priced.unwrap(), status.unwrap())
        saved = await self.deps.orders.save(order)
        if isinstance(saved, Failure):
            return await self._rollback(item_ids, saved.failure())

        published = self.deps.events.publish(
            OrderPlaced(order.order_id, order.user_id, order.total_price)
        )
        if isinstance(published, Failure):
            # the order is already durable; a lost event must not undo it
            logger.warning(
                "order_event_not_published",
                order_id=order.order_id.value,
                error=str(published.failure()),
            )
        return Success(order)

    async def _check_products(
        self, cmd: PlaceOrderCommand
    ) -> Result[None, StorefrontError]:
        refs = list(dict.fromkeys(ln.product_id for ln in cmd.lines))
        found = await asyncio.gather(
            *(self.deps.catalog.find_product(ProductId(r)) for r in refs)
        )
        for ref, r in zip(refs, found):
            if isinstance(r, Failure):
                return r
            if r.unwrap() is None:
                return Failure(
                    ProductNotFound(
                        message="referenced product not found", product_id=ref
                    )
                )
        return Success(None)

    async def _rollback(
        self, item_ids: Tuple[LineItemId, ...], cause: StorefrontError
    ) -> Result[Order, StorefrontError]:
        logger.warning(
            "order_placement_rolled_back",
            line_items=[i.value for i in item_ids],
            error=str(cause),
        )
        undone = await self.deps.materializer.discard(item_ids)
        if isinstance(undone, Failure):
            return undone
        return Failure(cause)


# ---- pure helpers ----------------------------------------------------------


def _validate_command(
    cmd: PlaceOrderCommand,
) -> Result[PlaceOrderCommand, StorefrontError]:
    if not cmd.user_id.strip():
        return Failure(ValidationError("user is required"))
    if not cmd.lines:
        return Failure(ValidationError("at least one order item is required"))

    for i, ln in enumerate(cmd.lines):
        if not ln.product_id.strip():
            return Failure(ValidationError(f"orderItems[{i}].product is required"))
        if isinstance(ln.quantity, bool) or ln.quantity <= 0:
            return Failure(ValidationError(f"orderItems[{i}].quantity must be > 0"))

    required = {
        "shippingAddress1": cmd.shipping_address1,
        "city": cmd.city,
        "zip": cmd.zip,
        "country": cmd.country,
        "phone": cmd.phone,
    }
    for name, value in required.items():
        if not value.strip():
            return Failure(ValidationError(f"{name} is required"))

    return Success(cmd)


def _build_order(
    cmd: PlaceOrderCommand,
    item_ids: Tuple[LineItemId, ...],
    total: Money,
    status: str,
) -> Order:
    return Order(
        order_id=OrderId.new(),
        items=item_ids,
        shipping=ShippingAddress(
            address1=cmd.shipping_address1,
            address2=cmd.shipping_address2,
            city=cmd.city,
            zip=cmd.zip,
            country=cmd.country,
        ),
        phone=cmd.phone,
        status=status,
        total_price=total,
        user_id=UserId(cmd.user_id),
        date_ordered=now_utc(),
    )
