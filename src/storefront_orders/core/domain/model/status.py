from __future__ import annotations

from enum import Enum
from typing import Mapping, FrozenSet

from returns.result import Failure, Result, Success

from storefront_orders.core.domain.model.errors import (
    InvalidStatusTransition,
    StorefrontError,
    ValidationError,
)


class OrderStatus(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


DEFAULT_STATUS = OrderStatus.PENDING.value

TRANSITIONS: Mapping[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.CANCELLED}
    ),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


class StatusPolicy(str, Enum):
    OPEN = "open"
    STRICT = "strict"


def _parse(raw: str) -> Result[OrderStatus, StorefrontError]:
    try:
        return Success(OrderStatus(raw))
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        return Failure(ValidationError(f"status must be one of: {allowed}"))


def check_initial_status(policy: StatusPolicy, raw: str) -> Result[str, StorefrontError]:
    if policy is StatusPolicy.OPEN:
        return Success(raw)
    parsed = _parse(raw)
    if isinstance(parsed, Failure):
        return parsed
    if parsed.unwrap() is not OrderStatus.PENDING:
        return Failure(
            InvalidStatusTransition(
                message="new orders must start as Pending",
                current="<new>",
                requested=raw,
            )
        )
    return Success(raw)


def check_transition(
    policy: StatusPolicy, current: str, requested: str
) -> Result[str, StorefrontError]:
    if policy is StatusPolicy.OPEN or current == requested:
        return Success(requested)

    target = _parse(requested)
    if isinstance(target, Failure):
        return target
    source = _parse(current)
    if isinstance(source, Failure):
        # legacy value stored under the open policy; only forward moves out of
        # Pending are assumed
        source = Success(OrderStatus.PENDING)

    if target.unwrap() not in TRANSITIONS[source.unwrap()]:
        return Failure(
            InvalidStatusTransition(
                message="transition not allowed",
                current=current,
                requested=requested,
            )
        )
    return Success(requested)
