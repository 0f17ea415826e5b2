from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Tuple
from uuid import uuid4


def new_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class OrderId:
    value: str

    @staticmethod
    def new() -> "OrderId":
        return OrderId(new_id())


@dataclass(frozen=True)
class LineItemId:
    value: str

    @staticmethod
    def new() -> "LineItemId":
        return LineItemId(new_id())


@dataclass(frozen=True)
class ProductId:
    value: str


@dataclass(frozen=True)
class CategoryId:
    value: str


@dataclass(frozen=True)
class UserId:
    value: str


_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    amount: Decimal

    @staticmethod
    def of(amount: Decimal | int | float | str) -> "Money":
        dec = Decimal(str(amount)).quantize(_CENTS, rounding=ROUND_HALF_UP)
        return Money(dec)

    @staticmethod
    def zero() -> "Money":
        return Money.of(0)

    def __add__(self, other: "Money") -> "Money":
        return Money(self.amount + other.amount)

    def __mul__(self, n: int) -> "Money":
        return Money((self.amount * Decimal(n)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def fold_money(values: Iterable[Money]) -> Money:
    total = Money.zero()
    for v in values:
        total = total + v
    return total


@dataclass(frozen=True)
class LineItem:
    line_item_id: LineItemId
    product_id: ProductId
    quantity: int


@dataclass(frozen=True)
class ShippingAddress:
    address1: str
    address2: str
    city: str
    zip: str
    country: str


@dataclass(frozen=True)
class Order:
    """Persisted order.

    ``total_price`` is a snapshot taken when the order was placed; later
    catalog price changes never touch it.
    """

    order_id: OrderId
    items: Tuple[LineItemId, ...]
    shipping: ShippingAddress
    phone: str
    status: str
    total_price: Money
    user_id: UserId
    date_ordered: datetime

    def with_status(self, status: str) -> "Order":
        return replace(self, status=status)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
