from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple

from storefront_orders.core.domain.model.order import (
    CategoryId,
    Money,
    ProductId,
    UserId,
)


@dataclass(frozen=True)
class Category:
    category_id: CategoryId
    name: str
    color: str | None = None
    icon: str | None = None


@dataclass(frozen=True)
class Product:
    product_id: ProductId
    name: str
    description: str
    price: Money
    category_id: CategoryId
    count_in_stock: int = 0
    rich_description: str = ""
    image: str = ""
    images: Tuple[str, ...] = ()
    brand: str = ""
    rating: float = 0
    num_reviews: int = 0
    is_featured: bool = False
    date_created: datetime | None = field(default=None)


@dataclass(frozen=True)
class UserSummary:
    user_id: UserId
    name: str
