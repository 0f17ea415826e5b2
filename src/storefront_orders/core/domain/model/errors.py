from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class StorefrontError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover
        return self.message


@dataclass(frozen=True)
class ValidationError(StorefrontError):
    pass


@dataclass(frozen=True)
class InvalidStatusTransition(ValidationError):
    current: str
    requested: str

    def __str__(self) -> str:  # pragma: no cover
        return f"invalid_status_transition: {self.current} -> {self.requested} ({self.message})"


@dataclass(frozen=True)
class NotFound(StorefrontError):
    pass


@dataclass(frozen=True)
class OrderNotFound(NotFound):
    order_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"order_not_found: {self.order_id} ({self.message})"


@dataclass(frozen=True)
class ProductNotFound(NotFound):
    product_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"product_not_found: {self.product_id} ({self.message})"


@dataclass(frozen=True)
class LineItemNotFound(NotFound):
    line_item_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"line_item_not_found: {self.line_item_id} ({self.message})"


@dataclass(frozen=True)
class PersistenceError(StorefrontError):
    pass


@dataclass(frozen=True)
class PartialCompletion(PersistenceError):
    """Some writes of a multi-step operation could not be completed or undone."""

    surviving_ids: Tuple[str, ...] = field(default=())

    def __str__(self) -> str:  # pragma: no cover
        return f"partial_completion: surviving={list(self.surviving_ids)} ({self.message})"


@dataclass(frozen=True)
class PublishError(StorefrontError):
    pass


@dataclass(frozen=True)
class Unauthorized(StorefrontError):
    pass


@dataclass(frozen=True)
class Forbidden(StorefrontError):
    pass
