from __future__ import annotations

from dataclasses import dataclass

from storefront_orders.core.domain.model.order import UserId


@dataclass(frozen=True)
class Identity:
    """Caller asserted by a verified bearer credential."""

    user_id: UserId
    is_admin: bool = False

    def owns(self, user_id: UserId) -> bool:
        return self.user_id.value == user_id.value
