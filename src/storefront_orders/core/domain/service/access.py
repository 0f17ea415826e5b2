from __future__ import annotations

from returns.result import Failure, Result, Success

from storefront_orders.core.domain.model.errors import Forbidden, StorefrontError
from storefront_orders.core.domain.model.identity import Identity
from storefront_orders.core.domain.model.order import UserId


def require_admin(caller: Identity) -> Result[Identity, StorefrontError]:
    if caller.is_admin:
        return Success(caller)
    return Failure(Forbidden("admin privileges required"))


def require_owner_or_admin(
    caller: Identity, owner: UserId
) -> Result[Identity, StorefrontError]:
    if caller.is_admin or caller.owns(owner):
        return Success(caller)
    return Failure(Forbidden("not allowed to access orders of another user"))
