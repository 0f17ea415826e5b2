from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Dict

import jwt
import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront_orders.core.domain.model.errors import Unauthorized
from storefront_orders.core.domain.model.identity import Identity
from storefront_orders.core.domain.model.order import UserId, now_utc

logger = structlog.get_logger(__name__)

bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class TokenVerifier:
    secret: str
    algorithm: str = "HS256"
    # admin_only: every credential without the admin claim is revoked
    revoke_non_admin: bool = True

    def verify(self, token: str) -> Identity:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise Unauthorized("token expired")
        except jwt.InvalidTokenError:
            raise Unauthorized("invalid token")

        user_id = payload.get("userId")
        if not isinstance(user_id, str) or not user_id:
            raise Unauthorized("invalid token payload")
        is_admin = payload.get("userIsAdmin") is True

        if self.revoke_non_admin and not is_admin:
            logger.info("credential_revoked", user_id=user_id)
            raise Unauthorized("token revoked")
        return Identity(user_id=UserId(user_id), is_admin=is_admin)


def issue_token(
    secret: str,
    user_id: str,
    is_admin: bool,
    algorithm: str = "HS256",
    expires_in: timedelta = timedelta(days=1),
) -> str:
    payload: Dict[str, Any] = {
        "userId": user_id,
        "userIsAdmin": is_admin,
        "exp": now_utc() + expires_in,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def identity_dependency(verifier: TokenVerifier) -> Callable[..., Identity]:
    def current_identity(
        credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    ) -> Identity:
        if credentials is None or credentials.scheme.lower() != "bearer":
            raise Unauthorized("missing bearer token")
        return verifier.verify(credentials.credentials)

    return current_identity
