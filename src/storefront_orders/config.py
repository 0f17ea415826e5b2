from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Tuple

from storefront_orders.core.domain.model.status import StatusPolicy

AUTH_POLICIES = ("admin_only", "capability")
STORE_BACKENDS = ("memory", "mongo")


@dataclass(frozen=True)
class Settings:
    api_prefix: str = "/api/v1"
    jwt_secret: str = "devsecret"
    jwt_algorithm: str = "HS256"
    auth_policy: str = "admin_only"
    status_policy: StatusPolicy = StatusPolicy.OPEN
    store_backend: str = "memory"
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "estore-database"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = field(default=("*",))

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env

        auth_policy = env.get("AUTH_POLICY", "admin_only")
        if auth_policy not in AUTH_POLICIES:
            raise ValueError(f"AUTH_POLICY must be one of: {', '.join(AUTH_POLICIES)}")
        store_backend = env.get("STORE_BACKEND", "memory")
        if store_backend not in STORE_BACKENDS:
            raise ValueError(f"STORE_BACKEND must be one of: {', '.join(STORE_BACKENDS)}")

        origins = tuple(
            o.strip() for o in env.get("CORS_ORIGINS", "*").split(",") if o.strip()
        )
        return Settings(
            api_prefix=env.get("API_VERSION", "/api/v1").rstrip("/"),
            jwt_secret=env.get("SECRET", "devsecret"),
            jwt_algorithm=env.get("JWT_ALGORITHM", "HS256"),
            auth_policy=auth_policy,
            status_policy=StatusPolicy(env.get("STATUS_POLICY", "open")),
            store_backend=store_backend,
            mongodb_url=env.get("MONGODB_URL", "mongodb://localhost:27017"),
            mongodb_database=env.get("MONGODB_DATABASE", "estore-database"),
            host=env.get("HOST", "0.0.0.0"),
            port=int(env.get("PORT", "3000")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            cors_origins=origins or ("*",),
        )
