from __future__ import annotations

import pytest

from storefront_orders.config import Settings
from storefront_orders.core.domain.model.status import StatusPolicy


def test_defaults():
    s = Settings.from_env({})
    assert s.api_prefix == "/api/v1"
    assert s.auth_policy == "admin_only"
    assert s.status_policy is StatusPolicy.OPEN
    assert s.store_backend == "memory"
    assert s.mongodb_database == "estore-database"
    assert s.port == 3000
    assert s.cors_origins == ("*",)


def test_from_env():
    s = Settings.from_env(
        {
            "API_VERSION": "/api/v2/",
            "SECRET": "x",
            "AUTH_POLICY": "capability",
            "STATUS_POLICY": "strict",
            "STORE_BACKEND": "mongo",
            "PORT": "8080",
            "LOG_LEVEL": "debug",
            "CORS_ORIGINS": "https://a.example, https://b.example",
        }
    )
    assert s.api_prefix == "/api/v2"
    assert s.jwt_secret == "x"
    assert s.auth_policy == "capability"
    assert s.status_policy is StatusPolicy.STRICT
    assert s.store_backend == "mongo"
    assert s.port == 8080
    assert s.log_level == "DEBUG"
    assert s.cors_origins == ("https://a.example", "https://b.example")


@pytest.mark.parametrize(
    "env", [{"AUTH_POLICY": "nobody"}, {"STORE_BACKEND": "sqlite"}, {"STATUS_POLICY": "loose"}]
)
def test_rejects_unknown_values(env):
    with pytest.raises(ValueError):
        Settings.from_env(env)
