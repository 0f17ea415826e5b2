from __future__ import annotations

from datetime import timedelta

import jwt
import pytest

from storefront_orders.adapters.inbound.web.auth import TokenVerifier, issue_token
from storefront_orders.core.domain.model.errors import Unauthorized

SECRET = "s3cret"


def test_admin_token_is_accepted():
    verifier = TokenVerifier(SECRET)
    identity = verifier.verify(issue_token(SECRET, "admin", is_admin=True))
    assert identity.user_id.value == "admin"
    assert identity.is_admin


def test_non_admin_token_is_revoked_by_default():
    verifier = TokenVerifier(SECRET)
    with pytest.raises(Unauthorized):
        verifier.verify(issue_token(SECRET, "u-1", is_admin=False))


def test_non_admin_token_accepted_under_capability_policy():
    verifier = TokenVerifier(SECRET, revoke_non_admin=False)
    identity = verifier.verify(issue_token(SECRET, "u-1", is_admin=False))
    assert identity.user_id.value == "u-1"
    assert not identity.is_admin


@pytest.mark.parametrize(
    "token",
    [
        issue_token("other-secret", "admin", is_admin=True),
        issue_token(SECRET, "admin", is_admin=True, expires_in=timedelta(seconds=-5)),
        jwt.encode({"userIsAdmin": True}, SECRET, algorithm="HS256"),
        "not-a-token",
    ],
)
def test_bad_tokens(token):
    with pytest.raises(Unauthorized):
        TokenVerifier(SECRET).verify(token)


def test_admin_claim_must_be_true():
    token = jwt.encode({"userId": "u-1", "userIsAdmin": "yes"}, SECRET, algorithm="HS256")
    with pytest.raises(Unauthorized):
        TokenVerifier(SECRET).verify(token)
