"""
Tests for the JWT Token Issuer.
"""

import pytest
from jose import jwt

from otp_auth.domain.errors import InvalidTokenError
from otp_auth.infrastructure.adapters.tokens import JWTTokenIssuer
from otp_auth.infrastructure.ports.users import UserData

USER = UserData(user_id="u1", email="jane@example.com", username="jane")


def test_issue_and_decode():
    issuer = JWTTokenIssuer(secret_key="s3cret", issuer="acme")

    tokens = issuer.issue(USER)
    claims = issuer.decode(tokens.access_token)

    assert tokens.token_type == "Bearer"
    assert tokens.expires_in == 3600
    assert claims["sub"] == "u1"
    assert claims["email"] == "jane@example.com"
    assert claims["username"] == "jane"
    assert claims["typ"] == "access"
    assert claims["exp"] - claims["iat"] == 3600


def test_refresh_token_has_no_profile_claims():
    issuer = JWTTokenIssuer(secret_key="s3cret", refresh_token_ttl_seconds=600)

    claims = issuer.decode(issuer.issue(USER).refresh_token)

    assert claims["typ"] == "refresh"
    assert "email" not in claims
    assert claims["exp"] - claims["iat"] == 600


def test_tokens_are_unique():
    issuer = JWTTokenIssuer(secret_key="s3cret")
    assert issuer.issue(USER).access_token != issuer.issue(USER).access_token


def test_decode_rejects_foreign_signature():
    token = JWTTokenIssuer(secret_key="other").issue(USER).access_token

    with pytest.raises(InvalidTokenError) as exc_info:
        JWTTokenIssuer(secret_key="s3cret").decode(token)
    assert exc_info.value.code == "INVALID_TOKEN"


def test_decode_rejects_expired_token():
    token = jwt.encode(
        {"sub": "u1", "iss": "otp-auth", "exp": 1}, "s3cret", algorithm="HS256"
    )

    with pytest.raises(InvalidTokenError):
        JWTTokenIssuer(secret_key="s3cret").decode(token)


def test_decode_rejects_garbage():
    with pytest.raises(InvalidTokenError):
        JWTTokenIssuer(secret_key="s3cret").decode("not-a-token")


def test_requires_secret():
    with pytest.raises(ValueError):
        JWTTokenIssuer(secret_key="")
