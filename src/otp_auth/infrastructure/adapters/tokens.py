"""
JWT Token Issuer.

Implements TokenIssuerPort with python-jose. Issues an access/refresh
token pair once a user has verified a login code.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import jwt, JWTError

from otp_auth.application.results import TokenPair
from otp_auth.domain.errors import InvalidTokenError
from otp_auth.infrastructure.ports.tokens import TokenIssuerPort
from otp_auth.infrastructure.ports.users import UserData


class JWTTokenIssuer(TokenIssuerPort):
    """
    HS256 JWT implementation of TokenIssuerPort.

    Usage:
        issuer = JWTTokenIssuer(secret_key="change-me", issuer="my-app")
        tokens = issuer.issue(user)
        claims = issuer.decode(tokens.access_token)
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str = "otp-auth",
        access_token_ttl_seconds: int = 3600,
        refresh_token_ttl_seconds: int = 86400,
    ):
        if not secret_key:
            raise ValueError("JWTTokenIssuer requires a non-empty secret_key")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.access_token_ttl_seconds = access_token_ttl_seconds
        self.refresh_token_ttl_seconds = refresh_token_ttl_seconds

    def _encode(self, user: UserData, token_type: str, ttl_seconds: int) -> str:
        now = datetime.now(timezone.utc)
        claims: Dict[str, Any] = {
            "sub": user.user_id,
            "iss": self.issuer,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=ttl_seconds)).timestamp()),
            "jti": str(uuid.uuid4()),
            "typ": token_type,
        }
        if token_type == "access":
            claims["email"] = user.email
            claims["username"] = user.username or user.email
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def issue(self, user: UserData) -> TokenPair:
        return TokenPair(
            access_token=self._encode(user, "access", self.access_token_ttl_seconds),
            refresh_token=self._encode(
                user, "refresh", self.refresh_token_ttl_seconds
            ),
            expires_in=self.access_token_ttl_seconds,
            refresh_expires_in=self.refresh_token_ttl_seconds,
        )

    def decode(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
            )
        except JWTError as e:
            raise InvalidTokenError(str(e), "INVALID_TOKEN")
        except Exception as e:
            raise InvalidTokenError(str(e), "TOKEN_DECODE_ERROR")


__all__ = ["JWTTokenIssuer"]
