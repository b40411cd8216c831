"""
Token Issuer Port.

Issues session tokens once a user has proven possession of a code.
"""

from typing import TYPE_CHECKING, Protocol, Any

from otp_auth.infrastructure.ports.users import UserData

if TYPE_CHECKING:
    from otp_auth.application.results import TokenPair


class TokenIssuerPort(Protocol):
    """Port for minting access/refresh tokens for an authenticated user."""

    def issue(self, user: UserData) -> "TokenPair":
        """Create a fresh token pair for the user."""
        ...

    def decode(self, token: str) -> dict[str, Any]:
        """
        Decode and validate a token issued by this issuer.

        Raises:
            InvalidTokenError: If the token is invalid or expired
        """
        ...
