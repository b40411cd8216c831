"""
User Directory Adapters.

In-memory implementation of UserDirectoryPort for development and tests.
Production deployments provide their own adapter over the user database.
"""

import hashlib
import logging
import secrets
from typing import Dict, Iterable, Optional

from otp_auth.domain.value_objects import OTPChannel, normalize_identifier
from otp_auth.infrastructure.ports.users import UserDirectoryPort, UserData

logger = logging.getLogger("otp_auth.infrastructure.adapters.users")


class InMemoryUserDirectory(UserDirectoryPort):
    """
    In-memory implementation of UserDirectoryPort.

    Lookups use the same normalization as the OTP service, so
    ``" Jane@Example.com"`` finds ``jane@example.com``.

    Usage:
        users = InMemoryUserDirectory([
            UserData(user_id="u-1", email="jane@example.com", phone_number="+306900000000"),
        ])
    """

    def __init__(self, users: Optional[Iterable[UserData]] = None):
        self._users: Dict[str, UserData] = {}
        # user_id -> "salt$sha256hex"
        self._passwords: Dict[str, str] = {}
        for user in users or []:
            self.add_user(user)

    def add_user(self, user: UserData) -> None:
        self._users[user.user_id] = user

    def _find(self, predicate) -> Optional[UserData]:
        for user in self._users.values():
            if predicate(user):
                return user
        return None

    async def get_user_by_email(self, email: str) -> Optional[UserData]:
        target = normalize_identifier(email, OTPChannel.EMAIL)
        return self._find(
            lambda u: u.email and normalize_identifier(u.email, OTPChannel.EMAIL) == target
        )

    async def get_user_by_phone(self, phone_number: str) -> Optional[UserData]:
        target = normalize_identifier(phone_number, OTPChannel.SMS)
        return self._find(
            lambda u: bool(u.phone_number)
            and normalize_identifier(u.phone_number, OTPChannel.SMS) == target
        )

    async def set_password(self, user_id: str, password: str) -> None:
        if user_id not in self._users:
            raise KeyError(f"Unknown user: {user_id}")
        salt = secrets.token_hex(8)
        digest = hashlib.sha256(f"{salt}{password}".encode("utf-8")).hexdigest()
        self._passwords[user_id] = f"{salt}${digest}"
        logger.debug(f"Password updated for user: {user_id}")

    def check_password(self, user_id: str, password: str) -> bool:
        """Check a password set through set_password (for testing)."""
        stored = self._passwords.get(user_id)
        if stored is None:
            return False
        salt, _, digest = stored.partition("$")
        candidate = hashlib.sha256(f"{salt}{password}".encode("utf-8")).hexdigest()
        return secrets.compare_digest(candidate, digest)

    def clear(self) -> None:
        """Clear all users (for testing)."""
        self._users.clear()
        self._passwords.clear()


__all__ = ["InMemoryUserDirectory"]
