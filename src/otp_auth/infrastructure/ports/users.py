"""
User Directory Port.

Read access to user accounts for the passwordless auth flows, plus the
single write the password-reset flow needs. Persistence of user records
belongs to the host application.
"""

from dataclasses import dataclass, field
from typing import Protocol, Optional, Any


@dataclass
class UserData:
    """User account as seen by the auth flows."""

    user_id: str
    email: str
    username: str = ""
    phone_number: Optional[str] = None
    name: Optional[str] = None
    enabled: bool = True
    attributes: dict[str, Any] = field(default_factory=dict)


class UserDirectoryPort(Protocol):
    """
    Port for looking up accounts by the identifiers codes are sent to.

    Implementations receive normalized identifiers (lower-cased emails,
    digit-only phone numbers with an optional leading '+').
    """

    async def get_user_by_email(self, email: str) -> Optional[UserData]:
        """Get a user by normalized email address."""
        ...

    async def get_user_by_phone(self, phone_number: str) -> Optional[UserData]:
        """Get a user by normalized phone number."""
        ...

    async def set_password(self, user_id: str, password: str) -> None:
        """
        Replace a user's password.

        Implementations are responsible for hashing.
        """
        ...
