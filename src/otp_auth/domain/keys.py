"""
Key-value store addressing for OTP state.

All OTP state lives under the ``otp:`` namespace:

    otp:<purpose>:<identifier>             pending code
    otp:attempts:<identifier>:<purpose>    verification attempt counter
    otp:lockout:<identifier>:<purpose>     lockout marker
    otp:cooldown:<identifier>:<purpose>    resend cooldown marker
    otp:ratelimit:<identifier>             hourly request counter (all purposes)

Identifiers must already be normalized. Purposes never collide with the
fixed segments (attempts, lockout, cooldown, ratelimit).
"""

from dataclasses import dataclass
from typing import Union

from otp_auth.domain.value_objects import OTPPurpose


@dataclass(frozen=True)
class OTPKeys:
    """Store keys for one (identifier, purpose) pair."""

    identifier: str
    purpose: OTPPurpose
    namespace: str = "otp"

    @classmethod
    def for_pair(
        cls, identifier: str, purpose: Union[OTPPurpose, str], namespace: str = "otp"
    ) -> "OTPKeys":
        return cls(
            identifier=identifier,
            purpose=OTPPurpose.coerce(purpose),
            namespace=namespace,
        )

    @property
    def code(self) -> str:
        return f"{self.namespace}:{self.purpose.value}:{self.identifier}"

    @property
    def attempts(self) -> str:
        return f"{self.namespace}:attempts:{self.identifier}:{self.purpose.value}"

    @property
    def lockout(self) -> str:
        return f"{self.namespace}:lockout:{self.identifier}:{self.purpose.value}"

    @property
    def cooldown(self) -> str:
        return f"{self.namespace}:cooldown:{self.identifier}:{self.purpose.value}"

    @property
    def rate_limit(self) -> str:
        # Shared by every purpose of the identifier
        return f"{self.namespace}:ratelimit:{self.identifier}"
