"""
OTP Metrics Port.

Receives lifecycle notifications from the OTP service for observability
and auditing. Emission is best-effort: the OTP service never awaits these
calls on its critical path and discards any error they raise.
"""

from typing import Protocol, Optional, runtime_checkable


@runtime_checkable
class OTPMetricsPort(Protocol):
    """
    Port for recording OTP lifecycle events.

    Channel and purpose are passed as their string values ("email",
    "login", ...). The identifier, when provided, is already normalized
    and must be masked by implementations that persist it.
    """

    async def record_requested(
        self, channel: str, purpose: str, identifier: Optional[str] = None
    ) -> None:
        """A code was generated and handed to a delivery channel."""
        ...

    async def record_verified(
        self, channel: str, purpose: str, identifier: Optional[str] = None
    ) -> None:
        """A code was verified successfully."""
        ...

    async def record_failed(
        self,
        channel: str,
        purpose: str,
        reason: str,
        identifier: Optional[str] = None,
    ) -> None:
        """A verification attempt failed (e.g. reason='invalid_code')."""
        ...

    async def record_locked_out(
        self, channel: str, purpose: str, identifier: Optional[str] = None
    ) -> None:
        """Too many failed attempts locked the pair out."""
        ...

    async def record_rate_limited(
        self,
        channel: str,
        purpose: str,
        reason: str,
        identifier: Optional[str] = None,
    ) -> None:
        """A code request was refused ('rate_limited' or 'locked_out')."""
        ...
