"""
Domain value objects for OTP authentication.

Value objects are immutable and have no identity; they are defined
only by their attributes.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

from otp_auth.domain.errors import InvalidIdentifierError, InvalidOTPRequestError


# ═══════════════════════════════════════════════════════════════
# CHANNELS & PURPOSES
# ═══════════════════════════════════════════════════════════════


class OTPChannel(str, Enum):
    """Delivery mechanism for a one-time code."""

    EMAIL = "email"
    SMS = "sms"

    @classmethod
    def coerce(cls, value: Union["OTPChannel", str]) -> "OTPChannel":
        """Convert a raw value to an OTPChannel, rejecting unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidOTPRequestError(
                f"Unsupported OTP channel: {value!r}",
                code="INVALID_CHANNEL",
                details={"channel": value, "allowed": [c.value for c in cls]},
            )


class OTPPurpose(str, Enum):
    """
    Business reason for a code.

    Codes are scoped per purpose: a login code cannot be used to reset
    a password for the same identifier.
    """

    LOGIN = "login"
    REGISTRATION = "registration"
    PASSWORD_RESET = "password_reset"
    EMAIL_VERIFICATION = "email_verification"
    PHONE_VERIFICATION = "phone_verification"
    TWO_FACTOR = "two_factor"
    GENERIC = "generic"

    @classmethod
    def coerce(cls, value: Union["OTPPurpose", str]) -> "OTPPurpose":
        """Convert a raw value to an OTPPurpose, rejecting unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidOTPRequestError(
                f"Unsupported OTP purpose: {value!r}",
                code="INVALID_PURPOSE",
                details={"purpose": value, "allowed": [p.value for p in cls]},
            )


# ═══════════════════════════════════════════════════════════════
# POLICY
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class OTPPolicy:
    """
    Tunables for code issuance and verification.

    The defaults form the external contract and should only be changed
    together with client-side countdowns.
    """

    code_length: int = 6
    code_ttl_seconds: int = 300  # 5 minutes
    max_attempts: int = 3
    lockout_seconds: int = 1800  # 30 minutes
    resend_cooldown_seconds: int = 60
    rate_limit_window_seconds: int = 3600  # 1 hour
    rate_limit_max_requests: int = 10

    def __post_init__(self):
        for name in (
            "code_length",
            "code_ttl_seconds",
            "max_attempts",
            "lockout_seconds",
            "rate_limit_window_seconds",
            "rate_limit_max_requests",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"OTPPolicy.{name} must be positive")
        if self.resend_cooldown_seconds < 0:
            raise ValueError("OTPPolicy.resend_cooldown_seconds must not be negative")

    @property
    def code_ttl_minutes(self) -> int:
        return math.ceil(self.code_ttl_seconds / 60)

    @property
    def lockout_minutes(self) -> int:
        return math.ceil(self.lockout_seconds / 60)


# ═══════════════════════════════════════════════════════════════
# IDENTIFIERS
# ═══════════════════════════════════════════════════════════════


_NON_DIGITS = re.compile(r"\D")


def normalize_identifier(identifier: str, channel: Union[OTPChannel, str]) -> str:
    """
    Normalize an identifier for use in store keys.

    Emails are trimmed and case-folded. Phone numbers are reduced to
    their digits, keeping a leading '+'.

    Raises:
        InvalidIdentifierError: If nothing usable remains.
    """
    channel = OTPChannel.coerce(channel)
    raw = (identifier or "").strip()

    if channel == OTPChannel.EMAIL:
        normalized = raw.lower()
    else:
        prefix = "+" if raw.startswith("+") else ""
        digits = _NON_DIGITS.sub("", raw)
        normalized = prefix + digits if digits else ""

    if not normalized:
        raise InvalidIdentifierError(
            f"Identifier is empty for channel '{channel.value}'",
            details={"channel": channel.value},
        )
    return normalized


def mask_identifier(identifier: str) -> str:
    """
    Mask an identifier for display and logs.

    Email: j***n@example.com (first and last char of the local part)
    Phone: ****4567 (last four digits)
    """
    if "@" in identifier:
        local, _, domain = identifier.partition("@")
        if not local:
            return f"***@{domain}"
        if len(local) <= 2:
            return f"{local[0]}***@{domain}"
        return f"{local[0]}***{local[-1]}@{domain}"
    return "****" + identifier[-4:]
