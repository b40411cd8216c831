"""
OTP and authentication result types.

These represent the outcomes of OTP and authentication operations.
Policy rejections and failed verifications are reported through these
results rather than raised, so that callers can render retry countdowns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class OTPFailureReason(str, Enum):
    """Why a request or verification did not succeed."""

    COOLDOWN = "cooldown"
    RATE_LIMITED = "rate_limited"
    LOCKED_OUT = "locked_out"
    EXPIRED = "expired"
    INVALID_CODE = "invalid_code"
    MAX_ATTEMPTS = "max_attempts"


@dataclass
class OTPRequestResult:
    """
    Result of requesting a code.

    The raw code is never part of the result; success only confirms
    that a delivery channel accepted it.
    """

    success: bool
    message: str
    expires_in_seconds: Optional[int] = None
    retry_after_seconds: Optional[int] = None
    reason: Optional[OTPFailureReason] = None

    @classmethod
    def sent(cls, message: str, expires_in_seconds: int) -> "OTPRequestResult":
        return cls(success=True, message=message, expires_in_seconds=expires_in_seconds)

    @classmethod
    def rejected(
        cls,
        reason: OTPFailureReason,
        message: str,
        retry_after_seconds: Optional[int] = None,
    ) -> "OTPRequestResult":
        return cls(
            success=False,
            message=message,
            retry_after_seconds=retry_after_seconds,
            reason=reason,
        )

    @property
    def is_throttled(self) -> bool:
        """True for rejections that callers usually map to HTTP 429."""
        return self.reason in (OTPFailureReason.RATE_LIMITED, OTPFailureReason.LOCKED_OUT)


@dataclass
class OTPVerifyResult:
    """Result of verifying a code."""

    valid: bool
    success: bool
    message: str
    remaining_attempts: Optional[int] = None
    retry_after_seconds: Optional[int] = None
    reason: Optional[OTPFailureReason] = None

    @classmethod
    def verified(cls, message: str = "Verification successful") -> "OTPVerifyResult":
        return cls(valid=True, success=True, message=message)

    @classmethod
    def failed(
        cls,
        reason: OTPFailureReason,
        message: str,
        remaining_attempts: Optional[int] = None,
        retry_after_seconds: Optional[int] = None,
    ) -> "OTPVerifyResult":
        return cls(
            valid=False,
            success=False,
            message=message,
            remaining_attempts=remaining_attempts,
            retry_after_seconds=retry_after_seconds,
            reason=reason,
        )


@dataclass
class OTPStatusResult:
    """Snapshot of a pair's pending code and resend cooldown."""

    has_active_otp: bool
    expires_in_seconds: int
    can_resend: bool
    resend_after_seconds: int


# ═══════════════════════════════════════════════════════════════
# AUTHENTICATION RESULTS
# ═══════════════════════════════════════════════════════════════


class AuthStatus(str, Enum):
    """Status of an authentication attempt."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class TokenPair:
    """Access and refresh token pair."""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = 3600  # seconds
    refresh_expires_in: int = 86400  # seconds


@dataclass
class AuthResult:
    """
    Result of a passwordless authentication operation.

    Use factory methods to create instances.
    """

    status: AuthStatus
    tokens: Optional[TokenPair] = None
    user_id: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None  # e.g., "INVALID_CODE", "LOCKED_OUT"
    remaining_attempts: Optional[int] = None
    retry_after_seconds: Optional[int] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def success(
        cls,
        user_id: str,
        username: str,
        email: Optional[str] = None,
        tokens: Optional[TokenPair] = None,
    ) -> "AuthResult":
        """Create a successful authentication result."""
        return cls(
            status=AuthStatus.SUCCESS,
            tokens=tokens,
            user_id=user_id,
            username=username,
            email=email,
        )

    @classmethod
    def failed(
        cls,
        error_message: str,
        error_code: str = "AUTHENTICATION_FAILED",
        remaining_attempts: Optional[int] = None,
        retry_after_seconds: Optional[int] = None,
    ) -> "AuthResult":
        """Create a failed authentication result."""
        return cls(
            status=AuthStatus.FAILED,
            error_message=error_message,
            error_code=error_code,
            remaining_attempts=remaining_attempts,
            retry_after_seconds=retry_after_seconds,
        )

    @classmethod
    def from_verify_failure(cls, result: OTPVerifyResult) -> "AuthResult":
        code = result.reason.value.upper() if result.reason else "AUTHENTICATION_FAILED"
        return cls.failed(
            error_message=result.message,
            error_code=code,
            remaining_attempts=result.remaining_attempts,
            retry_after_seconds=result.retry_after_seconds,
        )

    @property
    def is_success(self) -> bool:
        return self.status == AuthStatus.SUCCESS

    @property
    def is_failed(self) -> bool:
        return self.status == AuthStatus.FAILED
