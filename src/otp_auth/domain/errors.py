"""
Domain errors for the OTP authentication system.

These errors provide a consistent interface for reporting failures
across different adapters and layers.

Policy rejections (cooldown, rate limit, lockout) and failed verifications
are NOT errors: the OTP service reports them as structured results so that
callers can render countdowns. Only delivery failures, malformed requests
and infrastructure problems surface as exceptions.
"""

from typing import Optional, Any


class AuthDomainError(Exception):
    """Base class for all auth domain errors."""

    def __init__(
        self,
        message: str,
        code: str = "AUTH_ERROR",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class AuthenticationError(AuthDomainError):
    """Raised when authentication fails (invalid credentials, expired, etc.)."""

    def __init__(
        self,
        message: str = "Authentication failed",
        code: str = "AUTHENTICATION_FAILED",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)


class InvalidTokenError(AuthenticationError):
    """Raised when a token is invalid, expired, or malformed."""

    def __init__(
        self,
        message: str = "Invalid token",
        code: str = "INVALID_TOKEN",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)


class OTPError(AuthDomainError):
    """Base class for OTP-related errors."""

    pass


class InvalidOTPError(OTPError):
    """Raised when an OTP code is invalid."""

    def __init__(
        self,
        message: str = "Invalid OTP code",
        code: str = "INVALID_OTP",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)


class OTPRateLimitError(OTPError):
    """Raised when too many OTP requests or attempts are made."""

    def __init__(
        self,
        message: str = "Too many attempts",
        code: str = "OTP_RATE_LIMIT",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)

    @property
    def retry_after_seconds(self) -> Optional[int]:
        return self.details.get("retry_after_seconds")


class OTPDeliveryError(OTPError):
    """
    Raised when a delivery channel fails to send a code.

    The pending code and resend cooldown have already been rolled back
    when this is raised, so the user may request a new code immediately.
    """

    def __init__(
        self,
        message: str = "Failed to send verification code",
        code: str = "OTP_DELIVERY_FAILED",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)


class InvalidOTPRequestError(OTPError):
    """Raised when a channel, purpose or identifier is not acceptable."""

    def __init__(
        self,
        message: str = "Invalid OTP request",
        code: str = "INVALID_OTP_REQUEST",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)


class InvalidIdentifierError(InvalidOTPRequestError):
    """Raised when an identifier is empty after normalization."""

    def __init__(
        self,
        message: str = "Invalid identifier",
        code: str = "INVALID_IDENTIFIER",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
