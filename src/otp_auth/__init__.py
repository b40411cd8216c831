"""
py-otp-auth: One-time-code authentication core.

Generation, delivery, verification with attempt limiting and lockout,
resend cooldown and hourly rate limiting on top of a key-value store.
"""

__version__ = "0.1.0"

from otp_auth.domain import (
    OTPChannel,
    OTPPurpose,
    OTPPolicy,
    AuthDomainError,
    OTPError,
    OTPDeliveryError,
    OTPRateLimitError,
    InvalidOTPRequestError,
    InvalidIdentifierError,
)
from otp_auth.application import (
    OTPService,
    PasswordlessAuthService,
    OTPFailureReason,
    OTPRequestResult,
    OTPVerifyResult,
    OTPStatusResult,
    AuthResult,
    TokenPair,
)

__all__ = [
    "__version__",
    # Domain
    "OTPChannel",
    "OTPPurpose",
    "OTPPolicy",
    "AuthDomainError",
    "OTPError",
    "OTPDeliveryError",
    "OTPRateLimitError",
    "InvalidOTPRequestError",
    "InvalidIdentifierError",
    # Application
    "OTPService",
    "PasswordlessAuthService",
    "OTPFailureReason",
    "OTPRequestResult",
    "OTPVerifyResult",
    "OTPStatusResult",
    "AuthResult",
    "TokenPair",
]
