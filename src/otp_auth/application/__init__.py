"""Application layer: OTP issuance/verification and passwordless auth."""

from otp_auth.application.results import (
    OTPFailureReason,
    OTPRequestResult,
    OTPVerifyResult,
    OTPStatusResult,
    AuthStatus,
    AuthResult,
    TokenPair,
)
from otp_auth.application.otp_service import OTPService
from otp_auth.application.auth_service import (
    PasswordlessAuthService,
    NEUTRAL_REQUEST_MESSAGE,
)

__all__ = [
    # Results
    "OTPFailureReason",
    "OTPRequestResult",
    "OTPVerifyResult",
    "OTPStatusResult",
    "AuthStatus",
    "AuthResult",
    "TokenPair",
    # Services
    "OTPService",
    "PasswordlessAuthService",
    "NEUTRAL_REQUEST_MESSAGE",
]
