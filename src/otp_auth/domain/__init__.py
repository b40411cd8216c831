"""Domain layer: value objects, code generation, store keys and errors."""

from otp_auth.domain.errors import (
    AuthDomainError,
    AuthenticationError,
    InvalidTokenError,
    OTPError,
    InvalidOTPError,
    OTPRateLimitError,
    OTPDeliveryError,
    InvalidOTPRequestError,
    InvalidIdentifierError,
)
from otp_auth.domain.value_objects import (
    OTPChannel,
    OTPPurpose,
    OTPPolicy,
    normalize_identifier,
    mask_identifier,
)
from otp_auth.domain.codes import generate_code, codes_match
from otp_auth.domain.keys import OTPKeys

__all__ = [
    # Errors
    "AuthDomainError",
    "AuthenticationError",
    "InvalidTokenError",
    "OTPError",
    "InvalidOTPError",
    "OTPRateLimitError",
    "OTPDeliveryError",
    "InvalidOTPRequestError",
    "InvalidIdentifierError",
    # Value objects
    "OTPChannel",
    "OTPPurpose",
    "OTPPolicy",
    "normalize_identifier",
    "mask_identifier",
    # Codes & keys
    "generate_code",
    "codes_match",
    "OTPKeys",
]
