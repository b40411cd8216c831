"""
Tests for OTP store keys.
"""

import pytest

from otp_auth.domain.errors import InvalidOTPRequestError
from otp_auth.domain.keys import OTPKeys
from otp_auth.domain.value_objects import OTPPurpose


def test_key_layout():
    keys = OTPKeys.for_pair("user@example.com", "login")

    assert keys.code == "otp:login:user@example.com"
    assert keys.attempts == "otp:attempts:user@example.com:login"
    assert keys.lockout == "otp:lockout:user@example.com:login"
    assert keys.cooldown == "otp:cooldown:user@example.com:login"
    assert keys.rate_limit == "otp:ratelimit:user@example.com"


def test_rate_limit_key_is_shared_across_purposes():
    login = OTPKeys.for_pair("+306912345678", OTPPurpose.LOGIN)
    reset = OTPKeys.for_pair("+306912345678", OTPPurpose.PASSWORD_RESET)

    assert login.rate_limit == reset.rate_limit
    assert login.code != reset.code
    assert login.cooldown != reset.cooldown


def test_custom_namespace():
    keys = OTPKeys.for_pair("a@b.c", "generic", namespace="tenant1:otp")
    assert keys.code == "tenant1:otp:generic:a@b.c"


def test_unknown_purpose_rejected():
    with pytest.raises(InvalidOTPRequestError):
        OTPKeys.for_pair("a@b.c", "attempts")
