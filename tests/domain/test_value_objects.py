"""
Tests for Domain Value Objects.
"""

import pytest

from otp_auth.domain.errors import InvalidIdentifierError, InvalidOTPRequestError
from otp_auth.domain.value_objects import (
    OTPChannel,
    OTPPurpose,
    OTPPolicy,
    normalize_identifier,
    mask_identifier,
)


def test_channel_coerce_accepts_values_and_members():
    assert OTPChannel.coerce("email") is OTPChannel.EMAIL
    assert OTPChannel.coerce(" SMS ") is OTPChannel.SMS
    assert OTPChannel.coerce(OTPChannel.SMS) is OTPChannel.SMS


def test_channel_coerce_rejects_unknown():
    with pytest.raises(InvalidOTPRequestError) as exc_info:
        OTPChannel.coerce("carrier-pigeon")
    assert exc_info.value.code == "INVALID_CHANNEL"
    assert "email" in exc_info.value.details["allowed"]


def test_purpose_coerce_rejects_unknown():
    with pytest.raises(InvalidOTPRequestError) as exc_info:
        OTPPurpose.coerce("ratelimit")
    assert exc_info.value.code == "INVALID_PURPOSE"


def test_purpose_values():
    assert OTPPurpose.coerce("password_reset") is OTPPurpose.PASSWORD_RESET
    assert {p.value for p in OTPPurpose} == {
        "login",
        "registration",
        "password_reset",
        "email_verification",
        "phone_verification",
        "two_factor",
        "generic",
    }


def test_policy_defaults():
    policy = OTPPolicy()
    assert policy.code_length == 6
    assert policy.code_ttl_seconds == 300
    assert policy.max_attempts == 3
    assert policy.lockout_seconds == 1800
    assert policy.resend_cooldown_seconds == 60
    assert policy.rate_limit_window_seconds == 3600
    assert policy.rate_limit_max_requests == 10
    assert policy.code_ttl_minutes == 5
    assert policy.lockout_minutes == 30


def test_policy_rounds_minutes_up():
    assert OTPPolicy(code_ttl_seconds=90).code_ttl_minutes == 2


def test_policy_rejects_non_positive_values():
    with pytest.raises(ValueError):
        OTPPolicy(max_attempts=0)
    with pytest.raises(ValueError):
        OTPPolicy(resend_cooldown_seconds=-1)


def test_policy_allows_disabled_cooldown():
    assert OTPPolicy(resend_cooldown_seconds=0).resend_cooldown_seconds == 0


def test_normalize_email():
    assert normalize_identifier("  User@Example.COM ", OTPChannel.EMAIL) == "user@example.com"


def test_normalize_phone_keeps_leading_plus_and_digits():
    assert normalize_identifier("+30 (691) 234-5678", "sms") == "+306912345678"
    assert normalize_identifier("0691 234 5678", "sms") == "06912345678"


def test_normalize_phone_drops_inner_plus():
    assert normalize_identifier("30+691", OTPChannel.SMS) == "30691"


@pytest.mark.parametrize(
    "identifier,channel",
    [("", "email"), ("   ", "email"), ("+", "sms"), ("call me", "sms")],
)
def test_normalize_rejects_empty(identifier, channel):
    with pytest.raises(InvalidIdentifierError):
        normalize_identifier(identifier, channel)


def test_invalid_identifier_is_invalid_request():
    assert issubclass(InvalidIdentifierError, InvalidOTPRequestError)


def test_mask_email():
    assert mask_identifier("john@example.com") == "j***n@example.com"
    assert mask_identifier("jo@example.com") == "j***@example.com"


def test_mask_phone():
    assert mask_identifier("+306912345678") == "****5678"
