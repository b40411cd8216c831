"""
Tests for Factory functions.
"""

import os
from unittest.mock import patch

import pytest

from otp_auth.application.otp_service import OTPService
from otp_auth.contrib.dependency_injector import OTPContainer
from otp_auth.factory import (
    create_default_metrics,
    create_default_otp_service,
    create_default_policy,
    create_default_store,
    settings_from_env,
)
from otp_auth.infrastructure.adapters.metrics import (
    LoggingOTPMetrics,
    NullOTPMetrics,
    PrometheusOTPMetrics,
    RedisOTPMetrics,
)
from otp_auth.infrastructure.adapters.store import (
    InMemoryKeyValueStore,
    RedisKeyValueStore,
)


def test_settings_defaults():
    with patch.dict(os.environ, {}, clear=True):
        settings = settings_from_env()

    assert settings["store"]["backend"] == "memory"
    assert "url" not in settings["redis"]
    assert settings["otp"]["code_ttl_seconds"] == 300
    assert settings["otp"]["rate_limit_max_requests"] == 10
    assert settings["otp"]["app_name"] == "MyApp"
    assert settings["otp"]["metrics_backend"] == "none"
    assert settings["jwt"]["secret_key"] is None


def test_policy_from_env():
    with patch.dict(
        os.environ,
        {"OTP_MAX_ATTEMPTS": "5", "OTP_LOCKOUT_SECONDS": "600"},
        clear=True,
    ):
        policy = create_default_policy()

    assert policy.max_attempts == 5
    assert policy.lockout_seconds == 600
    assert policy.resend_cooldown_seconds == 60


def test_policy_env_must_be_integer():
    with patch.dict(os.environ, {"OTP_MAX_ATTEMPTS": "three"}, clear=True):
        with pytest.raises(ValueError, match="OTP_MAX_ATTEMPTS"):
            settings_from_env()


def test_create_default_store_in_memory():
    with patch.dict(os.environ, {}, clear=True):
        store = create_default_store()
    assert isinstance(store, InMemoryKeyValueStore)


def test_create_default_store_redis():
    with patch.dict(
        os.environ,
        {"OTP_REDIS_URL": "redis://cache:6379/0", "OTP_REDIS_PREFIX": "acme:"},
        clear=True,
    ):
        with patch("redis.asyncio.Redis.from_url") as from_url:
            store = create_default_store()

    assert isinstance(store, RedisKeyValueStore)
    from_url.assert_called_once_with("redis://cache:6379/0")


@pytest.mark.parametrize(
    "backend, expected",
    [
        ("none", NullOTPMetrics),
        ("logging", LoggingOTPMetrics),
        ("prometheus", PrometheusOTPMetrics),
        ("statsd", NullOTPMetrics),
    ],
)
def test_create_default_metrics(backend, expected):
    with patch.dict(os.environ, {"OTP_METRICS_BACKEND": backend}, clear=True):
        assert isinstance(create_default_metrics(), expected)


def test_create_default_metrics_redis():
    with patch.dict(
        os.environ,
        {"OTP_METRICS_BACKEND": "redis", "OTP_REDIS_URL": "redis://cache:6379/0"},
        clear=True,
    ):
        with patch("redis.asyncio.Redis.from_url"):
            assert isinstance(create_default_metrics(), RedisOTPMetrics)


def test_create_default_metrics_redis_needs_url():
    with patch.dict(os.environ, {"OTP_METRICS_BACKEND": "REDIS"}, clear=True):
        with pytest.raises(ValueError):
            create_default_metrics()


def test_create_default_otp_service():
    with patch.dict(
        os.environ,
        {"OTP_APP_NAME": "Acme", "OTP_CODE_TTL_SECONDS": "120"},
        clear=True,
    ):
        service = create_default_otp_service()

    assert isinstance(service, OTPService)
    assert service.app_name == "Acme"
    assert service.policy.code_ttl_seconds == 120
    assert service.email_channel.app_name == "Acme"


def test_settings_select_redis_store_in_container():
    with patch.dict(
        os.environ,
        {"OTP_REDIS_URL": "redis://cache:6379/0", "OTP_REDIS_PREFIX": "acme:"},
        clear=True,
    ):
        settings = settings_from_env()

    container = OTPContainer()
    container.config.from_dict(settings)

    with patch("redis.asyncio.Redis.from_url") as from_url:
        store = container.store()

    assert isinstance(store, RedisKeyValueStore)
    assert store._prefix == "acme:"
    from_url.assert_called_once_with("redis://cache:6379/0")


def test_settings_without_redis_keep_container_defaults():
    with patch.dict(os.environ, {}, clear=True):
        settings = settings_from_env()

    container = OTPContainer()
    container.config.from_dict(settings)

    assert isinstance(container.store(), InMemoryKeyValueStore)
    assert container.config.redis.url() == "redis://localhost:6379/0"
