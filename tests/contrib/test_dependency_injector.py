"""
Tests for the OTP IoC Container.
"""

from unittest.mock import MagicMock, patch

from dependency_injector import providers

from otp_auth.application.auth_service import PasswordlessAuthService
from otp_auth.application.otp_service import OTPService
from otp_auth.contrib.dependency_injector import OTPContainer
from otp_auth.infrastructure.adapters.communication import TemplatedOTPEmailChannel
from otp_auth.infrastructure.adapters.metrics import NullOTPMetrics
from otp_auth.infrastructure.adapters.store import (
    InMemoryKeyValueStore,
    RedisKeyValueStore,
)
from otp_auth.infrastructure.adapters.tokens import JWTTokenIssuer


def test_defaults():
    container = OTPContainer()

    service = container.otp_service()

    assert isinstance(service, OTPService)
    assert isinstance(service.store, InMemoryKeyValueStore)
    assert isinstance(service.metrics, NullOTPMetrics)
    assert isinstance(service.email_channel, TemplatedOTPEmailChannel)
    assert service.policy.max_attempts == 3
    assert service.policy.code_ttl_seconds == 300
    assert container.otp_service() is service


def test_config_overrides_policy():
    container = OTPContainer()
    container.config.from_dict(
        {"otp": {"code_ttl_seconds": "120", "max_attempts": 5, "app_name": "Acme"}}
    )

    service = container.otp_service()

    assert service.policy.code_ttl_seconds == 120
    assert service.policy.max_attempts == 5
    # Untouched keys keep their defaults
    assert service.policy.lockout_seconds == 1800
    assert service.email_channel.app_name == "Acme"


def test_redis_store_selected():
    container = OTPContainer()
    container.config.from_dict(
        {"store": {"backend": "redis"}, "redis": {"prefix": "acme:"}}
    )
    redis_client = MagicMock()
    container.redis_client.override(providers.Object(redis_client))

    store = container.store()

    assert isinstance(store, RedisKeyValueStore)
    assert store._redis is redis_client
    assert store._prefix == "acme:"


def test_redis_client_built_from_url():
    container = OTPContainer()
    container.config.from_dict({"redis": {"url": "redis://cache:6379/2"}})

    with patch("redis.asyncio.Redis.from_url") as from_url:
        container.redis_client()

    from_url.assert_called_once_with("redis://cache:6379/2")


def test_auth_service_wiring():
    container = OTPContainer()
    container.config.from_dict({"jwt": {"secret_key": "test-secret"}})

    auth = container.auth_service()

    assert isinstance(auth, PasswordlessAuthService)
    assert isinstance(auth.tokens, JWTTokenIssuer)
    assert auth.otp is container.otp_service()


def test_metrics_override_reaches_service():
    container = OTPContainer()
    sink = MagicMock()
    container.metrics.override(providers.Object(sink))

    assert container.otp_service().metrics is sink
