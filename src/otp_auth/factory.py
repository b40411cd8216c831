"""
Factory functions for automatic service creation.

Implements the 'if not provided, create' pattern for framework
integrations: everything is read from environment variables and falls
back to development-friendly in-memory/console adapters.
"""

import os
import logging
from typing import Any, Dict, Optional

from otp_auth.application.otp_service import OTPService
from otp_auth.domain.value_objects import OTPPolicy
from otp_auth.infrastructure.adapters.communication import (
    ConsoleEmailSender,
    ConsoleSMSSender,
    TemplatedOTPEmailChannel,
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
from otp_auth.infrastructure.ports.metrics import OTPMetricsPort
from otp_auth.infrastructure.ports.store import KeyValueStorePort

logger = logging.getLogger(__name__)

_POLICY_ENV = {
    "code_ttl_seconds": "OTP_CODE_TTL_SECONDS",
    "max_attempts": "OTP_MAX_ATTEMPTS",
    "lockout_seconds": "OTP_LOCKOUT_SECONDS",
    "resend_cooldown_seconds": "OTP_RESEND_COOLDOWN_SECONDS",
    "rate_limit_window_seconds": "OTP_RATE_LIMIT_WINDOW_SECONDS",
    "rate_limit_max_requests": "OTP_RATE_LIMIT_MAX_REQUESTS",
}


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}")


def settings_from_env() -> Dict[str, Any]:
    """
    Read settings from environment variables.

    The returned dict has the same shape as OTPContainer's configuration
    (sections ``store``, ``redis``, ``otp``, ``jwt``), so it can be passed to
    ``container.config.from_dict()``. Setting OTP_REDIS_URL selects the
    Redis store backend.
    """
    defaults = OTPPolicy()
    otp = {
        field: _int_env(env, getattr(defaults, field))
        for field, env in _POLICY_ENV.items()
    }
    otp["app_name"] = os.environ.get("OTP_APP_NAME", "MyApp")
    otp["metrics_backend"] = os.environ.get("OTP_METRICS_BACKEND", "none").lower()

    redis_settings = {"prefix": os.environ.get("OTP_REDIS_PREFIX", "")}
    redis_url = os.environ.get("OTP_REDIS_URL")
    # An unset url must not replace the container's default with None
    if redis_url:
        redis_settings["url"] = redis_url

    return {
        "store": {"backend": "redis" if redis_url else "memory"},
        "redis": redis_settings,
        "otp": otp,
        "jwt": {
            "secret_key": os.environ.get("OTP_JWT_SECRET"),
        },
    }


def create_default_policy(settings: Optional[Dict[str, Any]] = None) -> OTPPolicy:
    """Create an OTPPolicy from settings (or the environment)."""
    otp = (settings or settings_from_env())["otp"]
    return OTPPolicy(**{field: otp[field] for field in _POLICY_ENV})


def _redis_client(url: str) -> Any:
    import redis.asyncio as redis

    return redis.Redis.from_url(url)


def create_default_store(settings: Optional[Dict[str, Any]] = None) -> KeyValueStorePort:
    """
    Create the key-value store.

    Uses Redis when OTP_REDIS_URL is set, otherwise an in-memory store
    that only works within a single process.
    """
    redis_settings = (settings or settings_from_env())["redis"]
    if redis_settings.get("url"):
        return RedisKeyValueStore(
            _redis_client(redis_settings["url"]),
            prefix=redis_settings.get("prefix", ""),
        )
    logger.warning(
        "OTP_REDIS_URL is not set; using InMemoryKeyValueStore (single process only)"
    )
    return InMemoryKeyValueStore()


def create_default_metrics(settings: Optional[Dict[str, Any]] = None) -> OTPMetricsPort:
    """
    Create the metrics sink selected by OTP_METRICS_BACKEND.

    Supported values: none (default), logging, prometheus, redis.
    """
    settings = settings or settings_from_env()
    backend = settings["otp"].get("metrics_backend", "none")

    if backend == "logging":
        return LoggingOTPMetrics()
    if backend == "prometheus":
        return PrometheusOTPMetrics()
    if backend == "redis":
        url = settings["redis"].get("url")
        if not url:
            raise ValueError("OTP_METRICS_BACKEND=redis requires OTP_REDIS_URL")
        return RedisOTPMetrics(_redis_client(url))
    if backend != "none":
        logger.warning(f"Unknown OTP_METRICS_BACKEND '{backend}', metrics disabled")
    return NullOTPMetrics()


def create_default_otp_service(settings: Optional[Dict[str, Any]] = None) -> OTPService:
    """
    Create an OTPService from the environment.

    Delivery goes to the console; production setups pass real senders
    through OTPContainer instead.
    """
    settings = settings or settings_from_env()
    app_name = settings["otp"]["app_name"]
    return OTPService(
        store=create_default_store(settings),
        email_channel=TemplatedOTPEmailChannel(ConsoleEmailSender(), app_name=app_name),
        sms_sender=ConsoleSMSSender(),
        metrics=create_default_metrics(settings),
        policy=create_default_policy(settings),
        app_name=app_name,
    )
