"""
Dependency Injector integration for otp-auth.

Provides an optional IoC Container with pre-configured OTP services.
Host applications can extend this container or use it directly.

Usage:
    from otp_auth.contrib.dependency_injector import OTPContainer

    class AppContainer(OTPContainer):
        # Provide implementations for production dependencies
        email_sender = providers.Singleton(AsyncSMTPEmailSender, host="smtp.example.com")
        sms_sender = providers.Singleton(BulkerSMSSender, auth_key="...")
        user_directory = providers.Singleton(MyUserDirectory, ...)
"""

from dependency_injector import containers, providers

from otp_auth.application.auth_service import PasswordlessAuthService
from otp_auth.application.otp_service import OTPService
from otp_auth.domain.value_objects import OTPPolicy
from otp_auth.infrastructure.adapters.communication import (
    ConsoleEmailSender,
    ConsoleSMSSender,
    TemplatedOTPEmailChannel,
)
from otp_auth.infrastructure.adapters.metrics import NullOTPMetrics
from otp_auth.infrastructure.adapters.store import (
    InMemoryKeyValueStore,
    RedisKeyValueStore,
)
from otp_auth.infrastructure.adapters.tokens import JWTTokenIssuer
from otp_auth.infrastructure.adapters.users import InMemoryUserDirectory


def _redis_from_url(url: str):
    import redis.asyncio as redis

    return redis.Redis.from_url(url)


DEFAULT_CONFIG = {
    "store": {"backend": "memory"},
    "redis": {"url": "redis://localhost:6379/0", "prefix": ""},
    "otp": {
        "app_name": "MyApp",
        "from_email": None,
        "sms_from": None,
        "code_length": 6,
        "code_ttl_seconds": 300,
        "max_attempts": 3,
        "lockout_seconds": 1800,
        "resend_cooldown_seconds": 60,
        "rate_limit_window_seconds": 3600,
        "rate_limit_max_requests": 10,
    },
    "jwt": {
        "secret_key": None,
        "algorithm": "HS256",
        "issuer": "otp-auth",
        "access_token_ttl_seconds": 3600,
        "refresh_token_ttl_seconds": 86400,
    },
}


class OTPContainer(containers.DeclarativeContainer):
    """
    IoC Container for OTP services.

    External dependencies (can be overridden by host app):

    - email_sender: EmailSenderPort (default: ConsoleEmailSender)
    - sms_sender: SMSSenderPort (default: ConsoleSMSSender)
    - metrics: OTPMetricsPort (default: NullOTPMetrics)
    - user_directory: UserDirectoryPort (default: InMemoryUserDirectory)

    Config (see DEFAULT_CONFIG for every key):
    - store.backend: "memory" or "redis"
    - redis.url / redis.prefix: used when store.backend is "redis"
    - otp.*: OTPPolicy fields plus app_name, from_email, sms_from
    - jwt.secret_key: required before auth_service is resolved

    Usage:
        container = OTPContainer()
        container.config.from_dict({
            "store": {"backend": "redis"},
            "redis": {"url": "redis://redis:6379/0"},
            "jwt": {"secret_key": "..."},
        })
        otp_service = container.otp_service()
    """

    wiring_config = containers.WiringConfiguration(
        modules=["otp_auth.contrib.fastapi.router"]
    )

    config = providers.Configuration(default=DEFAULT_CONFIG)

    # ═══════════════════════════════════════════════════════════════
    # STORAGE
    # ═══════════════════════════════════════════════════════════════

    redis_client = providers.Singleton(_redis_from_url, config.redis.url)

    store = providers.Selector(
        config.store.backend,
        memory=providers.Singleton(InMemoryKeyValueStore),
        redis=providers.Singleton(
            RedisKeyValueStore,
            redis_client=redis_client,
            prefix=config.redis.prefix,
        ),
    )

    # ═══════════════════════════════════════════════════════════════
    # DELIVERY & METRICS
    # ═══════════════════════════════════════════════════════════════

    email_sender = providers.Singleton(ConsoleEmailSender)
    sms_sender = providers.Singleton(ConsoleSMSSender)

    email_channel = providers.Singleton(
        TemplatedOTPEmailChannel,
        email_sender=email_sender,
        app_name=config.otp.app_name,
        from_email=config.otp.from_email,
    )

    metrics = providers.Singleton(NullOTPMetrics)

    # ═══════════════════════════════════════════════════════════════
    # OTP SERVICES
    # ═══════════════════════════════════════════════════════════════

    policy = providers.Singleton(
        OTPPolicy,
        code_length=config.otp.code_length.as_int(),
        code_ttl_seconds=config.otp.code_ttl_seconds.as_int(),
        max_attempts=config.otp.max_attempts.as_int(),
        lockout_seconds=config.otp.lockout_seconds.as_int(),
        resend_cooldown_seconds=config.otp.resend_cooldown_seconds.as_int(),
        rate_limit_window_seconds=config.otp.rate_limit_window_seconds.as_int(),
        rate_limit_max_requests=config.otp.rate_limit_max_requests.as_int(),
    )

    otp_service = providers.Singleton(
        OTPService,
        store=store,
        email_channel=email_channel,
        sms_sender=sms_sender,
        metrics=metrics,
        policy=policy,
        app_name=config.otp.app_name,
        sms_from=config.otp.sms_from,
    )

    # ═══════════════════════════════════════════════════════════════
    # PASSWORDLESS AUTH
    # ═══════════════════════════════════════════════════════════════

    user_directory = providers.Singleton(InMemoryUserDirectory)

    token_issuer = providers.Singleton(
        JWTTokenIssuer,
        secret_key=config.jwt.secret_key,
        algorithm=config.jwt.algorithm,
        issuer=config.jwt.issuer,
        access_token_ttl_seconds=config.jwt.access_token_ttl_seconds.as_int(),
        refresh_token_ttl_seconds=config.jwt.refresh_token_ttl_seconds.as_int(),
    )

    auth_service = providers.Singleton(
        PasswordlessAuthService,
        otp_service=otp_service,
        users=user_directory,
        tokens=token_issuer,
    )
