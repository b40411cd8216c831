"""Concrete infrastructure adapters (stores, senders, metrics, tokens, users)."""

from otp_auth.infrastructure.adapters.store import (
    InMemoryKeyValueStore,
    RedisKeyValueStore,
)
from otp_auth.infrastructure.adapters.communication import (
    ConsoleEmailSender,
    ConsoleSMSSender,
    TemplatedOTPEmailChannel,
)
from otp_auth.infrastructure.adapters.metrics import (
    NullOTPMetrics,
    LoggingOTPMetrics,
    CompositeOTPMetrics,
    PrometheusOTPMetrics,
    RedisOTPMetrics,
)
from otp_auth.infrastructure.adapters.users import InMemoryUserDirectory
from otp_auth.infrastructure.adapters.tokens import JWTTokenIssuer

__all__ = [
    # Stores
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
    # Communication
    "ConsoleEmailSender",
    "ConsoleSMSSender",
    "TemplatedOTPEmailChannel",
    # Metrics
    "NullOTPMetrics",
    "LoggingOTPMetrics",
    "CompositeOTPMetrics",
    "PrometheusOTPMetrics",
    "RedisOTPMetrics",
    # Users & tokens
    "InMemoryUserDirectory",
    "JWTTokenIssuer",
]
