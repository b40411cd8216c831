"""
OTP Metrics Adapters.

Concrete implementations of OTPMetricsPort:
- NullOTPMetrics: Default, records nothing
- LoggingOTPMetrics: Writes events to the logger (dev)
- CompositeOTPMetrics: Fans out to several sinks
- PrometheusOTPMetrics: prometheus_client counters for scraping
- RedisOTPMetrics: Daily/global counters and a recent-events log in Redis
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from prometheus_client import (
    CollectorRegistry,
    Counter,
    generate_latest,
    CONTENT_TYPE_LATEST,
)

from otp_auth.domain.value_objects import OTPChannel, OTPPurpose, mask_identifier
from otp_auth.infrastructure.ports.metrics import OTPMetricsPort

logger = logging.getLogger("otp_auth.infrastructure.adapters.metrics")


# ═══════════════════════════════════════════════════════════════
# NULL / LOGGING / COMPOSITE
# ═══════════════════════════════════════════════════════════════


class NullOTPMetrics(OTPMetricsPort):
    """Metrics sink that discards every event."""

    async def record_requested(self, channel, purpose, identifier=None) -> None:
        pass

    async def record_verified(self, channel, purpose, identifier=None) -> None:
        pass

    async def record_failed(self, channel, purpose, reason, identifier=None) -> None:
        pass

    async def record_locked_out(self, channel, purpose, identifier=None) -> None:
        pass

    async def record_rate_limited(
        self, channel, purpose, reason, identifier=None
    ) -> None:
        pass


class LoggingOTPMetrics(OTPMetricsPort):
    """
    Metrics sink that writes one log line per event.

    Identifiers are masked before logging.
    """

    def __init__(self, level: int = logging.INFO):
        self.level = level

    def _log(self, event: str, channel: str, purpose: str, **extra: Any) -> None:
        parts = [f"OTP {event} [{channel}/{purpose}]"]
        for key, value in extra.items():
            if value is None:
                continue
            if key == "identifier":
                value = mask_identifier(value)
            parts.append(f"{key}={value}")
        logger.log(self.level, " ".join(parts))

    async def record_requested(self, channel, purpose, identifier=None) -> None:
        self._log("requested", channel, purpose, identifier=identifier)

    async def record_verified(self, channel, purpose, identifier=None) -> None:
        self._log("verified", channel, purpose, identifier=identifier)

    async def record_failed(self, channel, purpose, reason, identifier=None) -> None:
        self._log("failed", channel, purpose, reason=reason, identifier=identifier)

    async def record_locked_out(self, channel, purpose, identifier=None) -> None:
        self._log("locked_out", channel, purpose, identifier=identifier)

    async def record_rate_limited(
        self, channel, purpose, reason, identifier=None
    ) -> None:
        self._log(
            "rate_limited", channel, purpose, reason=reason, identifier=identifier
        )


class CompositeOTPMetrics(OTPMetricsPort):
    """
    Forwards every event to each configured sink.

    A failing sink is logged and skipped; the remaining sinks still
    receive the event.
    """

    def __init__(self, sinks: Sequence[OTPMetricsPort]):
        self.sinks = list(sinks)

    async def _fan_out(self, method: str, *args: Any, **kwargs: Any) -> None:
        for sink in self.sinks:
            try:
                await getattr(sink, method)(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Metrics sink {type(sink).__name__}.{method} failed: {e}"
                )

    async def record_requested(self, channel, purpose, identifier=None) -> None:
        await self._fan_out("record_requested", channel, purpose, identifier=identifier)

    async def record_verified(self, channel, purpose, identifier=None) -> None:
        await self._fan_out("record_verified", channel, purpose, identifier=identifier)

    async def record_failed(self, channel, purpose, reason, identifier=None) -> None:
        await self._fan_out(
            "record_failed", channel, purpose, reason, identifier=identifier
        )

    async def record_locked_out(self, channel, purpose, identifier=None) -> None:
        await self._fan_out(
            "record_locked_out", channel, purpose, identifier=identifier
        )

    async def record_rate_limited(
        self, channel, purpose, reason, identifier=None
    ) -> None:
        await self._fan_out(
            "record_rate_limited", channel, purpose, reason, identifier=identifier
        )


# ═══════════════════════════════════════════════════════════════
# PROMETHEUS
# ═══════════════════════════════════════════════════════════════


class PrometheusOTPMetrics(OTPMetricsPort):
    """
    prometheus_client implementation of OTPMetricsPort.

    Exposes:
        otp_requested_total{channel, purpose}
        otp_verified_total{channel, purpose}
        otp_failed_total{channel, purpose, reason}

    Lockouts and refused requests are counted as failures with reason
    "locked_out" or "rate_limited". Each instance owns a private
    CollectorRegistry unless one is passed in.
    """

    CONTENT_TYPE = CONTENT_TYPE_LATEST

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        self.requested = Counter(
            name="otp_requested",
            documentation="Total number of OTP codes issued",
            labelnames=["channel", "purpose"],
            registry=self.registry,
        )
        self.verified = Counter(
            name="otp_verified",
            documentation="Total number of OTP codes verified successfully",
            labelnames=["channel", "purpose"],
            registry=self.registry,
        )
        self.failed = Counter(
            name="otp_failed",
            documentation="Total number of failed or refused OTP operations",
            labelnames=["channel", "purpose", "reason"],
            registry=self.registry,
        )

    async def record_requested(self, channel, purpose, identifier=None) -> None:
        self.requested.labels(channel=channel, purpose=purpose).inc()

    async def record_verified(self, channel, purpose, identifier=None) -> None:
        self.verified.labels(channel=channel, purpose=purpose).inc()

    async def record_failed(self, channel, purpose, reason, identifier=None) -> None:
        self.failed.labels(channel=channel, purpose=purpose, reason=reason).inc()

    async def record_locked_out(self, channel, purpose, identifier=None) -> None:
        self.failed.labels(channel=channel, purpose=purpose, reason="locked_out").inc()

    async def record_rate_limited(
        self, channel, purpose, reason, identifier=None
    ) -> None:
        self.failed.labels(channel=channel, purpose=purpose, reason=reason).inc()

    def render(self) -> bytes:
        """Render the registry in the Prometheus text exposition format."""
        return generate_latest(self.registry)


# ═══════════════════════════════════════════════════════════════
# REDIS
# ═══════════════════════════════════════════════════════════════


def _decode(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def _decode_hash(raw: Optional[Dict[Any, Any]]) -> Dict[str, int]:
    return {_decode(k): int(_decode(v)) for k, v in (raw or {}).items()}


class RedisOTPMetrics(OTPMetricsPort):
    """
    Redis implementation of OTPMetricsPort with reporting queries.

    Layout (prefix defaults to ``otp:metrics``):
        <prefix>:daily:<YYYY-MM-DD>   hash, kept for 90 days
        <prefix>:global               hash, never expires
        <prefix>:recent               list of the last 500 events (JSON)

    Hash fields are ``total:<event>``, ``channel:<c>:<event>``,
    ``purpose:<p>:<event>`` and, for daily hashes, ``hour:<h>:<event>``.

    Usage:
        import redis.asyncio as redis

        client = redis.Redis.from_url("redis://localhost:6379")
        metrics = RedisOTPMetrics(client)
    """

    DAILY_RETENTION_SECONDS = 90 * 24 * 60 * 60
    RECENT_EVENTS_LIMIT = 500

    def __init__(
        self,
        redis_client: Any,
        prefix: str = "otp:metrics",
        now: Optional[Callable[[], datetime]] = None,
    ):
        self._redis = redis_client
        self._prefix = prefix
        self._now = now or (lambda: datetime.now(timezone.utc))

    def _daily_key(self, day: str) -> str:
        return f"{self._prefix}:daily:{day}"

    @property
    def _global_key(self) -> str:
        return f"{self._prefix}:global"

    @property
    def _recent_key(self) -> str:
        return f"{self._prefix}:recent"

    async def track_event(
        self,
        event: str,
        channel: str,
        purpose: str,
        identifier: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Record one event in the daily, global and recent structures."""
        timestamp = self._now()
        daily_key = self._daily_key(timestamp.date().isoformat())

        pipe = self._redis.pipeline()

        pipe.hincrby(daily_key, f"total:{event}", 1)
        pipe.hincrby(daily_key, f"channel:{channel}:{event}", 1)
        pipe.hincrby(daily_key, f"purpose:{purpose}:{event}", 1)
        pipe.hincrby(daily_key, f"hour:{timestamp.hour}:{event}", 1)
        pipe.expire(daily_key, self.DAILY_RETENTION_SECONDS)

        pipe.hincrby(self._global_key, f"total:{event}", 1)
        pipe.hincrby(self._global_key, f"channel:{channel}:{event}", 1)
        pipe.hincrby(self._global_key, f"purpose:{purpose}:{event}", 1)

        entry = {
            "event": event,
            "identifier": mask_identifier(identifier) if identifier else None,
            "channel": channel,
            "purpose": purpose,
            "timestamp": timestamp.isoformat(),
        }
        if metadata:
            entry["metadata"] = metadata
        pipe.lpush(self._recent_key, json.dumps(entry))
        pipe.ltrim(self._recent_key, 0, self.RECENT_EVENTS_LIMIT - 1)

        await pipe.execute()
        logger.debug(f"OTP metric: {event} [{channel}/{purpose}]")

    async def record_requested(self, channel, purpose, identifier=None) -> None:
        await self.track_event("requested", channel, purpose, identifier)

    async def record_verified(self, channel, purpose, identifier=None) -> None:
        await self.track_event("verified", channel, purpose, identifier)

    async def record_failed(self, channel, purpose, reason, identifier=None) -> None:
        await self.track_event(
            "failed", channel, purpose, identifier, metadata={"reason": reason}
        )

    async def record_locked_out(self, channel, purpose, identifier=None) -> None:
        await self.track_event("locked_out", channel, purpose, identifier)

    async def record_rate_limited(
        self, channel, purpose, reason, identifier=None
    ) -> None:
        await self.track_event(
            "rate_limited", channel, purpose, identifier, metadata={"reason": reason}
        )

    # ─── Reporting ─────────────────────────────────────────────

    async def get_metrics(self) -> Dict[str, Any]:
        """Aggregate totals, rates, per-channel/purpose splits and today's hours."""
        stats = _decode_hash(await self._redis.hgetall(self._global_key))

        def total(event: str) -> int:
            return stats.get(f"total:{event}", 0)

        requested = total("requested")
        verified = total("verified")
        failed = total("failed")

        by_channel = {}
        for channel in OTPChannel:
            by_channel[channel.value] = {
                event: stats.get(f"channel:{channel.value}:{event}", 0)
                for event in ("requested", "verified", "failed")
            }

        by_purpose = {}
        for purpose in OTPPurpose:
            counts = {
                event: stats.get(f"purpose:{purpose.value}:{event}", 0)
                for event in ("requested", "verified", "failed")
            }
            if any(counts.values()):
                by_purpose[purpose.value] = counts

        today = self._now().date().isoformat()
        daily = _decode_hash(await self._redis.hgetall(self._daily_key(today)))
        hourly = [
            {"hour": h, "count": daily.get(f"hour:{h}:requested", 0)}
            for h in range(24)
        ]

        return {
            "total_requested": requested,
            "total_verified": verified,
            "total_failed": failed,
            "total_locked_out": total("locked_out"),
            "total_rate_limited": total("rate_limited"),
            "verification_rate": (verified / requested * 100) if requested else 0.0,
            "failure_rate": (failed / requested * 100) if requested else 0.0,
            "by_channel": by_channel,
            "by_purpose": by_purpose,
            "hourly_distribution": hourly,
        }

    async def get_daily_stats(self, days: int = 30) -> List[Dict[str, Any]]:
        """Per-day totals for the last ``days`` days, oldest first."""
        results = []
        today = self._now().date()
        for offset in range(days):
            day = (today - timedelta(days=offset)).isoformat()
            stats = _decode_hash(await self._redis.hgetall(self._daily_key(day)))
            results.append(
                {
                    "date": day,
                    "requested": stats.get("total:requested", 0),
                    "verified": stats.get("total:verified", 0),
                    "failed": stats.get("total:failed", 0),
                    "rate_limited": stats.get("total:rate_limited", 0),
                }
            )
        results.reverse()
        return results

    async def get_recent_events(self, limit: int = 20) -> List[Dict[str, Any]]:
        """Most recent events first, identifiers already masked."""
        raw = await self._redis.lrange(self._recent_key, 0, limit - 1)
        return [json.loads(_decode(item)) for item in raw]


__all__ = [
    "NullOTPMetrics",
    "LoggingOTPMetrics",
    "CompositeOTPMetrics",
    "PrometheusOTPMetrics",
    "RedisOTPMetrics",
]
