"""
OTP Service.

Issues, delivers and verifies one-time codes for an (identifier, purpose)
pair. All state lives in a KeyValueStorePort with native expiry; the
service itself keeps nothing between calls except references to
in-flight metrics emissions.

Policy outcomes (cooldown, rate limit, lockout, wrong or expired code)
are returned as result objects. Only malformed requests, missing
delivery configuration, delivery failures and store errors raise.
"""

import asyncio
import logging
import math
from typing import Any, Optional, Set, Tuple, Union

from otp_auth.application.results import (
    OTPFailureReason,
    OTPRequestResult,
    OTPStatusResult,
    OTPVerifyResult,
)
from otp_auth.domain.codes import codes_match, generate_code
from otp_auth.domain.errors import OTPDeliveryError, OTPError
from otp_auth.domain.keys import OTPKeys
from otp_auth.domain.value_objects import (
    OTPChannel,
    OTPPolicy,
    OTPPurpose,
    mask_identifier,
    normalize_identifier,
)
from otp_auth.infrastructure.adapters.metrics import NullOTPMetrics
from otp_auth.infrastructure.ports.communication import (
    OTPEmailChannelPort,
    SMSMessage,
    SMSSenderPort,
)
from otp_auth.infrastructure.ports.metrics import OTPMetricsPort
from otp_auth.infrastructure.ports.store import KeyValueStorePort

logger = logging.getLogger("otp_auth.application.otp_service")


def _minutes(seconds: int) -> int:
    return max(1, math.ceil(seconds / 60))


class OTPService:
    """
    One-time code issuance and verification.

    Usage:
        service = OTPService(
            store=RedisKeyValueStore(redis_client),
            email_channel=TemplatedOTPEmailChannel(AsyncSMTPEmailSender()),
            sms_sender=BulkerSMSSender(auth_key="..."),
        )
        await service.request_code("jane@example.com", "email", "login")
        result = await service.verify_code("jane@example.com", "042917", "email", "login")
    """

    def __init__(
        self,
        store: KeyValueStorePort,
        email_channel: Optional[OTPEmailChannelPort] = None,
        sms_sender: Optional[SMSSenderPort] = None,
        metrics: Optional[OTPMetricsPort] = None,
        policy: Optional[OTPPolicy] = None,
        app_name: str = "MyApp",
        sms_from: Optional[str] = None,
        key_namespace: str = "otp",
    ):
        self.store = store
        self.email_channel = email_channel
        self.sms_sender = sms_sender
        self.metrics = metrics or NullOTPMetrics()
        self.policy = policy or OTPPolicy()
        self.app_name = app_name
        self.sms_from = sms_from
        self.key_namespace = key_namespace
        self._pending_emissions: Set[asyncio.Task] = set()

    # ═══════════════════════════════════════════════════════════
    # REQUEST
    # ═══════════════════════════════════════════════════════════

    async def request_code(
        self,
        identifier: str,
        channel: Union[OTPChannel, str],
        purpose: Union[OTPPurpose, str] = OTPPurpose.LOGIN,
    ) -> OTPRequestResult:
        """
        Generate a code and deliver it over ``channel``.

        Raises:
            InvalidOTPRequestError: Unknown channel/purpose or empty identifier
            OTPError: No sender configured for the channel
            OTPDeliveryError: The channel failed; code and cooldown were removed
        """
        channel, purpose, normalized = self._resolve(identifier, channel, purpose)
        self._ensure_channel_configured(channel)
        keys = self._keys(normalized, purpose)
        masked = mask_identifier(normalized)

        if await self.store.get(keys.lockout):
            retry_after = self._remaining(
                await self.store.ttl(keys.lockout), self.policy.lockout_seconds
            )
            logger.warning(
                f"OTP request refused for {masked} [{purpose.value}]: locked out"
            )
            self._emit(
                "record_rate_limited",
                channel.value,
                purpose.value,
                OTPFailureReason.LOCKED_OUT.value,
                identifier=normalized,
            )
            return OTPRequestResult.rejected(
                OTPFailureReason.LOCKED_OUT,
                f"Too many failed attempts. Try again in {_minutes(retry_after)} minutes.",
                retry_after_seconds=retry_after,
            )

        cooldown_ttl = await self.store.ttl(keys.cooldown)
        if cooldown_ttl > 0:
            return OTPRequestResult.rejected(
                OTPFailureReason.COOLDOWN,
                f"Please wait {cooldown_ttl} seconds before requesting a new code",
                retry_after_seconds=cooldown_ttl,
            )

        request_count = await self.store.increment(keys.rate_limit)
        if request_count == 1:
            await self.store.expire(keys.rate_limit, self.policy.rate_limit_window_seconds)
        if request_count > self.policy.rate_limit_max_requests:
            window_ttl = await self.store.ttl(keys.rate_limit)
            if window_ttl < 0:
                # Counter lost its expiry; restart the window rather than block forever
                await self.store.expire(
                    keys.rate_limit, self.policy.rate_limit_window_seconds
                )
            retry_after = self._remaining(
                window_ttl, self.policy.rate_limit_window_seconds
            )
            logger.warning(
                f"OTP request refused for {masked}: rate limited "
                f"({request_count}/{self.policy.rate_limit_max_requests})"
            )
            self._emit(
                "record_rate_limited",
                channel.value,
                purpose.value,
                OTPFailureReason.RATE_LIMITED.value,
                identifier=normalized,
            )
            return OTPRequestResult.rejected(
                OTPFailureReason.RATE_LIMITED,
                f"Too many OTP requests. Try again in {_minutes(retry_after)} minutes.",
                retry_after_seconds=retry_after,
            )

        code = generate_code(self.policy.code_length)
        await self.store.set(keys.code, code, ttl_seconds=self.policy.code_ttl_seconds)
        await self.store.delete(keys.attempts)
        if self.policy.resend_cooldown_seconds:
            await self.store.set(
                keys.cooldown, "1", ttl_seconds=self.policy.resend_cooldown_seconds
            )

        try:
            await self._dispatch(channel, normalized, code)
        except Exception as e:
            await self.store.delete(keys.code)
            await self.store.delete(keys.cooldown)
            logger.error(
                f"Failed to send OTP to {masked} via {channel.value}: {e}"
            )
            raise OTPDeliveryError(
                f"Failed to send verification code via {channel.value}. Please try again.",
                details={"channel": channel.value},
            ) from e

        logger.info(
            f"OTP generated for {masked} via {channel.value} [purpose: {purpose.value}]"
        )
        self._emit(
            "record_requested", channel.value, purpose.value, identifier=normalized
        )
        return OTPRequestResult.sent(
            f"Verification code sent to {masked}",
            expires_in_seconds=self.policy.code_ttl_seconds,
        )

    async def _dispatch(self, channel: OTPChannel, to: str, code: str) -> None:
        minutes = self.policy.code_ttl_minutes
        if channel == OTPChannel.EMAIL:
            await self.email_channel.send_code(to, code, minutes)
        else:
            await self.sms_sender.send(
                SMSMessage(
                    to=to,
                    body=(
                        f"Your {self.app_name} verification code is: {code}. "
                        f"Expires in {minutes} minutes. Do not share this code."
                    ),
                    from_number=self.sms_from,
                )
            )

    # ═══════════════════════════════════════════════════════════
    # VERIFY
    # ═══════════════════════════════════════════════════════════

    async def verify_code(
        self,
        identifier: str,
        code: str,
        channel: Union[OTPChannel, str],
        purpose: Union[OTPPurpose, str] = OTPPurpose.LOGIN,
    ) -> OTPVerifyResult:
        """
        Check ``code`` against the pending code for the pair.

        A successful match consumes the code. The last allowed wrong
        attempt locks the pair out and is reported as MAX_ATTEMPTS.
        """
        channel, purpose, normalized = self._resolve(identifier, channel, purpose)
        keys = self._keys(normalized, purpose)
        masked = mask_identifier(normalized)

        if await self.store.get(keys.lockout):
            retry_after = self._remaining(
                await self.store.ttl(keys.lockout), self.policy.lockout_seconds
            )
            return OTPVerifyResult.failed(
                OTPFailureReason.LOCKED_OUT,
                f"Account temporarily locked. Try again in {_minutes(retry_after)} minutes.",
                retry_after_seconds=retry_after,
            )

        stored = await self.store.get(keys.code)
        if stored is None:
            return OTPVerifyResult.failed(
                OTPFailureReason.EXPIRED,
                "Verification code has expired or was not requested. "
                "Please request a new code.",
            )

        attempts = await self.store.increment(keys.attempts)
        if attempts == 1:
            code_ttl = await self.store.ttl(keys.code)
            await self.store.expire(
                keys.attempts,
                code_ttl if code_ttl > 0 else self.policy.code_ttl_seconds,
            )

        if attempts >= self.policy.max_attempts:
            await self.store.set(
                keys.lockout, "1", ttl_seconds=self.policy.lockout_seconds
            )
            await self.store.delete(keys.code)
            await self.store.delete(keys.attempts)
            logger.warning(
                f"Max OTP attempts exceeded for {masked} [{purpose.value}], "
                f"locked out for {self.policy.lockout_minutes} minutes"
            )
            self._emit(
                "record_locked_out", channel.value, purpose.value, identifier=normalized
            )
            return OTPVerifyResult.failed(
                OTPFailureReason.MAX_ATTEMPTS,
                f"Too many failed attempts. Account locked for "
                f"{self.policy.lockout_minutes} minutes.",
                remaining_attempts=0,
                retry_after_seconds=self.policy.lockout_seconds,
            )

        if codes_match(stored, str(code).strip()):
            await self.store.delete(keys.code)
            await self.store.delete(keys.attempts)
            logger.info(f"OTP verified for {masked} [purpose: {purpose.value}]")
            self._emit(
                "record_verified", channel.value, purpose.value, identifier=normalized
            )
            return OTPVerifyResult.verified()

        remaining = self.policy.max_attempts - attempts
        logger.warning(
            f"Invalid OTP for {masked} "
            f"[attempt {attempts}/{self.policy.max_attempts}]"
        )
        self._emit(
            "record_failed",
            channel.value,
            purpose.value,
            OTPFailureReason.INVALID_CODE.value,
            identifier=normalized,
        )
        return OTPVerifyResult.failed(
            OTPFailureReason.INVALID_CODE,
            f"Invalid verification code. {remaining} attempt(s) remaining.",
            remaining_attempts=remaining,
        )

    # ═══════════════════════════════════════════════════════════
    # STATUS / INVALIDATE
    # ═══════════════════════════════════════════════════════════

    async def get_status(
        self,
        identifier: str,
        channel: Union[OTPChannel, str],
        purpose: Union[OTPPurpose, str] = OTPPurpose.LOGIN,
    ) -> OTPStatusResult:
        """Read-only view of the pending code and resend cooldown."""
        _, purpose, normalized = self._resolve(identifier, channel, purpose)
        keys = self._keys(normalized, purpose)

        code_ttl = await self.store.ttl(keys.code)
        cooldown_ttl = await self.store.ttl(keys.cooldown)

        return OTPStatusResult(
            has_active_otp=code_ttl > 0,
            expires_in_seconds=max(0, code_ttl),
            can_resend=cooldown_ttl <= 0,
            resend_after_seconds=max(0, cooldown_ttl),
        )

    async def invalidate(
        self,
        identifier: str,
        channel: Union[OTPChannel, str],
        purpose: Union[OTPPurpose, str] = OTPPurpose.LOGIN,
    ) -> None:
        """Discard the pending code. Lockout and rate limit are kept."""
        _, purpose, normalized = self._resolve(identifier, channel, purpose)
        await self.store.delete(self._keys(normalized, purpose).code)
        logger.debug(
            f"OTP invalidated for {mask_identifier(normalized)} [{purpose.value}]"
        )

    # ═══════════════════════════════════════════════════════════
    # METRICS
    # ═══════════════════════════════════════════════════════════

    def _emit(self, method: str, *args: Any, **kwargs: Any) -> None:
        """Schedule a metrics call without waiting for it."""
        task = asyncio.create_task(self._safe_emit(method, *args, **kwargs))
        self._pending_emissions.add(task)
        task.add_done_callback(self._pending_emissions.discard)

    async def _safe_emit(self, method: str, *args: Any, **kwargs: Any) -> None:
        try:
            await getattr(self.metrics, method)(*args, **kwargs)
        except Exception as e:
            logger.error(f"OTP metrics {method} failed: {e}")

    async def flush_metrics(self) -> None:
        """Wait for scheduled metrics emissions to finish."""
        while self._pending_emissions:
            await asyncio.gather(*list(self._pending_emissions))

    # ═══════════════════════════════════════════════════════════
    # HELPERS
    # ═══════════════════════════════════════════════════════════

    def _resolve(
        self,
        identifier: str,
        channel: Union[OTPChannel, str],
        purpose: Union[OTPPurpose, str],
    ) -> Tuple[OTPChannel, OTPPurpose, str]:
        channel = OTPChannel.coerce(channel)
        purpose = OTPPurpose.coerce(purpose)
        return channel, purpose, normalize_identifier(identifier, channel)

    def _keys(self, identifier: str, purpose: OTPPurpose) -> OTPKeys:
        return OTPKeys(identifier, purpose, namespace=self.key_namespace)

    def _ensure_channel_configured(self, channel: OTPChannel) -> None:
        if channel == OTPChannel.EMAIL and self.email_channel is None:
            raise OTPError("Email OTP not configured", "OTP_CHANNEL_NOT_CONFIGURED")
        if channel == OTPChannel.SMS and self.sms_sender is None:
            raise OTPError("SMS OTP not configured", "OTP_CHANNEL_NOT_CONFIGURED")

    @staticmethod
    def _remaining(ttl: int, fallback: int) -> int:
        return ttl if ttl > 0 else fallback
