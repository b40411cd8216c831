"""
Passwordless Authentication Service.

Login and password reset built on top of the OTP service. Code requests
for unknown accounts receive the same answer as known ones, so the
endpoints cannot be used to probe which addresses are registered.
"""

import logging
from typing import Optional, Union

from otp_auth.application.otp_service import OTPService
from otp_auth.application.results import (
    AuthResult,
    OTPRequestResult,
)
from otp_auth.domain.errors import OTPDeliveryError
from otp_auth.domain.value_objects import (
    OTPChannel,
    OTPPurpose,
    mask_identifier,
    normalize_identifier,
)
from otp_auth.infrastructure.ports.tokens import TokenIssuerPort
from otp_auth.infrastructure.ports.users import UserData, UserDirectoryPort

logger = logging.getLogger("otp_auth.application.auth_service")

NEUTRAL_REQUEST_MESSAGE = (
    "If an account exists for this address, a verification code has been sent."
)


class PasswordlessAuthService:
    """
    Orchestrates OTP login and OTP-confirmed password reset.

    Usage:
        auth = PasswordlessAuthService(otp_service, users, JWTTokenIssuer(secret))
        await auth.request_login_code("jane@example.com")
        result = await auth.verify_login_code("jane@example.com", "042917")
        if result.is_success:
            return result.tokens
    """

    def __init__(
        self,
        otp_service: OTPService,
        users: UserDirectoryPort,
        tokens: TokenIssuerPort,
    ):
        self.otp = otp_service
        self.users = users
        self.tokens = tokens

    async def _find_user(
        self, identifier: str, channel: OTPChannel
    ) -> Optional[UserData]:
        normalized = normalize_identifier(identifier, channel)
        if channel == OTPChannel.EMAIL:
            user = await self.users.get_user_by_email(normalized)
        else:
            user = await self.users.get_user_by_phone(normalized)
        if user is not None and not user.enabled:
            logger.info(f"Ignoring disabled account {user.user_id}")
            return None
        return user

    async def _request(
        self, identifier: str, channel: OTPChannel, purpose: OTPPurpose
    ) -> OTPRequestResult:
        # Every outcome gets the same answer; the real one is only logged
        neutral = OTPRequestResult.sent(
            NEUTRAL_REQUEST_MESSAGE,
            expires_in_seconds=self.otp.policy.code_ttl_seconds,
        )
        masked = mask_identifier(normalize_identifier(identifier, channel))

        user = await self._find_user(identifier, channel)
        if user is None:
            logger.info(f"OTP {purpose.value} requested for unknown account {masked}")
            return neutral

        try:
            result = await self.otp.request_code(identifier, channel, purpose)
        except OTPDeliveryError as e:
            logger.error(f"OTP {purpose.value} delivery failed for {masked}: {e.message}")
            return neutral

        if not result.success:
            logger.info(
                f"OTP {purpose.value} request for {masked} rejected: "
                f"{result.reason.value if result.reason else 'unknown'}"
            )
        return neutral

    # ─── Login ─────────────────────────────────────────────────

    async def request_login_code(
        self,
        identifier: str,
        channel: Union[OTPChannel, str] = OTPChannel.EMAIL,
    ) -> OTPRequestResult:
        """Send a login code if the account exists."""
        return await self._request(
            identifier, OTPChannel.coerce(channel), OTPPurpose.LOGIN
        )

    async def verify_login_code(
        self,
        identifier: str,
        code: str,
        channel: Union[OTPChannel, str] = OTPChannel.EMAIL,
    ) -> AuthResult:
        """
        Verify a login code and issue tokens.

        A successful login also discards any login code pending on the
        account's other channel.
        """
        channel = OTPChannel.coerce(channel)
        verification = await self.otp.verify_code(
            identifier, code, channel, OTPPurpose.LOGIN
        )
        if not verification.valid:
            return AuthResult.from_verify_failure(verification)

        user = await self._find_user(identifier, channel)
        if user is None:
            return AuthResult.failed("Account not found", "USER_NOT_FOUND")

        await self._invalidate_other_channel(user, channel)

        logger.info(f"Passwordless login for user {user.user_id}")
        return AuthResult.success(
            user_id=user.user_id,
            username=user.username or user.email,
            email=user.email,
            tokens=self.tokens.issue(user),
        )

    async def _invalidate_other_channel(
        self, user: UserData, channel: OTPChannel
    ) -> None:
        if channel == OTPChannel.EMAIL and user.phone_number:
            await self.otp.invalidate(user.phone_number, OTPChannel.SMS, OTPPurpose.LOGIN)
        elif channel == OTPChannel.SMS and user.email:
            await self.otp.invalidate(user.email, OTPChannel.EMAIL, OTPPurpose.LOGIN)

    # ─── Password reset ────────────────────────────────────────

    async def request_password_reset(self, email: str) -> OTPRequestResult:
        """Send a password reset code by email if the account exists."""
        return await self._request(email, OTPChannel.EMAIL, OTPPurpose.PASSWORD_RESET)

    async def reset_password(
        self, email: str, code: str, new_password: str
    ) -> AuthResult:
        """Verify a password reset code and store the new password."""
        if not new_password:
            return AuthResult.failed("New password must not be empty", "INVALID_PASSWORD")

        verification = await self.otp.verify_code(
            email, code, OTPChannel.EMAIL, OTPPurpose.PASSWORD_RESET
        )
        if not verification.valid:
            return AuthResult.from_verify_failure(verification)

        user = await self._find_user(email, OTPChannel.EMAIL)
        if user is None:
            return AuthResult.failed("Account not found", "USER_NOT_FOUND")

        await self.users.set_password(user.user_id, new_password)
        logger.info(f"Password reset for user {user.user_id}")
        return AuthResult.success(
            user_id=user.user_id,
            username=user.username or user.email,
            email=user.email,
        )
