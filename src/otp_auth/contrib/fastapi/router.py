from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from dependency_injector.wiring import inject, Provide

from otp_auth.contrib.dependency_injector import OTPContainer
from otp_auth.application.auth_service import PasswordlessAuthService
from otp_auth.application.otp_service import OTPService
from otp_auth.application.results import (
    AuthResult,
    OTPFailureReason,
    OTPRequestResult,
    OTPVerifyResult,
)
from otp_auth.domain.errors import OTPRateLimitError
from otp_auth.domain.value_objects import OTPChannel, OTPPurpose


class OTPRequestBody(BaseModel):
    identifier: str = Field(min_length=1)
    channel: OTPChannel = OTPChannel.EMAIL
    purpose: OTPPurpose = OTPPurpose.LOGIN


class OTPVerifyBody(OTPRequestBody):
    code: str = Field(min_length=1, max_length=12)


class EmailOTPRequestBody(BaseModel):
    email: str = Field(min_length=1)
    purpose: OTPPurpose = OTPPurpose.LOGIN


class EmailOTPVerifyBody(EmailOTPRequestBody):
    code: str = Field(min_length=1, max_length=12)


class SMSOTPRequestBody(BaseModel):
    phone: str = Field(min_length=1)
    purpose: OTPPurpose = OTPPurpose.LOGIN


class SMSOTPVerifyBody(SMSOTPRequestBody):
    code: str = Field(min_length=1, max_length=12)


class LoginCodeRequestBody(BaseModel):
    identifier: str = Field(min_length=1)
    channel: OTPChannel = OTPChannel.EMAIL


class LoginCodeVerifyBody(LoginCodeRequestBody):
    code: str = Field(min_length=1, max_length=12)


class PasswordResetRequestBody(BaseModel):
    email: str = Field(min_length=1)


class PasswordResetConfirmBody(BaseModel):
    email: str = Field(min_length=1)
    code: str = Field(min_length=1, max_length=12)
    new_password: str = Field(min_length=1)


# -----------------------------------------------------------------------------
# Result to HTTP mapping
# -----------------------------------------------------------------------------


def _raise_throttled(
    message: str, reason: Optional[OTPFailureReason], retry_after: Optional[int]
) -> None:
    raise OTPRateLimitError(
        message,
        details={
            "reason": reason.value if reason else None,
            "retry_after_seconds": retry_after,
        },
    )


def _request_response(result: OTPRequestResult):
    # Cooldown stays a 200 so clients can render the countdown
    if result.is_throttled:
        _raise_throttled(result.message, result.reason, result.retry_after_seconds)
    return result


def _verify_response(result: OTPVerifyResult):
    if result.reason == OTPFailureReason.LOCKED_OUT:
        _raise_throttled(result.message, result.reason, result.retry_after_seconds)
    if not result.valid:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=jsonable_encoder(result),
        )
    return result


def _auth_response(result: AuthResult, failure_status: int):
    if result.is_success:
        return result
    if result.error_code == OTPFailureReason.LOCKED_OUT.value.upper():
        _raise_throttled(
            result.error_message,
            OTPFailureReason.LOCKED_OUT,
            result.retry_after_seconds,
        )
    return JSONResponse(status_code=failure_status, content=jsonable_encoder(result))


# -----------------------------------------------------------------------------
# Module-level handlers (required for dependency-injector wiring)
# -----------------------------------------------------------------------------


@inject
async def request_otp(
    data: OTPRequestBody,
    otp: OTPService = Depends(Provide[OTPContainer.otp_service]),
):
    result = await otp.request_code(data.identifier, data.channel, data.purpose)
    return _request_response(result)


@inject
async def verify_otp(
    data: OTPVerifyBody,
    otp: OTPService = Depends(Provide[OTPContainer.otp_service]),
):
    result = await otp.verify_code(
        data.identifier, data.code, data.channel, data.purpose
    )
    return _verify_response(result)


@inject
async def request_email_otp(
    data: EmailOTPRequestBody,
    otp: OTPService = Depends(Provide[OTPContainer.otp_service]),
):
    result = await otp.request_code(data.email, OTPChannel.EMAIL, data.purpose)
    return _request_response(result)


@inject
async def verify_email_otp(
    data: EmailOTPVerifyBody,
    otp: OTPService = Depends(Provide[OTPContainer.otp_service]),
):
    result = await otp.verify_code(data.email, data.code, OTPChannel.EMAIL, data.purpose)
    return _verify_response(result)


@inject
async def request_sms_otp(
    data: SMSOTPRequestBody,
    otp: OTPService = Depends(Provide[OTPContainer.otp_service]),
):
    result = await otp.request_code(data.phone, OTPChannel.SMS, data.purpose)
    return _request_response(result)


@inject
async def verify_sms_otp(
    data: SMSOTPVerifyBody,
    otp: OTPService = Depends(Provide[OTPContainer.otp_service]),
):
    result = await otp.verify_code(data.phone, data.code, OTPChannel.SMS, data.purpose)
    return _verify_response(result)


@inject
async def otp_status(
    identifier: str,
    channel: OTPChannel = OTPChannel.EMAIL,
    purpose: OTPPurpose = OTPPurpose.LOGIN,
    otp: OTPService = Depends(Provide[OTPContainer.otp_service]),
):
    return await otp.get_status(identifier, channel, purpose)


@inject
async def request_login_code(
    data: LoginCodeRequestBody,
    auth: PasswordlessAuthService = Depends(Provide[OTPContainer.auth_service]),
):
    result = await auth.request_login_code(data.identifier, data.channel)
    return _request_response(result)


@inject
async def verify_login_code(
    data: LoginCodeVerifyBody,
    auth: PasswordlessAuthService = Depends(Provide[OTPContainer.auth_service]),
):
    result = await auth.verify_login_code(data.identifier, data.code, data.channel)
    return _auth_response(result, status.HTTP_401_UNAUTHORIZED)


@inject
async def request_password_reset(
    data: PasswordResetRequestBody,
    auth: PasswordlessAuthService = Depends(Provide[OTPContainer.auth_service]),
):
    result = await auth.request_password_reset(data.email)
    return _request_response(result)


@inject
async def confirm_password_reset(
    data: PasswordResetConfirmBody,
    auth: PasswordlessAuthService = Depends(Provide[OTPContainer.auth_service]),
):
    result = await auth.reset_password(data.email, data.code, data.new_password)
    return _auth_response(result, status.HTTP_400_BAD_REQUEST)


# -----------------------------------------------------------------------------
# Router Factories
# -----------------------------------------------------------------------------


def create_otp_router(prefix: str = "/otp") -> APIRouter:
    """
    Factory to create a FastAPI router with generic OTP endpoints.

    Request-time lockout and rate limiting answer 429, a resend cooldown
    answers 200 with ``success: false``, a failed verification answers
    400 with the result body.
    """
    router = APIRouter(prefix=prefix, tags=["otp"])

    router.add_api_route("/request", request_otp, methods=["POST"])
    router.add_api_route("/verify", verify_otp, methods=["POST"])
    router.add_api_route("/email/request", request_email_otp, methods=["POST"])
    router.add_api_route("/email/verify", verify_email_otp, methods=["POST"])
    router.add_api_route("/sms/request", request_sms_otp, methods=["POST"])
    router.add_api_route("/sms/verify", verify_sms_otp, methods=["POST"])
    router.add_api_route("/status", otp_status, methods=["GET"])

    return router


def create_auth_router(prefix: str = "/auth") -> APIRouter:
    """
    Factory to create a FastAPI router with passwordless auth endpoints.
    """
    router = APIRouter(prefix=prefix, tags=["auth"])

    router.add_api_route("/otp/request", request_login_code, methods=["POST"])
    router.add_api_route("/otp/verify", verify_login_code, methods=["POST"])
    router.add_api_route(
        "/password-reset/request", request_password_reset, methods=["POST"]
    )
    router.add_api_route(
        "/password-reset/confirm", confirm_password_reset, methods=["POST"]
    )

    return router
