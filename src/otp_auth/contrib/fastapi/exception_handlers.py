"""
Exception handlers for FastAPI.

Maps domain errors to HTTP responses.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from otp_auth.domain.errors import (
    AuthDomainError,
    AuthenticationError,
    OTPError,
    InvalidOTPError,
    OTPRateLimitError,
)


def _error_body(exc: AuthDomainError) -> dict:
    return {"error": exc.code, "message": exc.message, "details": exc.details}


async def authentication_error_handler(request: Request, exc: AuthenticationError):
    """Handle AuthenticationError (401)."""
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=_error_body(exc),
    )


async def invalid_otp_error_handler(request: Request, exc: InvalidOTPError):
    """Handle InvalidOTPError (400)."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(exc),
    )


async def otp_rate_limit_error_handler(request: Request, exc: OTPRateLimitError):
    """Handle OTPRateLimitError (429) with a Retry-After header when known."""
    headers = {}
    if exc.retry_after_seconds is not None:
        headers["Retry-After"] = str(exc.retry_after_seconds)
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=_error_body(exc),
        headers=headers,
    )


async def otp_error_handler(request: Request, exc: OTPError):
    """Handle remaining OTP errors: delivery failures, invalid requests (400)."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(exc),
    )


def register_exception_handlers(app):
    """
    Register uniform exception handlers for the FastAPI app.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(InvalidOTPError, invalid_otp_error_handler)
    app.add_exception_handler(OTPRateLimitError, otp_rate_limit_error_handler)
    app.add_exception_handler(OTPError, otp_error_handler)
