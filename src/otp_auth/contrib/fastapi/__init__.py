"""
FastAPI integration for otp-auth.

Provides OTP and passwordless-auth routers, exception handlers that map
domain errors to HTTP responses, and async delivery adapters.
"""

from .exception_handlers import register_exception_handlers
from .router import create_otp_router, create_auth_router
from .mail import AsyncSMTPEmailSender
from .sms import BulkerSMSSender

__all__ = [
    "create_otp_router",
    "create_auth_router",
    "register_exception_handlers",
    "AsyncSMTPEmailSender",
    "BulkerSMSSender",
]
