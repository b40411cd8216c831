# ruff: noqa: F401
"""
Contrib modules for framework and library integrations.

Available integrations (installed conditionally based on dependencies):
- dependency_injector: OTPContainer for DI
- fastapi: Routers, exception handlers and async delivery adapters
"""

__all__ = []

# Dependency Injector integration
try:
    from otp_auth.contrib.dependency_injector import OTPContainer

    HAS_DEPENDENCY_INJECTOR = True
    __all__.append("OTPContainer")
except ImportError:
    HAS_DEPENDENCY_INJECTOR = False
    OTPContainer = None

# FastAPI integration
try:
    import fastapi
    from otp_auth.contrib.fastapi import (
        create_otp_router,
        create_auth_router,
        register_exception_handlers,
    )

    HAS_FASTAPI = True
    __all__.extend(
        [
            "create_otp_router",
            "create_auth_router",
            "register_exception_handlers",
        ]
    )
except ImportError:
    HAS_FASTAPI = False
