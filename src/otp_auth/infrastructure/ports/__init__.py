"""Port interfaces (Protocols) for infrastructure adapters."""

from otp_auth.infrastructure.ports.store import KeyValueStorePort
from otp_auth.infrastructure.ports.communication import (
    EmailSenderPort,
    SMSSenderPort,
    OTPEmailChannelPort,
    EmailMessage,
    EmailAttachment,
    SMSMessage,
)
from otp_auth.infrastructure.ports.metrics import OTPMetricsPort
from otp_auth.infrastructure.ports.users import UserDirectoryPort, UserData
from otp_auth.infrastructure.ports.tokens import TokenIssuerPort

__all__ = [
    # Store
    "KeyValueStorePort",
    # Communication
    "EmailSenderPort",
    "SMSSenderPort",
    "OTPEmailChannelPort",
    "EmailMessage",
    "EmailAttachment",
    "SMSMessage",
    # Metrics
    "OTPMetricsPort",
    # Users & tokens
    "UserDirectoryPort",
    "UserData",
    "TokenIssuerPort",
]
