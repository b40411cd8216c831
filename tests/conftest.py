"""
Pytest configuration for py-otp-auth tests.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from otp_auth.application.otp_service import OTPService
from otp_auth.infrastructure.adapters.store import InMemoryKeyValueStore
from otp_auth.infrastructure.ports.communication import (
    OTPEmailChannelPort,
    SMSSenderPort,
)
from otp_auth.infrastructure.ports.metrics import OTPMetricsPort


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryKeyValueStore(clock=clock)


# -----------------------------------------------------------------------------
# MOCKS
# -----------------------------------------------------------------------------


@pytest.fixture
def mock_email_channel():
    mock = MagicMock(spec=OTPEmailChannelPort)
    mock.send_code = AsyncMock()
    return mock


@pytest.fixture
def mock_sms_sender():
    mock = MagicMock(spec=SMSSenderPort)
    mock.send = AsyncMock()
    return mock


@pytest.fixture
def mock_metrics():
    mock = MagicMock(spec=OTPMetricsPort)
    mock.record_requested = AsyncMock()
    mock.record_verified = AsyncMock()
    mock.record_failed = AsyncMock()
    mock.record_locked_out = AsyncMock()
    mock.record_rate_limited = AsyncMock()
    return mock


@pytest.fixture
def otp_service(store, mock_email_channel, mock_sms_sender, mock_metrics):
    return OTPService(
        store=store,
        email_channel=mock_email_channel,
        sms_sender=mock_sms_sender,
        metrics=mock_metrics,
        app_name="TestApp",
    )


@pytest.fixture
def sent_code(mock_email_channel):
    """Returns the code handed to the email channel by the last request."""

    def _last_code() -> str:
        args, _ = mock_email_channel.send_code.call_args
        return args[1]

    return _last_code
