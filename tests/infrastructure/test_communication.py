"""
Tests for Communication Adapters.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from otp_auth.infrastructure.adapters.communication import (
    ConsoleEmailSender,
    ConsoleSMSSender,
    TemplatedOTPEmailChannel,
)
from otp_auth.infrastructure.ports.communication import EmailMessage, SMSMessage


@pytest.mark.asyncio
async def test_email_console_send():
    sender = ConsoleEmailSender(output_to_stdout=True)

    msg = EmailMessage(
        to=["user@example.com"],
        subject="Test",
        body_text="Hello",
        body_html="<b>Hello</b>",
        cc=["cc@example.com"],
    )

    with patch("builtins.print") as mock_print:
        await sender.send(msg)
        args = mock_print.call_args[0][0]
        assert "EMAIL SENT" in args
        assert "To: user@example.com" in args
        assert "CC: cc@example.com" in args
        assert "Body (HTML available)" in args


@pytest.mark.asyncio
async def test_sms_console_send_without_stdout():
    sender = ConsoleSMSSender(output_to_stdout=False)

    with patch("builtins.print") as mock_print:
        await sender.send(SMSMessage(to="+306912345678", body="Code 123456"))
        mock_print.assert_not_called()


@pytest.mark.asyncio
async def test_sms_console_send():
    sender = ConsoleSMSSender()

    with patch("builtins.print") as mock_print:
        await sender.send(SMSMessage(to="+306912345678", body="Code 123456"))
        args = mock_print.call_args[0][0]
        assert "SMS SENT" in args
        assert "From: (default)" in args
        assert "Code 123456" in args


@pytest.mark.asyncio
async def test_templated_channel_renders_code():
    email_sender = MagicMock()
    email_sender.send = AsyncMock()
    channel = TemplatedOTPEmailChannel(
        email_sender, app_name="Acme & Co", from_email="no-reply@acme.test"
    )

    await channel.send_code("jane@example.com", "042917", 5)

    message = email_sender.send.call_args[0][0]
    assert message.to == ["jane@example.com"]
    assert message.subject == "Acme & Co - Your Verification Code"
    assert message.from_email == "no-reply@acme.test"
    assert "042917" in message.body_text
    assert "expires in 5 minutes" in message.body_text
    assert "042917" in message.body_html
    assert "Acme &amp; Co" in message.body_html


@pytest.mark.asyncio
async def test_templated_channel_propagates_sender_errors():
    email_sender = MagicMock()
    email_sender.send = AsyncMock(side_effect=ConnectionError("smtp down"))
    channel = TemplatedOTPEmailChannel(email_sender)

    with pytest.raises(ConnectionError):
        await channel.send_code("jane@example.com", "042917", 5)
