"""
Tests for the Bulker SMS Adapter.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from otp_auth.contrib.fastapi.sms import BulkerSMSError, BulkerSMSSender
from otp_auth.infrastructure.ports.communication import SMSMessage


def _response(text: str, status_code: int = 200):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.raise_for_status = MagicMock()
    return response


@pytest.mark.asyncio
async def test_bulker_send_success():
    sender = BulkerSMSSender(auth_key="test_key")

    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = _response("OK;12345;0.05")

        msg = SMSMessage(to="+306912345678", body="Your code", from_number="SENDER")
        await sender.send(msg)

        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        assert args[0] == "https://www.bulker.gr/api/v1/sms/send"
        data = kwargs["data"]
        assert data["auth_key"] == "test_key"
        assert data["from"] == "SENDER"
        assert data["to"] == "306912345678"
        assert data["text"] == "Your code"
        assert data["validity"] == 1


@pytest.mark.asyncio
async def test_bulker_send_error_reply():
    sender = BulkerSMSSender(auth_key="test_key", default_from_sms="ACME")

    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = _response("ERROR;101;Invalid auth key")

        with pytest.raises(BulkerSMSError, match="Bulker API returned error"):
            await sender.send(SMSMessage(to="+306912345678", body="Fail"))


@pytest.mark.asyncio
async def test_bulker_http_error():
    sender = BulkerSMSSender(auth_key="test_key", default_from_sms="ACME")
    response = _response("", status_code=500)
    response.raise_for_status.side_effect = httpx.HTTPStatusError(
        "500", request=MagicMock(), response=MagicMock()
    )

    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = response

        with pytest.raises(httpx.HTTPStatusError):
            await sender.send(SMSMessage(to="+306912345678", body="Fail"))


@pytest.mark.asyncio
async def test_bulker_requires_originator():
    sender = BulkerSMSSender(auth_key="test_key")

    with pytest.raises(ValueError, match="Sender number"):
        await sender.send(SMSMessage(to="+306912345678", body="No sender"))
