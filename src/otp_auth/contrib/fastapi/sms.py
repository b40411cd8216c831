"""
Bulker.gr SMS Adapter for FastAPI.

Uses httpx for asynchronous communication with the Bulker.gr API.
"""

import logging
import time
from typing import Optional

import httpx

from otp_auth.domain.value_objects import mask_identifier
from otp_auth.infrastructure.ports.communication import (
    SMSSenderPort,
    SMSMessage,
)

logger = logging.getLogger("otp_auth.contrib.fastapi.sms")


class BulkerSMSError(Exception):
    """Raised when Bulker.gr rejects a message."""

    def __init__(self, response_text: str):
        super().__init__(f"Bulker API returned error: {response_text}")
        self.response_text = response_text


class BulkerSMSSender(SMSSenderPort):
    """
    Async implementation of SMSSenderPort using Bulker.gr.

    Bulker answers ``OK;<msg_id>;<charge>`` on success and
    ``ERROR;<code>;<description>`` otherwise, both with HTTP 200.
    """

    def __init__(
        self,
        auth_key: str,
        sms_url: str = "https://www.bulker.gr/api/v1/sms/send",
        default_from_sms: Optional[str] = None,
        validity: int = 1,
        timeout: float = 10.0,
    ):
        self.auth_key = auth_key
        self.sms_url = sms_url
        self.default_from_sms = default_from_sms
        self.validity = validity
        self.timeout = timeout

    def build_payload(self, message: SMSMessage) -> dict:
        originator = message.from_number or self.default_from_sms
        if not originator:
            raise ValueError("Sender number (from_number) is required.")
        return {
            "auth_key": self.auth_key,
            "id": time.time_ns() // 1_000_000,
            "from": originator,
            # Bulker expects recipient numbers without leading '+'
            "to": message.to.lstrip("+"),
            "text": message.body,
            "validity": self.validity,
        }

    async def send(self, message: SMSMessage) -> None:
        """Send an SMS via Bulker.gr."""
        data = self.build_payload(message)
        masked_to = mask_identifier(message.to)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.sms_url, data=data)
                response.raise_for_status()

            ack = response.text.split(";", 1)[0]
            if ack != "OK":
                raise BulkerSMSError(response.text)
            logger.info(f"SMS sent to {masked_to}")

        except Exception as e:
            logger.error(f"Failed to send SMS to {masked_to}: {e}")
            raise
