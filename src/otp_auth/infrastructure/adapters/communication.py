"""
Communication Adapters.

Concrete implementations of communication ports, plus the email
channel that turns a raw code into a branded message.
"""

import html
import logging
from typing import Optional

from otp_auth.infrastructure.ports.communication import (
    EmailSenderPort,
    SMSSenderPort,
    OTPEmailChannelPort,
    EmailMessage,
    SMSMessage,
)

logger = logging.getLogger("otp_auth.infrastructure.adapters.communication")


# ═══════════════════════════════════════════════════════════════
# CONSOLE EMAIL SENDER (Dev/Test)
# ═══════════════════════════════════════════════════════════════


class ConsoleEmailSender(EmailSenderPort):
    """
    Console implementation of EmailSenderPort.

    Prints emails to stdout/logger, which makes codes visible during
    local development.
    """

    def __init__(self, output_to_stdout: bool = True):
        self.output_to_stdout = output_to_stdout

    async def send(self, message: EmailMessage) -> None:
        output = [
            "--------------------------------------------------",
            "EMAIL SENT (Console)",
            f"To: {', '.join(message.to)}",
            f"Subject: {message.subject}",
            f"From: {message.from_email or '(default)'}",
        ]
        if message.cc:
            output.append(f"CC: {', '.join(message.cc)}")

        output.append("Body:")
        output.append(message.body_text)
        if message.body_html:
            output.append("Body (HTML available)")
        output.append("--------------------------------------------------")

        full_output = "\n".join(output)
        logger.info(full_output)

        if self.output_to_stdout:
            print(full_output)


# ═══════════════════════════════════════════════════════════════
# CONSOLE SMS SENDER (Dev/Test)
# ═══════════════════════════════════════════════════════════════


class ConsoleSMSSender(SMSSenderPort):
    """Console implementation of SMSSenderPort."""

    def __init__(self, output_to_stdout: bool = True):
        self.output_to_stdout = output_to_stdout

    async def send(self, message: SMSMessage) -> None:
        full_output = "\n".join(
            [
                "--------------------------------------------------",
                "SMS SENT (Console)",
                f"To: {message.to}",
                f"From: {message.from_number or '(default)'}",
                "Body:",
                message.body,
                "--------------------------------------------------",
            ]
        )
        logger.info(full_output)

        if self.output_to_stdout:
            print(full_output)


# ═══════════════════════════════════════════════════════════════
# OTP EMAIL CHANNEL
# ═══════════════════════════════════════════════════════════════


class TemplatedOTPEmailChannel(OTPEmailChannelPort):
    """
    OTPEmailChannelPort that renders a plain-text and HTML message and
    hands it to any EmailSenderPort (SMTP, console, ...).

    Usage:
        channel = TemplatedOTPEmailChannel(
            AsyncSMTPEmailSender(host="smtp.example.com"), app_name="Acme"
        )
        await channel.send_code("jane@example.com", "042917", 5)
    """

    def __init__(
        self,
        email_sender: EmailSenderPort,
        app_name: str = "MyApp",
        from_email: Optional[str] = None,
    ):
        self.email_sender = email_sender
        self.app_name = app_name
        self.from_email = from_email

    def render(self, code: str, expires_in_minutes: int) -> EmailMessage:
        """Build the message for a code without a recipient."""
        text = (
            f"Your {self.app_name} verification code is: {code}\n\n"
            f"This code expires in {expires_in_minutes} minutes.\n"
            "If you did not request this code, you can ignore this email. "
            "Do not share this code with anyone."
        )
        app = html.escape(self.app_name)
        body_html = (
            f"<p>Your {app} verification code is:</p>"
            f'<p style="font-size:24px;font-weight:bold;letter-spacing:4px">{code}</p>'
            f"<p>This code expires in {expires_in_minutes} minutes.</p>"
            "<p>If you did not request this code, you can ignore this email. "
            "Do not share this code with anyone.</p>"
        )
        return EmailMessage(
            to=[],
            subject=f"{self.app_name} - Your Verification Code",
            body_text=text,
            body_html=body_html,
            from_email=self.from_email,
        )

    async def send_code(self, to: str, code: str, expires_in_minutes: int) -> None:
        message = self.render(code, expires_in_minutes)
        message.to = [to]
        await self.email_sender.send(message)


__all__ = [
    "ConsoleEmailSender",
    "ConsoleSMSSender",
    "TemplatedOTPEmailChannel",
]
