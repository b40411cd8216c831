"""
Async SMTP Email Adapter for FastAPI.

Pair it with TemplatedOTPEmailChannel to deliver codes:

    channel = TemplatedOTPEmailChannel(
        AsyncSMTPEmailSender(host="smtp.example.com", port=587, use_starttls=True),
        app_name="Acme",
    )
"""

import logging
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List, Optional

try:
    import aiosmtplib
except ImportError:
    aiosmtplib = None  # type: ignore

from otp_auth.domain.value_objects import mask_identifier
from otp_auth.infrastructure.ports.communication import (
    EmailSenderPort,
    EmailMessage,
)

logger = logging.getLogger("otp_auth.contrib.fastapi.mail")


class AsyncSMTPEmailSender(EmailSenderPort):
    """
    SMTP implementation of EmailSenderPort using aiosmtplib.

    ``use_ssl`` connects with implicit TLS (usually port 465);
    ``use_starttls`` upgrades a plain connection (usually port 587).
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 1025,
        user: Optional[str] = None,
        password: Optional[str] = None,
        use_ssl: bool = False,
        use_starttls: bool = False,
        timeout: int = 10,
        default_from: Optional[str] = None,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_ssl = use_ssl
        self.use_starttls = use_starttls
        self.timeout = timeout
        self.default_from = default_from

        if aiosmtplib is None:
            logger.warning(
                "aiosmtplib is not installed. AsyncSMTPEmailSender will not work. "
                "Install it with: pip install aiosmtplib"
            )

    def build_mime(self, message: EmailMessage) -> MIMEMultipart:
        """Convert an EmailMessage into a multipart MIME message."""
        mime_msg = MIMEMultipart("alternative")
        mime_msg["Subject"] = message.subject
        mime_msg["From"] = (
            message.from_email or self.default_from or f"noreply@{self.host}"
        )
        mime_msg["To"] = ", ".join(message.to)
        if message.cc:
            mime_msg["Cc"] = ", ".join(message.cc)
        if message.reply_to:
            mime_msg["Reply-To"] = message.reply_to

        mime_msg.attach(MIMEText(message.body_text, "plain"))
        if message.body_html:
            mime_msg.attach(MIMEText(message.body_html, "html"))

        for attachment in message.attachments:
            part = MIMEBase(*attachment.mimetype.split("/", 1))
            part.set_payload(attachment.content)
            encoders.encode_base64(part)
            part.add_header(
                "Content-Disposition",
                f"attachment; filename={attachment.filename}",
            )
            mime_msg.attach(part)

        return mime_msg

    @staticmethod
    def recipients(message: EmailMessage) -> List[str]:
        return message.to + message.cc + message.bcc

    async def send(self, message: EmailMessage) -> None:
        """Send an email using aiosmtplib."""
        if aiosmtplib is None:
            raise ImportError(
                "aiosmtplib is required for AsyncSMTPEmailSender. "
                "Install it with: pip install aiosmtplib"
            )

        mime_msg = self.build_mime(message)
        masked_to = ", ".join(mask_identifier(addr) for addr in message.to)

        try:
            smtp = aiosmtplib.SMTP(
                hostname=self.host,
                port=self.port,
                use_tls=self.use_ssl,
                timeout=self.timeout,
            )
            async with smtp:
                if self.use_starttls and not self.use_ssl:
                    await smtp.starttls()
                if self.user and self.password:
                    await smtp.login(self.user, self.password)
                await smtp.send_message(mime_msg, recipients=self.recipients(message))

            logger.info(f"Email sent to {masked_to}")

        except Exception as e:
            logger.error(f"Failed to send email to {masked_to}: {e}")
            raise
