"""
SMTP email sender.

smtplib is blocking, so each send runs in the default executor to keep the
event loop free.
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage as MIMEMessage
from email.utils import make_msgid
from typing import Optional

from .base import EmailMessage, EmailSendError, EmailSender

logger = logging.getLogger(__name__)


class SMTPEmailSender(EmailSender):

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        from_email: Optional[str] = None,
        use_tls: bool = True,
        timeout_s: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email or username or ""
        self.use_tls = use_tls
        self.timeout_s = timeout_s

    def _build(self, message: EmailMessage) -> MIMEMessage:
        mime = MIMEMessage()
        mime["From"] = self.from_email
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime["Message-ID"] = make_msgid()
        mime.set_content(message.text)
        if message.html:
            mime.add_alternative(message.html, subtype="html")
        return mime

    def _send_blocking(self, mime: MIMEMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout_s) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username and self.password:
                smtp.login(self.username, self.password)
            smtp.send_message(mime)

    async def send(self, message: EmailMessage) -> str:
        if not self.host:
            raise EmailSendError("SMTP_HOST not configured")

        mime = self._build(message)
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._send_blocking, mime)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP send to {message.to} failed: {type(e).__name__}")
            raise EmailSendError(f"SMTP send failed: {type(e).__name__}") from e

        logger.info(f"Email sent to {message.to}", extra={"message_id": mime["Message-ID"]})
        return mime["Message-ID"]
