import logging
import uuid
from typing import List

from .base import EmailMessage, EmailSender

logger = logging.getLogger(__name__)


class LoggingEmailSender(EmailSender):
    """
    Development/test sender: records messages instead of delivering them.

    Only the recipient and subject are logged; the body holds the code.
    """

    def __init__(self):
        self.outbox: List[EmailMessage] = []

    async def send(self, message: EmailMessage) -> str:
        self.outbox.append(message)
        message_id = f"<{uuid.uuid4()}@localhost>"
        logger.info(f"Email queued for {message.to}: {message.subject}")
        return message_id
