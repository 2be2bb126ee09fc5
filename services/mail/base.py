"""
Outbound email interface.

Used by the OTP flow to deliver codes. Senders raise EmailSendError on
failure; they never log message bodies (which contain the code).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class EmailSendError(Exception):
    """Email could not be delivered."""
    pass


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    text: str
    html: Optional[str] = None


class EmailSender(ABC):

    @abstractmethod
    async def send(self, message: EmailMessage) -> str:
        """
        Deliver a message.

        Returns:
            Message id assigned by the backend.

        Raises:
            EmailSendError: delivery failed
        """
        raise NotImplementedError
