"""
OTP issue/verify flow.

issue():  generate a 6-digit code → store with expiry → email it
verify(): look up → expired? delete → compare (constant time) → delete on match

A code verifies at most once. A wrong guess is counted against the record;
after max_attempts wrong guesses the code is withdrawn and a new one must
be issued.
"""

import hmac
import logging
import secrets
import time
from dataclasses import replace
from enum import Enum
from typing import Callable, Optional

from services.mail import EmailMessage, EmailSender

from .base import OTPRecord, OTPStore

logger = logging.getLogger(__name__)

DEFAULT_TTL_S = 10 * 60
CODE_DIGITS = 6
MAX_FAILED_ATTEMPTS = 5


class VerifyOutcome(str, Enum):
    VERIFIED = "verified"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    INVALID = "invalid"


def generate_code(digits: int = CODE_DIGITS) -> str:
    """Uniform numeric code without a leading zero (100000-999999 for 6 digits)."""
    low = 10 ** (digits - 1)
    return str(low + secrets.randbelow(9 * low))


class OTPService:

    def __init__(
        self,
        store: OTPStore,
        sender: EmailSender,
        ttl_s: float = DEFAULT_TTL_S,
        clock: Optional[Callable[[], float]] = None,
        code_factory: Callable[[], str] = generate_code,
        max_attempts: int = MAX_FAILED_ATTEMPTS,
    ):
        self.store = store
        self.sender = sender
        self.ttl_s = ttl_s
        self._clock = clock or time.time
        self._code_factory = code_factory
        self.max_attempts = max_attempts

    async def issue(self, user_id: str, email: str) -> str:
        """
        Issue and email a fresh code for user_id.

        Returns:
            Message id from the email backend.

        Raises:
            EmailSendError: delivery failed (the stored code is withdrawn)
        """
        code = self._code_factory()
        self.store.put(user_id, OTPRecord(code=code, expires_at=self._clock() + self.ttl_s))

        minutes = int(self.ttl_s // 60)
        message = EmailMessage(
            to=email,
            subject="Your verification code",
            text=f"Your OTP is {code}",
            html=f"<p>Your OTP is <b>{code}</b>. It expires in {minutes} minutes.</p>",
        )
        try:
            message_id = await self.sender.send(message)
        except Exception:
            self.store.delete(user_id)
            raise

        logger.info(f"OTP issued for user {user_id}", extra={"message_id": message_id})
        return message_id

    def verify(self, user_id: str, code: str) -> VerifyOutcome:
        record = self.store.get(user_id)
        if record is None:
            return VerifyOutcome.NOT_FOUND

        if record.is_expired(self._clock()):
            self.store.delete(user_id)
            logger.info(f"OTP for user {user_id} expired")
            return VerifyOutcome.EXPIRED

        if not hmac.compare_digest(record.code.encode(), str(code).strip().encode()):
            failed = record.failed_attempts + 1
            if failed >= self.max_attempts:
                self.store.delete(user_id)
                logger.warning(f"OTP for user {user_id} withdrawn after {failed} failed attempts")
            else:
                self.store.put(user_id, replace(record, failed_attempts=failed))
                logger.info(f"OTP mismatch for user {user_id}")
            return VerifyOutcome.INVALID

        self.store.delete(user_id)
        logger.info(f"OTP verified for user {user_id}")
        return VerifyOutcome.VERIFIED
