"""
One-time passcode store interface.

Role: user id → {code, expires_at, failed_attempts}. Nothing else.

Rules:
- One live record per user; put() replaces any previous code
- The store never checks expiry or compares codes (OTPService does)
- Backends are swappable without touching request handlers
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class OTPRecord:
    code: str
    expires_at: float  # epoch seconds
    failed_attempts: int = 0

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


class OTPStore(ABC):
    """
    Abstract OTP boundary.
    Handlers must depend ONLY on this interface (via OTPService).
    """

    @abstractmethod
    def put(self, user_id: str, record: OTPRecord) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, user_id: str) -> Optional[OTPRecord]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, user_id: str) -> None:
        raise NotImplementedError
