from typing import Dict, Optional

from .base import OTPRecord, OTPStore


class InMemoryOTPStore(OTPStore):
    """
    Dict-backed OTP store for tests and single-process development.

    Lost on restart; not shared between workers.
    """

    def __init__(self):
        self.records: Dict[str, OTPRecord] = {}

    def put(self, user_id: str, record: OTPRecord) -> None:
        self.records[user_id] = record

    def get(self, user_id: str) -> Optional[OTPRecord]:
        return self.records.get(user_id)

    def delete(self, user_id: str) -> None:
        self.records.pop(user_id, None)
