"""
OTP service exports.
"""

from .base import OTPRecord, OTPStore
from .memory import InMemoryOTPStore
from .sqlite import SQLiteOTPStore
from .service import OTPService, VerifyOutcome, generate_code

__all__ = [
    "OTPRecord",
    "OTPStore",
    "InMemoryOTPStore",
    "SQLiteOTPStore",
    "OTPService",
    "VerifyOutcome",
    "generate_code",
]
