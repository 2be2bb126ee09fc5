"""
SQLite-backed OTP store.

Same interface as InMemoryOTPStore, but survives restarts and is shared
by every worker pointed at the same file.

Design:
- One table: otp_codes
- Columns: user_id (primary key), code, expires_at, failed_attempts, created_at
- put() upserts, so a newly issued code replaces the previous one
"""

import logging
import sqlite3
from typing import Optional

from .base import OTPRecord, OTPStore

logger = logging.getLogger(__name__)


class SQLiteOTPStore(OTPStore):

    def __init__(self, db_path: Optional[str] = None):
        """
        Args:
            db_path: Path to SQLite database file.
                    If None, uses ':memory:' with one shared connection.
        """
        self.db_path = db_path or ":memory:"
        # ':memory:' databases vanish with their connection, so keep one open
        self._shared_conn = (
            sqlite3.connect(self.db_path, check_same_thread=False)
            if self.db_path == ":memory:"
            else None
        )
        self._initialize_db()

    def _connect(self) -> sqlite3.Connection:
        return self._shared_conn or sqlite3.connect(self.db_path)

    def _close(self, conn: sqlite3.Connection) -> None:
        if conn is not self._shared_conn:
            conn.close()

    def _initialize_db(self) -> None:
        conn = self._connect()
        try:
            cursor = conn.cursor()
            if self.db_path != ":memory:":
                cursor.execute("PRAGMA journal_mode=WAL")

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS otp_codes (
                    user_id TEXT PRIMARY KEY,
                    code TEXT NOT NULL,
                    expires_at REAL NOT NULL,
                    failed_attempts INTEGER NOT NULL DEFAULT 0,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.commit()
            logger.debug(f"SQLite OTP store initialized: {self.db_path}")
        finally:
            self._close(conn)

    def put(self, user_id: str, record: OTPRecord) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT INTO otp_codes (user_id, code, expires_at, failed_attempts)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    code = excluded.code,
                    expires_at = excluded.expires_at,
                    failed_attempts = excluded.failed_attempts,
                    created_at = CURRENT_TIMESTAMP
                """,
                (user_id, record.code, record.expires_at, record.failed_attempts),
            )
            conn.commit()
        finally:
            self._close(conn)

    def get(self, user_id: str) -> Optional[OTPRecord]:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT code, expires_at, failed_attempts FROM otp_codes WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        finally:
            self._close(conn)

        if row is None:
            return None
        return OTPRecord(code=row[0], expires_at=float(row[1]), failed_attempts=int(row[2]))

    def delete(self, user_id: str) -> None:
        conn = self._connect()
        try:
            conn.execute("DELETE FROM otp_codes WHERE user_id = ?", (user_id,))
            conn.commit()
        finally:
            self._close(conn)
