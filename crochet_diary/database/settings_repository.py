"""Settings repository — whole-blob reads and writes by key."""

from __future__ import annotations

from crochet_diary.database.db_manager import DatabaseManager


class SettingsRepository:
    """Key/value access to the ``app_settings`` table.

    Every write replaces the full value for its key inside one committed
    transaction; readers never see a partially written blob.
    """

    def __init__(self, db: DatabaseManager):
        self._db = db

    def get_value(self, key: str, default: bytes = b"") -> bytes:
        """Get a stored blob, or ``default`` when the key is absent."""
        conn = self._db.connect()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return default
        value = row[0]
        # Rows written as TEXT come back as str
        if isinstance(value, str):
            return value.encode("utf-8")
        return bytes(value)

    def set_value(self, key: str, value: bytes) -> None:
        """Set a blob (upsert)."""
        conn = self._db.connect()
        with conn:
            conn.execute(
                "INSERT OR REPLACE INTO app_settings (key, value) VALUES (?, ?)",
                (key, value),
            )
