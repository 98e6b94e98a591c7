"""SQLite database manager — connection, schema creation, and initialization.

The database is the app-private key/value preference area: one
``app_settings`` table whose rows each hold a whole serialized blob
(``patterns_data``, ``workspace_state_dict``).
"""

import sqlite3
from pathlib import Path

from crochet_diary.constants import DB_FILENAME

_SCHEMA_SQL = """
-- Application settings / persisted blobs
CREATE TABLE IF NOT EXISTS app_settings (
    key TEXT PRIMARY KEY,
    value BLOB NOT NULL
);
"""


class DatabaseManager:
    """Manages SQLite database connection and schema lifecycle."""

    def __init__(self, db_path: Path | str | None = None):
        if db_path is None:
            db_path = Path.cwd() / DB_FILENAME
        self._db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    @property
    def db_path(self) -> Path:
        return self._db_path

    def connect(self) -> sqlite3.Connection:
        """Open (or return existing) database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self._db_path))
            self._conn.execute("PRAGMA journal_mode=WAL")
        return self._conn

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def initialize_database(self) -> None:
        """Create all tables if they don't exist."""
        conn = self.connect()
        conn.executescript(_SCHEMA_SQL)
        conn.commit()

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
