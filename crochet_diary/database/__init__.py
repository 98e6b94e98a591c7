"""Database layer — SQLite connection, schema, and blob stores."""

from crochet_diary.database.db_manager import DatabaseManager
from crochet_diary.database.pattern_store import PatternStore
from crochet_diary.database.settings_repository import SettingsRepository
from crochet_diary.database.workspace_store import WorkspaceStateStore

__all__ = [
    "DatabaseManager",
    "PatternStore",
    "SettingsRepository",
    "WorkspaceStateStore",
]
