"""Tests for crochet_diary.database — db manager, settings blobs, pattern and
workspace stores.

Each test gets its own SQLite file under ``tmp_path``.
"""

import base64
import json
import math

import pytest

from crochet_diary.constants import PATTERNS_DATA_KEY, WORKSPACE_STATE_KEY
from crochet_diary.core.serializers import decode_patterns, encode_patterns
from crochet_diary.database import (
    DatabaseManager,
    PatternStore,
    SettingsRepository,
    WorkspaceStateStore,
)
from crochet_diary.models.pattern import CrochetPattern
from crochet_diary.models.workspace import Marker, WorkspaceState


# ── Fixtures ─────────────────────────────────────────────────────────

@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager(tmp_path / "test.db")
    manager.initialize_database()
    yield manager
    manager.close()


@pytest.fixture
def settings(db):
    return SettingsRepository(db)


@pytest.fixture
def store(settings):
    return PatternStore(settings)


def _make_pattern(name: str = "Test Pattern", **kwargs) -> CrochetPattern:
    return CrochetPattern(name=name, image_data=b"img-" + name.encode(), **kwargs)


def _legacy_blob(*records: dict) -> bytes:
    return json.dumps(list(records)).encode("utf-8")


def _legacy_record(name: str, finished: bool) -> dict:
    return {
        "id": "0B6D4E5A-1D2B-4C3E-9F00-112233445566" if finished
              else "1C7E5F6B-2E3C-4D4F-8A11-223344556677",
        "name": name,
        "imageData": base64.b64encode(b"legacy").decode("ascii"),
        "hookSize": 2.5,
        "yarn": "",
        "notes": "",
        "currentRound": 1,
        "currentStitch": 0,
        "markerXRatio": 0.5,
        "markerYRatio": 0.5,
        "isFinished": finished,
        "startDate": 0,
    }


# ── Database manager ─────────────────────────────────────────────────

class TestDatabaseManager:

    def test_initialize_creates_settings_table(self, db):
        rows = db.connect().execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        ).fetchall()
        assert [r[0] for r in rows] == ["app_settings"]

    def test_initialize_keeps_existing_rows(self, db, settings):
        settings.set_value("k", b"v")
        db.initialize_database()
        assert settings.get_value("k") == b"v"

    def test_context_manager_closes(self, tmp_path):
        with DatabaseManager(tmp_path / "ctx.db") as manager:
            manager.initialize_database()
            SettingsRepository(manager).set_value("k", b"v")
        assert manager._conn is None

    def test_db_path(self, tmp_path):
        assert DatabaseManager(tmp_path / "a.db").db_path == tmp_path / "a.db"


# ── Settings repository ──────────────────────────────────────────────

class TestSettingsRepository:

    def test_missing_key_returns_default(self, settings):
        assert settings.get_value("nope") == b""
        assert settings.get_value("nope", b"fallback") == b"fallback"

    def test_set_and_get(self, settings):
        settings.set_value("k", b"\x00\x01blob")
        assert settings.get_value("k") == b"\x00\x01blob"

    def test_overwrite_replaces_whole_value(self, settings):
        settings.set_value("k", b"a much longer first value")
        settings.set_value("k", b"short")
        assert settings.get_value("k") == b"short"

    def test_text_rows_come_back_as_bytes(self, settings, db):
        conn = db.connect()
        with conn:
            conn.execute("INSERT INTO app_settings (key, value) VALUES (?, ?)", ("t", "[]"))
        assert settings.get_value("t") == b"[]"

    def test_survives_reopen(self, tmp_path):
        path = tmp_path / "persist.db"
        with DatabaseManager(path) as first:
            first.initialize_database()
            SettingsRepository(first).set_value("k", b"kept")
        with DatabaseManager(path) as second:
            assert SettingsRepository(second).get_value("k") == b"kept"


# ── Pattern store ────────────────────────────────────────────────────

class TestPatternStore:

    def test_empty_store_loads_empty_list(self, store):
        assert store.load() == []

    def test_save_then_load(self, store):
        patterns = [_make_pattern("A"), _make_pattern("B", is_starred=True)]
        assert store.save(patterns) is True
        assert store.load() == patterns

    def test_load_preserves_order(self, store):
        patterns = [_make_pattern(n) for n in ("Z", "A", "M")]
        store.save(patterns)
        assert [p.name for p in store.load()] == ["Z", "A", "M"]

    def test_save_empty_list(self, store, settings):
        store.save([_make_pattern()])
        store.save([])
        assert settings.get_value(PATTERNS_DATA_KEY) == b"[]"
        assert store.load() == []

    def test_legacy_blob_migrated(self, store, settings):
        settings.set_value(PATTERNS_DATA_KEY, _legacy_blob(
            _legacy_record("Finished Hat", True),
            _legacy_record("Scarf", False),
        ))
        loaded = store.load()
        assert [p.name for p in loaded] == ["Finished Hat", "Scarf"]
        assert [p.is_in_works for p in loaded] == [True, False]
        assert all(p.is_starred is False for p in loaded)
        assert all(p.stitch_images == [] for p in loaded)

    def test_migration_rewrites_current_shape(self, store, settings):
        settings.set_value(PATTERNS_DATA_KEY, _legacy_blob(_legacy_record("Hat", True)))
        loaded = store.load()
        raw = settings.get_value(PATTERNS_DATA_KEY)
        assert b"isFinished" not in raw
        assert decode_patterns(raw) == loaded

    def test_undecodable_blob_loads_empty(self, store, settings):
        settings.set_value(PATTERNS_DATA_KEY, b"definitely not json")
        assert store.load() == []
        # Stored bytes are untouched until the next save
        assert settings.get_value(PATTERNS_DATA_KEY) == b"definitely not json"

    def test_mixed_shape_loads_empty(self, store, settings):
        current = json.loads(encode_patterns([_make_pattern()]))
        settings.set_value(PATTERNS_DATA_KEY, _legacy_blob(current[0], _legacy_record("Old", False)))
        assert store.load() == []

    def test_encode_failure_keeps_prior_blob(self, store, settings):
        store.save([_make_pattern("Good")])
        before = settings.get_value(PATTERNS_DATA_KEY)
        assert store.save([_make_pattern("Bad", marker_x_ratio=math.nan)]) is False
        assert settings.get_value(PATTERNS_DATA_KEY) == before

    def test_custom_key(self, settings):
        other = PatternStore(settings, key="other_patterns")
        other.save([_make_pattern()])
        assert settings.get_value("other_patterns") != b""
        assert settings.get_value(PATTERNS_DATA_KEY) == b""


# ── Workspace state store ────────────────────────────────────────────

class TestWorkspaceStateStore:

    def test_empty_store(self, settings):
        assert WorkspaceStateStore(settings).load_all() == {}

    def test_save_and_load_all(self, settings):
        ws = WorkspaceStateStore(settings)
        states = {"recommended.B": WorkspaceState(round=2, stitch=9, markers=[Marker(0.3, 0.4)])}
        assert ws.save_all(states) is True
        assert ws.load_all() == states
        assert settings.get_value(WORKSPACE_STATE_KEY) != b""

    def test_garbage_loads_empty(self, settings):
        settings.set_value(WORKSPACE_STATE_KEY, b"[1, 2, 3]")
        assert WorkspaceStateStore(settings).load_all() == {}

    def test_encode_failure_keeps_prior_blob(self, settings):
        ws = WorkspaceStateStore(settings)
        ws.save_all({"k": WorkspaceState.default(1)})
        before = settings.get_value(WORKSPACE_STATE_KEY)
        assert ws.save_all({"k": WorkspaceState(markers=[Marker(y=math.inf)])}) is False
        assert settings.get_value(WORKSPACE_STATE_KEY) == before
