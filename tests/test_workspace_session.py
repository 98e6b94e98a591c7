"""Tests for crochet_diary.core.workspace_session — per-entry counters and
markers with deferred, whole-map saves.
"""

import pytest

from crochet_diary.constants import MAX_COUNTER
from crochet_diary.core.workspace_session import WorkspaceSession, workspace_key_for
from crochet_diary.database import DatabaseManager, SettingsRepository, WorkspaceStateStore
from crochet_diary.models.pattern import CrochetPattern
from crochet_diary.models.workspace import Marker, WorkspaceState


@pytest.fixture
def store(tmp_path):
    db = DatabaseManager(tmp_path / "test.db")
    db.initialize_database()
    yield WorkspaceStateStore(SettingsRepository(db))
    db.close()


class TestWorkspaceState:

    def test_default_has_marker_per_image(self):
        state = WorkspaceState.default(3)
        assert (state.round, state.stitch) == (0, 0)
        assert state.markers == [Marker(), Marker(), Marker()]

    def test_default_has_at_least_one_marker(self):
        assert len(WorkspaceState.default(0).markers) == 1

    def test_ensure_marker_capacity(self):
        state = WorkspaceState.default(1)
        state.ensure_marker_capacity(3)
        assert len(state.markers) == 4
        state.ensure_marker_capacity(1)
        assert len(state.markers) == 4


class TestWorkspaceSession:

    def test_key_for_pattern_is_upper_case(self):
        p = CrochetPattern(name="x", image_data=b"x")
        assert workspace_key_for(p) == str(p.id).upper()

    def test_new_entry_gets_default(self, store):
        session = WorkspaceSession(store, "recommended.A", 3)
        assert session.round == 0
        assert len(session.state.markers) == 3

    def test_counters_bounded(self, store):
        session = WorkspaceSession(store, "k", 1)
        assert session.decrement_round() == 0
        assert session.decrement_stitch() == 0
        session.state.round = MAX_COUNTER
        session.state.stitch = MAX_COUNTER
        assert session.increment_round() == MAX_COUNTER
        assert session.increment_stitch() == MAX_COUNTER

    def test_edits_not_saved_until_save(self, store):
        session = WorkspaceSession(store, "k", 1)
        session.increment_round()
        session.set_marker(0, 0.2, 0.3)
        assert store.load_all() == {}
        assert session.save() is True
        assert store.load_all()["k"] == WorkspaceState(round=1, stitch=0, markers=[Marker(0.2, 0.3)])

    def test_reopen_restores_state(self, store):
        first = WorkspaceSession(store, "k", 2)
        first.increment_stitch()
        first.increment_stitch()
        first.save()
        second = WorkspaceSession(store, "k", 2)
        assert second.stitch == 2

    def test_other_entries_preserved(self, store):
        store.save_all({"other": WorkspaceState(round=5, markers=[Marker()])})
        session = WorkspaceSession(store, "k", 1)
        session.increment_round()
        session.save()
        states = store.load_all()
        assert states["other"].round == 5
        assert states["k"].round == 1

    def test_set_marker_grows_and_clamps(self, store):
        session = WorkspaceSession(store, "k", 1)
        marker = session.set_marker(3, 1.7, -0.4)
        assert marker == Marker(1.0, 0.0)
        assert len(session.state.markers) == 4
        assert session.marker(2) == Marker()

    def test_set_marker_negative_index(self, store):
        session = WorkspaceSession(store, "k", 1)
        with pytest.raises(IndexError):
            session.set_marker(-1, 0.5, 0.5)

    def test_marker_past_end_is_default(self, store):
        session = WorkspaceSession(store, "k", 1)
        assert session.marker(10) == Marker()

    def test_reset_saves_immediately(self, store):
        session = WorkspaceSession(store, "k", 2)
        session.increment_round()
        session.set_marker(1, 0.9, 0.9)
        session.save()
        session.reset()
        assert store.load_all()["k"] == WorkspaceState.default(2)
        assert session.round == 0

    def test_session_state_is_a_copy(self, store):
        store.save_all({"k": WorkspaceState(round=2, markers=[Marker()])})
        session = WorkspaceSession(store, "k", 1)
        session.increment_round()
        assert store.load_all()["k"].round == 2
