"""Tests for crochet_diary.core.pattern_registry — list ownership and
save-on-every-mutation.
"""

import sys
import uuid
from datetime import datetime, timezone

import pytest
from PyQt6.QtWidgets import QApplication

from crochet_diary.core.pattern_form import (
    IMAGE_REQUIRED_MESSAGE,
    NAME_REQUIRED_MESSAGE,
    PatternDraft,
    PatternValidationError,
)
from crochet_diary.core.pattern_registry import PatternRegistry, SortOrder
from crochet_diary.database import DatabaseManager, PatternStore, SettingsRepository
from crochet_diary.models.pattern import CrochetPattern

_app = QApplication.instance() or QApplication(sys.argv)


class _CountingStore:
    """In-memory stand-in that records every save."""

    def __init__(self, initial=None):
        self.saved = list(initial or [])
        self.save_count = 0

    def load(self):
        return list(self.saved)

    def save(self, patterns):
        self.saved = list(patterns)
        self.save_count += 1
        return True


@pytest.fixture
def pattern_store(tmp_path):
    db = DatabaseManager(tmp_path / "test.db")
    db.initialize_database()
    yield PatternStore(SettingsRepository(db))
    db.close()


@pytest.fixture
def registry(pattern_store):
    return PatternRegistry(pattern_store)


def _make_pattern(name: str = "Test", **kwargs) -> CrochetPattern:
    return CrochetPattern(name=name, image_data=b"img", **kwargs)


def _date(year: int, month: int = 1, day: int = 1) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


# ── Loading / adding ─────────────────────────────────────────────────

class TestLoadAndAdd:

    def test_starts_empty(self, registry):
        assert len(registry) == 0
        assert registry.patterns == []

    def test_loads_existing(self, pattern_store):
        pattern_store.save([_make_pattern("A"), _make_pattern("B")])
        assert [p.name for p in PatternRegistry(pattern_store).patterns] == ["A", "B"]

    def test_add_inserts_at_front(self, registry):
        registry.add(_make_pattern("First"))
        index = registry.add(_make_pattern("Second"))
        assert index == 0
        assert [p.name for p in registry.patterns] == ["Second", "First"]

    def test_add_is_persisted(self, registry, pattern_store):
        p = _make_pattern("Saved")
        registry.add(p)
        assert pattern_store.load() == [p]

    def test_add_brings_values_into_range(self, registry, pattern_store):
        p = _make_pattern(marker_x_ratio=-2.0, marker_y_ratio=7.0,
                          current_round=-3, current_stitch=4)
        registry.add(p)
        for stored in (registry.find(p.id), pattern_store.load()[0]):
            assert stored.marker_x_ratio == pytest.approx(0.0)
            assert stored.marker_y_ratio == pytest.approx(1.0)
            assert (stored.current_round, stored.current_stitch) == (0, 4)

    def test_patterns_returns_copy(self, registry):
        registry.add(_make_pattern())
        registry.patterns.clear()
        assert len(registry) == 1

    def test_find(self, registry):
        p = _make_pattern()
        registry.add(p)
        assert registry.find(p.id) == p
        assert registry.find(uuid.uuid4()) is None


# ── Create from draft ────────────────────────────────────────────────

class TestCreate:

    def test_create_adds_and_resets_draft(self):
        store = _CountingStore()
        registry = PatternRegistry(store)
        draft = PatternDraft(name="Bunny", image_data=b"photo", yarn="Mohair")
        created = registry.create(draft)
        assert registry.patterns == [created]
        assert created.yarn == "Mohair"
        assert created.current_round == 0
        assert created.marker_x_ratio == pytest.approx(0.5)
        assert store.save_count == 1
        assert draft.name == "" and draft.image_data is None

    def test_empty_name_rejected_without_save(self):
        store = _CountingStore()
        registry = PatternRegistry(store)
        with pytest.raises(PatternValidationError, match=NAME_REQUIRED_MESSAGE):
            registry.create(PatternDraft(name="   ", image_data=b"photo"))
        assert len(registry) == 0
        assert store.save_count == 0

    def test_missing_image_rejected_without_save(self):
        store = _CountingStore()
        registry = PatternRegistry(store)
        draft = PatternDraft(name="Bunny")
        with pytest.raises(PatternValidationError, match=IMAGE_REQUIRED_MESSAGE):
            registry.create(draft)
        assert len(registry) == 0
        assert store.save_count == 0
        assert draft.name == "Bunny"


# ── Update / delete ──────────────────────────────────────────────────

class TestUpdateAndDelete:

    def test_update_replaces_by_id(self, registry, pattern_store):
        p = _make_pattern("Before")
        registry.add(p)
        registry.update(CrochetPattern(name="After", image_data=b"new", id=p.id))
        assert registry.find(p.id).name == "After"
        assert pattern_store.load()[0].name == "After"

    def test_update_brings_values_into_range(self, registry, pattern_store):
        p = _make_pattern()
        registry.add(p)
        registry.update(CrochetPattern(
            name="Edited", image_data=b"img", id=p.id,
            marker_x_ratio=1.5, marker_y_ratio=-0.3,
            current_round=-5, current_stitch=-1,
        ))
        for stored in (registry.find(p.id), pattern_store.load()[0]):
            assert stored.marker_x_ratio == pytest.approx(1.0)
            assert stored.marker_y_ratio == pytest.approx(0.0)
            assert (stored.current_round, stored.current_stitch) == (0, 0)
            assert stored.name == "Edited"

    def test_update_unknown_is_noop(self):
        store = _CountingStore([_make_pattern()])
        registry = PatternRegistry(store)
        registry.update(_make_pattern("Stranger"))
        assert store.save_count == 0

    def test_delete_by_indices(self, registry, pattern_store):
        for name in ("C", "B", "A"):
            registry.add(_make_pattern(name))
        registry.delete([0, 2])
        assert [p.name for p in registry.patterns] == ["B"]
        assert [p.name for p in PatternRegistry(pattern_store).patterns] == ["B"]

    def test_delete_out_of_range_changes_nothing(self):
        store = _CountingStore([_make_pattern("A"), _make_pattern("B")])
        registry = PatternRegistry(store)
        with pytest.raises(IndexError):
            registry.delete([0, 5])
        assert len(registry) == 2
        assert store.save_count == 0

    def test_delete_empty_is_noop(self):
        store = _CountingStore([_make_pattern()])
        registry = PatternRegistry(store)
        registry.delete([])
        assert store.save_count == 0

    def test_delete_pattern_by_id(self, registry):
        keep, drop = _make_pattern("Keep"), _make_pattern("Drop")
        registry.add(keep)
        registry.add(drop)
        registry.delete_pattern(drop.id)
        assert registry.patterns == [keep]


# ── Progress ─────────────────────────────────────────────────────────

class TestProgress:

    def test_update_progress_partial(self, registry):
        p = _make_pattern(current_round=4, current_stitch=2)
        registry.add(p)
        registry.update_progress(p, stitch=9)
        updated = registry.find(p.id)
        assert updated.current_round == 4
        assert updated.current_stitch == 9
        assert updated.marker_x_ratio == pytest.approx(0.5)

    def test_update_progress_clamps(self, registry):
        p = _make_pattern()
        registry.add(p)
        registry.update_progress(p, round=-5, stitch=-1, x_ratio=1.5, y_ratio=-0.2)
        updated = registry.find(p.id)
        assert updated.current_round == 0
        assert updated.current_stitch == 0
        assert updated.marker_x_ratio == pytest.approx(1.0)
        assert updated.marker_y_ratio == pytest.approx(0.0)

    def test_update_progress_with_stale_copy(self, registry):
        p = _make_pattern()
        registry.add(p)
        registry.update_progress(p, round=3)
        registry.update_progress(p, stitch=7)
        updated = registry.find(p.id)
        assert (updated.current_round, updated.current_stitch) == (3, 7)

    def test_update_progress_persists(self, registry, pattern_store):
        p = _make_pattern()
        registry.add(p)
        registry.update_progress(p, x_ratio=0.2, y_ratio=0.8)
        stored = pattern_store.load()[0]
        assert stored.marker_x_ratio == pytest.approx(0.2)
        assert stored.marker_y_ratio == pytest.approx(0.8)

    def test_update_progress_unknown_is_noop(self):
        store = _CountingStore([_make_pattern()])
        registry = PatternRegistry(store)
        registry.update_progress(_make_pattern("Other"), round=3)
        assert store.save_count == 0

    def test_reset_progress(self, registry):
        p = _make_pattern(current_round=8, current_stitch=3,
                          marker_x_ratio=0.1, marker_y_ratio=0.9)
        registry.add(p)
        registry.reset_progress(p)
        reset = registry.find(p.id)
        assert (reset.current_round, reset.current_stitch) == (0, 0)
        assert reset.marker_x_ratio == pytest.approx(0.5)
        assert reset.marker_y_ratio == pytest.approx(0.5)

    def test_reset_progress_unknown_is_noop(self):
        store = _CountingStore()
        registry = PatternRegistry(store)
        registry.reset_progress(_make_pattern())
        assert store.save_count == 0


# ── Library / works views ────────────────────────────────────────────

class TestViews:

    def test_library_excludes_works(self, registry):
        registry.add(_make_pattern("Lib"))
        registry.add(_make_pattern("Work", is_in_works=True))
        assert [p.name for p in registry.library_patterns()] == ["Lib"]
        assert [p.name for p in registry.works_patterns()] == ["Work"]

    def test_works_sorted_latest_first(self, registry):
        registry.add(_make_pattern("Old", is_in_works=True, start_date=_date(2020)))
        registry.add(_make_pattern("New", is_in_works=True, start_date=_date(2024)))
        registry.add(_make_pattern("Mid", is_in_works=True, start_date=_date(2022)))
        names = [p.name for p in registry.works_patterns(SortOrder.LATEST_TO_EARLIEST)]
        assert names == ["New", "Mid", "Old"]

    def test_works_sorted_earliest_first(self, registry):
        registry.add(_make_pattern("Old", is_in_works=True, start_date=_date(2020)))
        registry.add(_make_pattern("New", is_in_works=True, start_date=_date(2024)))
        names = [p.name for p in registry.works_patterns(SortOrder.EARLIEST_TO_LATEST)]
        assert names == ["Old", "New"]

    def test_undated_works_placement(self, registry):
        registry.add(_make_pattern("Dated", is_in_works=True, start_date=_date(2021)))
        registry.add(_make_pattern("Undated", is_in_works=True))
        assert [p.name for p in registry.works_patterns(SortOrder.EARLIEST_TO_LATEST)] == ["Dated", "Undated"]
        assert [p.name for p in registry.works_patterns(SortOrder.LATEST_TO_EARLIEST)] == ["Undated", "Dated"]

    def test_toggle_starred(self, registry, pattern_store):
        p = _make_pattern()
        registry.add(p)
        registry.toggle_starred(p.id)
        assert registry.find(p.id).is_starred is True
        assert pattern_store.load()[0].is_starred is True
        registry.toggle_starred(p.id)
        assert registry.find(p.id).is_starred is False


# ── Signals ──────────────────────────────────────────────────────────

class TestSignals:

    def test_patterns_changed_emitted_per_mutation(self, registry):
        received = []
        registry.patterns_changed.connect(received.append)
        p = _make_pattern()
        registry.add(p)
        registry.update_progress(p, round=1)
        registry.delete([0])
        assert len(received) == 3
        assert received[0] == [p]
        assert received[-1] == []

    def test_rejected_create_emits_nothing(self, registry):
        received = []
        registry.patterns_changed.connect(received.append)
        with pytest.raises(PatternValidationError):
            registry.create(PatternDraft())
        assert received == []
