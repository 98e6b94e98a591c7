"""Pattern registry — authoritative in-memory pattern list.

Owns the single list of ``CrochetPattern`` records, loaded once from the
``PatternStore``. Every mutation writes the full list straight back to the
store (no batching) and then emits ``patterns_changed`` so that library /
gallery views refresh.

Records are matched by ``id``. A stale copy held by a view (e.g. one whose
counters have since changed) still addresses the right record.
"""

from __future__ import annotations

import dataclasses
import uuid
from collections.abc import Iterable
from enum import Enum

from PyQt6.QtCore import QObject, pyqtSignal

from crochet_diary.constants import DEFAULT_MARKER_RATIO
from crochet_diary.core.marker_geometry import clamp_ratio
from crochet_diary.core.pattern_form import PatternDraft
from crochet_diary.database.pattern_store import PatternStore
from crochet_diary.models.pattern import CrochetPattern


def _bounded(pattern: CrochetPattern) -> CrochetPattern:
    """Copy with counters floored at 0 and marker ratios clamped to [0, 1]."""
    return dataclasses.replace(
        pattern,
        current_round=max(0, int(pattern.current_round)),
        current_stitch=max(0, int(pattern.current_stitch)),
        marker_x_ratio=clamp_ratio(pattern.marker_x_ratio),
        marker_y_ratio=clamp_ratio(pattern.marker_y_ratio),
    )


class SortOrder(Enum):
    EARLIEST_TO_LATEST = "earliest_to_latest"
    LATEST_TO_EARLIEST = "latest_to_earliest"


class PatternRegistry(QObject):
    """Central owner of the pattern list.

    Signals:
        patterns_changed(list): Copy of the list after each mutation.
    """

    patterns_changed = pyqtSignal(list)

    def __init__(self, store: PatternStore, parent: QObject | None = None):
        super().__init__(parent)
        self._store = store
        self._patterns: list[CrochetPattern] = store.load()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def patterns(self) -> list[CrochetPattern]:
        """Current list (shallow copy, newest first)."""
        return list(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def find(self, pattern_id: uuid.UUID) -> CrochetPattern | None:
        idx = self._index_of(pattern_id)
        return self._patterns[idx] if idx is not None else None

    def library_patterns(self) -> list[CrochetPattern]:
        """Patterns kept in the library (not routed to finished works)."""
        return [p for p in self._patterns if not p.is_in_works]

    def works_patterns(
        self, order: SortOrder = SortOrder.LATEST_TO_EARLIEST,
    ) -> list[CrochetPattern]:
        """Finished works sorted by start date.

        Earliest-first puts undated works last; latest-first puts them
        first. Equal dates keep registry order.
        """
        works = [p for p in self._patterns if p.is_in_works]
        dated = [p for p in works if p.start_date is not None]
        undated = [p for p in works if p.start_date is None]
        if order is SortOrder.EARLIEST_TO_LATEST:
            dated.sort(key=lambda p: p.start_date)
            return dated + undated
        dated.sort(key=lambda p: p.start_date, reverse=True)
        return undated + dated

    # ------------------------------------------------------------------
    # Mutations (each one saves the full list)
    # ------------------------------------------------------------------

    def add(self, pattern: CrochetPattern) -> int:
        """Insert at the front. Returns the new index (always 0)."""
        self._patterns.insert(0, _bounded(pattern))
        self._commit()
        return 0

    def create(self, draft: PatternDraft) -> CrochetPattern:
        """Validate a draft, add the resulting pattern and clear the draft.

        Raises:
            PatternValidationError: Missing name or image. Nothing is
                added and nothing is saved.
        """
        pattern = draft.build()
        self.add(pattern)
        draft.reset()
        return pattern

    def update(self, pattern: CrochetPattern) -> None:
        """Replace the record with the same id; no-op if not found.

        Counters and marker ratios are brought into range as in ``add``.
        """
        idx = self._index_of(pattern.id)
        if idx is None:
            return
        self._patterns[idx] = _bounded(pattern)
        self._commit()

    def delete(self, indices: Iterable[int]) -> None:
        """Remove the records at the given positions.

        Raises:
            IndexError: If any index is out of range (nothing is removed).
        """
        targets = sorted(set(indices), reverse=True)
        if not targets:
            return
        count = len(self._patterns)
        for i in targets:
            if not 0 <= i < count:
                raise IndexError(f"pattern index out of range: {i}")
        for i in targets:
            del self._patterns[i]
        self._commit()

    def delete_pattern(self, pattern_id: uuid.UUID) -> None:
        idx = self._index_of(pattern_id)
        if idx is not None:
            self.delete([idx])

    def toggle_starred(self, pattern_id: uuid.UUID) -> None:
        idx = self._index_of(pattern_id)
        if idx is None:
            return
        current = self._patterns[idx]
        self._patterns[idx] = dataclasses.replace(current, is_starred=not current.is_starred)
        self._commit()

    def reset_progress(self, pattern: CrochetPattern) -> None:
        """Counters to 0, marker back to the image centre."""
        idx = self._index_of(pattern.id)
        if idx is None:
            return
        self._patterns[idx] = dataclasses.replace(
            self._patterns[idx],
            current_round=0,
            current_stitch=0,
            marker_x_ratio=DEFAULT_MARKER_RATIO,
            marker_y_ratio=DEFAULT_MARKER_RATIO,
        )
        self._commit()

    def update_progress(
        self,
        pattern: CrochetPattern,
        round: int | None = None,
        stitch: int | None = None,
        x_ratio: float | None = None,
        y_ratio: float | None = None,
    ) -> None:
        """Apply only the given progress fields.

        Counters are floored at 0; ratios are clamped to [0, 1].
        """
        idx = self._index_of(pattern.id)
        if idx is None:
            return
        changes = {}
        if round is not None:
            changes["current_round"] = max(0, int(round))
        if stitch is not None:
            changes["current_stitch"] = max(0, int(stitch))
        if x_ratio is not None:
            changes["marker_x_ratio"] = clamp_ratio(x_ratio)
        if y_ratio is not None:
            changes["marker_y_ratio"] = clamp_ratio(y_ratio)
        self._patterns[idx] = dataclasses.replace(self._patterns[idx], **changes)
        self._commit()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _index_of(self, pattern_id: uuid.UUID) -> int | None:
        for i, p in enumerate(self._patterns):
            if p.id == pattern_id:
                return i
        return None

    def _commit(self) -> None:
        self._store.save(self._patterns)
        self.patterns_changed.emit(list(self._patterns))
