"""Workspace session — viewing state of one catalog entry while it is open.

The whole state map is loaded once when the session starts; edits go to a
local copy and are written back (whole map) by ``save()``, which the
workspace screen calls when it closes. Reset is the only edit that saves
immediately.

Progress kept here is separate from a pattern's own ``current_round`` /
marker fields; the two are not synchronized.
"""

from __future__ import annotations

import copy

from crochet_diary.constants import MAX_COUNTER, MIN_COUNTER
from crochet_diary.core.marker_geometry import clamp_ratio
from crochet_diary.database.workspace_store import WorkspaceStateStore
from crochet_diary.models.pattern import CrochetPattern
from crochet_diary.models.workspace import Marker, WorkspaceState


def workspace_key_for(pattern: CrochetPattern) -> str:
    """State-map key of a user pattern: its upper-case UUID text."""
    return str(pattern.id).upper()


class WorkspaceSession:
    """Round / stitch counters and per-image markers for one entry."""

    def __init__(self, store: WorkspaceStateStore, key: str, image_count: int):
        self._store = store
        self._key = key
        self._image_count = image_count
        self._states = store.load_all()
        existing = self._states.get(key)
        self._state = (
            copy.deepcopy(existing) if existing is not None
            else WorkspaceState.default(image_count)
        )

    @property
    def key(self) -> str:
        return self._key

    @property
    def state(self) -> WorkspaceState:
        return self._state

    @property
    def round(self) -> int:
        return self._state.round

    @property
    def stitch(self) -> int:
        return self._state.stitch

    # ------------------------------------------------------------------
    # Counters (stepper semantics: stay inside MIN_COUNTER..MAX_COUNTER)
    # ------------------------------------------------------------------

    def increment_round(self) -> int:
        if self._state.round < MAX_COUNTER:
            self._state.round += 1
        return self._state.round

    def decrement_round(self) -> int:
        if self._state.round > MIN_COUNTER:
            self._state.round -= 1
        return self._state.round

    def increment_stitch(self) -> int:
        if self._state.stitch < MAX_COUNTER:
            self._state.stitch += 1
        return self._state.stitch

    def decrement_stitch(self) -> int:
        if self._state.stitch > MIN_COUNTER:
            self._state.stitch -= 1
        return self._state.stitch

    # ------------------------------------------------------------------
    # Markers
    # ------------------------------------------------------------------

    def marker(self, index: int) -> Marker:
        """Marker of image ``index``; centred default past the end."""
        if 0 <= index < len(self._state.markers):
            return self._state.markers[index]
        return Marker()

    def set_marker(self, index: int, x: float, y: float) -> Marker:
        if index < 0:
            raise IndexError(f"marker index must be >= 0, got {index}")
        self._state.ensure_marker_capacity(index)
        marker = Marker(x=clamp_ratio(x), y=clamp_ratio(y))
        self._state.markers[index] = marker
        return marker

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Counters to 0, one centred marker per image; saved immediately."""
        self._state = WorkspaceState.default(self._image_count)
        self.save()

    def save(self) -> bool:
        """Write this entry back into the map and persist the whole map."""
        self._states[self._key] = copy.deepcopy(self._state)
        return self._store.save_all(self._states)
