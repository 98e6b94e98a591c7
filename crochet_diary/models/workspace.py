"""Workspace viewing-state models.

Workspace state is kept per catalog-entry key (a pattern's UUID text or a
built-in recommended pattern id) and is independent of the progress
fields stored on ``CrochetPattern``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from crochet_diary.constants import DEFAULT_MARKER_RATIO


@dataclass
class Marker:
    """Normalized marker position on one image."""
    x: float = DEFAULT_MARKER_RATIO
    y: float = DEFAULT_MARKER_RATIO


@dataclass
class WorkspaceState:
    """Round / stitch counters and one marker per displayable image.

    ``markers[0]`` belongs to the main image, the rest follow the
    auxiliary images in order.
    """
    round: int = 0
    stitch: int = 0
    markers: list[Marker] = field(default_factory=list)

    @classmethod
    def default(cls, image_count: int) -> WorkspaceState:
        """Fresh state with a centered marker per image (at least one)."""
        return cls(
            round=0,
            stitch=0,
            markers=[Marker() for _ in range(max(1, image_count))],
        )

    def ensure_marker_capacity(self, index: int) -> None:
        """Grow ``markers`` with defaults so that ``index`` is valid."""
        missing = index - len(self.markers) + 1
        if missing > 0:
            self.markers.extend(Marker() for _ in range(missing))
