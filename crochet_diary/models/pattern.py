"""Crochet pattern data model.

A pattern is one user-created catalog entry: the finished-work photo,
hook size, yarn, notes, and the progress state (round / stitch counters
and the normalized marker position on the primary image).

Ratios are normalized to the displayed image: (0, 0) is the top-left
corner, (1, 1) the bottom-right.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from crochet_diary.constants import DEFAULT_HOOK_SIZE_MM, DEFAULT_MARKER_RATIO


@dataclass
class CrochetPattern:
    """A saved crochet design record.

    Attributes:
        name: Display name.
        image_data: Encoded bytes of the primary (finished-work) image.
        hook_size: Hook size [mm], one of the HOOK_PAIRS values.
        current_round: Round counter (>= 0).
        current_stitch: Stitch counter (>= 0).
        marker_x_ratio: Marker x position in [0, 1].
        marker_y_ratio: Marker y position in [0, 1].
        is_in_works: True routes the pattern to the finished works gallery
            instead of the pattern library.
        is_starred: Importance flag, independent of ``is_in_works``.
        start_date: Optional start date (timezone-aware, UTC).
        stitch_images: Auxiliary stitch / diagram images, in display order.
    """
    name: str
    image_data: bytes
    hook_size: float = DEFAULT_HOOK_SIZE_MM
    yarn: str = ""
    notes: str = ""
    current_round: int = 0
    current_stitch: int = 0
    marker_x_ratio: float = DEFAULT_MARKER_RATIO
    marker_y_ratio: float = DEFAULT_MARKER_RATIO
    is_in_works: bool = False
    is_starred: bool = False
    start_date: Optional[datetime] = None
    stitch_images: list[bytes] = field(default_factory=list)
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self):
        # Stored dates are UTC; naive values are taken as UTC
        if self.start_date is not None and self.start_date.tzinfo is None:
            self.start_date = self.start_date.replace(tzinfo=timezone.utc)

    @property
    def image_count(self) -> int:
        """Primary image plus auxiliary images."""
        return 1 + len(self.stitch_images)

    def all_images(self) -> list[bytes]:
        """Primary image first, then stitch images in order."""
        return [self.image_data, *self.stitch_images]


@dataclass
class LegacyPattern:
    """Older record shape: single ``is_finished`` flag, no stitch images."""
    id: uuid.UUID
    name: str
    image_data: bytes
    hook_size: float
    yarn: str
    notes: str
    current_round: int
    current_stitch: int
    marker_x_ratio: float
    marker_y_ratio: float
    is_finished: bool
    start_date: Optional[datetime] = None

    def migrate(self) -> CrochetPattern:
        """Map to the current shape: finished -> in works, not starred."""
        return CrochetPattern(
            id=self.id,
            name=self.name,
            image_data=self.image_data,
            hook_size=self.hook_size,
            yarn=self.yarn,
            notes=self.notes,
            current_round=self.current_round,
            current_stitch=self.current_stitch,
            marker_x_ratio=self.marker_x_ratio,
            marker_y_ratio=self.marker_y_ratio,
            is_in_works=self.is_finished,
            is_starred=False,
            start_date=self.start_date,
            stitch_images=[],
        )
