"""Pattern draft — the in-progress state of the add-pattern form.

A draft becomes a ``CrochetPattern`` only through ``build()``, which
validates first; an invalid draft never produces a partial record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from crochet_diary.constants import DEFAULT_HOOK_INDEX
from crochet_diary.core.hook_sizes import (
    closest_hook_index,
    hook_index_from_slider,
    hook_pair_at,
)
from crochet_diary.models.pattern import CrochetPattern

NAME_REQUIRED_MESSAGE = "Pattern name is required."
IMAGE_REQUIRED_MESSAGE = "Please select a diagram image."


class PatternValidationError(ValueError):
    """User-facing reason a draft cannot be saved."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PatternDraft:
    name: str = ""
    image_data: Optional[bytes] = None
    hook_index: int = DEFAULT_HOOK_INDEX
    yarn: str = ""
    notes: str = ""
    is_in_works: bool = False
    is_starred: bool = False
    start_date: datetime = field(default_factory=_now)
    stitch_images: list[bytes] = field(default_factory=list)

    @property
    def hook_size(self) -> float:
        return hook_pair_at(self.hook_index)[0]

    @property
    def hook_number(self) -> float:
        return hook_pair_at(self.hook_index)[1]

    def set_hook_index(self, value: float) -> None:
        """Select a hook pair from a slider position."""
        self.hook_index = hook_index_from_slider(value)

    def sync_hook_to_size(self, mm: float) -> None:
        self.hook_index = closest_hook_index(mm)

    def append_stitch_images(self, images: list[bytes]) -> None:
        self.stitch_images.extend(images)

    def clear_stitch_images(self) -> None:
        self.stitch_images.clear()

    def validate(self) -> None:
        """Raise ``PatternValidationError`` if the draft cannot be saved."""
        if not self.name.strip():
            raise PatternValidationError(NAME_REQUIRED_MESSAGE)
        if not self.image_data:
            raise PatternValidationError(IMAGE_REQUIRED_MESSAGE)

    def build(self) -> CrochetPattern:
        """Validate and create a new pattern with default progress."""
        self.validate()
        return CrochetPattern(
            name=self.name,
            image_data=self.image_data,
            hook_size=self.hook_size,
            yarn=self.yarn,
            notes=self.notes,
            is_in_works=self.is_in_works,
            is_starred=self.is_starred,
            start_date=self.start_date,
            stitch_images=list(self.stitch_images),
        )

    def reset(self) -> None:
        """Clear the form after a successful save."""
        self.name = ""
        self.image_data = None
        self.hook_index = DEFAULT_HOOK_INDEX
        self.yarn = ""
        self.notes = ""
        self.is_in_works = False
        self.is_starred = False
        self.start_date = _now()
        self.stitch_images = []
