"""Built-in recommended patterns.

Recommended patterns have no backing ``CrochetPattern`` record; their
progress lives only in the workspace state store under the fixed ``id``.
Images ship as asset files: ``<main_asset>.<ext>`` for the main image and
``<stitch_prefix>1``, ``<stitch_prefix>2``, ... for stitch diagrams.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")


@dataclass(frozen=True)
class RecommendedPattern:
    id: str
    name: str
    main_asset: str
    stitch_prefix: str
    hook_size: float
    yarn_text: str

    def main_image_path(self, asset_dir: Path) -> Path | None:
        return _find_asset(asset_dir, self.main_asset)

    def stitch_image_paths(self, asset_dir: Path) -> list[Path]:
        """Consecutive stitch assets starting at 1, stopping at the first gap."""
        paths: list[Path] = []
        index = 1
        while True:
            path = _find_asset(asset_dir, f"{self.stitch_prefix}{index}")
            if path is None:
                break
            paths.append(path)
            index += 1
        return paths

    def image_paths(self, asset_dir: Path) -> list[Path]:
        main = self.main_image_path(asset_dir)
        paths = [main] if main is not None else []
        return paths + self.stitch_image_paths(asset_dir)


def _find_asset(asset_dir: Path, name: str) -> Path | None:
    for ext in IMAGE_EXTENSIONS:
        candidate = Path(asset_dir) / f"{name}{ext}"
        if candidate.is_file():
            return candidate
    return None


RECOMMENDED_PATTERNS: tuple[RecommendedPattern, ...] = (
    RecommendedPattern("recommended.A", "Pattern A", "patternA", "patternA-", 2.5, "Color: 01/24/26"),
    RecommendedPattern("recommended.B", "Pattern B", "patternB", "patternB-", 2.0, "Color: 01/01/10/09/11"),
    RecommendedPattern("recommended.C", "Pattern C", "patternC", "patternC-", 2.0, "Color: 01/02/15/05/09"),
    RecommendedPattern("recommended.D", "Pattern D", "patternD", "patternD-", 2.0, "Color: 01/16/15/10"),
)


def find_recommended(pattern_id: str) -> RecommendedPattern | None:
    for item in RECOMMENDED_PATTERNS:
        if item.id == pattern_id:
            return item
    return None
