"""Marker geometry — normalized marker ratios <-> on-screen points.

The diagram image is drawn aspect-fit (letterboxed) inside its container,
then zoomed about the container centre and panned:

    base   = image_origin + ratio * image_size
    screen = (base - centre) * scale + centre + pan

The inverse maps a drag release point back through the transform, clamps
it to the displayed image rectangle and normalizes it. All functions are
pure and accept either one point (shape ``(2,)``) or many (``(N, 2)``).
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from crochet_diary.constants import (
    DEFAULT_MARKER_RATIO,
    MAX_ZOOM,
    MIN_ZOOM,
    TIE_TOLERANCE,
    ZOOM_STEPS,
)


@dataclass(frozen=True)
class ImageRect:
    """Displayed image rectangle in container coordinates [px]."""
    x: float
    y: float
    width: float
    height: float

    @property
    def origin(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)

    @property
    def size(self) -> np.ndarray:
        return np.array([self.width, self.height], dtype=float)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


def fit_image_rect(container_size, image_size) -> ImageRect:
    """Aspect-fit an image into a container, centred.

    If the image is relatively wider than the container, its width fills
    the container and it is centred vertically; otherwise its height fills
    and it is centred horizontally.

    Args:
        container_size: (width, height) of the container.
        image_size: (width, height) of the source image (pixels).

    Returns:
        The displayed rectangle. Degenerate sizes give an empty rect at the
        container centre.
    """
    cw, ch = (float(v) for v in container_size)
    iw, ih = (float(v) for v in image_size)
    if cw <= 0 or ch <= 0 or iw <= 0 or ih <= 0:
        return ImageRect(max(cw, 0.0) / 2.0, max(ch, 0.0) / 2.0, 0.0, 0.0)

    image_aspect = iw / ih
    container_aspect = cw / ch
    if image_aspect > container_aspect:
        width = cw
        height = width / image_aspect
    else:
        height = ch
        width = height * image_aspect
    return ImageRect((cw - width) / 2.0, (ch - height) / 2.0, width, height)


def _centre(container_size) -> np.ndarray:
    return np.asarray(container_size, dtype=float) / 2.0


def marker_to_screen(
    ratio,
    container_size,
    image_rect: ImageRect,
    scale: float = 1.0,
    offset=(0.0, 0.0),
) -> np.ndarray:
    """Forward mapping: normalized ratio -> screen point."""
    ratio = np.asarray(ratio, dtype=float)
    centre = _centre(container_size)
    base = image_rect.origin + ratio * image_rect.size
    return (base - centre) * scale + centre + np.asarray(offset, dtype=float)


def screen_to_marker(
    point,
    container_size,
    image_rect: ImageRect,
    scale: float = 1.0,
    offset=(0.0, 0.0),
) -> np.ndarray:
    """Inverse mapping: screen point -> ratio clamped to [0, 1].

    Raises:
        ValueError: If ``scale`` is not positive.
    """
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")
    point = np.asarray(point, dtype=float)
    centre = _centre(container_size)
    base = (point - np.asarray(offset, dtype=float) - centre) / scale + centre
    if image_rect.is_empty:
        return np.full_like(base, DEFAULT_MARKER_RATIO)
    origin = image_rect.origin
    size = image_rect.size
    clamped = np.clip(base, origin, origin + size)
    return (clamped - origin) / size


def clamp_ratio(value: float) -> float:
    return min(max(0.0, float(value)), 1.0)


# ------------------------------------------------------------------
# Zoom stepping
# ------------------------------------------------------------------

def clamp_zoom(scale: float) -> float:
    """Clamp a continuous (pinch / wheel) scale to [MIN_ZOOM, MAX_ZOOM]."""
    return min(max(float(scale), MIN_ZOOM), MAX_ZOOM)


def scale_for_step(step: int) -> float:
    """Preset scale for a zoom step; unknown steps fall back to 1.0."""
    if 0 <= step < len(ZOOM_STEPS):
        return ZOOM_STEPS[step]
    return ZOOM_STEPS[0]


def next_zoom_step(step: int) -> int:
    return (step + 1) % len(ZOOM_STEPS)


def nearest_zoom_step(scale: float) -> int:
    """Index of the preset closest to ``scale``; ties go to the lower index.

    Distances within ``TIE_TOLERANCE`` count as ties, so float noise such
    as 2.2 sitting between 1.8 and 2.6 still snaps down.
    """
    best_index = 0
    best_diff = abs(ZOOM_STEPS[0] - scale)
    for i, step_scale in enumerate(ZOOM_STEPS[1:], start=1):
        diff = abs(step_scale - scale)
        if diff < best_diff - TIE_TOLERANCE:
            best_diff = diff
            best_index = i
    return best_index
