"""Viewport state — zoom scale, zoom step and pan offset of one diagram.

Pure Python class (no Qt dependency). Widgets feed gesture events in and
read ``scale`` / ``offset`` back out for painting and for the marker
transforms in ``marker_geometry``.

Usage::

    vp = ViewportState()
    vp.pinch_changed(1.3)   # cumulative magnification since gesture start
    vp.pinch_ended()        # snap zoom_step to the nearest preset
    vp.cycle_zoom_step()    # button: 1.0 -> 1.8 -> 2.6 -> 1.0
"""

from __future__ import annotations

from crochet_diary.core.marker_geometry import (
    clamp_zoom,
    nearest_zoom_step,
    next_zoom_step,
    scale_for_step,
)


class ViewportState:
    """Zoom / pan state with gesture bookkeeping."""

    def __init__(self) -> None:
        self.scale: float = 1.0
        self.zoom_step: int = 0
        self.offset: tuple[float, float] = (0.0, 0.0)
        self._last_offset: tuple[float, float] = (0.0, 0.0)
        self._last_pinch: float = 1.0

    # ------------------------------------------------------------------
    # Zoom
    # ------------------------------------------------------------------

    def cycle_zoom_step(self) -> float:
        """Advance to the next preset step and return its scale."""
        self.zoom_step = next_zoom_step(self.zoom_step)
        self.scale = scale_for_step(self.zoom_step)
        return self.scale

    def pinch_changed(self, magnification: float) -> float:
        """Apply a pinch update.

        Args:
            magnification: Cumulative magnification since the gesture began.
        """
        if magnification <= 0:
            return self.scale
        delta = magnification / self._last_pinch
        self.scale = clamp_zoom(self.scale * delta)
        self._last_pinch = magnification
        return self.scale

    def pinch_ended(self) -> int:
        """Finish a pinch: keep the continuous scale, snap the step indicator."""
        self._last_pinch = 1.0
        self.zoom_step = nearest_zoom_step(self.scale)
        return self.zoom_step

    def zoom_by(self, factor: float) -> float:
        """One-shot continuous zoom (mouse wheel)."""
        self.scale = clamp_zoom(self.scale * factor)
        self.zoom_step = nearest_zoom_step(self.scale)
        return self.scale

    # ------------------------------------------------------------------
    # Pan
    # ------------------------------------------------------------------

    def pan_changed(self, dx: float, dy: float) -> None:
        """Translation since the drag began."""
        self.offset = (self._last_offset[0] + dx, self._last_offset[1] + dy)

    def pan_ended(self) -> None:
        self._last_offset = self.offset

    def recenter(self) -> None:
        self.offset = (0.0, 0.0)
        self._last_offset = (0.0, 0.0)

    def reset(self) -> None:
        """Back to 1.0x, step 0, no pan."""
        self.scale = 1.0
        self.zoom_step = 0
        self._last_pinch = 1.0
        self.recenter()
