"""Diagram view — pattern image with zoom, pan and a draggable marker.

Zoom: pinch (continuous, 1x – 4x), mouse wheel, or the zoom button which
cycles the 1.0 / 1.8 / 2.6 presets.
Pan: right- or middle-click drag, or left drag on the image away from the
marker.
Marker: left drag; on release the point is mapped back through the
zoom/pan transform, clamped to the image and stored as a ratio.
"""

from __future__ import annotations

from PyQt6.QtCore import QEvent, QPointF, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import (
    QColor,
    QMouseEvent,
    QPainter,
    QPen,
    QPixmap,
    QWheelEvent,
)
from PyQt6.QtWidgets import QGestureEvent, QPinchGesture, QToolButton, QWidget

from crochet_diary.constants import (
    DEFAULT_MARKER_RATIO,
    MARKER_RADIUS,
    WHEEL_ZOOM_FACTOR,
)
from crochet_diary.core.marker_geometry import (
    ImageRect,
    fit_image_rect,
    marker_to_screen,
    screen_to_marker,
)
from crochet_diary.core.viewport import ViewportState
from crochet_diary.ui.styles.colors import (
    ACCENT_ROSE,
    CREAM_BACKGROUND,
    MARKER_BORDER,
    MARKER_FILL_ALPHA,
    SOFT_BROWN_TEXT,
)


class DiagramView(QWidget):
    """Zoomable, pannable image with one progress marker.

    Signals:
        marker_moved(float, float): New (x, y) ratio after a marker drag.
        zoom_changed(float): Current scale.
    """

    marker_moved = pyqtSignal(float, float)
    zoom_changed = pyqtSignal(float)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._pixmap = QPixmap()
        self._marker = (DEFAULT_MARKER_RATIO, DEFAULT_MARKER_RATIO)
        self._viewport = ViewportState()

        self._dragging_marker = False
        self._marker_drag_pos: QPointF | None = None
        self._panning = False
        self._pan_start = QPointF()

        self.setMinimumSize(240, 240)
        self.setMouseTracking(False)
        self.grabGesture(Qt.GestureType.PinchGesture)

        self._zoom_button = QToolButton(self)
        self._zoom_button.setText("+")
        self._zoom_button.setToolTip("Zoom")
        self._zoom_button.clicked.connect(self.cycle_zoom_step)

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def set_image_data(self, data: bytes) -> bool:
        """Load encoded image bytes. Returns False if they can't be decoded."""
        pixmap = QPixmap()
        ok = pixmap.loadFromData(data)
        self._pixmap = pixmap if ok else QPixmap()
        self.update()
        return ok

    def set_marker(self, x_ratio: float, y_ratio: float) -> None:
        self._marker = (x_ratio, y_ratio)
        self.update()

    @property
    def marker(self) -> tuple[float, float]:
        return self._marker

    @property
    def viewport_state(self) -> ViewportState:
        return self._viewport

    def reset_view(self) -> None:
        """Back to 1x, no pan, no pending drag."""
        self._viewport.reset()
        self._dragging_marker = False
        self._marker_drag_pos = None
        self.zoom_changed.emit(self._viewport.scale)
        self.update()

    def cycle_zoom_step(self) -> None:
        self._viewport.cycle_zoom_step()
        self.zoom_changed.emit(self._viewport.scale)
        self.update()

    # ------------------------------------------------------------------
    # Geometry helpers
    # ------------------------------------------------------------------

    def _container_size(self) -> tuple[float, float]:
        return (float(self.width()), float(self.height()))

    def _image_rect(self) -> ImageRect:
        if self._pixmap.isNull():
            return fit_image_rect(self._container_size(), (0, 0))
        return fit_image_rect(
            self._container_size(),
            (self._pixmap.width(), self._pixmap.height()),
        )

    def _marker_screen_pos(self) -> QPointF:
        x, y = marker_to_screen(
            self._marker,
            self._container_size(),
            self._image_rect(),
            self._viewport.scale,
            self._viewport.offset,
        )
        return QPointF(float(x), float(y))

    def _hits_marker(self, pos: QPointF) -> bool:
        centre = self._marker_screen_pos()
        dx = pos.x() - centre.x()
        dy = pos.y() - centre.y()
        reach = MARKER_RADIUS * 1.5
        return dx * dx + dy * dy <= reach * reach

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHints(
            QPainter.RenderHint.Antialiasing
            | QPainter.RenderHint.SmoothPixmapTransform
        )
        painter.fillRect(self.rect(), QColor(CREAM_BACKGROUND))

        if self._pixmap.isNull():
            painter.setPen(QColor(SOFT_BROWN_TEXT))
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, "Image unavailable")
            painter.end()
            return

        rect = self._image_rect()
        cw, ch = self._container_size()
        ox, oy = self._viewport.offset
        scale = self._viewport.scale

        painter.save()
        painter.translate(cw / 2.0 + ox, ch / 2.0 + oy)
        painter.scale(scale, scale)
        painter.translate(-cw / 2.0, -ch / 2.0)
        painter.drawPixmap(
            QRectF(rect.x, rect.y, rect.width, rect.height),
            self._pixmap,
            QRectF(self._pixmap.rect()),
        )
        painter.restore()

        # Marker is drawn in screen space so it keeps a constant size
        pos = self._marker_drag_pos if self._dragging_marker else None
        if pos is None:
            pos = self._marker_screen_pos()
        fill = QColor(ACCENT_ROSE)
        fill.setAlpha(MARKER_FILL_ALPHA)
        painter.setBrush(fill)
        painter.setPen(QPen(QColor(MARKER_BORDER), 2))
        painter.drawEllipse(pos, MARKER_RADIUS, MARKER_RADIUS)
        painter.end()

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        hint = self._zoom_button.sizeHint()
        self._zoom_button.move(
            self.width() - hint.width() - 12,
            self.height() - hint.height() - 12,
        )

    # ------------------------------------------------------------------
    # Mouse: marker drag / pan / wheel zoom
    # ------------------------------------------------------------------

    def mousePressEvent(self, event: QMouseEvent) -> None:
        pos = event.position()
        if event.button() == Qt.MouseButton.LeftButton and self._hits_marker(pos):
            self._dragging_marker = True
            self._marker_drag_pos = pos
            event.accept()
            return
        if event.button() in (
            Qt.MouseButton.LeftButton,
            Qt.MouseButton.RightButton,
            Qt.MouseButton.MiddleButton,
        ):
            self._panning = True
            self._pan_start = pos
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if self._dragging_marker:
            self._marker_drag_pos = event.position()
            self.update()
            event.accept()
            return
        if self._panning:
            delta = event.position() - self._pan_start
            self._viewport.pan_changed(delta.x(), delta.y())
            self.update()
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if self._dragging_marker:
            self._dragging_marker = False
            self._marker_drag_pos = None
            if not self._pixmap.isNull():
                pos = event.position()
                x, y = screen_to_marker(
                    (pos.x(), pos.y()),
                    self._container_size(),
                    self._image_rect(),
                    self._viewport.scale,
                    self._viewport.offset,
                )
                self._marker = (float(x), float(y))
                self.marker_moved.emit(float(x), float(y))
            self.update()
            event.accept()
            return
        if self._panning:
            self._panning = False
            self._viewport.pan_ended()
            self.setCursor(Qt.CursorShape.ArrowCursor)
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def mouseDoubleClickEvent(self, event: QMouseEvent) -> None:
        self._viewport.recenter()
        self.update()
        event.accept()

    def wheelEvent(self, event: QWheelEvent) -> None:
        delta = event.angleDelta().y()
        if delta == 0:
            return
        factor = WHEEL_ZOOM_FACTOR if delta > 0 else 1.0 / WHEEL_ZOOM_FACTOR
        self._viewport.zoom_by(factor)
        self.zoom_changed.emit(self._viewport.scale)
        self.update()

    # ------------------------------------------------------------------
    # Touch: pinch zoom
    # ------------------------------------------------------------------

    def event(self, event) -> bool:
        if event.type() == QEvent.Type.Gesture:
            return self._gesture_event(event)
        return super().event(event)

    def _gesture_event(self, event: QGestureEvent) -> bool:
        pinch = event.gesture(Qt.GestureType.PinchGesture)
        if not isinstance(pinch, QPinchGesture):
            return False
        self._viewport.pinch_changed(pinch.totalScaleFactor())
        if pinch.state() in (Qt.GestureState.GestureFinished, Qt.GestureState.GestureCanceled):
            self._viewport.pinch_ended()
        self.zoom_changed.emit(self._viewport.scale)
        self.update()
        event.accept()
        return True
