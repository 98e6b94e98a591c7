"""Diagram dialog — progress tracking on a pattern's primary image.

Round / stitch counters and the marker write straight through the
registry (and therefore to the store) on every change.
"""

from PyQt6.QtWidgets import (
    QDialog, QHBoxLayout, QLabel, QMessageBox, QPushButton, QSpinBox,
    QVBoxLayout,
)

from crochet_diary.constants import MAX_COUNTER, MIN_COUNTER
from crochet_diary.core.pattern_registry import PatternRegistry
from crochet_diary.models.pattern import CrochetPattern
from crochet_diary.ui.diagram_view import DiagramView


class DiagramDialog(QDialog):
    """Single-image diagram with two counters and a reset button."""

    def __init__(self, registry: PatternRegistry, pattern: CrochetPattern, parent=None):
        super().__init__(parent)
        self._registry = registry
        self._pattern = pattern
        self.setWindowTitle(pattern.name)
        self.resize(720, 720)

        self._view = DiagramView()
        self._view.set_image_data(pattern.image_data)
        self._view.set_marker(pattern.marker_x_ratio, pattern.marker_y_ratio)
        self._view.marker_moved.connect(self._on_marker_moved)

        self._round_spin = QSpinBox()
        self._round_spin.setRange(MIN_COUNTER, MAX_COUNTER)
        self._round_spin.setValue(pattern.current_round)
        self._round_spin.valueChanged.connect(self._on_round_changed)

        self._stitch_spin = QSpinBox()
        self._stitch_spin.setRange(MIN_COUNTER, MAX_COUNTER)
        self._stitch_spin.setValue(pattern.current_stitch)
        self._stitch_spin.valueChanged.connect(self._on_stitch_changed)

        reset_btn = QPushButton("Reset")
        reset_btn.clicked.connect(self._confirm_reset)

        bar = QHBoxLayout()
        bar.addWidget(QLabel("Round"))
        bar.addWidget(self._round_spin)
        bar.addWidget(QLabel("Stitch"))
        bar.addWidget(self._stitch_spin)
        bar.addStretch()
        bar.addWidget(reset_btn)

        layout = QVBoxLayout(self)
        layout.addWidget(self._view, stretch=1)
        layout.addLayout(bar)

    def _on_marker_moved(self, x: float, y: float) -> None:
        self._registry.update_progress(self._pattern, x_ratio=x, y_ratio=y)

    def _on_round_changed(self, value: int) -> None:
        self._registry.update_progress(self._pattern, round=value)

    def _on_stitch_changed(self, value: int) -> None:
        self._registry.update_progress(self._pattern, stitch=value)

    def _confirm_reset(self) -> None:
        answer = QMessageBox.question(
            self,
            "Reset progress?",
            "This will reset the round, stitch, and marker position.",
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        self._registry.reset_progress(self._pattern)
        current = self._registry.find(self._pattern.id) or self._pattern
        for spin, value in ((self._round_spin, current.current_round),
                            (self._stitch_spin, current.current_stitch)):
            spin.blockSignals(True)
            spin.setValue(value)
            spin.blockSignals(False)
        self._view.set_marker(current.marker_x_ratio, current.marker_y_ratio)
        self._view.reset_view()
