"""Add-pattern dialog — form over a ``PatternDraft``.

Stitch / diagram images are read by an ``ImageLoadWorker`` and appended
in the order they were picked.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from PyQt6.QtCore import QDate, Qt
from PyQt6.QtWidgets import (
    QCheckBox, QDateEdit, QDialog, QFileDialog, QFormLayout, QHBoxLayout,
    QLabel, QLineEdit, QMessageBox, QPlainTextEdit, QPushButton, QSlider,
    QVBoxLayout,
)

from crochet_diary.constants import HOOK_PAIRS, MAX_STITCH_IMAGE_SELECTION
from crochet_diary.core.hook_sizes import format_hook_number, format_hook_size
from crochet_diary.core.pattern_form import PatternDraft, PatternValidationError
from crochet_diary.core.pattern_registry import PatternRegistry
from crochet_diary.workers.image_load_worker import ImageLoadWorker

logger = logging.getLogger(__name__)

_IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.heic *.bmp)"


class AddPatternDialog(QDialog):
    """Create a pattern; rejected drafts show the validation message."""

    def __init__(self, registry: PatternRegistry, parent=None):
        super().__init__(parent)
        self._registry = registry
        self._draft = PatternDraft()
        self._worker: ImageLoadWorker | None = None
        self.setWindowTitle("Add Pattern")

        self._name_edit = QLineEdit()
        self._star_box = QCheckBox("Starred")

        self._hook_slider = QSlider(Qt.Orientation.Horizontal)
        self._hook_slider.setRange(0, len(HOOK_PAIRS) - 1)
        self._hook_slider.setSingleStep(1)
        self._hook_slider.setValue(self._draft.hook_index)
        self._hook_slider.valueChanged.connect(self._on_hook_changed)
        self._hook_label = QLabel()

        self._yarn_edit = QLineEdit()
        self._image_label = QLabel("No finished-work image selected")
        pick_image_btn = QPushButton("Choose image...")
        pick_image_btn.clicked.connect(self._pick_main_image)

        self._stitch_label = QLabel()
        pick_stitch_btn = QPushButton("Add stitch / diagram images...")
        pick_stitch_btn.clicked.connect(self._pick_stitch_images)
        clear_stitch_btn = QPushButton("Clear")
        clear_stitch_btn.clicked.connect(self._clear_stitch_images)

        self._date_edit = QDateEdit(QDate.currentDate())
        self._date_edit.setCalendarPopup(True)
        self._works_box = QCheckBox("Add to my works (shown only in the gallery)")
        self._notes_edit = QPlainTextEdit()

        save_btn = QPushButton("Save Pattern")
        save_btn.clicked.connect(self._save)

        name_row = QHBoxLayout()
        name_row.addWidget(self._name_edit)
        name_row.addWidget(self._star_box)
        image_row = QHBoxLayout()
        image_row.addWidget(self._image_label, stretch=1)
        image_row.addWidget(pick_image_btn)
        stitch_row = QHBoxLayout()
        stitch_row.addWidget(self._stitch_label, stretch=1)
        stitch_row.addWidget(pick_stitch_btn)
        stitch_row.addWidget(clear_stitch_btn)

        form = QFormLayout()
        form.addRow("Pattern name", name_row)
        form.addRow("Hook", self._hook_label)
        form.addRow("", self._hook_slider)
        form.addRow("Yarn", self._yarn_edit)
        form.addRow("Image", image_row)
        form.addRow("Stitch images", stitch_row)
        form.addRow("Start date", self._date_edit)
        form.addRow("", self._works_box)
        form.addRow("Notes", self._notes_edit)

        layout = QVBoxLayout(self)
        layout.addLayout(form)
        layout.addWidget(save_btn)

        self._refresh()

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def _pick_main_image(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Choose image", "", _IMAGE_FILTER)
        if not path:
            return
        try:
            self._draft.image_data = Path(path).read_bytes()
        except OSError as exc:
            logger.warning("Failed to read image %s", path, exc_info=True)
            QMessageBox.warning(self, "Cannot Load Image", str(exc))
            return
        self._image_label.setText(Path(path).name)

    def _pick_stitch_images(self) -> None:
        paths, _ = QFileDialog.getOpenFileNames(
            self, "Choose stitch / diagram images", "", _IMAGE_FILTER,
        )
        if not paths:
            return
        paths = paths[:MAX_STITCH_IMAGE_SELECTION]
        self._worker = ImageLoadWorker(self)
        self._worker.setup(paths)
        self._worker.batch_finished.connect(self._on_stitch_images_loaded)
        self._worker.error_occurred.connect(
            lambda msg: QMessageBox.warning(self, "Cannot Load Images", msg)
        )
        self._worker.start()

    def _on_stitch_images_loaded(self, images: list) -> None:
        self._draft.append_stitch_images(images)
        self._refresh()

    def _clear_stitch_images(self) -> None:
        self._draft.clear_stitch_images()
        self._refresh()

    # ------------------------------------------------------------------
    # Form
    # ------------------------------------------------------------------

    def _on_hook_changed(self, value: int) -> None:
        self._draft.set_hook_index(value)
        self._refresh()

    def _refresh(self) -> None:
        self._hook_label.setText(
            f"{format_hook_size(self._draft.hook_size)}  "
            f"({format_hook_number(self._draft.hook_number)})"
        )
        count = len(self._draft.stitch_images)
        self._stitch_label.setText(f"{count} image(s)" if count else "Optional")

    def _collect(self) -> None:
        qdate = self._date_edit.date()
        self._draft.name = self._name_edit.text()
        self._draft.yarn = self._yarn_edit.text()
        self._draft.notes = self._notes_edit.toPlainText()
        self._draft.is_starred = self._star_box.isChecked()
        self._draft.is_in_works = self._works_box.isChecked()
        self._draft.start_date = datetime(
            qdate.year(), qdate.month(), qdate.day(), tzinfo=timezone.utc,
        )

    def _save(self) -> None:
        self._collect()
        try:
            self._registry.create(self._draft)
        except PatternValidationError as exc:
            QMessageBox.warning(self, "Cannot Save", str(exc))
            return
        self.accept()
