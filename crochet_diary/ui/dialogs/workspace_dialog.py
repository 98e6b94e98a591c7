"""Workspace dialog — every image of an entry, each with its own marker.

Works for user patterns and built-in recommended patterns alike. State is
kept in a ``WorkspaceSession`` and saved when the dialog closes.
"""

from __future__ import annotations

from PyQt6.QtWidgets import (
    QDialog, QHBoxLayout, QLabel, QMessageBox, QPushButton, QScrollArea,
    QVBoxLayout, QWidget,
)

from crochet_diary.core.hook_sizes import format_hook_size
from crochet_diary.core.workspace_session import WorkspaceSession
from crochet_diary.ui.diagram_view import DiagramView


class WorkspaceDialog(QDialog):
    """Scrollable image column plus round / stitch counters.

    Args:
        session: Viewing state for this entry.
        title: Window title.
        images: Encoded images, main image first.
        hook_size: Hook size [mm] for the info line.
        yarn: Yarn text for the info line.
        notes: Notes text.
        on_delete: If given, a delete button is shown; called after the
            user confirms.
    """

    def __init__(
        self,
        session: WorkspaceSession,
        title: str,
        images: list[bytes],
        hook_size: float,
        yarn: str = "",
        notes: str = "",
        on_delete=None,
        parent=None,
    ):
        super().__init__(parent)
        self._session = session
        self._on_delete = on_delete
        self.setWindowTitle(title)
        self.resize(640, 860)

        column = QWidget()
        column_layout = QVBoxLayout(column)
        self._views: list[DiagramView] = []
        for index, data in enumerate(images):
            view = DiagramView()
            view.setMinimumHeight(420)
            view.set_image_data(data)
            marker = session.marker(index)
            view.set_marker(marker.x, marker.y)
            view.marker_moved.connect(
                lambda x, y, i=index: self._session.set_marker(i, x, y)
            )
            column_layout.addWidget(view)
            self._views.append(view)

        info = QLabel(
            f"{format_hook_size(hook_size)}    {yarn.strip() or '(none)'}\n\n"
            f"Notes:\n{notes.strip()}"
        )
        info.setWordWrap(True)
        column_layout.addWidget(info)

        if on_delete is not None:
            delete_btn = QPushButton("Delete this work")
            delete_btn.clicked.connect(self._confirm_delete)
            column_layout.addWidget(delete_btn)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(column)

        self._round_label = QLabel()
        self._stitch_label = QLabel()
        bar = QHBoxLayout()
        bar.addWidget(self._round_label)
        bar.addWidget(self._stepper_button("-", self._session.decrement_round))
        bar.addWidget(self._stepper_button("+", self._session.increment_round))
        bar.addWidget(self._stitch_label)
        bar.addWidget(self._stepper_button("-", self._session.decrement_stitch))
        bar.addWidget(self._stepper_button("+", self._session.increment_stitch))
        bar.addStretch()
        reset_btn = QPushButton("Reset")
        reset_btn.clicked.connect(self._confirm_reset)
        bar.addWidget(reset_btn)

        layout = QVBoxLayout(self)
        layout.addWidget(scroll, stretch=1)
        layout.addLayout(bar)
        self._refresh_counters()

    def _stepper_button(self, text: str, action) -> QPushButton:
        btn = QPushButton(text)
        btn.setFixedWidth(36)

        def _step():
            action()
            self._refresh_counters()

        btn.clicked.connect(_step)
        return btn

    def _refresh_counters(self) -> None:
        self._round_label.setText(f"Round: {self._session.round}")
        self._stitch_label.setText(f"Stitch: {self._session.stitch}")

    def _confirm_reset(self) -> None:
        answer = QMessageBox.question(
            self,
            "Reset progress?",
            "This will reset the round, stitch, and marker position.",
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        self._session.reset()
        for index, view in enumerate(self._views):
            marker = self._session.marker(index)
            view.set_marker(marker.x, marker.y)
            view.reset_view()
        self._refresh_counters()

    def _confirm_delete(self) -> None:
        answer = QMessageBox.question(
            self, "Delete this work?", "This action cannot be undone.",
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        self._on_delete()
        self.reject()

    def done(self, result: int) -> None:
        self._session.save()
        super().done(result)
