"""Main window — pattern library, finished works gallery, add / open actions.

Layout:
  Tab "Library": recommended patterns, then the user's collection
  Tab "Works":   finished works, sortable by start date
  Toolbar:       Add pattern, Track progress
"""

import logging
from pathlib import Path

from PyQt6.QtWidgets import (
    QComboBox, QHBoxLayout, QLabel, QListWidget, QListWidgetItem,
    QMainWindow, QPushButton, QTabWidget, QVBoxLayout, QWidget,
)
from PyQt6.QtCore import Qt, QSettings
from PyQt6.QtGui import QAction

from crochet_diary.constants import (
    APP_NAME, APP_VERSION, MIN_WINDOW_WIDTH, MIN_WINDOW_HEIGHT,
)
from crochet_diary.core.hook_sizes import format_hook_size
from crochet_diary.core.pattern_registry import PatternRegistry, SortOrder
from crochet_diary.core.workspace_session import WorkspaceSession, workspace_key_for
from crochet_diary.database import (
    DatabaseManager,
    PatternStore,
    SettingsRepository,
    WorkspaceStateStore,
)
from crochet_diary.models.pattern import CrochetPattern
from crochet_diary.models.recommended import RECOMMENDED_PATTERNS, find_recommended
from crochet_diary.ui.dialogs import AddPatternDialog, DiagramDialog, WorkspaceDialog

logger = logging.getLogger(__name__)

ASSET_DIR = Path(__file__).resolve().parent.parent / "assets"

_ROLE = Qt.ItemDataRole.UserRole


class MainWindow(QMainWindow):
    """Application main window."""

    def __init__(self, db_path: Path | str | None = None):
        super().__init__()
        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION}")
        self.setMinimumSize(MIN_WINDOW_WIDTH, MIN_WINDOW_HEIGHT)

        # Persistence
        self._db_manager = DatabaseManager(db_path)
        self._db_manager.initialize_database()
        logger.info("Using database %s", self._db_manager.db_path)
        settings = SettingsRepository(self._db_manager)
        self._workspace_store = WorkspaceStateStore(settings)
        self._registry = PatternRegistry(PatternStore(settings), self)
        self._registry.patterns_changed.connect(self._refresh_lists)

        self._setup_ui()
        self._refresh_lists()
        self._restore_state()

    # ------------------------------------------------------------------
    # UI
    # ------------------------------------------------------------------

    def _setup_ui(self) -> None:
        toolbar = self.addToolBar("Main")
        add_action = QAction("Add Pattern", self)
        add_action.triggered.connect(self._add_pattern)
        toolbar.addAction(add_action)
        track_action = QAction("Track Progress", self)
        track_action.triggered.connect(self._track_selected)
        toolbar.addAction(track_action)

        # Library tab
        self._recommended_list = QListWidget()
        for item in RECOMMENDED_PATTERNS:
            entry = QListWidgetItem(item.name)
            entry.setData(_ROLE, item.id)
            self._recommended_list.addItem(entry)
        self._recommended_list.itemDoubleClicked.connect(self._open_recommended)

        self._collection_list = QListWidget()
        self._collection_list.itemDoubleClicked.connect(self._open_user_workspace)
        self._collection_empty = QLabel("No images have been collected yet.")

        library = QWidget()
        lib_layout = QVBoxLayout(library)
        lib_layout.addWidget(QLabel("Recommended"))
        lib_layout.addWidget(self._recommended_list)
        lib_layout.addWidget(QLabel("My Collection"))
        lib_layout.addWidget(self._collection_empty)
        lib_layout.addWidget(self._collection_list, stretch=1)

        # Works tab
        self._sort_combo = QComboBox()
        self._sort_combo.addItem("Latest → Earliest", SortOrder.LATEST_TO_EARLIEST)
        self._sort_combo.addItem("Earliest → Latest", SortOrder.EARLIEST_TO_LATEST)
        self._sort_combo.currentIndexChanged.connect(lambda _i: self._refresh_lists())

        self._works_list = QListWidget()
        self._works_list.itemDoubleClicked.connect(self._open_user_workspace)
        self._works_empty = QLabel("No finished works yet.")

        star_btn = QPushButton("Star / Unstar")
        star_btn.clicked.connect(self._toggle_star_selected_work)
        delete_btn = QPushButton("Delete")
        delete_btn.clicked.connect(self._delete_selected_work)

        works_bar = QHBoxLayout()
        works_bar.addWidget(QLabel("Sort"))
        works_bar.addWidget(self._sort_combo)
        works_bar.addStretch()
        works_bar.addWidget(star_btn)
        works_bar.addWidget(delete_btn)

        works = QWidget()
        works_layout = QVBoxLayout(works)
        works_layout.addLayout(works_bar)
        works_layout.addWidget(self._works_empty)
        works_layout.addWidget(self._works_list, stretch=1)

        self._tabs = QTabWidget()
        self._tabs.addTab(library, "Library")
        self._tabs.addTab(works, "Works")
        self.setCentralWidget(self._tabs)

    def _refresh_lists(self, _patterns=None) -> None:
        self._fill(self._collection_list, self._registry.library_patterns())
        self._collection_empty.setVisible(self._collection_list.count() == 0)

        order = self._sort_combo.currentData() or SortOrder.LATEST_TO_EARLIEST
        self._fill(self._works_list, self._registry.works_patterns(order))
        self._works_empty.setVisible(self._works_list.count() == 0)

    @staticmethod
    def _fill(widget: QListWidget, patterns: list[CrochetPattern]) -> None:
        widget.clear()
        for p in patterns:
            star = "★ " if p.is_starred else ""
            date = f"  {p.start_date:%Y-%m-%d}" if p.start_date else ""
            entry = QListWidgetItem(f"{star}{p.name}  ({format_hook_size(p.hook_size)}){date}")
            entry.setData(_ROLE, p.id)
            widget.addItem(entry)

    def _selected_pattern(self) -> CrochetPattern | None:
        widget = (self._collection_list if self._tabs.currentIndex() == 0
                  else self._works_list)
        item = widget.currentItem()
        if item is None:
            return None
        return self._registry.find(item.data(_ROLE))

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _add_pattern(self) -> None:
        AddPatternDialog(self._registry, self).exec()

    def _track_selected(self) -> None:
        pattern = self._selected_pattern()
        if pattern is not None:
            DiagramDialog(self._registry, pattern, self).exec()

    def _open_user_workspace(self, item: QListWidgetItem) -> None:
        pattern = self._registry.find(item.data(_ROLE))
        if pattern is None:
            return
        session = WorkspaceSession(
            self._workspace_store, workspace_key_for(pattern), pattern.image_count,
        )
        WorkspaceDialog(
            session,
            pattern.name,
            pattern.all_images(),
            pattern.hook_size,
            pattern.yarn,
            pattern.notes,
            on_delete=lambda: self._registry.delete_pattern(pattern.id),
            parent=self,
        ).exec()

    def _open_recommended(self, item: QListWidgetItem) -> None:
        recommended = find_recommended(item.data(_ROLE))
        if recommended is None:
            return
        images = []
        for path in recommended.image_paths(ASSET_DIR):
            try:
                images.append(path.read_bytes())
            except OSError:
                logger.warning("Failed to read asset %s", path, exc_info=True)
        session = WorkspaceSession(self._workspace_store, recommended.id, len(images))
        WorkspaceDialog(
            session,
            recommended.name,
            images,
            recommended.hook_size,
            recommended.yarn_text,
            parent=self,
        ).exec()

    def _toggle_star_selected_work(self) -> None:
        item = self._works_list.currentItem()
        if item is not None:
            self._registry.toggle_starred(item.data(_ROLE))

    def _delete_selected_work(self) -> None:
        item = self._works_list.currentItem()
        if item is not None:
            self._registry.delete_pattern(item.data(_ROLE))

    # ------------------------------------------------------------------
    # Window state
    # ------------------------------------------------------------------

    def closeEvent(self, event) -> None:
        settings = QSettings()
        settings.setValue("mainwindow/geometry", self.saveGeometry())
        self._db_manager.close()
        super().closeEvent(event)

    def _restore_state(self) -> None:
        settings = QSettings()
        geometry = settings.value("mainwindow/geometry")
        if geometry:
            self.restoreGeometry(geometry)
