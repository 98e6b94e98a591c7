"""Dialogs — add pattern, diagram progress, multi-image workspace."""

from crochet_diary.ui.dialogs.add_pattern_dialog import AddPatternDialog
from crochet_diary.ui.dialogs.diagram_dialog import DiagramDialog
from crochet_diary.ui.dialogs.workspace_dialog import WorkspaceDialog

__all__ = [
    "AddPatternDialog",
    "DiagramDialog",
    "WorkspaceDialog",
]
