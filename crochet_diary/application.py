"""Application factory — QApplication creation, palette and font."""

import logging

from PyQt6.QtCore import qInstallMessageHandler, QtMsgType
from PyQt6.QtGui import QColor, QFont, QPalette
from PyQt6.QtWidgets import QApplication

from crochet_diary.constants import APP_NAME, APP_ORGANIZATION, APP_VERSION
from crochet_diary.ui.styles.colors import (
    CREAM_BACKGROUND,
    SOFT_BEIGE,
    SOFT_BROWN_TEXT,
    WARM_BROWN,
)

logger = logging.getLogger(__name__)

_QT_LOG_LEVELS = {
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


def _qt_message_handler(msg_type, context, message):
    """Forward Qt warnings and errors to ``logging``.

    QPainter warnings from widgets painted before they have a size are
    dropped; debug/info messages are ignored.
    """
    if "QPainter" in message:
        return
    level = _QT_LOG_LEVELS.get(msg_type)
    if level is not None:
        logger.log(level, "Qt: %s", message)


def _warm_palette() -> QPalette:
    palette = QPalette()
    palette.setColor(QPalette.ColorRole.Window, QColor(CREAM_BACKGROUND))
    palette.setColor(QPalette.ColorRole.Base, QColor(CREAM_BACKGROUND))
    palette.setColor(QPalette.ColorRole.AlternateBase, QColor(SOFT_BEIGE))
    palette.setColor(QPalette.ColorRole.Button, QColor(SOFT_BEIGE))
    palette.setColor(QPalette.ColorRole.Highlight, QColor(WARM_BROWN))
    for role in (QPalette.ColorRole.WindowText, QPalette.ColorRole.Text,
                 QPalette.ColorRole.ButtonText):
        palette.setColor(role, QColor(SOFT_BROWN_TEXT))
    return palette


def create_application(argv: list[str]) -> QApplication:
    """Create and configure the QApplication instance."""
    qInstallMessageHandler(_qt_message_handler)

    app = QApplication(argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)
    app.setOrganizationName(APP_ORGANIZATION)
    app.setPalette(_warm_palette())

    font = QFont("Helvetica Neue", 11)
    font.setStyleHint(QFont.StyleHint.SansSerif)
    app.setFont(font)

    return app
