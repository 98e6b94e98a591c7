"""Crochet Diary — Entry Point."""
import sys

from crochet_diary.application import create_application
from crochet_diary.ui.main_window import MainWindow


def main(argv: list[str] | None = None) -> int:
    app = create_application(sys.argv if argv is None else argv)
    window = MainWindow()
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
