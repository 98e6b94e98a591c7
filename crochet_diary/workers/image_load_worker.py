"""Image load worker — background thread for reading picked image files.

Files are read on a small thread pool so a multi-image pick does not block
the UI. Completions arrive in any order; the final list is assembled by
``OrderedImageBatch`` in the order the files were picked.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from PyQt6.QtCore import QThread, pyqtSignal

from crochet_diary.constants import IMAGE_LOAD_THREADS
from crochet_diary.core.image_batch import OrderedImageBatch

logger = logging.getLogger(__name__)


def _read_file(path: Path) -> bytes:
    return Path(path).read_bytes()


def load_images(
    paths: Sequence[Path | str],
    max_workers: int = IMAGE_LOAD_THREADS,
    reader: Callable[[Path], bytes] = _read_file,
    on_loaded: Callable[[int, bytes], None] | None = None,
) -> list[bytes]:
    """Read ``paths`` concurrently and return their bytes in input order.

    Unreadable files are logged and left out.

    Args:
        paths: Image files, in pick order.
        max_workers: Thread pool size.
        reader: Function returning the bytes of one path.
        on_loaded: Called as ``(index, data)`` for every successful load,
            in completion order.
    """
    batch = OrderedImageBatch(len(paths))
    if not paths:
        return []
    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        futures = {
            pool.submit(reader, Path(p)): i for i, p in enumerate(paths)
        }
        for future in as_completed(futures):
            index = futures[future]
            try:
                data = future.result()
            except OSError:
                logger.warning("Failed to load image %s", paths[index], exc_info=True)
                batch.complete(index, None)
                continue
            batch.complete(index, data)
            if on_loaded is not None and data:
                on_loaded(index, data)
    return batch.ordered()


class ImageLoadWorker(QThread):
    """Background thread for loading a batch of picked images.

    Signals:
        image_loaded(int, bytes): One file finished (pick index, bytes).
        batch_finished(list): All loads done; bytes in pick order.
        error_occurred(str): Unexpected failure of the whole batch.

    Usage:
        worker = ImageLoadWorker()
        worker.setup(paths)
        worker.batch_finished.connect(draft.append_stitch_images)
        worker.start()
    """

    image_loaded = pyqtSignal(int, bytes)
    batch_finished = pyqtSignal(list)
    error_occurred = pyqtSignal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._paths: list[Path] = []
        self._max_workers = IMAGE_LOAD_THREADS

    def setup(self, paths: Sequence[Path | str], max_workers: int = IMAGE_LOAD_THREADS) -> None:
        """Configure the batch before starting."""
        self._paths = [Path(p) for p in paths]
        self._max_workers = max_workers

    def run(self) -> None:
        """Load the configured files and emit the ordered result."""
        try:
            images = load_images(
                self._paths,
                max_workers=self._max_workers,
                on_loaded=self.image_loaded.emit,
            )
            self.batch_finished.emit(images)
        except Exception as e:
            logger.exception("Image batch load failed")
            self.error_occurred.emit(str(e))
