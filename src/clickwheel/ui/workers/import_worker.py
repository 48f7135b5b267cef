# ui/workers/import_worker.py
import logging

from PySide6.QtCore import QThread, Signal

from clickwheel.core.errors import StoreUnavailable
from clickwheel.db.store import LibraryStore
from clickwheel.library.importer import ImportProgress, import_files

logger = logging.getLogger(__name__)

class ImportWorker(QThread):
    progress_signal = Signal(object)     # ImportProgress
    finished_signal = Signal(object)     # ImportReport
    error_signal = Signal(str)           # the import never started

    def __init__(self, db_path: str, paths: list[str]):
        super().__init__()
        self.db_path = db_path
        self.paths = paths

    def _emit_progress(self, progress: ImportProgress):
        self.progress_signal.emit(progress)

    def run(self):
        # IMPORTANT: open db connection inside this thread
        try:
            store = LibraryStore.open(self.db_path)
        except StoreUnavailable as e:
            logger.error("Import aborted: %s", e)
            self.error_signal.emit(f"Could not add music: {e}")
            return

        try:
            report = import_files(store, self.paths, on_progress=self._emit_progress)
        finally:
            store.close()
        self.finished_signal.emit(report)
