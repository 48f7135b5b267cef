from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QLabel, QFileDialog, QFrame,
)
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QShortcut, QKeySequence
import logging

from clickwheel.core.navigation import now_playing_line
from clickwheel.library.importer import AUDIO_EXTS, ImportReport
from clickwheel.ui.widgets.click_wheel import ClickWheel
from clickwheel.ui.widgets.screen_view import ScreenView
from clickwheel.ui.widgets.toast import ToastManager
from clickwheel.ui.workers.import_worker import ImportWorker

logger = logging.getLogger(__name__)

AUDIO_FILTER = "Audio files ({})".format(" ".join(f"*{ext}" for ext in sorted(AUDIO_EXTS)))


class MainWindow(QMainWindow):
    def __init__(self, app_state):
        super().__init__()
        self.setWindowTitle("Click Wheel")
        self.app_state = app_state
        self.navigator = app_state.navigator
        self._import_worker: ImportWorker | None = None

        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.layout = QVBoxLayout(self.central_widget)
        self.layout.setContentsMargins(0, 0, 0, 0)

        # --- Device body ---
        self.device = QFrame()
        self.device.setObjectName("Device")
        body = QVBoxLayout(self.device)
        body.setContentsMargins(20, 20, 20, 24)
        body.setSpacing(24)
        self.layout.addWidget(self.device)

        if self.navigator is not None:
            self.screen = ScreenView(self.navigator)
        else:
            # library could not be opened: stay on the loading display
            self.screen = QLabel("Loading…")
            self.screen.setObjectName("Screen")
            self.screen.setFixedSize(240, 200)
            self.screen.setAlignment(Qt.AlignmentFlag.AlignCenter)
        body.addWidget(self.screen, 0, Qt.AlignmentFlag.AlignHCenter)

        self.wheel = ClickWheel()
        body.addWidget(self.wheel, 0, Qt.AlignmentFlag.AlignHCenter)

        self.lbl_now_playing = QLabel()
        self.lbl_now_playing.setObjectName("NowPlaying")
        self.lbl_now_playing.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.lbl_now_playing.setFixedHeight(16)
        body.addWidget(self.lbl_now_playing)

        self.toasts = ToastManager(self.device)
        self.app_state.notification.connect(self._on_notify)

        if self.navigator is not None:
            self._wire_navigator()

        self.setStyleSheet("""
            QFrame#Device {
                background: qlineargradient(x1:0, y1:0, x2:0, y2:1, stop:0 #fafafa, stop:1 #e4e4e7);
            }
            QLabel#Screen {
                background: #e8f0f8;
                border: 2px solid #3f3f46;
                border-radius: 6px;
                color: #18181b;
            }
            QLabel#NowPlaying {
                color: #52525b;
                font-size: 11px;
            }
        """)
        self.setFixedSize(self.sizeHint())
        QTimer.singleShot(0, self.show_queued_notifications)

    def _wire_navigator(self):
        nav = self.navigator

        # --- Click wheel ---
        self.wheel.stepped.connect(self._on_step)
        self.wheel.selectClicked.connect(lambda: self._when_ready(nav.activate))
        self.wheel.menuClicked.connect(lambda: self._when_ready(nav.back))
        self.wheel.playPauseClicked.connect(lambda: self._when_ready(nav.toggle_play_pause))
        self.wheel.prevClicked.connect(lambda: self._when_ready(nav.previous_track))
        self.wheel.nextClicked.connect(lambda: self._when_ready(nav.next_track))

        # --- Screen surface ---
        self.screen.stepped.connect(self._on_step)
        self.screen.rowClicked.connect(lambda i: self._when_ready(lambda: nav.select_index(i)))
        self.screen.pickFilesRequested.connect(self.pick_files)
        self.screen.pickFolderRequested.connect(self.pick_folder)
        self.screen.seekRequested.connect(lambda f: self._when_ready(lambda: nav.seek_fraction(f)))
        self.screen.volumeRequested.connect(lambda v: self._when_ready(lambda: nav.set_volume(v)))

        # --- Shortcuts ---
        QShortcut(QKeySequence("Up"), self, activated=lambda: self._on_step(-1))
        QShortcut(QKeySequence("Down"), self, activated=lambda: self._on_step(1))
        QShortcut(QKeySequence("Return"), self, activated=lambda: self._when_ready(nav.activate))
        QShortcut(QKeySequence("Enter"), self, activated=lambda: self._when_ready(nav.activate))
        QShortcut(QKeySequence("Escape"), self, activated=lambda: self._when_ready(nav.back))
        QShortcut(QKeySequence("Backspace"), self, activated=lambda: self._when_ready(nav.back))
        QShortcut(QKeySequence("Space"), self, activated=lambda: self._when_ready(nav.toggle_play_pause))
        QShortcut(QKeySequence("Left"), self, activated=lambda: self._when_ready(nav.previous_track))
        QShortcut(QKeySequence("Right"), self, activated=lambda: self._when_ready(nav.next_track))

        nav.importRequested.connect(self.pick_files)
        nav.message.connect(self.app_state.notify)
        nav.changed.connect(self._refresh_now_playing)
        self._refresh_now_playing()

    def _when_ready(self, fn):
        if self.navigator.ready:
            fn()

    def _on_step(self, n: int):
        self._when_ready(lambda: self.navigator.step(n))

    def _refresh_now_playing(self):
        nav = self.navigator
        self.lbl_now_playing.setText(now_playing_line(nav.snapshot(), nav.now_playing_track()))

    # ------------------ import ------------------
    def pick_files(self):
        if self.navigator.importing:
            return
        paths, _ = QFileDialog.getOpenFileNames(self, "Select Audio Files", "", AUDIO_FILTER)
        self.start_import(paths)

    def pick_folder(self):
        if self.navigator.importing:
            return
        folder = QFileDialog.getExistingDirectory(self, "Select Folder")
        self.start_import([folder] if folder else [])

    def start_import(self, paths: list[str]):
        if not paths:
            return  # dialog cancelled

        store = self.app_state.store
        if store is None or not store.path:
            self.app_state.notify("The library is not available.", "error")
            return

        self.navigator.begin_import()
        self._import_worker = ImportWorker(store.path, paths)
        self._import_worker.progress_signal.connect(self.navigator.update_import_progress)
        self._import_worker.finished_signal.connect(self._import_finished)
        self._import_worker.error_signal.connect(self._import_failed)
        self._import_worker.start()

    def _import_finished(self, report: ImportReport):
        logger.info("Import finished: %s", report)
        self.navigator.finish_import(report)
        self._drop_worker()

    def _import_failed(self, error: str):
        self.navigator.abort_import(error)
        self._drop_worker()

    def _drop_worker(self):
        if self._import_worker is not None:
            self._import_worker.wait()
            self._import_worker.deleteLater()
            self._import_worker = None

    # ------------------ notifications ------------------
    def _on_notify(self, n):
        msg = getattr(n, "message", "") or ""
        if not msg:
            return
        kind = (getattr(n, "notify_type", "info") or "info").lower()
        self.toasts.show_toast(msg, notify_type=kind, timeout_ms=3000)

    def show_queued_notifications(self):
        for n in self.app_state.take_queued_notifications():
            self._on_notify(n)

    def closeEvent(self, event):
        if self._import_worker is not None and self._import_worker.isRunning():
            self._import_worker.wait()
        super().closeEvent(event)
