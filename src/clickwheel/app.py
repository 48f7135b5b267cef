import logging
import sys

from PySide6.QtCore import QStandardPaths
from PySide6.QtWidgets import QApplication

from clickwheel.core.config import AppConfig, load_config, setup_logging
from clickwheel.core.errors import StoreUnavailable
from clickwheel.core.navigation import Navigator
from clickwheel.core.state import AppState, Notify
from clickwheel.core.utils import is_installed
from clickwheel.db.database import debug_schema, initialize_database
from clickwheel.db.store import LibraryStore
from clickwheel.player.backend import QtMediaBackend
from clickwheel.player.player import Player
from clickwheel.ui.main_window import MainWindow

logger = logging.getLogger("clickwheel")

APP_NAME = "pyclickwheel"


def get_app_data_dir() -> str:
    return QStandardPaths.writableLocation(QStandardPaths.AppDataLocation)


def init_app_state(config: AppConfig) -> AppState:
    app_state = AppState()
    app_state.config = config

    try:
        db = initialize_database(config.data_dir, config.db_file_name)
    except StoreUnavailable as e:
        logger.error("%s", e)
        app_state.queued_notifications.append(
            Notify(message=f"Failed to open the music library: {e}", notify_type="error")
        )
        return app_state

    if config.debug_schema:
        print("\n[tracks table schema]")
        for line in debug_schema(db):
            print(line)

    app_state.store = LibraryStore(db, config.db_path)

    try:
        backend = QtMediaBackend()
    except Exception as e:
        logger.exception("Audio backend unavailable")
        app_state.queued_notifications.append(
            Notify(message=f"Failed to initialize audio player: {e}", notify_type="error")
        )
        return app_state

    app_state.player = Player(app_state.store, backend, volume=config.initial_volume)
    app_state.navigator = Navigator(app_state.store, app_state.player, installed=is_installed())
    if not app_state.navigator.reload_library():
        app_state.queued_notifications.append(
            Notify(message="Failed to read the music library.", notify_type="error")
        )

    return app_state


def main() -> int:
    qt_app = QApplication(sys.argv)
    qt_app.setApplicationName(APP_NAME)

    config = load_config(default_data_dir=get_app_data_dir())
    setup_logging(config.log_level)

    app_state = init_app_state(config)
    if app_state.player is not None:
        qt_app.aboutToQuit.connect(app_state.player.destroy)

    main_window = MainWindow(app_state)
    main_window.show()

    return qt_app.exec()
