from conftest import FakeBackend

from clickwheel import app
from clickwheel.core.config import AppConfig
from clickwheel.core.models import ActionKind, MenuAction
from clickwheel.core.navigation import INSTALL_HINT


class TestInitAppState:
    """Tests for wiring the store, player and navigator at startup."""

    def test_ready_navigator(self, tmp_path, monkeypatch):
        """Test a writable data dir gives a loaded, empty library."""
        monkeypatch.setattr(app, "QtMediaBackend", FakeBackend)
        state = app.init_app_state(AppConfig(data_dir=str(tmp_path / "data"), initial_volume=0.4))
        try:
            assert state.queued_notifications == []
            assert state.navigator.ready
            assert state.navigator.tracks == []
            assert state.player.volume == 0.4
            assert (tmp_path / "data" / "library.sqlite3").exists()
        finally:
            state.player.destroy()
            state.store.close()

    def test_unusable_data_dir_queues_error(self, tmp_path):
        """Test a data dir that is a file leaves the app on the loading display."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        state = app.init_app_state(AppConfig(data_dir=str(blocker / "data")))
        assert state.store is None
        assert state.navigator is None
        (notice,) = state.queued_notifications
        assert notice.notify_type == "error"
        assert notice.message.startswith("Failed to open the music library")

    def test_backend_failure_queues_error(self, tmp_path, monkeypatch):
        """Test a missing audio backend is reported, not raised."""
        def broken():
            raise RuntimeError("no audio device")

        monkeypatch.setattr(app, "QtMediaBackend", broken)
        state = app.init_app_state(AppConfig(data_dir=str(tmp_path)))
        try:
            assert state.player is None
            (notice,) = state.queued_notifications
            assert "no audio device" in notice.message
        finally:
            state.store.close()


class TestInstallHint:
    """Tests for the About screen install action."""

    def test_names_the_launcher(self, navigator):
        """Test the hint names both the package and the command it installs."""
        seen = []
        navigator.message.connect(lambda text, kind: seen.append((text, kind)))
        navigator._dispatch(MenuAction(kind=ActionKind.INSTALL))
        assert seen == [(INSTALL_HINT, "info")]
        assert "pip install pyclickwheel" in INSTALL_HINT
        assert INSTALL_HINT.endswith("run pyclickwheel")
