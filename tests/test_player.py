import math

import pytest

from clickwheel.player.player import PlayerStatus


class TestPlayerLoad:
    """Tests for loading tracks into the engine."""

    def test_load_success(self, player, add_track, backend):
        """Test a load opens the payload paused at zero."""
        track = add_track("Alpha")
        changes = []
        player.trackChanged.connect(changes.append)

        assert player.load_track(track.id, track.file_name) is True
        assert player.status == PlayerStatus.PAUSED
        assert player.loaded_track_id == track.id
        assert player.current_time == 0.0
        assert player.duration is None
        assert backend.opened[0][1:] == (b"abc", "Alpha.mp3")
        assert changes == [track.id]

    def test_load_missing_keeps_state(self, player, add_track):
        """Test a missing record leaves the current track playing."""
        track = add_track("Alpha")
        player.load_track(track.id)
        player.play()

        assert player.load_track("missing") is False
        assert player.status == PlayerStatus.PLAYING
        assert player.loaded_track_id == track.id

    def test_reload_releases_previous_handle(self, player, add_track, backend):
        """Test only one payload handle is held at a time."""
        a = add_track("Alpha")
        b = add_track("Beta")
        player.load_track(a.id)
        first = backend.opened[0][0]
        player.load_track(b.id)
        assert backend.released == [first]

    def test_backend_refuses_payload(self, player, add_track, backend):
        """Test an undecodable payload leaves nothing loaded."""
        track = add_track("Alpha")
        backend.reject_open = True
        assert player.load_track(track.id) is False
        assert player.status == PlayerStatus.IDLE
        assert player.loaded_track_id is None

    def test_load_started_from_status_listener_wins(self, player, add_track, backend):
        """Test a load issued while another is loading supersedes it."""
        a = add_track("Alpha")
        b = add_track("Beta")
        started = []

        def on_status(status):
            if status == PlayerStatus.LOADING and not started:
                started.append(b.id)
                assert player.load_track(b.id, b.file_name) is True

        player.statusChanged.connect(on_status)
        assert player.load_track(a.id, a.file_name) is False
        assert started == [b.id]
        assert player.loaded_track_id == b.id
        assert player.status == PlayerStatus.PAUSED
        assert [o[2] for o in backend.opened] == ["Beta.mp3"]

    def test_events_ignored_without_track(self, player, backend):
        """Test stray backend events do nothing while unloaded."""
        backend.timeUpdated.emit(12.0, 100.0)
        backend.finished.emit()
        assert player.current_time == 0.0
        assert player.status == PlayerStatus.IDLE


class TestPlayerTransport:
    """Tests for play, pause and seek."""

    @pytest.fixture(autouse=True)
    def _loaded(self, player, add_track, backend):
        self.track = add_track("Alpha")
        player.load_track(self.track.id)
        backend.timeUpdated.emit(0.0, 200.0)

    def test_play_pause_toggle(self, player):
        """Test toggling alternates between playing and paused."""
        player.toggle_play_pause()
        assert player.status == PlayerStatus.PLAYING
        player.toggle_play_pause()
        assert player.status == PlayerStatus.PAUSED

    def test_rejected_play_stays_paused(self, player, backend):
        """Test a refused start is swallowed."""
        backend.reject_play = True
        player.play()
        assert player.status == PlayerStatus.PAUSED

    def test_seek_clamps_to_duration(self, player, backend):
        """Test seeks past the end land on the end."""
        player.seek(500)
        assert player.current_time == 200.0
        assert backend.current_position == 200.0

    @pytest.mark.parametrize("target", [-5, math.nan, math.inf])
    def test_invalid_seek_ignored(self, player, backend, target):
        """Test negative and non-finite seeks change nothing."""
        player.seek(42)
        player.seek(target)
        assert player.current_time == 42.0
        assert backend.current_position == 42.0

    def test_seek_unknown_duration(self, player, add_track):
        """Test an unknown duration clamps seeks to zero."""
        other = add_track("Beta")
        player.load_track(other.id)
        player.seek(30)
        assert player.current_time == 0.0

    def test_progress_updates(self, player, backend):
        """Test backend time updates reach listeners."""
        seen = []
        player.positionChanged.connect(seen.append)
        backend.timeUpdated.emit(12.5, 200.0)
        assert player.current_time == 12.5
        assert seen == [12.5]

    def test_end_of_track(self, player, backend):
        """Test the end of media moves to ENDED and notifies."""
        ended = []
        player.ended.connect(lambda: ended.append(True))
        player.play()
        backend.finished.emit()
        assert player.status == PlayerStatus.ENDED
        assert ended == [True]


class TestPlayerVolume:
    """Tests for the volume property."""

    def test_initial_volume_applied(self, player, backend):
        """Test the backend starts at the configured volume."""
        assert player.volume == 0.8
        assert backend.volume == 0.8

    def test_volume_clamped(self, player):
        """Test volume stays within 0..1."""
        player.volume = 1.7
        assert player.volume == 1.0
        player.volume = -0.2
        assert player.volume == 0.0

    def test_volume_ignores_nan(self, player):
        """Test non-finite volume is ignored."""
        player.volume = math.nan
        assert player.volume == 0.8

    def test_volume_persists_across_loads(self, player, add_track):
        """Test a new track keeps the chosen volume."""
        player.volume = 0.3
        player.load_track(add_track("Alpha").id)
        assert player.volume == 0.3


class TestPlayerTeardown:
    """Tests for stop and destroy."""

    def test_stop_unloads(self, player, add_track, backend):
        """Test stop releases the handle and unloads."""
        track = add_track("Alpha")
        player.load_track(track.id)
        player.play()
        player.stop()
        assert player.loaded_track_id is None
        assert player.status == PlayerStatus.IDLE
        assert len(backend.released) == 1

    def test_destroy_once(self, player, add_track, backend):
        """Test a second destroy does nothing."""
        player.load_track(add_track("Alpha").id)
        player.destroy()
        calls = list(backend.calls)
        player.destroy()
        assert backend.calls == calls

    def test_snapshot(self, player, add_track):
        """Test the snapshot mirrors the engine."""
        track = add_track("Alpha")
        player.load_track(track.id)
        player.play()
        snap = player.snapshot()
        assert snap.loaded_track_id == track.id
        assert snap.playing is True
        assert snap.volume == 0.8
