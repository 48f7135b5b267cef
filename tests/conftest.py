import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from PySide6.QtCore import QCoreApplication

from clickwheel.core.errors import PlaybackRejected
from clickwheel.core.models import StoredTrack, Track
from clickwheel.core.navigation import Navigator
from clickwheel.db import database
from clickwheel.db.store import LibraryStore
from clickwheel.player.backend import AudioBackend
from clickwheel.player.player import Player


class FakeBackend(AudioBackend):
    """Records calls instead of producing sound."""

    def __init__(self):
        super().__init__()
        self.calls = []
        self.reject_play = False
        self.reject_open = False
        self.current_position = 0.0
        self.volume = None
        self.opened = []
        self.released = []

    def open(self, payload, source_name=""):
        if self.reject_open:
            raise PlaybackRejected("cannot decode")
        handle = object()
        self.opened.append((handle, payload, source_name))
        self.calls.append("open")
        return handle

    def release(self, handle):
        self.released.append(handle)
        self.calls.append("release")

    def play(self):
        if self.reject_play:
            raise PlaybackRejected("not allowed")
        self.calls.append("play")

    def pause(self):
        self.calls.append("pause")

    def stop(self):
        self.calls.append("stop")

    def set_position(self, seconds):
        self.current_position = seconds
        self.calls.append(("seek", seconds))

    def position(self):
        return self.current_position

    def set_volume(self, volume_0_to_1):
        self.volume = volume_0_to_1


def make_track(title, artist="Unknown Artist", album="Unknown Album", duration=180.0, track_id=None):
    return Track(
        id=track_id or f"id-{title.lower().replace(' ', '-')}",
        title=title,
        artist=artist,
        album=album,
        duration=duration,
        file_name=f"{title}.mp3",
        mime_type="audio/mpeg",
        size=3,
        date_added=0,
    )


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    """Qt core application for signal delivery."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def store():
    """In-memory library store."""
    s = LibraryStore(database.connect(":memory:"))
    yield s
    s.close()


@pytest.fixture
def add_track(store):
    """Insert a track with a small payload and return its metadata."""
    def _add(title, artist="Unknown Artist", album="Unknown Album", duration=180.0, track_id=None):
        track = make_track(title, artist, album, duration, track_id)
        assert store.put(StoredTrack(meta=track, payload=b"abc")).ok
        return track
    return _add


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def player(store, backend):
    p = Player(store, backend, volume=0.8)
    yield p
    p.destroy()


@pytest.fixture
def navigator(store, player):
    nav = Navigator(store, player)
    nav.reload_library()
    return nav
