# clickwheel/player/player.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from PySide6.QtCore import QObject, Signal

from clickwheel.core.errors import InvalidSeek, PlaybackRejected
from clickwheel.core.utils import clamp
from clickwheel.db.store import LibraryStore
from .backend import AudioBackend

logger = logging.getLogger(__name__)

class PlayerStatus(Enum):
    IDLE = auto()
    LOADING = auto()
    PAUSED = auto()
    PLAYING = auto()
    ENDED = auto()

@dataclass(frozen=True)
class PlaybackSnapshot:
    loaded_track_id: str | None
    status: PlayerStatus
    current_time: float
    duration: float | None     # None until the backend reports it
    volume: float

    @property
    def playing(self) -> bool:
        return self.status == PlayerStatus.PLAYING

class Player(QObject):
    statusChanged = Signal(object)      # PlayerStatus
    positionChanged = Signal(float)     # seconds
    durationChanged = Signal(float)     # seconds
    trackChanged = Signal(object)       # track id | None
    volumeChanged = Signal(float)
    ended = Signal()

    def __init__(self, store: LibraryStore, backend: AudioBackend, volume: float = 0.8):
        super().__init__()
        self.store = store
        self.backend = backend

        self.status = PlayerStatus.IDLE
        self.loaded_track_id: str | None = None
        self.current_time: float = 0.0
        self.duration: Optional[float] = None

        self._handle = None
        self._load_seq = 0
        self._destroyed = False

        self._volume = clamp(float(volume), 0.0, 1.0)
        self.backend.set_volume(self._volume)

        self.backend.timeUpdated.connect(self._on_time_update)
        self.backend.playingChanged.connect(self._on_playing_changed)
        self.backend.finished.connect(self._on_finished)

    # ----------------------------
    # Backend handlers
    # ----------------------------

    def _on_time_update(self, position: float, duration: float) -> None:
        if self.loaded_track_id is None or self.status == PlayerStatus.LOADING:
            return
        if duration and duration > 0 and duration != self.duration:
            self.duration = float(duration)
            self.durationChanged.emit(self.duration)
        pos = max(0.0, float(position))
        if self.duration is not None:
            pos = min(pos, self.duration)
        self.current_time = pos
        self.positionChanged.emit(pos)

    def _on_playing_changed(self, playing: bool) -> None:
        if self.loaded_track_id is None or self.status in (PlayerStatus.LOADING, PlayerStatus.ENDED):
            return
        self._set_status(PlayerStatus.PLAYING if playing else PlayerStatus.PAUSED)

    def _on_finished(self) -> None:
        if self.loaded_track_id is None:
            return
        self._set_status(PlayerStatus.ENDED)
        self.ended.emit()

    def _set_status(self, new_status: PlayerStatus) -> None:
        if self.status != new_status:
            self.status = new_status
            self.statusChanged.emit(self.status)

    def _release_handle(self) -> None:
        if self._handle is not None:
            self.backend.release(self._handle)
            self._handle = None

    # ----------------------------
    # Public API
    # ----------------------------

    def load_track(self, track_id: str, source_name: str = "") -> bool:
        """
        Fetch the payload and make it current, paused at 0. On failure the
        previous state is kept and False is returned.
        """
        self._load_seq += 1
        seq = self._load_seq
        previous = self.status
        self._set_status(PlayerStatus.LOADING)

        result = self.store.get_payload(track_id)
        # a statusChanged listener may have started another load meanwhile
        if seq != self._load_seq:
            logger.debug("Discarding superseded load of %s", track_id)
            return False
        if not result.ok:
            logger.warning("Cannot load track %s: %s", track_id, result.error)
            self._set_status(previous)
            return False

        self._release_handle()
        try:
            self._handle = self.backend.open(result.value, source_name)
        except PlaybackRejected as e:
            logger.error("Backend refused track %s: %s", track_id, e)
            self.loaded_track_id = None
            self._set_status(PlayerStatus.IDLE)
            self.trackChanged.emit(None)
            return False

        self.loaded_track_id = track_id
        self.current_time = 0.0
        self.duration = None
        self._set_status(PlayerStatus.PAUSED)
        self.trackChanged.emit(track_id)
        self.positionChanged.emit(0.0)
        return True

    def play(self) -> None:
        if self.loaded_track_id is None:
            return
        try:
            self.backend.play()
        except PlaybackRejected as e:
            # autoplay/permission refusals are not errors for the user
            logger.info("Playback rejected: %s", e)
            return
        self._set_status(PlayerStatus.PLAYING)

    def pause(self) -> None:
        if self.status != PlayerStatus.PLAYING:
            return
        self.backend.pause()
        self._set_status(PlayerStatus.PAUSED)

    def toggle_play_pause(self) -> None:
        if self.status == PlayerStatus.PLAYING:
            self.pause()
        else:
            self.play()

    def _seek_target(self, seconds: float) -> float:
        if not isinstance(seconds, (int, float)) or not math.isfinite(seconds) or seconds < 0:
            raise InvalidSeek(f"Invalid seek target: {seconds!r}")
        # unknown duration counts as 0
        return min(float(seconds), self.duration or 0.0)

    def seek(self, seconds: float) -> None:
        try:
            target = self._seek_target(seconds)
        except InvalidSeek as e:
            logger.debug("Ignoring seek: %s", e)
            return
        if self.loaded_track_id is None:
            return
        self.backend.set_position(target)
        self.current_time = target
        self.positionChanged.emit(target)

    def elapsed(self) -> float:
        if self.loaded_track_id is None:
            return 0.0
        return self.backend.position()

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, value: float) -> None:
        if not isinstance(value, (int, float)) or not math.isfinite(value):
            return
        v = clamp(float(value), 0.0, 1.0)
        if v == self._volume:
            return
        self._volume = v
        self.backend.set_volume(v)
        self.volumeChanged.emit(v)

    @property
    def is_playing(self) -> bool:
        return self.status == PlayerStatus.PLAYING

    def stop(self) -> None:
        """Stop and unload the current track."""
        self._load_seq += 1
        had_track = self.loaded_track_id is not None
        self.backend.stop()
        self._release_handle()
        self.loaded_track_id = None
        self.current_time = 0.0
        self.duration = None
        self._set_status(PlayerStatus.IDLE)
        if had_track:
            self.trackChanged.emit(None)

    def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        self.stop()

    def snapshot(self) -> PlaybackSnapshot:
        return PlaybackSnapshot(
            loaded_track_id=self.loaded_track_id,
            status=self.status,
            current_time=self.current_time,
            duration=self.duration,
            volume=self._volume,
        )
