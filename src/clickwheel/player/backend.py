# clickwheel/player/backend.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from PySide6.QtCore import QObject, Signal, QBuffer, QByteArray, QIODevice, QUrl
from PySide6.QtMultimedia import QMediaPlayer, QAudioOutput

from clickwheel.core.errors import PlaybackRejected

logger = logging.getLogger(__name__)


class AudioBackend(QObject):
    """
    Audio output primitive driven by the Player. Times are in seconds.
    """
    timeUpdated = Signal(float, float)   # position, duration (0 = unknown)
    playingChanged = Signal(bool)
    finished = Signal()

    def open(self, payload: bytes, source_name: str = ""):
        """Make payload the current source; returns a handle for release()."""
        raise NotImplementedError("Subclasses must implement open()")

    def release(self, handle) -> None:
        raise NotImplementedError("Subclasses must implement release()")

    def play(self) -> None:
        """Start or resume; raises PlaybackRejected when refused."""
        raise NotImplementedError("Subclasses must implement play()")

    def pause(self) -> None:
        raise NotImplementedError("Subclasses must implement pause()")

    def stop(self) -> None:
        raise NotImplementedError("Subclasses must implement stop()")

    def set_position(self, seconds: float) -> None:
        raise NotImplementedError("Subclasses must implement set_position()")

    def position(self) -> float:
        raise NotImplementedError("Subclasses must implement position()")

    def set_volume(self, volume_0_to_1: float) -> None:
        raise NotImplementedError("Subclasses must implement set_volume()")


@dataclass
class PayloadHandle:
    data: QByteArray = field(repr=False)
    buffer: QBuffer = field(repr=False)

    def release(self) -> None:
        if self.buffer.isOpen():
            self.buffer.close()


class QtMediaBackend(AudioBackend):
    """QMediaPlayer reading the stored payload from an in-memory QBuffer."""

    def __init__(self):
        super().__init__()

        self.audio = QAudioOutput()
        self.media = QMediaPlayer()
        self.media.setAudioOutput(self.audio)
        self._device_set = False

        # Qt signal forwarding
        self.media.positionChanged.connect(self._on_qt_position)
        self.media.durationChanged.connect(self._on_qt_duration)
        self.media.playbackStateChanged.connect(self._on_qt_state_changed)
        self.media.mediaStatusChanged.connect(self._on_qt_media_status)
        self.media.errorOccurred.connect(self._on_qt_error)

    # ----------------------------
    # Qt backend handlers
    # ----------------------------

    def _emit_time(self) -> None:
        self.timeUpdated.emit(self.media.position() / 1000.0, max(0, self.media.duration()) / 1000.0)

    def _on_qt_position(self, _ms: int) -> None:
        self._emit_time()

    def _on_qt_duration(self, _ms: int) -> None:
        self._emit_time()

    def _on_qt_state_changed(self, state: QMediaPlayer.PlaybackState) -> None:
        self.playingChanged.emit(state == QMediaPlayer.PlaybackState.PlayingState)

    def _on_qt_media_status(self, status: QMediaPlayer.MediaStatus) -> None:
        if status == QMediaPlayer.MediaStatus.EndOfMedia:
            self.finished.emit()

    def _on_qt_error(self, error: QMediaPlayer.Error, message: str) -> None:
        logger.warning("Media error %s: %s", error, message)

    # ----------------------------
    # AudioBackend
    # ----------------------------

    def open(self, payload: bytes, source_name: str = "") -> PayloadHandle:
        data = QByteArray(payload)
        buffer = QBuffer()
        buffer.setData(data)
        if not buffer.open(QIODevice.OpenModeFlag.ReadOnly):
            raise PlaybackRejected(f"Cannot open payload buffer for {source_name or 'track'}")

        # the url only hints the container format
        self.media.setSourceDevice(buffer, QUrl(source_name) if source_name else QUrl())
        self._device_set = True
        return PayloadHandle(data=data, buffer=buffer)

    def release(self, handle: PayloadHandle) -> None:
        if self._device_set:
            self.media.stop()
            self.media.setSource(QUrl())
            self._device_set = False
        handle.release()

    def play(self) -> None:
        if not self._device_set:
            raise PlaybackRejected("No media loaded")
        if self.media.error() != QMediaPlayer.Error.NoError:
            raise PlaybackRejected(self.media.errorString())
        self.media.play()

    def pause(self) -> None:
        self.media.pause()

    def stop(self) -> None:
        self.media.stop()

    def set_position(self, seconds: float) -> None:
        self.media.setPosition(int(seconds * 1000))

    def position(self) -> float:
        return self.media.position() / 1000.0

    def set_volume(self, volume_0_to_1: float) -> None:
        self.audio.setVolume(volume_0_to_1)
