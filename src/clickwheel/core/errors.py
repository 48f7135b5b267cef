from __future__ import annotations


class ClickwheelError(Exception):
    """Base exception for clickwheel."""


class StoreUnavailable(ClickwheelError):
    """The library database cannot be opened or migrated."""


class RecordNotFound(ClickwheelError):
    """No stored track with the requested id."""

    def __init__(self, track_id: str):
        super().__init__(f"Track not found: {track_id}")
        self.track_id = track_id


class ExtractionFailure(ClickwheelError):
    """Tag probing failed; callers fall back to filename heuristics."""


class PlaybackRejected(ClickwheelError):
    """The audio backend refused to start playback."""


class InvalidSeek(ClickwheelError):
    """Seek target is negative or not a finite number."""
