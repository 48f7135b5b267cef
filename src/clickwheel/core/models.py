# core/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Track:
    id: str
    title: str
    artist: str
    album: str
    duration: float
    file_name: str
    mime_type: str
    size: int
    date_added: int     # ms since epoch
    cover_art: str | None = None  # data: URL


@dataclass(frozen=True)
class StoredTrack:
    meta: Track
    payload: bytes = field(repr=False)

    @property
    def id(self) -> str:
        return self.meta.id


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Exception | None = None

    @staticmethod
    def success(value: Optional[T] = None) -> "StoreResult[T]":
        return StoreResult(ok=True, value=value)

    @staticmethod
    def failure(error: Exception) -> "StoreResult[T]":
        return StoreResult(ok=False, error=error)


@dataclass(frozen=True)
class Filters:
    artist: str | None = None
    album: str | None = None

    def matches(self, track: Track) -> bool:
        if self.artist is not None and track.artist != self.artist:
            return False
        if self.album is not None and track.album != self.album:
            return False
        return True


class Screen(Enum):
    ROOT = "root"
    LIBRARY = "library-root"
    ARTISTS = "artists"
    ALBUMS = "albums"
    SONGS = "songs"
    NOW_PLAYING = "now-playing"
    COVER_FLOW = "cover-flow"
    SETTINGS = "settings"
    ADD_MEDIA = "add-media"
    VOLUME = "volume"
    ABOUT = "about"


class ActionKind(Enum):
    NONE = "none"
    PUSH = "push"
    OPEN_SONGS = "open-songs"
    OPEN_LIST = "open-list"
    PLAY_TRACK = "play-track"
    CLEAR_LIBRARY = "clear-library"
    INSTALL = "install"


@dataclass(frozen=True)
class MenuAction:
    kind: ActionKind = ActionKind.NONE
    screen: Screen | None = None
    track_id: str | None = None
    filters: Filters | None = None


@dataclass(frozen=True)
class MenuItem:
    id: str
    label: str
    annotation: str | None = None
    action: MenuAction = MenuAction()


@dataclass(frozen=True)
class Menu:
    title: str
    items: tuple[MenuItem, ...]
