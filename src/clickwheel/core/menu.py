"""
Menu models for the list screens.

build_menu is pure: the same library, filters and playback snapshot always
give the same items. Actions are plain values; the navigator executes them.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from clickwheel.core.models import (
    ActionKind, Filters, Menu, MenuAction, MenuItem, Screen, Track,
)
from clickwheel.core.utils import fmt_time, title_key, unique_sorted

if TYPE_CHECKING:
    from clickwheel.player.player import PlaybackSnapshot

DEVICE_TITLE = "iPod"
APP_VERSION = "v1.0"

LIST_SCREENS = frozenset({
    Screen.ROOT, Screen.LIBRARY, Screen.ARTISTS, Screen.ALBUMS,
    Screen.SONGS, Screen.SETTINGS, Screen.ABOUT,
})


def sort_tracks(tracks: Sequence[Track]) -> list[Track]:
    return sorted(tracks, key=lambda t: title_key(t.title))


def filter_tracks(tracks: Sequence[Track], filters: Filters) -> list[Track]:
    return [t for t in sort_tracks(tracks) if filters.matches(t)]


def _push(screen: Screen) -> MenuAction:
    return MenuAction(kind=ActionKind.PUSH, screen=screen)


def _open_list(screen: Screen) -> MenuAction:
    # push with the list's remembered position reset
    return MenuAction(kind=ActionKind.OPEN_LIST, screen=screen)


def _open_songs(artist: str | None = None, album: str | None = None) -> MenuAction:
    return MenuAction(kind=ActionKind.OPEN_SONGS, screen=Screen.SONGS, filters=Filters(artist=artist, album=album))


def _root_menu(tracks, now_playing_id) -> Menu:
    items = [
        MenuItem("music", "Music", str(len(tracks)), _push(Screen.LIBRARY)),
        MenuItem("cover-flow", "Cover Flow", None, _push(Screen.COVER_FLOW)),
        MenuItem("add", "Add Music", "+", _push(Screen.ADD_MEDIA)),
    ]
    if now_playing_id is not None and any(t.id == now_playing_id for t in tracks):
        items.append(MenuItem("now-playing", "Now Playing", "♪", _push(Screen.NOW_PLAYING)))
    items += [
        MenuItem("settings", "Settings", None, _push(Screen.SETTINGS)),
        MenuItem("about", "About", None, _push(Screen.ABOUT)),
    ]
    return Menu(DEVICE_TITLE, tuple(items))


def _library_menu(tracks) -> Menu:
    artists = unique_sorted(t.artist for t in tracks)
    albums = unique_sorted(t.album for t in tracks)
    return Menu("Music", (
        MenuItem("songs", "Songs", str(len(tracks)), _open_songs()),
        MenuItem("artists", "Artists", str(len(artists)), _open_list(Screen.ARTISTS)),
        MenuItem("albums", "Albums", str(len(albums)), _open_list(Screen.ALBUMS)),
        MenuItem("cover-flow", "Cover Flow", None, _push(Screen.COVER_FLOW)),
    ))


def _artists_menu(tracks) -> Menu:
    return Menu("Artists", tuple(
        MenuItem(
            f"artist:{name}", name,
            str(sum(1 for t in tracks if t.artist == name)),
            _open_songs(artist=name),
        )
        for name in unique_sorted(t.artist for t in tracks)
    ))


def _albums_menu(tracks) -> Menu:
    return Menu("Albums", tuple(
        MenuItem(
            f"album:{name}", name,
            str(sum(1 for t in tracks if t.album == name)),
            _open_songs(album=name),
        )
        for name in unique_sorted(t.album for t in tracks)
    ))


def _songs_menu(tracks, filters: Filters) -> Menu:
    title = filters.artist or filters.album or "Songs"
    return Menu(title, tuple(
        MenuItem(t.id, t.title, fmt_time(t.duration), MenuAction(kind=ActionKind.PLAY_TRACK, track_id=t.id))
        for t in filter_tracks(tracks, filters)
    ))


def _settings_menu(volume: float) -> Menu:
    return Menu("Settings", (
        MenuItem("volume", "Volume", f"{round(volume * 100)}%", _push(Screen.VOLUME)),
        MenuItem("clear", "Clear Library", "⚠", MenuAction(kind=ActionKind.CLEAR_LIBRARY)),
    ))


def _about_menu(tracks, installed: bool) -> Menu:
    items = [
        MenuItem("about-name", "iPod Classic", APP_VERSION),
        MenuItem("about-songs", f"Songs: {len(tracks)}", ""),
        MenuItem("about-storage", "Storage: Local", "✓"),
        MenuItem("about-offline", "Offline Mode", "✓"),
    ]
    if not installed:
        items.append(MenuItem("about-install", "Install App", "📥", MenuAction(kind=ActionKind.INSTALL)))
    return Menu("About", tuple(items))


def build_menu(
    screen: Screen,
    filters: Filters,
    tracks: Sequence[Track],
    snapshot: Optional["PlaybackSnapshot"] = None,
    installed: bool = False,
) -> Optional[Menu]:
    """Menu for a list screen, None for screens drawn some other way."""
    now_playing_id = snapshot.loaded_track_id if snapshot is not None else None
    volume = snapshot.volume if snapshot is not None else 0.0
    if screen == Screen.ROOT:
        return _root_menu(tracks, now_playing_id)
    if screen == Screen.LIBRARY:
        return _library_menu(tracks)
    if screen == Screen.ARTISTS:
        return _artists_menu(tracks)
    if screen == Screen.ALBUMS:
        return _albums_menu(tracks)
    if screen == Screen.SONGS:
        return _songs_menu(tracks, filters)
    if screen == Screen.SETTINGS:
        return _settings_menu(volume)
    if screen == Screen.ABOUT:
        return _about_menu(tracks, installed)
    return None
