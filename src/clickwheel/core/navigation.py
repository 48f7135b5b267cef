"""
Screen stack, per-screen list positions and the intents the click wheel sends.

Wheel steps are interpreted by whichever screen is on top of the stack:
volume on the now-playing and volume screens, the cover index on cover flow,
the highlighted row everywhere else.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from PySide6.QtCore import QObject, Signal

from clickwheel.core.menu import build_menu, sort_tracks
from clickwheel.core.models import ActionKind, Filters, Menu, MenuAction, Screen, Track
from clickwheel.core.utils import clamp
from clickwheel.db.store import LibraryStore
from clickwheel.library.importer import ImportProgress, ImportReport, import_files
from clickwheel.player.player import PlaybackSnapshot, Player

logger = logging.getLogger(__name__)

WINDOW_SIZE = 7
VOLUME_STEP = 0.05
RESTART_THRESHOLD_S = 3.0
INSTALL_HINT = "Install with: pip install pyclickwheel, then run pyclickwheel"


@dataclass(frozen=True)
class ListPosition:
    selected: int = 0
    offset: int = 0


def move_selection(pos: ListPosition, delta: int, count: int) -> ListPosition:
    """
    Move the highlight by delta rows and slide the 7-row window just enough to
    keep it visible. delta=0 normalizes a position after the list changed size.
    """
    if count <= 0:
        return ListPosition()
    current = int(clamp(pos.selected, 0, count - 1))
    selected = int(clamp(current + delta, 0, count - 1))
    offset = pos.offset
    if selected < offset:
        offset = selected
    if selected >= offset + WINDOW_SIZE:
        offset = selected - (WINDOW_SIZE - 1)
    offset = int(clamp(offset, 0, max(0, count - WINDOW_SIZE)))
    return ListPosition(selected, offset)


class Navigator(QObject):
    changed = Signal()
    importRequested = Signal()
    message = Signal(str, str)      # text, notify_type

    def __init__(self, store: LibraryStore, player: Player, installed: bool = False):
        super().__init__()
        self.store = store
        self.player = player
        self.installed = installed

        self.tracks: List[Track] = []
        self.ready = False

        self.stack: List[Screen] = [Screen.ROOT]
        self.filters = Filters()
        self._positions: dict[Screen, ListPosition] = {}

        self.importing = False
        self.import_progress = ""

        self.player.ended.connect(self.next_track)
        self.player.statusChanged.connect(self._on_player_changed)
        self.player.trackChanged.connect(self._on_player_changed)
        self.player.volumeChanged.connect(self._on_player_changed)
        self.player.positionChanged.connect(self._on_player_changed)

    def _on_player_changed(self, *_args) -> None:
        self.changed.emit()

    # -------------------------
    # Read side
    # -------------------------

    @property
    def current_screen(self) -> Screen:
        return self.stack[-1]

    def snapshot(self) -> PlaybackSnapshot:
        return self.player.snapshot()

    def sorted_tracks(self) -> List[Track]:
        return sort_tracks(self.tracks)

    def menu(self, screen: Optional[Screen] = None) -> Optional[Menu]:
        return build_menu(
            screen or self.current_screen,
            self.filters,
            self.tracks,
            self.player.snapshot(),
            installed=self.installed,
        )

    def position(self, screen: Screen) -> ListPosition:
        return self._positions.get(screen, ListPosition())

    def _list_position(self) -> ListPosition:
        menu = self.menu()
        count = len(menu.items) if menu else 0
        return move_selection(self.position(self.current_screen), 0, count)

    @property
    def selected_index(self) -> int:
        if self.current_screen == Screen.COVER_FLOW:
            return self.cover_index
        return self._list_position().selected

    @property
    def scroll_offset(self) -> int:
        return self._list_position().offset

    @property
    def cover_index(self) -> int:
        return int(clamp(self.position(Screen.COVER_FLOW).selected, 0, max(0, len(self.tracks) - 1)))

    def now_playing_track(self) -> Optional[Track]:
        return self._find(self.player.loaded_track_id)

    def _find(self, track_id: Optional[str]) -> Optional[Track]:
        if track_id is None:
            return None
        return next((t for t in self.tracks if t.id == track_id), None)

    # -------------------------
    # Stack
    # -------------------------

    def push(self, screen: Screen) -> None:
        self.stack.append(screen)
        logger.debug("push %s -> %s", screen.value, [s.value for s in self.stack])
        self.changed.emit()

    def pop(self) -> None:
        if len(self.stack) > 1:
            self.stack.pop()
            self.changed.emit()

    def reset_position(self, screen: Screen) -> None:
        self._positions[screen] = ListPosition()
        self.changed.emit()

    # -------------------------
    # Intents
    # -------------------------

    def step(self, n: int) -> None:
        if not n:
            return
        screen = self.current_screen

        if screen in (Screen.NOW_PLAYING, Screen.VOLUME):
            self.set_volume(self.player.volume + n * VOLUME_STEP)
            return

        if screen == Screen.COVER_FLOW:
            index = int(clamp(self.cover_index + n, 0, max(0, len(self.tracks) - 1)))
            self._positions[Screen.COVER_FLOW] = ListPosition(index, 0)
            self.changed.emit()
            return

        menu = self.menu()
        if not menu or not menu.items:
            return
        self._positions[screen] = move_selection(self.position(screen), n, len(menu.items))
        self.changed.emit()

    def activate(self) -> None:
        screen = self.current_screen

        if screen == Screen.NOW_PLAYING:
            self.player.toggle_play_pause()
            return
        if screen == Screen.COVER_FLOW:
            ordered = self.sorted_tracks()
            if ordered and self.play_track(ordered[self.cover_index].id):
                self.push(Screen.NOW_PLAYING)
            return
        if screen == Screen.VOLUME:
            self.pop()
            return
        if screen == Screen.ADD_MEDIA:
            if not self.importing:
                self.importRequested.emit()
            return

        menu = self.menu()
        if not menu or not menu.items:
            return
        self._dispatch(menu.items[self.selected_index].action)

    def select_index(self, index: int) -> None:
        """Pointer click on a visible row: highlight it, then activate it."""
        menu = self.menu()
        if not menu or not 0 <= index < len(menu.items):
            return
        screen = self.current_screen
        pos = move_selection(self.position(screen), 0, len(menu.items))
        self._positions[screen] = move_selection(pos, index - pos.selected, len(menu.items))
        self.changed.emit()
        self.activate()

    def back(self) -> None:
        if self.current_screen == Screen.SONGS:
            self.filters = Filters()
        self.pop()

    def toggle_play_pause(self) -> None:
        if self.player.loaded_track_id is None:
            ordered = self.sorted_tracks()
            if ordered and self.play_track(ordered[0].id):
                self.push(Screen.NOW_PLAYING)
            return
        if self.current_screen != Screen.NOW_PLAYING:
            self.push(Screen.NOW_PLAYING)
            return
        self.player.toggle_play_pause()

    def next_track(self) -> None:
        ordered = self.sorted_tracks()
        if not ordered:
            return
        i = self._index_of(ordered, self.player.loaded_track_id)
        self.play_track(ordered[(i + 1) % len(ordered)].id)

    def previous_track(self) -> None:
        ordered = self.sorted_tracks()
        if not ordered:
            return
        if self.player.loaded_track_id is not None and self.player.elapsed() > RESTART_THRESHOLD_S:
            self.player.seek(0)
            return
        i = self._index_of(ordered, self.player.loaded_track_id)
        target = ordered[-1] if i < 0 else ordered[(i - 1) % len(ordered)]
        self.play_track(target.id)

    def set_volume(self, volume: float) -> None:
        self.player.volume = volume

    def seek_fraction(self, fraction: float) -> None:
        """Pointer seek on the progress bar; ignored until the engine knows the duration."""
        duration = self.player.duration
        if self.player.loaded_track_id is None or not duration:
            return
        self.player.seek(clamp(float(fraction), 0.0, 1.0) * duration)

    @staticmethod
    def _index_of(ordered: List[Track], track_id: Optional[str]) -> int:
        return next((i for i, t in enumerate(ordered) if t.id == track_id), -1)

    def _dispatch(self, action: MenuAction) -> None:
        kind = action.kind
        if kind == ActionKind.PUSH:
            self.push(action.screen)
        elif kind == ActionKind.OPEN_LIST:
            self.push(action.screen)
            self.reset_position(action.screen)
        elif kind == ActionKind.OPEN_SONGS:
            self.filters = action.filters or Filters()
            self.push(Screen.SONGS)
            self.reset_position(Screen.SONGS)
        elif kind == ActionKind.PLAY_TRACK:
            if self.play_track(action.track_id):
                self.push(Screen.NOW_PLAYING)
        elif kind == ActionKind.CLEAR_LIBRARY:
            self.clear_library()
        elif kind == ActionKind.INSTALL:
            self.message.emit(INSTALL_HINT, "info")

    # -------------------------
    # Playback & library
    # -------------------------

    def play_track(self, track_id: str) -> bool:
        track = self._find(track_id)
        if not self.player.load_track(track_id, track.file_name if track else ""):
            self.message.emit("Could not load this track.", "error")
            return False
        self.player.play()
        return True

    def reload_library(self) -> bool:
        result = self.store.get_all_metadata()
        if not result.ok:
            self.message.emit(f"Failed to read library: {result.error}", "error")
            return False
        self.tracks = list(result.value or [])
        self.ready = True
        self.changed.emit()
        return True

    def clear_library(self) -> None:
        if not self.tracks:
            return
        result = self.store.delete_all()
        if not result.ok:
            self.message.emit(f"Failed to clear library: {result.error}", "error")
            return
        self.tracks = []
        self.player.stop()
        self.pop()

    def delete_track(self, track_id: str) -> bool:
        result = self.store.delete(track_id)
        if not result.ok:
            self.message.emit(f"Failed to delete track: {result.error}", "error")
            return False
        self.tracks = [t for t in self.tracks if t.id != track_id]
        if self.player.loaded_track_id == track_id:
            self.player.stop()
        self.changed.emit()
        return True

    def begin_import(self) -> None:
        self.importing = True
        self.import_progress = ""
        self.changed.emit()

    def update_import_progress(self, progress: ImportProgress) -> None:
        self.import_progress = progress.message
        self.changed.emit()

    def abort_import(self, error: str) -> None:
        self.importing = False
        self.import_progress = ""
        self.changed.emit()
        self.message.emit(error, "error")

    def finish_import(self, report: ImportReport) -> None:
        self.importing = False
        self.import_progress = ""

        if report.attempted == 0:
            self.changed.emit()
            self.message.emit("No audio files were found in your selection.", "warning")
            return

        self.reload_library()
        if report.skipped:
            self.message.emit(f"Added {report.imported} songs, skipped {report.skipped}.", "warning")
        else:
            self.message.emit(f"Added {report.imported} songs.", "success")
        if self.current_screen == Screen.ADD_MEDIA:
            self.pop()

    def import_files(self, paths: Iterable[str]) -> ImportReport:
        """Blocking import on the calling thread; the UI uses ImportWorker."""
        self.begin_import()
        report = import_files(self.store, paths, on_progress=self.update_import_progress)
        self.finish_import(report)
        return report


def now_playing_line(snapshot: PlaybackSnapshot, track: Optional[Track]) -> str:
    """Short status line shown under the wheel, empty when nothing is loaded."""
    if track is None or snapshot.loaded_track_id is None:
        return ""
    glyph = "▶" if snapshot.playing else "❚❚"
    return f"{glyph} {track.title}"
