# ui/widgets/screen_view.py
from __future__ import annotations

import base64
import logging

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QFrame, QWidget, QLabel, QHBoxLayout, QVBoxLayout, QStackedWidget,
    QAbstractSlider, QPushButton, QSlider,
)

from clickwheel.core.gestures import SurfaceGesture, pulse_steps
from clickwheel.core.menu import LIST_SCREENS
from clickwheel.core.models import Screen
from clickwheel.core.navigation import WINDOW_SIZE, Navigator
from clickwheel.core.utils import fmt_time
from clickwheel.player.player import PlayerStatus

logger = logging.getLogger(__name__)

SCREEN_TITLES = {
    Screen.NOW_PLAYING: "Now Playing",
    Screen.COVER_FLOW: "Cover Flow",
    Screen.VOLUME: "Volume",
    Screen.ADD_MEDIA: "Add Music",
}

COVER_SIZE = 96

def _cover_pixmap(data_url: str | None, size: int = COVER_SIZE) -> QPixmap | None:
    if not data_url or "," not in data_url:
        return None
    try:
        raw = base64.b64decode(data_url.split(",", 1)[1])
    except ValueError:
        logger.debug("Ignoring undecodable cover art")
        return None
    pm = QPixmap()
    if not pm.loadFromData(raw):
        return None
    return pm.scaled(size, size, Qt.AspectRatioMode.KeepAspectRatio, Qt.TransformationMode.SmoothTransformation)


class _Row(QFrame):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("Row")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        lay = QHBoxLayout(self)
        lay.setContentsMargins(8, 2, 8, 2)
        self.lbl = QLabel()
        self.annotation = QLabel()
        self.annotation.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        lay.addWidget(self.lbl, 1)
        lay.addWidget(self.annotation)

    def set_item(self, label: str, annotation: str | None, selected: bool):
        self.lbl.setText(label)
        self.annotation.setText("›" if annotation is None else annotation)
        self.setProperty("selected", selected)
        self.style().unpolish(self)
        self.style().polish(self)
        for w in (self.lbl, self.annotation):
            w.style().unpolish(w)
            w.style().polish(w)


class _ScreenSlider(QSlider):
    """Horizontal slider that leaves wheel scrolling to the screen."""

    def __init__(self, maximum: int, parent=None):
        super().__init__(Qt.Orientation.Horizontal, parent)
        self.setRange(0, maximum)
        self.setFocusPolicy(Qt.FocusPolicy.NoFocus)

    def wheelEvent(self, event):
        event.ignore()


class ScreenView(QFrame):
    """
    The device display. Mirrors the navigator on every change and turns
    pointer input on the surface into wheel steps and row clicks.
    """
    stepped = Signal(int)
    rowClicked = Signal(int)
    pickFilesRequested = Signal()
    pickFolderRequested = Signal()
    seekRequested = Signal(float)       # fraction of the track, 0..1
    volumeRequested = Signal(float)     # 0..1

    def __init__(self, navigator: Navigator, parent=None):
        super().__init__(parent)
        self.navigator = navigator
        self.setObjectName("Screen")
        self.setFixedSize(240, 200)
        self._gesture = SurfaceGesture()
        self._np_duration = 0.0

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        # --- status bar ---
        bar = QWidget()
        bar.setObjectName("StatusBar")
        bar_layout = QHBoxLayout(bar)
        bar_layout.setContentsMargins(8, 2, 8, 2)
        self.lbl_title = QLabel()
        self.lbl_title.setObjectName("Title")
        self.lbl_state = QLabel()
        self.lbl_state.setObjectName("Title")
        bar_layout.addWidget(self.lbl_title, 1)
        bar_layout.addWidget(self.lbl_state)
        root.addWidget(bar)

        self.pages = QStackedWidget()
        root.addWidget(self.pages, 1)

        self.page_loading = self._build_loading_page()
        self.page_list = self._build_list_page()
        self.page_now = self._build_now_playing_page()
        self.page_cover = self._build_cover_flow_page()
        self.page_volume = self._build_volume_page()
        self.page_add = self._build_add_media_page()

        self.navigator.changed.connect(self.refresh)
        self._apply_styles()
        self.refresh()

    # -------------------------
    # Pages
    # -------------------------

    def _build_loading_page(self) -> QWidget:
        page = QLabel("Loading…")
        page.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.pages.addWidget(page)
        return page

    def _build_list_page(self) -> QWidget:
        page = QWidget()
        lay = QVBoxLayout(page)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.setSpacing(0)
        self.rows = [_Row() for _ in range(WINDOW_SIZE)]
        for row in self.rows:
            lay.addWidget(row)
        lay.addStretch(1)
        self.lbl_empty = QLabel()
        self.lbl_empty.setAlignment(Qt.AlignmentFlag.AlignCenter)
        lay.addWidget(self.lbl_empty)
        self.pages.addWidget(page)
        return page

    def _build_now_playing_page(self) -> QWidget:
        page = QWidget()
        lay = QVBoxLayout(page)
        lay.setContentsMargins(8, 6, 8, 6)

        top = QHBoxLayout()
        self.np_cover = QLabel()
        self.np_cover.setFixedSize(72, 72)
        self.np_cover.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.np_cover.setObjectName("Cover")
        info = QVBoxLayout()
        self.np_title = QLabel()
        self.np_title.setObjectName("Strong")
        self.np_artist = QLabel()
        self.np_album = QLabel()
        self.np_index = QLabel()
        self.np_index.setObjectName("Muted")
        for w in (self.np_index, self.np_title, self.np_artist, self.np_album):
            info.addWidget(w)
        top.addWidget(self.np_cover)
        top.addLayout(info, 1)
        lay.addLayout(top)

        self.np_progress = _ScreenSlider(1000)
        self.np_progress.setPageStep(50)
        self.np_progress.sliderMoved.connect(self._on_progress_moved)
        self.np_progress.sliderReleased.connect(self._on_progress_released)
        self.np_progress.actionTriggered.connect(self._on_progress_action)
        lay.addWidget(self.np_progress)

        times = QHBoxLayout()
        self.np_elapsed = QLabel("0:00")
        self.np_remaining = QLabel("-0:00")
        self.np_remaining.setAlignment(Qt.AlignmentFlag.AlignRight)
        times.addWidget(self.np_elapsed)
        times.addWidget(self.np_remaining)
        lay.addLayout(times)

        self.np_volume = _ScreenSlider(100)
        self.np_volume.setObjectName("Volume")
        self.np_volume.valueChanged.connect(self._on_volume_slider)
        lay.addWidget(self.np_volume)
        self.pages.addWidget(page)
        return page

    def _build_cover_flow_page(self) -> QWidget:
        page = QWidget()
        lay = QVBoxLayout(page)
        lay.setContentsMargins(8, 6, 8, 6)
        self.cf_cover = QLabel()
        self.cf_cover.setObjectName("Cover")
        self.cf_cover.setFixedSize(COVER_SIZE, COVER_SIZE)
        self.cf_cover.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.cf_title = QLabel()
        self.cf_title.setObjectName("Strong")
        self.cf_title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.cf_sub = QLabel()
        self.cf_sub.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.cf_index = QLabel()
        self.cf_index.setObjectName("Muted")
        self.cf_index.setAlignment(Qt.AlignmentFlag.AlignCenter)
        lay.addWidget(self.cf_cover, 0, Qt.AlignmentFlag.AlignHCenter)
        lay.addWidget(self.cf_title)
        lay.addWidget(self.cf_sub)
        lay.addWidget(self.cf_index)
        self.pages.addWidget(page)
        return page

    def _build_volume_page(self) -> QWidget:
        page = QWidget()
        lay = QVBoxLayout(page)
        lay.setContentsMargins(16, 16, 16, 16)
        self.vol_label = QLabel()
        self.vol_label.setObjectName("Strong")
        self.vol_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.vol_bar = _ScreenSlider(100)
        self.vol_bar.setObjectName("Volume")
        self.vol_bar.valueChanged.connect(self._on_volume_slider)
        lay.addStretch(1)
        lay.addWidget(self.vol_label)
        lay.addWidget(self.vol_bar)
        lay.addStretch(1)
        self.pages.addWidget(page)
        return page

    def _build_add_media_page(self) -> QWidget:
        page = QWidget()
        lay = QVBoxLayout(page)
        lay.setContentsMargins(12, 8, 12, 8)
        self.add_hint = QLabel("Add songs from this computer.\nThey stay in the local library.")
        self.add_hint.setWordWrap(True)
        self.add_hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.btn_files = QPushButton("Select Audio Files")
        self.btn_folder = QPushButton("Select Folder")
        for btn in (self.btn_files, self.btn_folder):
            btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self.btn_files.clicked.connect(self.pickFilesRequested.emit)
        self.btn_folder.clicked.connect(self.pickFolderRequested.emit)
        self.add_progress = QLabel()
        self.add_progress.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.add_progress.setWordWrap(True)
        lay.addWidget(self.add_hint)
        lay.addWidget(self.btn_files)
        lay.addWidget(self.btn_folder)
        lay.addWidget(self.add_progress)
        lay.addStretch(1)
        self.pages.addWidget(page)
        return page

    # -------------------------
    # Rendering
    # -------------------------

    def refresh(self):
        nav = self.navigator
        snap = nav.snapshot()
        screen = nav.current_screen

        self.lbl_state.setText("▶" if snap.playing else ("❚❚" if snap.status == PlayerStatus.PAUSED else ""))

        if not nav.ready:
            self.lbl_title.setText("")
            self.pages.setCurrentWidget(self.page_loading)
            return

        if screen in LIST_SCREENS:
            self._render_list()
        elif screen == Screen.NOW_PLAYING:
            self._render_now_playing()
        elif screen == Screen.COVER_FLOW:
            self._render_cover_flow()
        elif screen == Screen.VOLUME:
            self._render_volume()
        elif screen == Screen.ADD_MEDIA:
            self._render_add_media()

        if screen not in LIST_SCREENS:
            self.lbl_title.setText(SCREEN_TITLES.get(screen, ""))

    def _render_list(self):
        nav = self.navigator
        menu = nav.menu()
        self.lbl_title.setText(menu.title if menu else "")
        items = menu.items if menu else ()
        offset, selected = nav.scroll_offset, nav.selected_index

        for i, row in enumerate(self.rows):
            idx = offset + i
            if idx < len(items):
                item = items[idx]
                row.set_item(item.label, item.annotation, idx == selected)
                row.show()
            else:
                row.hide()

        self.lbl_empty.setText("" if items else "No songs")
        self.pages.setCurrentWidget(self.page_list)

    def _render_now_playing(self):
        nav = self.navigator
        snap = nav.snapshot()
        track = nav.now_playing_track()
        if track is None:
            self.np_title.setText("Nothing playing")
            for w in (self.np_artist, self.np_album, self.np_index):
                w.setText("")
            self.np_cover.clear()
        else:
            ordered = nav.sorted_tracks()
            pos = next((i for i, t in enumerate(ordered) if t.id == track.id), 0)
            self.np_index.setText(f"{pos + 1} of {len(ordered)}")
            self.np_title.setText(track.title)
            self.np_artist.setText(track.artist)
            self.np_album.setText(track.album)
            pm = _cover_pixmap(track.cover_art, 72)
            if pm is not None:
                self.np_cover.setPixmap(pm)
            else:
                self.np_cover.setText("♪")

        duration = snap.duration or (track.duration if track else 0.0) or 0.0
        self._np_duration = duration
        # seeking needs the duration the engine reports
        self.np_progress.setEnabled(bool(snap.duration))
        if not self.np_progress.isSliderDown():
            elapsed = min(snap.current_time, duration) if duration else snap.current_time
            self._set_quietly(self.np_progress, int(1000 * elapsed / duration) if duration else 0)
            self._show_times(elapsed, duration)
        self._set_quietly(self.np_volume, round(snap.volume * 100))
        self.pages.setCurrentWidget(self.page_now)

    def _show_times(self, elapsed: float, duration: float):
        self.np_elapsed.setText(fmt_time(elapsed))
        self.np_remaining.setText(f"-{fmt_time(max(0.0, duration - elapsed))}")

    @staticmethod
    def _set_quietly(slider: QSlider, value: int):
        slider.blockSignals(True)
        slider.setValue(value)
        slider.blockSignals(False)

    def _render_cover_flow(self):
        nav = self.navigator
        ordered = nav.sorted_tracks()
        if not ordered:
            self.cf_cover.setText("♪")
            self.cf_title.setText("No songs")
            self.cf_sub.setText("")
            self.cf_index.setText("")
        else:
            track = ordered[nav.cover_index]
            pm = _cover_pixmap(track.cover_art)
            if pm is not None:
                self.cf_cover.setPixmap(pm)
            else:
                self.cf_cover.setText("♪")
            self.cf_title.setText(track.title)
            self.cf_sub.setText(f"{track.artist} · {track.album}")
            self.cf_index.setText(f"{nav.cover_index + 1} / {len(ordered)}")
        self.pages.setCurrentWidget(self.page_cover)

    def _render_volume(self):
        v = round(self.navigator.snapshot().volume * 100)
        self.vol_label.setText(f"{v}%")
        self._set_quietly(self.vol_bar, v)
        self.pages.setCurrentWidget(self.page_volume)

    def _render_add_media(self):
        nav = self.navigator
        self.btn_files.setEnabled(not nav.importing)
        self.btn_folder.setEnabled(not nav.importing)
        self.add_progress.setText(nav.import_progress if nav.importing else "")
        self.pages.setCurrentWidget(self.page_add)

    # -------------------------
    # Pointer input
    # -------------------------

    def _on_progress_moved(self, value: int):
        # preview the target time while dragging
        self._show_times(self._np_duration * value / 1000, self._np_duration)

    def _on_progress_released(self):
        self.seekRequested.emit(self.np_progress.value() / 1000)

    def _on_progress_action(self, action: int):
        if self.np_progress.isSliderDown():
            return
        if action in (
            QAbstractSlider.SliderAction.SliderPageStepAdd.value,
            QAbstractSlider.SliderAction.SliderPageStepSub.value,
        ):
            self.seekRequested.emit(self.np_progress.sliderPosition() / 1000)

    def _on_volume_slider(self, value: int):
        self.volumeRequested.emit(value / 100)

    def wheelEvent(self, event):
        # scrolling down moves the highlight down
        steps = pulse_steps(-event.angleDelta().y())
        if steps:
            self.stepped.emit(steps)
        event.accept()

    def mousePressEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            return super().mousePressEvent(event)
        pos = event.position()
        self._gesture.begin(pos.x(), pos.y())
        event.accept()

    def mouseMoveEvent(self, event):
        if not self._gesture.active:
            return super().mouseMoveEvent(event)
        pos = event.position()
        horizontal = self.navigator.current_screen == Screen.COVER_FLOW
        steps = self._gesture.move(pos.x(), pos.y(), horizontal=horizontal)
        if steps:
            self.stepped.emit(steps)
        event.accept()

    def mouseReleaseEvent(self, event):
        if not self._gesture.active:
            return super().mouseReleaseEvent(event)
        dragged = self._gesture.end()
        if not dragged:
            self._click_row(event.position().toPoint())
        event.accept()

    def _click_row(self, pos):
        if self.pages.currentWidget() is not self.page_list:
            return
        w = self.childAt(pos)
        while w is not None and w is not self and not isinstance(w, _Row):
            w = w.parentWidget()
        if not isinstance(w, _Row) or not w.isVisible():
            return
        self.rowClicked.emit(self.navigator.scroll_offset + self.rows.index(w))

    def _apply_styles(self):
        self.setStyleSheet("""
        QFrame#Screen {
            background: #e8f0f8;
            border: 2px solid #3f3f46;
            border-radius: 6px;
        }
        QWidget#StatusBar {
            background: qlineargradient(x1:0, y1:0, x2:0, y2:1, stop:0 #f4f4f5, stop:1 #d4d4d8);
            border-bottom: 1px solid #a1a1aa;
        }
        QLabel { color: #18181b; font-size: 11px; }
        QLabel#Title { font-weight: bold; }
        QLabel#Strong { font-weight: bold; font-size: 12px; }
        QLabel#Muted { color: #71717a; font-size: 10px; }
        QLabel#Cover { background: #d4d4d8; border-radius: 4px; font-size: 28px; color: #71717a; }
        QFrame#Row[selected="true"] {
            background: qlineargradient(x1:0, y1:0, x2:0, y2:1, stop:0 #60a5fa, stop:1 #2563eb);
        }
        QFrame#Row[selected="true"] QLabel { color: #ffffff; }
        QSlider::groove:horizontal {
            height: 6px;
            background: #f4f4f5;
            border: 1px solid #a1a1aa;
            border-radius: 3px;
        }
        QSlider::handle:horizontal {
            width: 10px;
            height: 10px;
            margin: -3px 0;
            border-radius: 5px;
            background: #2563eb;
        }
        QSlider::sub-page:horizontal {
            background: #2563eb;
            border-radius: 3px;
        }
        QSlider::handle:horizontal:disabled { background: #a1a1aa; }
        QSlider::sub-page:horizontal:disabled { background: #a1a1aa; }
        """)
