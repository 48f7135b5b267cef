# ui/widgets/click_wheel.py
from __future__ import annotations

import math

from PySide6.QtCore import Qt, QSize, QPointF, Signal, QByteArray
from PySide6.QtGui import QIcon, QPixmap, QPainter, QRadialGradient, QColor, QPen
from PySide6.QtSvg import QSvgRenderer
from PySide6.QtWidgets import QWidget, QToolButton

from clickwheel.core.gestures import RotaryGesture, angle_deg

def _svg_icon(path_d: str, size: int = 16, color: str = "#71717a") -> QIcon:
    svg = f"""
    <svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 24 24">
      <path d="{path_d}" fill="{color}"/>
    </svg>
    """.strip()

    renderer = QSvgRenderer(QByteArray(svg.encode("utf-8")))
    pm = QPixmap(size, size)
    pm.fill(Qt.transparent)

    p = QPainter(pm)
    renderer.render(p)
    p.end()

    return QIcon(pm)

SVG_PREV = "M6 18V6h2v12H6zm3.5-6L18 6v12l-8.5-6z"
SVG_NEXT = "M16 6v12h2V6h-2zM6 18l8.5-6L6 6v12z"
SVG_PLAY_PAUSE = "M3 5v14l9-7L3 5zm11 0h3v14h-3V5zm5 0h3v14h-3V5z"

WHEEL_SIZE = 208
CENTER_SIZE = 80

class ClickWheel(QWidget):
    """
    The wheel ring turns drags into steps; the five buttons on top of it are
    separate controls and never start a drag.
    """
    stepped = Signal(int)
    menuClicked = Signal()
    selectClicked = Signal()
    prevClicked = Signal()
    nextClicked = Signal()
    playPauseClicked = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setFixedSize(WHEEL_SIZE, WHEEL_SIZE)
        self.setObjectName("ClickWheel")
        self.setCursor(Qt.CursorShape.OpenHandCursor)

        self._gesture = RotaryGesture()

        self.btn_menu = self._button("MENU", "BtnMenu")
        self.btn_prev = self._button("", "BtnPrev", _svg_icon(SVG_PREV))
        self.btn_next = self._button("", "BtnNext", _svg_icon(SVG_NEXT))
        self.btn_play = self._button("", "BtnPlay", _svg_icon(SVG_PLAY_PAUSE, 18))
        self.btn_center = self._button("", "BtnCenter")
        self.btn_center.setFixedSize(CENTER_SIZE, CENTER_SIZE)
        self.btn_center.setToolTip("Select")

        c = WHEEL_SIZE // 2
        self.btn_menu.move(c - self.btn_menu.sizeHint().width() // 2, 14)
        self.btn_prev.move(12, c - 14)
        self.btn_next.move(WHEEL_SIZE - 40, c - 14)
        self.btn_play.move(c - 14, WHEEL_SIZE - 42)
        self.btn_center.move(c - CENTER_SIZE // 2, c - CENTER_SIZE // 2)

        self.btn_menu.clicked.connect(self.menuClicked.emit)
        self.btn_prev.clicked.connect(self.prevClicked.emit)
        self.btn_next.clicked.connect(self.nextClicked.emit)
        self.btn_play.clicked.connect(self.playPauseClicked.emit)
        self.btn_center.clicked.connect(self.selectClicked.emit)

        self._apply_styles()

    def _button(self, text: str, name: str, icon: QIcon | None = None) -> QToolButton:
        btn = QToolButton(self)
        btn.setObjectName(name)
        btn.setCursor(Qt.CursorShape.PointingHandCursor)
        btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        if text:
            btn.setText(text)
        if icon is not None:
            btn.setIcon(icon)
            btn.setIconSize(QSize(16, 16))
        return btn

    # -------------------------
    # Drag handling
    # -------------------------

    def _angle_at(self, pos: QPointF) -> float:
        c = WHEEL_SIZE / 2.0
        return angle_deg(c, c, pos.x(), pos.y())

    def _on_ring(self, pos: QPointF) -> bool:
        c = WHEEL_SIZE / 2.0
        return math.hypot(pos.x() - c, pos.y() - c) <= c

    def mousePressEvent(self, event):
        pos = event.position()
        if event.button() != Qt.MouseButton.LeftButton or not self._on_ring(pos):
            return super().mousePressEvent(event)
        if self._gesture.begin(self._angle_at(pos)):
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
        event.accept()

    def mouseMoveEvent(self, event):
        if not self._gesture.active:
            return super().mouseMoveEvent(event)
        steps = self._gesture.move(self._angle_at(event.position()))
        if steps:
            self.stepped.emit(steps)
        event.accept()

    def mouseReleaseEvent(self, event):
        if self._gesture.active:
            self._gesture.end()
            self.setCursor(Qt.CursorShape.OpenHandCursor)
            event.accept()
            return
        super().mouseReleaseEvent(event)

    # -------------------------
    # Painting
    # -------------------------

    def paintEvent(self, event):
        p = QPainter(self)
        p.setRenderHint(QPainter.RenderHint.Antialiasing)

        c = WHEEL_SIZE / 2.0
        grad = QRadialGradient(QPointF(c, c * 0.8), c)
        grad.setColorAt(0.0, QColor("#f4f4f5"))
        grad.setColorAt(0.7, QColor("#d4d4d8"))
        grad.setColorAt(1.0, QColor("#a1a1aa"))
        p.setBrush(grad)
        p.setPen(QPen(QColor(0, 0, 0, 30), 1))
        p.drawEllipse(QPointF(c, c), c - 1, c - 1)
        p.end()

    def _apply_styles(self):
        self.setStyleSheet(f"""
        QToolButton {{
            border: none;
            background: transparent;
            color: #71717a;
            font-size: 10px;
            font-weight: bold;
            padding: 4px;
        }}
        QToolButton:hover {{
            color: #27272a;
        }}
        QToolButton#BtnCenter {{
            border-radius: {CENTER_SIZE // 2}px;
            background: qradialgradient(cx:0.5, cy:0.4, radius:0.6, fx:0.5, fy:0.4,
                                        stop:0 #fafafa, stop:1 #d4d4d8);
            border: 1px solid rgba(0, 0, 0, 0.08);
        }}
        QToolButton#BtnCenter:pressed {{
            background: #d4d4d8;
        }}
        """)
