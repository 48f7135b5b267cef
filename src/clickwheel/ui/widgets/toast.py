from __future__ import annotations

from dataclasses import dataclass

from PySide6.QtCore import Qt, QTimer, QEasingCurve, QPropertyAnimation
from PySide6.QtWidgets import QWidget, QFrame, QLabel, QHBoxLayout, QGraphicsOpacityEffect


@dataclass(frozen=True)
class ToastData:
    message: str
    notify_type: str = "info"  # "info" | "success" | "warning" | "error"
    timeout_ms: int = 2500


def _colors(kind: str) -> tuple[str, str]:
    """
    Returns (bg, text).
    """
    kind = (kind or "info").lower()
    if kind == "success":
        return "rgba(22, 101, 52, 0.92)", "#f0fdf4"
    if kind == "warning":
        return "rgba(146, 64, 14, 0.92)", "#fffbeb"
    if kind == "error":
        return "rgba(153, 27, 27, 0.92)", "#fef2f2"
    return "rgba(24, 24, 27, 0.88)", "#fafafa"


class ToastWidget(QFrame):
    def __init__(self, data: ToastData, parent: QWidget):
        super().__init__(parent)
        self.data = data

        bg, text = _colors(data.notify_type)
        self.setObjectName("Toast")
        self.setStyleSheet(f"""
        QFrame#Toast {{
            background: {bg};
            border-radius: 8px;
        }}
        QLabel {{
            color: {text};
            font-size: 11px;
        }}
        """)
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)

        root = QHBoxLayout(self)
        root.setContentsMargins(10, 6, 10, 6)
        self.lbl = QLabel(data.message)
        self.lbl.setWordWrap(True)
        self.lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self.lbl)

        self._opacity = QGraphicsOpacityEffect(self)
        self._opacity.setOpacity(1.0)
        self.setGraphicsEffect(self._opacity)
        self._anim: QPropertyAnimation | None = None

    def fade_out(self, on_done):
        self._anim = QPropertyAnimation(self._opacity, b"opacity", self)
        self._anim.setDuration(180)
        self._anim.setStartValue(self._opacity.opacity())
        self._anim.setEndValue(0.0)
        self._anim.setEasingCurve(QEasingCurve.Type.InCubic)
        self._anim.finished.connect(on_done)
        self._anim.start()


class ToastManager:
    """
    Shows one toast at a time near the bottom of the host widget; a new
    message replaces the one on screen.
    """
    def __init__(self, host: QWidget, margin: int = 10):
        self.host = host
        self._margin = margin
        self._current: ToastWidget | None = None

    def show_toast(self, message: str, notify_type: str = "info", timeout_ms: int = 2500):
        if not message:
            return
        self._remove_current()

        toast = ToastWidget(ToastData(message, notify_type, timeout_ms), parent=self.host)
        toast.setFixedWidth(max(120, self.host.width() - 2 * self._margin))
        toast.adjustSize()
        toast.move(self._margin, self.host.height() - toast.height() - self._margin)
        toast.show()
        toast.raise_()
        self._current = toast

        QTimer.singleShot(max(500, int(timeout_ms)), lambda: self._dismiss(toast))

    def _dismiss(self, toast: ToastWidget):
        if toast is not self._current:
            return
        toast.fade_out(lambda: self._remove(toast))

    def _remove(self, toast: ToastWidget):
        if toast is self._current:
            self._remove_current()

    def _remove_current(self):
        if self._current is not None:
            self._current.hide()
            self._current.deleteLater()
            self._current = None
