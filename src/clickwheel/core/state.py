from __future__ import annotations
from dataclasses import dataclass
from PySide6.QtCore import QObject, Signal, Slot

@dataclass(frozen=True)
class Notify:
    message: str
    notify_type: str = "info"   # info/success/warning/error

class AppState(QObject):
    notification = Signal(object)   # emits Notify

    def __init__(self):
        super().__init__()
        self.config = None
        self.store = None
        self.player = None
        self.navigator = None
        self.queued_notifications: list[Notify] = []

    @Slot(str, str)
    def notify(self, message: str, notify_type: str = "info"):
        self.notification.emit(Notify(message=message, notify_type=notify_type))

    def take_queued_notifications(self) -> list[Notify]:
        queued, self.queued_notifications = self.queued_notifications, []
        return queued
