from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, QTimer


class QtScheduler(QObject):
    """Repeating ``QTimer`` handles for the idle highlight."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._timers: set[QTimer] = set()

    def schedule_repeating(self, delay_seconds: float, callback: Callable[[], None]) -> QTimer:
        timer = QTimer(self)
        timer.setSingleShot(False)
        timer.setInterval(max(1, int(round(float(delay_seconds) * 1000))))
        timer.timeout.connect(callback)
        timer.start()
        self._timers.add(timer)
        return timer

    def cancel(self, handle: QTimer) -> None:
        if handle not in self._timers:
            return
        self._timers.discard(handle)
        handle.stop()
        handle.deleteLater()

    def restart_all(self) -> None:
        """Push every pending fire back by a full interval (call on user input)."""
        for timer in self._timers:
            timer.start()
