# Rev 0.1.0
"""Simulated GitHub sync: a cancellable single-shot timer, no I/O.

Absent cancellation the timer fires once and appends one System activity.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from sitebook.utils.logging_setup import get_logger

SYNC_DONE_ACTION = "GitHub sync completed (simulated)"


class SyncSimulator(QObject):
    started = Signal()
    cancelled = Signal()
    finished = Signal(dict)  # the activity entry

    def __init__(self, store, *, delay_ms: int = 2000, timer_factory: Optional[Callable[[], Any]] = None, parent=None):
        super().__init__(parent)
        self._log = get_logger("SyncSimulator")
        self._store = store
        self._timer = timer_factory() if timer_factory else QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(int(delay_ms))
        self._timer.timeout.connect(self._on_timeout)

    def is_pending(self) -> bool:
        return bool(self._timer.isActive())

    def start(self) -> None:
        if self.is_pending():
            self._timer.stop()
        self._timer.start()
        self._log.info("Simulated sync scheduled (%d ms)", self._timer.interval())
        self.started.emit()

    def cancel(self) -> bool:
        if not self.is_pending():
            return False
        self._timer.stop()
        self._log.info("Simulated sync cancelled")
        self.cancelled.emit()
        return True

    def _on_timeout(self) -> None:
        entry: Dict[str, Any] = self._store.record_activity("System", SYNC_DONE_ACTION)
        self._log.info("Simulated sync finished")
        self.finished.emit(entry)
