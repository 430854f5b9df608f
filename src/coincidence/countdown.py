"""
Bounded, cancellable tick sequence driven by a repeating timer.
"""
import logging
from typing import Callable, Optional
from PyQt5.QtCore import QObject, Qt, QTimer, pyqtSignal

logger = logging.getLogger(__name__)

TICK_BOUND = 3              # Ticks delivered per session
DEFAULT_INTERVAL_MS = 1000  # One time unit

# Builds a repeating timer object with a `timeout` signal, start(ms) and stop().
TimerFactory = Callable[[Optional[QObject]], QObject]


def qt_timer_factory(parent: Optional[QObject] = None) -> QTimer:
    """Default timer factory: a precise repeating QTimer."""
    timer = QTimer(parent)
    timer.setTimerType(Qt.PreciseTimer)
    timer.setSingleShot(False)
    return timer


class CountdownSession(QObject):
    """
    One countdown: ticks 1..TICK_BOUND, one per interval, then completion
    on the following interval.

    Cancellation is synchronous. Once cancel() returns, nothing else is
    emitted, even for a timeout that was already queued.
    """
    ticked = pyqtSignal(int)
    completed = pyqtSignal()
    cancelled = pyqtSignal()

    def __init__(
        self,
        timer_factory: Optional[TimerFactory] = None,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        parent=None,
    ):
        super().__init__(parent)
        self._interval_ms = interval_ms
        self._timer = (timer_factory or qt_timer_factory)(self)
        self._timer.timeout.connect(self._on_timeout)
        self._count = 0
        self._active = False
        self._finished = False

    @property
    def count(self) -> int:
        return self._count

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self):
        if self._active or self._finished:
            return
        self._active = True
        self._timer.start(self._interval_ms)
        logger.debug("Countdown started (%d ms interval)", self._interval_ms)

    def cancel(self):
        """Stop immediately. No-op if already finished."""
        if not self._active:
            return
        self._halt()
        logger.debug("Countdown cancelled after %d tick(s)", self._count)
        self.cancelled.emit()

    def _halt(self):
        self._active = False
        self._finished = True
        self._timer.stop()

    def _on_timeout(self):
        if not self._active:
            return

        # Bound is checked before emitting anything
        if self._count >= TICK_BOUND:
            self._halt()
            logger.debug("Countdown completed")
            self.completed.emit()
            return

        self._count += 1
        self.ticked.emit(self._count)
