"""
Gesture reactors: the host-facing entry points.

The host forwards pan and rotate updates; the reactor notifies its delegate
with start / tick(n) / complete. Two interchangeable implementations are
provided, one composed from signals and one written with plain flags.
"""
import logging
from typing import Dict, Optional
from PyQt5.QtCore import QObject, pyqtSignal

from gesture_input.phases import GestureSource, GestureState, coerce_source, read_phase, to_gesture_state
from gesture_input.tracker import GestureStateTracker
from .config import Config
from .countdown import DEFAULT_INTERVAL_MS, TICK_BOUND, TimerFactory, qt_timer_factory
from .delegate import GestureReactorDelegate, ReactorEvent, attach_delegate, detach_delegate
from .timer import CoincidenceTimer

logger = logging.getLogger(__name__)


class GestureReactor(QObject):
    """
    Base reactor.
    Emits the same notifications as Qt signals and to an optional delegate.
    """
    started = pyqtSignal()
    ticked = pyqtSignal(int)
    completed = pyqtSignal()
    event_emitted = pyqtSignal(object)  # ReactorEvent

    def __init__(self, parent=None):
        super().__init__(parent)
        self._delegate: Optional[GestureReactorDelegate] = None

    @property
    def delegate(self) -> Optional[GestureReactorDelegate]:
        return self._delegate

    @delegate.setter
    def delegate(self, delegate: Optional[GestureReactorDelegate]):
        if self._delegate is not None:
            detach_delegate(self, self._delegate)
        self._delegate = delegate
        if delegate is not None:
            attach_delegate(self, delegate)

    def handle_pan(self, raw):
        raise NotImplementedError

    def handle_rotate(self, raw):
        raise NotImplementedError

    def handle_gestures(self, pan_raw=None, rotate_raw=None):
        """Handle updates from both sources that happened at the same instant."""
        raise NotImplementedError

    def reset(self):
        raise NotImplementedError

    @property
    def is_active(self) -> bool:
        raise NotImplementedError

    def _notify_start(self):
        self.started.emit()
        self.event_emitted.emit(ReactorEvent.start())

    def _notify_tick(self, count: int):
        self.ticked.emit(count)
        self.event_emitted.emit(ReactorEvent.tick(count))

    def _notify_complete(self):
        self.completed.emit()
        self.event_emitted.emit(ReactorEvent.complete())


class ReactiveGestureReactor(GestureReactor):
    """Tracker and coincidence timer wired together with signals."""

    def __init__(
        self,
        timer_factory: Optional[TimerFactory] = None,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        parent=None,
    ):
        super().__init__(parent)
        self._tracker = GestureStateTracker(self)
        self._timer = CoincidenceTimer(timer_factory, interval_ms, parent=self)
        self._timer.connect_tracker(self._tracker)

        self._timer.started.connect(self.started)
        self._timer.ticked.connect(self.ticked)
        self._timer.completed.connect(self.completed)
        self._timer.event_emitted.connect(self.event_emitted)

    @property
    def tracker(self) -> GestureStateTracker:
        return self._tracker

    @property
    def coincidence_timer(self) -> CoincidenceTimer:
        return self._timer

    @property
    def is_active(self) -> bool:
        return self._timer.is_active

    def handle_pan(self, raw):
        self._tracker.handle_pan(raw)

    def handle_rotate(self, raw):
        self._tracker.handle_rotate(raw)

    def handle_gestures(self, pan_raw=None, rotate_raw=None):
        self._tracker.observe_pair(pan_raw, rotate_raw)

    def reset(self):
        self._timer.reset()
        self._tracker.reset()


class ImperativeGestureReactor(GestureReactor):
    """
    Same rule with presence flags and a single timer.

    A source only counts as newly present on a Started that follows an
    Ended (or the initial state), so repeated began phases do not restart.
    The timer is created once and restarted for every countdown.
    """

    def __init__(
        self,
        timer_factory: Optional[TimerFactory] = None,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        parent=None,
    ):
        super().__init__(parent)
        self._interval_ms = interval_ms
        self._present: Dict[GestureSource, bool] = {s: False for s in GestureSource}
        self._timer = (timer_factory or qt_timer_factory)(self)
        self._timer.timeout.connect(self._tick)
        self._running = False
        self._ticks = 0

    @property
    def is_active(self) -> bool:
        return self._running

    def handle_pan(self, raw):
        self.handle_gestures(pan_raw=raw)

    def handle_rotate(self, raw):
        self.handle_gestures(rotate_raw=raw)

    def handle_gestures(self, pan_raw=None, rotate_raw=None):
        changed = False
        for source, raw in ((GestureSource.PAN, pan_raw), (GestureSource.ROTATE, rotate_raw)):
            if raw is not None:
                changed |= self._apply(source, raw)
        if not changed:
            return

        if all(self._present.values()):
            self._start_timer_if_needed()
        else:
            self._stop_timer_if_needed()

    def reset(self):
        self._stop_timer_if_needed()
        for source in self._present:
            self._present[source] = False

    def _apply(self, source, raw) -> bool:
        """Update the presence flag; True if it changed."""
        source = coerce_source(source)
        state = to_gesture_state(read_phase(raw))
        if source is None or state is None:
            return False

        present = state is GestureState.STARTED
        if self._present[source] == present:
            return False
        self._present[source] = present
        return True

    def _start_timer_if_needed(self):
        if self._running:
            return
        self._ticks = 0
        self._running = True
        self._timer.start(self._interval_ms)
        logger.info("Both gestures present, timer started")

        # The delegate may end a gesture from in here, which stops the timer again
        self._notify_start()

    def _stop_timer_if_needed(self) -> bool:
        if not self._running:
            return False
        self._running = False
        self._timer.stop()
        return True

    def _tick(self):
        if not self._running:
            return
        if self._ticks >= TICK_BOUND:
            self._stop_timer_if_needed()
            logger.info("Timer completed")
            self._notify_complete()
            return
        self._ticks += 1
        self._notify_tick(self._ticks)


def create_reactor(
    config: Optional[Config] = None,
    timer_factory: Optional[TimerFactory] = None,
    parent=None,
) -> GestureReactor:
    """Build the reactor variant named in the config."""
    config = config or Config()
    cls = ImperativeGestureReactor if config.reactor.variant == "imperative" else ReactiveGestureReactor
    logger.debug("Creating %s (%d ms interval)", cls.__name__, config.timer.interval_ms)
    return cls(timer_factory, config.timer.interval_ms, parent=parent)
