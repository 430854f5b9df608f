"""
Coincidence timer.

Composes two normalized gesture-state streams into an edge-triggered
"coincidence started" / "coincidence ended" signal pair, and derives a
bounded countdown from it:

    states_changed ─► window ─► pair_changed ─┬─► coincidence_started ─► start session
                                              └─► coincidence_ended   ─► cancel session
"""
import logging
from typing import List, Optional
from PyQt5.QtCore import QObject, pyqtSignal, pyqtSlot

from gesture_input.phases import PairState
from .countdown import CountdownSession, DEFAULT_INTERVAL_MS, TimerFactory
from .delegate import GestureReactorDelegate, ReactorEvent, attach_delegate
from .window import CoincidenceWindow

logger = logging.getLogger(__name__)


class CoincidenceTimer(QObject):
    """
    Emits start / tick(n) / complete for overlapping gestures.

    Start is edge-triggered: it fires when the pair becomes BOTH_STARTED and
    cannot fire again until the pair has left that state. Leaving it (either
    source ended) cancels a running countdown.
    """
    # Derived streams
    pair_changed = pyqtSignal(object)      # PairState
    coincidence_started = pyqtSignal()
    coincidence_ended = pyqtSignal()

    # Listener-facing notifications
    started = pyqtSignal()
    ticked = pyqtSignal(int)
    completed = pyqtSignal()
    event_emitted = pyqtSignal(object)     # ReactorEvent

    def __init__(
        self,
        timer_factory: Optional[TimerFactory] = None,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        listener: Optional[GestureReactorDelegate] = None,
        parent=None,
    ):
        super().__init__(parent)
        self._timer_factory = timer_factory
        self._interval_ms = interval_ms
        self._window = CoincidenceWindow()
        self._session: Optional[CountdownSession] = None
        self._coincident = False

        # Finished sessions wait here until no session callback is on the stack
        self._retired: List[CountdownSession] = []
        self._dispatch_depth = 0

        self.pair_changed.connect(self._on_pair_changed)
        self.coincidence_started.connect(self._start_session)
        self.coincidence_ended.connect(self._cancel_session)

        if listener is not None:
            attach_delegate(self, listener)

    @property
    def is_active(self) -> bool:
        """True while a countdown session is running."""
        return self._session is not None and self._session.is_active

    @property
    def session(self) -> Optional[CountdownSession]:
        return self._session

    @property
    def window(self) -> CoincidenceWindow:
        return self._window

    def connect_tracker(self, tracker):
        tracker.states_changed.connect(self.feed)

    @pyqtSlot(object)
    def feed(self, snapshots):
        """Apply one batch of snapshots and evaluate the pair once."""
        self._release_retired()
        pair = self._window.apply(snapshots)
        if pair is not None:
            self.pair_changed.emit(pair)

    def reset(self):
        self._cancel_session()
        self._coincident = False
        self._window.reset()
        self._release_retired()

    # ------------------------------------------------------------------

    def _on_pair_changed(self, pair: PairState):
        if pair is PairState.BOTH_STARTED:
            if not self._coincident:
                self._coincident = True
                self.coincidence_started.emit()
        elif self._coincident:
            self._coincident = False
            self.coincidence_ended.emit()

    def _start_session(self):
        # At most one session alive
        self._cancel_session()

        session = CountdownSession(self._timer_factory, self._interval_ms, parent=self)
        session.ticked.connect(self._on_tick)
        session.completed.connect(self._on_complete)
        self._session = session
        session.start()
        logger.info("Both gestures active, countdown started")

        # Listeners may end a gesture from in here; the session is live so it gets cancelled
        self.started.emit()
        self.event_emitted.emit(ReactorEvent.start())

    def _cancel_session(self):
        session, self._session = self._session, None
        if session is None:
            return
        if session.is_active:
            logger.info("Gesture ended, countdown cancelled at tick %d", session.count)
        session.cancel()
        self._retired.append(session)

    def _release_retired(self):
        if self._dispatch_depth or not self._retired:
            return
        for session in self._retired:
            # Unparented, the last Python reference owns and deletes it
            session.setParent(None)
        self._retired.clear()

    def _on_tick(self, count: int):
        self._dispatch_depth += 1
        try:
            self.ticked.emit(count)
            self.event_emitted.emit(ReactorEvent.tick(count))
        finally:
            self._dispatch_depth -= 1

    def _on_complete(self):
        session, self._session = self._session, None
        if session is not None:
            self._retired.append(session)
        logger.info("Countdown complete")

        self._dispatch_depth += 1
        try:
            self.completed.emit()
            self.event_emitted.emit(ReactorEvent.complete())
        finally:
            self._dispatch_depth -= 1
