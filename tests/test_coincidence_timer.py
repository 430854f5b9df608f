"""
Tests for the countdown session, the latest-state window and the
signal-composed coincidence timer.
"""
import pytest
from coincidence.countdown import CountdownSession, TICK_BOUND
from coincidence.delegate import EventKind, ReactorEvent
from coincidence.timer import CoincidenceTimer
from coincidence.window import CoincidenceWindow
from gesture_input.phases import GesturePhase, GestureSnapshot, GestureSource, GestureState, PairState
from gesture_input.tracker import GestureStateTracker

BEGAN, ENDED = GesturePhase.BEGAN, GesturePhase.ENDED
S, E = GestureState.STARTED, GestureState.ENDED


def snap(source, state):
    return GestureSnapshot(source=source, state=state)


class TestCountdownSession:

    def test_ticks_then_completes_on_following_interval(self, timer_factory, timers):
        session = CountdownSession(timer_factory, interval_ms=250)
        ticks, done = [], []
        session.ticked.connect(ticks.append)
        session.completed.connect(lambda: done.append(True))

        session.start()
        timer = timers[0]
        assert timer.interval == 250 and timer.active

        for _ in range(TICK_BOUND):
            timer.fire()
        assert ticks == [1, 2, 3]
        assert done == []

        timer.fire()
        assert done == [True]
        assert not session.is_active
        assert not timer.active

        # Stray timeouts after completion are ignored
        timer.fire()
        assert ticks == [1, 2, 3] and done == [True]

    def test_cancel_drops_already_queued_timeout(self, timer_factory, timers):
        session = CountdownSession(timer_factory)
        ticks, cancelled = [], []
        session.ticked.connect(ticks.append)
        session.cancelled.connect(lambda: cancelled.append(True))

        session.start()
        timers[0].fire()
        session.cancel()
        timers[0].fire()

        assert ticks == [1]
        assert cancelled == [True]
        assert session.count == 1

    def test_cannot_restart_after_finishing(self, timer_factory, timers):
        session = CountdownSession(timer_factory)
        session.start()
        session.cancel()
        session.start()
        assert not session.is_active


class TestCoincidenceWindow:

    def test_nothing_until_both_sources_reported(self):
        window = CoincidenceWindow()
        assert window.apply([snap(GestureSource.PAN, S)]) is None
        assert window.apply([snap(GestureSource.ROTATE, S)]) is PairState.BOTH_STARTED

    def test_batch_is_applied_before_comparison(self):
        window = CoincidenceWindow()
        window.apply([snap(GestureSource.PAN, S), snap(GestureSource.ROTATE, S)])
        pair = window.apply([snap(GestureSource.PAN, E), snap(GestureSource.ROTATE, E)])
        assert pair is PairState.BOTH_ENDED

    def test_mismatch(self):
        window = CoincidenceWindow()
        assert window.apply([snap(GestureSource.PAN, S), snap(GestureSource.ROTATE, E)]) is PairState.MISMATCHED


@pytest.fixture
def rig(timer_factory, timers, recorder):
    """Tracker wired to a coincidence timer, with a recording listener."""
    tracker = GestureStateTracker()
    timer = CoincidenceTimer(timer_factory, interval_ms=1000, listener=recorder)
    timer.connect_tracker(tracker)

    def advance(units=1):
        for _ in range(units):
            live = [t for t in timers if t.active]
            for t in live:
                t.fire()

    return tracker, timer, advance


class TestCoincidenceTimer:

    def test_scenario_natural_completion(self, rig, recorder):
        tracker, timer, advance = rig
        tracker.handle_pan(BEGAN)
        tracker.handle_rotate(BEGAN)
        assert recorder.events == [ReactorEvent.start()]

        advance(3)
        assert recorder.ticks == [1, 2, 3]
        assert recorder.count(EventKind.COMPLETE) == 0

        advance()
        assert recorder.events[-1] == ReactorEvent.complete()
        assert not timer.is_active

        advance(3)
        assert len(recorder.events) == 5

    def test_scenario_early_end_cancels(self, rig, recorder, timers):
        tracker, timer, advance = rig
        tracker.handle_pan(BEGAN)
        tracker.handle_rotate(BEGAN)
        advance()
        tracker.handle_pan(ENDED)

        # A timeout that was due anyway must not get through
        timers[-1].fire()
        advance(5)
        assert recorder.ticks == [1]
        assert recorder.count(EventKind.COMPLETE) == 0
        assert not timer.is_active

    def test_scenario_single_gesture_is_silent(self, rig, recorder):
        tracker, _, advance = rig
        tracker.handle_pan(BEGAN)
        advance(5)
        tracker.handle_pan(ENDED)
        assert recorder.events == []

    def test_scenario_retrigger_after_end(self, rig, recorder):
        tracker, _, _ = rig
        tracker.handle_pan(BEGAN)
        tracker.handle_rotate(BEGAN)
        tracker.handle_pan(ENDED)
        tracker.handle_pan(BEGAN)
        assert recorder.count(EventKind.START) == 2

    def test_start_is_edge_triggered(self, rig, recorder):
        tracker, _, advance = rig
        tracker.handle_pan(BEGAN)
        tracker.handle_rotate(BEGAN)
        tracker.handle_pan(BEGAN)
        tracker.handle_rotate(GesturePhase.CHANGED)
        tracker.handle_rotate(BEGAN)
        assert recorder.count(EventKind.START) == 1

        # Still latched after completing
        advance(4)
        tracker.handle_pan(BEGAN)
        assert recorder.count(EventKind.START) == 1

    def test_fresh_session_after_completion(self, rig, recorder):
        tracker, _, advance = rig
        tracker.handle_pan(BEGAN)
        tracker.handle_rotate(BEGAN)
        advance(4)
        tracker.handle_rotate(ENDED)
        tracker.handle_rotate(BEGAN)
        recorder.clear()

        advance(4)
        assert recorder.ticks == [1, 2, 3]
        assert recorder.count(EventKind.COMPLETE) == 1

    def test_end_before_any_start_is_noop(self, rig, recorder):
        tracker, _, _ = rig
        tracker.handle_pan(ENDED)
        tracker.handle_rotate(ENDED)
        tracker.handle_pan(BEGAN)
        assert recorder.events == []

    def test_simultaneous_pair_is_atomic(self, rig, recorder):
        tracker, timer, _ = rig
        pairs = []
        timer.pair_changed.connect(pairs.append)

        tracker.handle_pan(BEGAN)
        tracker.handle_rotate(ENDED)
        # Swap both at once: never seen half-updated as BOTH_STARTED or BOTH_ENDED
        tracker.observe_pair(ENDED, BEGAN)

        assert pairs == [PairState.MISMATCHED, PairState.MISMATCHED]
        assert recorder.events == []

    def test_at_most_one_session(self, rig, timers):
        tracker, timer, _ = rig
        for _ in range(3):
            tracker.handle_pan(BEGAN)
            tracker.handle_rotate(BEGAN)
            tracker.handle_pan(ENDED)
        tracker.handle_pan(BEGAN)

        assert sum(1 for t in timers if t.active) == 1
        assert timer.is_active

    def test_derived_signals(self, rig):
        tracker, timer, _ = rig
        seen = []
        timer.coincidence_started.connect(lambda: seen.append("started"))
        timer.coincidence_ended.connect(lambda: seen.append("ended"))

        tracker.handle_pan(BEGAN)
        tracker.handle_rotate(BEGAN)
        tracker.handle_rotate(ENDED)
        tracker.handle_pan(ENDED)
        assert seen == ["started", "ended"]

    def test_event_channel_mirrors_listener(self, rig, recorder):
        tracker, timer, advance = rig
        channel = []
        timer.event_emitted.connect(channel.append)

        tracker.observe_pair(BEGAN, BEGAN)
        advance(4)
        assert channel == recorder.events
        assert [str(e) for e in channel] == ["start", "tick(1)", "tick(2)", "tick(3)", "complete"]

    def test_reset_cancels_and_forgets(self, rig, recorder):
        tracker, timer, advance = rig
        tracker.observe_pair(BEGAN, BEGAN)
        timer.reset()
        advance(4)
        assert recorder.ticks == []

        # Window was cleared, so one source alone does nothing
        tracker.handle_pan(BEGAN)
        assert recorder.count(EventKind.START) == 1

    def test_finished_sessions_are_released(self, rig):
        tracker, timer, advance = rig
        for _ in range(3):
            tracker.observe_pair(BEGAN, BEGAN)
            advance(4)
            tracker.observe_pair(ENDED, ENDED)

        # One cancelled mid-countdown as well
        tracker.observe_pair(BEGAN, BEGAN)
        advance()
        tracker.handle_pan(ENDED)
        tracker.handle_pan(BEGAN)

        sessions = [c for c in timer.children() if isinstance(c, CountdownSession)]
        assert sessions == [timer.session]
        assert timer.is_active
