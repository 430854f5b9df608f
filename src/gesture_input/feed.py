"""
Scripted gesture feed.
Replays timed gesture phases into a reactor on the Qt event loop, standing in
for the host's gesture recognizers.
"""
from dataclasses import dataclass
from itertools import groupby
from typing import Dict, Iterable, List, Tuple, Union
from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from .phases import GesturePhase, GestureSource, coerce_source, read_phase


@dataclass(frozen=True)
class GestureStep:
    """
    One raw update in a script.

    Attributes:
        at: Offset from script start, in time units (1.0 = one tick interval)
        source: Gesture channel
        phase: Raw lifecycle phase
    """
    at: float
    source: GestureSource
    phase: GesturePhase


def _steps(*rows: Tuple[float, str, str]) -> Tuple[GestureStep, ...]:
    return tuple(GestureStep(at, GestureSource(src), GesturePhase(phase)) for at, src, phase in rows)


# Built-in scripts; the "changed" rows are movement noise the tracker drops
SCENARIOS: Dict[str, Tuple[GestureStep, ...]] = {
    "complete": _steps(
        (0.0, "pan", "began"),
        (0.0, "rotate", "began"),
        (0.5, "pan", "changed"),
        (1.5, "rotate", "changed"),
        (5.0, "pan", "ended"),
        (5.0, "rotate", "ended"),
    ),
    "cancel": _steps(
        (0.0, "pan", "began"),
        (0.0, "rotate", "began"),
        (1.5, "pan", "ended"),
        (2.0, "rotate", "ended"),
    ),
    "alone": _steps(
        (0.0, "pan", "began"),
        (1.0, "pan", "changed"),
        (2.0, "pan", "ended"),
    ),
    "retrigger": _steps(
        (0.0, "pan", "began"),
        (0.0, "rotate", "began"),
        (0.5, "pan", "ended"),
        (0.6, "pan", "began"),
        (2.5, "pan", "ended"),
        (2.5, "rotate", "ended"),
    ),
}


def load_scenario(scenario: Union[str, Iterable[dict]]) -> List[GestureStep]:
    """
    Resolve a scenario name, or build steps from mappings such as
    ``{"at": 1.0, "source": "pan", "phase": "ended"}``.

    Raises:
        KeyError: unknown scenario name
        ValueError: a row that is not a mapping, or a step with an unknown
            source, phase or time
    """
    if isinstance(scenario, str):
        if scenario not in SCENARIOS:
            raise KeyError(f"Unknown scenario {scenario!r}; choose from {sorted(SCENARIOS)}")
        return list(SCENARIOS[scenario])

    if not isinstance(scenario, (list, tuple)):
        raise ValueError(f"Scenario must be a name or a list of steps, got {scenario!r}")

    steps = []
    for row in scenario:
        if not isinstance(row, dict):
            raise ValueError(f"Scenario step must be a mapping, got {row!r}")
        source = coerce_source(row.get("source"))
        phase = read_phase(row.get("phase"))
        at = row.get("at", 0.0)
        if source is None or phase is None or isinstance(at, bool) or not isinstance(at, (int, float)):
            raise ValueError(f"Invalid scenario step: {row!r}")
        steps.append(GestureStep(float(at), source, phase))
    return sorted(steps, key=lambda s: s.at)


class ScriptedGestureFeed(QObject):
    """
    Plays a script into a reactor using single-shot timers.

    Updates for both sources sharing a timestamp are delivered together via
    handle_gestures(), as one logical instant.
    """
    step_played = pyqtSignal(object)  # GestureStep
    finished = pyqtSignal()

    def __init__(self, reactor, steps: Iterable[GestureStep], interval_ms: int, parent=None):
        super().__init__(parent)
        self._reactor = reactor
        self._interval_ms = interval_ms
        self._batches = [list(group) for _, group in groupby(sorted(steps, key=lambda s: s.at), key=lambda s: s.at)]
        self._pending = 0

    @property
    def duration_ms(self) -> int:
        if not self._batches:
            return 0
        return int(self._batches[-1][0].at * self._interval_ms)

    def start(self):
        self._pending = len(self._batches)
        if not self._pending:
            self.finished.emit()
            return
        for batch in self._batches:
            delay = int(batch[0].at * self._interval_ms)
            QTimer.singleShot(delay, lambda b=batch: self._play(b))

    def _play(self, batch: List[GestureStep]):
        self.deliver(self._reactor, batch)
        for step in batch:
            self.step_played.emit(step)
        self._pending -= 1
        if self._pending == 0:
            self.finished.emit()

    @staticmethod
    def deliver(reactor, batch: List[GestureStep]):
        """Hand one same-instant batch to the reactor."""
        pan = [s.phase for s in batch if s.source is GestureSource.PAN]
        rotate = [s.phase for s in batch if s.source is GestureSource.ROTATE]
        # Extra updates for the same source at one instant are delivered in order first
        for phase in pan[:-1]:
            reactor.handle_pan(phase)
        for phase in rotate[:-1]:
            reactor.handle_rotate(phase)
        reactor.handle_gestures(
            pan_raw=pan[-1] if pan else None,
            rotate_raw=rotate[-1] if rotate else None,
        )
