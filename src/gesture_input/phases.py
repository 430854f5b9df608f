"""
Gesture lifecycle types.
Raw phases from the host toolkit are reduced to a two-valued state per source.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import time


class GesturePhase(Enum):
    """Raw lifecycle phase reported by a gesture recognizer."""
    BEGAN = "began"
    CHANGED = "changed"
    ENDED = "ended"
    CANCELLED = "cancelled"
    FAILED = "failed"


class GestureState(Enum):
    """Normalized state tracked per gesture source."""
    STARTED = "started"
    ENDED = "ended"


class GestureSource(Enum):
    """The two tracked gesture channels."""
    PAN = "pan"          # A
    ROTATE = "rotate"    # B


class PairState(Enum):
    """Result of comparing the latest state of both sources."""
    BOTH_STARTED = "both_started"
    BOTH_ENDED = "both_ended"
    MISMATCHED = "mismatched"


@dataclass(frozen=True)
class GestureSnapshot:
    """
    Immutable record of a normalized state, taken when the event is observed.

    Attributes:
        source: Which gesture channel reported
        state: Started or Ended
        timestamp: perf_counter() at observation time
    """
    source: GestureSource
    state: GestureState
    timestamp: float = field(default_factory=time.perf_counter)


_PHASE_TO_STATE = {
    GesturePhase.BEGAN: GestureState.STARTED,
    GesturePhase.ENDED: GestureState.ENDED,
}


def read_phase(raw) -> Optional[GesturePhase]:
    """
    Read the lifecycle phase out of a raw gesture update.

    Accepts a GesturePhase, a phase name ("began", "ENDED", ...) or any
    object exposing a ``phase`` or ``state`` attribute holding one of those.
    Returns None if nothing usable is found.
    """
    if isinstance(raw, GesturePhase):
        return raw
    if isinstance(raw, str):
        try:
            return GesturePhase(raw.strip().lower())
        except ValueError:
            return None
    if raw is None:
        return None

    for attr in ("phase", "state"):
        value = getattr(raw, attr, None)
        if isinstance(value, (GesturePhase, str)):
            return read_phase(value)
    return None


def to_gesture_state(phase: Optional[GesturePhase]) -> Optional[GestureState]:
    """Map began/ended to Started/Ended; every other phase maps to None."""
    return _PHASE_TO_STATE.get(phase)


def compare_states(a: GestureState, b: GestureState) -> PairState:
    """Three-way comparison of two source states."""
    if a is not b:
        return PairState.MISMATCHED
    if a is GestureState.STARTED:
        return PairState.BOTH_STARTED
    return PairState.BOTH_ENDED


def coerce_source(source) -> Optional[GestureSource]:
    """Accept a GestureSource or its name/value ("pan", "ROTATE", "a", "b")."""
    if isinstance(source, GestureSource):
        return source
    if not isinstance(source, str):
        return None
    key = source.strip().lower()
    aliases = {"a": GestureSource.PAN, "b": GestureSource.ROTATE, "pinch": GestureSource.ROTATE}
    if key in aliases:
        return aliases[key]
    try:
        return GestureSource(key)
    except ValueError:
        return None
