"""
Gesture state tracker.
Turns raw per-frame gesture updates into Started/Ended snapshots.
"""
import logging
from typing import Dict, Optional, Tuple
from PyQt5.QtCore import QObject, pyqtSignal

from .phases import (
    GestureSnapshot,
    GestureSource,
    GestureState,
    coerce_source,
    read_phase,
    to_gesture_state,
)

logger = logging.getLogger(__name__)


class GestureStateTracker(QObject):
    """
    Filters raw gesture updates down to transition-relevant moments.

    Only "began" and "ended" phases produce output. Every emission is a tuple
    of snapshots that belong to the same logical instant, so a consumer can
    apply them together before evaluating anything.
    """
    # Emits Tuple[GestureSnapshot, ...]
    states_changed = pyqtSignal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._last: Dict[GestureSource, GestureState] = {}

    def _snapshot(self, source, raw) -> Optional[GestureSnapshot]:
        resolved = coerce_source(source)
        if resolved is None:
            logger.debug("Dropping update for unknown source %r", source)
            return None

        # Read the phase now; the raw object may mutate after this call
        phase = read_phase(raw)
        if phase is None:
            logger.debug("Dropping malformed %s update: %r", resolved.value, raw)
            return None

        state = to_gesture_state(phase)
        if state is None:
            return None

        self._last[resolved] = state
        return GestureSnapshot(source=resolved, state=state)

    def observe(self, source, raw) -> Optional[GestureSnapshot]:
        """
        Observe one raw update from one source.

        Returns the emitted snapshot, or None if the update was filtered out.
        """
        snapshot = self._snapshot(source, raw)
        if snapshot is not None:
            self.states_changed.emit((snapshot,))
        return snapshot

    def observe_pair(self, pan_raw, rotate_raw) -> Tuple[GestureSnapshot, ...]:
        """
        Observe updates for both sources that happened at the same instant.

        Either argument may be None when only one source reported. Snapshots
        are emitted as a single batch.
        """
        snapshots = []
        for source, raw in ((GestureSource.PAN, pan_raw), (GestureSource.ROTATE, rotate_raw)):
            if raw is None:
                continue
            snapshot = self._snapshot(source, raw)
            if snapshot is not None:
                snapshots.append(snapshot)

        batch = tuple(snapshots)
        if batch:
            self.states_changed.emit(batch)
        return batch

    def handle_pan(self, raw) -> Optional[GestureSnapshot]:
        return self.observe(GestureSource.PAN, raw)

    def handle_rotate(self, raw) -> Optional[GestureSnapshot]:
        return self.observe(GestureSource.ROTATE, raw)

    def last_state(self, source) -> Optional[GestureState]:
        """Last normalized state seen for a source."""
        resolved = coerce_source(source)
        return self._last.get(resolved) if resolved else None

    def reset(self):
        self._last.clear()
