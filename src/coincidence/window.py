"""
Latest-state window over both gesture sources.
"""
from typing import Dict, Iterable, Optional

from gesture_input.phases import (
    GestureSnapshot,
    GestureSource,
    GestureState,
    PairState,
    compare_states,
)


class CoincidenceWindow:
    """
    Holds the most recent state of each source.

    Works like combine-latest: nothing is produced until both sources
    have reported at least once.
    """

    def __init__(self):
        self._latest: Dict[GestureSource, GestureState] = {}

    def apply(self, snapshots: Iterable[GestureSnapshot]) -> Optional[PairState]:
        """Apply a batch of snapshots, then compare the pair once."""
        for snapshot in snapshots:
            self._latest[snapshot.source] = snapshot.state
        return self.pair

    @property
    def pair(self) -> Optional[PairState]:
        pan = self._latest.get(GestureSource.PAN)
        rotate = self._latest.get(GestureSource.ROTATE)
        if pan is None or rotate is None:
            return None
        return compare_states(pan, rotate)

    def latest(self, source: GestureSource) -> Optional[GestureState]:
        return self._latest.get(source)

    def reset(self):
        self._latest.clear()
