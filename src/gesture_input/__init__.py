"""
Gesture Input Module

Normalizes raw pan/rotate gesture updates into Started/Ended snapshots.
"""
from .phases import (
    GesturePhase,
    GestureState,
    GestureSource,
    GestureSnapshot,
    PairState,
    compare_states,
)
from .tracker import GestureStateTracker
from .feed import GestureStep, ScriptedGestureFeed, load_scenario, SCENARIOS

__all__ = [
    'GesturePhase',
    'GestureState',
    'GestureSource',
    'GestureSnapshot',
    'PairState',
    'compare_states',
    'GestureStateTracker',
    'GestureStep',
    'ScriptedGestureFeed',
    'load_scenario',
    'SCENARIOS',
]
