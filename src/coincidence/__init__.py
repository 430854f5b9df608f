"""
Coincidence Module

Countdown that runs while both gestures are active, in reactive and
imperative flavours.
"""
from .config import Config, load_config
from .countdown import CountdownSession, TICK_BOUND, qt_timer_factory
from .delegate import GestureReactorDelegate, EventRecorder, ReactorEvent, EventKind
from .window import CoincidenceWindow
from .timer import CoincidenceTimer
from .reactors import (
    GestureReactor,
    ReactiveGestureReactor,
    ImperativeGestureReactor,
    create_reactor,
)

__all__ = [
    'Config',
    'load_config',
    'CountdownSession',
    'TICK_BOUND',
    'qt_timer_factory',
    'GestureReactorDelegate',
    'EventRecorder',
    'ReactorEvent',
    'EventKind',
    'CoincidenceWindow',
    'CoincidenceTimer',
    'GestureReactor',
    'ReactiveGestureReactor',
    'ImperativeGestureReactor',
    'create_reactor',
]
