"""
Listener contract for countdown notifications.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional


class EventKind(Enum):
    START = auto()
    TICK = auto()
    COMPLETE = auto()


@dataclass(frozen=True)
class ReactorEvent:
    """Tagged notification: Start, Tick(count) or Complete."""
    kind: EventKind
    count: Optional[int] = None

    @classmethod
    def start(cls) -> "ReactorEvent":
        return cls(EventKind.START)

    @classmethod
    def tick(cls, count: int) -> "ReactorEvent":
        return cls(EventKind.TICK, count)

    @classmethod
    def complete(cls) -> "ReactorEvent":
        return cls(EventKind.COMPLETE)

    def __str__(self):
        if self.kind is EventKind.TICK:
            return f"tick({self.count})"
        return self.kind.name.lower()


class GestureReactorDelegate:
    """
    Receives fire-and-forget notifications from a reactor.
    Subclass and override what you need; defaults do nothing.
    """

    def did_start(self):
        pass

    def did_tick(self, count: int):
        pass

    def did_complete(self):
        pass


class EventRecorder(GestureReactorDelegate):
    """Delegate that keeps every notification as a ReactorEvent."""

    def __init__(self):
        self.events: List[ReactorEvent] = []

    def did_start(self):
        self.events.append(ReactorEvent.start())

    def did_tick(self, count: int):
        self.events.append(ReactorEvent.tick(count))

    def did_complete(self):
        self.events.append(ReactorEvent.complete())

    @property
    def ticks(self) -> List[int]:
        return [e.count for e in self.events if e.kind is EventKind.TICK]

    def count(self, kind: EventKind) -> int:
        return sum(1 for e in self.events if e.kind is kind)

    def clear(self):
        self.events.clear()


def attach_delegate(emitter, delegate: GestureReactorDelegate):
    """Connect an emitter's started/ticked/completed signals to a delegate."""
    emitter.started.connect(delegate.did_start)
    emitter.ticked.connect(delegate.did_tick)
    emitter.completed.connect(delegate.did_complete)


def detach_delegate(emitter, delegate: GestureReactorDelegate):
    emitter.started.disconnect(delegate.did_start)
    emitter.ticked.disconnect(delegate.did_tick)
    emitter.completed.disconnect(delegate.did_complete)
