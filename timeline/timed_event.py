# timeline/timed_event.py

"""
Frame-stamped notifications and the ordered sequences compiled from
marble diagrams or recorded from a stream under test.

A TimedEventSequence is a value object: it validates its ordering and
terminal invariants once, at construction, and is never mutated afterwards,
so it can be shared between cold observables, hot observables and
expectations by reference.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from .notification import Notification


@dataclass(frozen=True, slots=True)
class TimedEvent:
    frame: int
    notification: Notification

    def to_comparable(self) -> Dict[str, Any]:
        return {"frame": self.frame, **self.notification.to_comparable()}

    def __str__(self) -> str:
        return f"{self.notification}@{self.frame}"


class TimedEventSequence:
    """Immutable, validated sequence of timed events.

    Invariants:
      • frames are non-decreasing; same-frame events keep declaration order.
      • at most one terminal event, and if present it is the last one.

    Raises:
        ValueError: at construction if either invariant is violated
    """

    __slots__ = ("_events",)

    def __init__(self, events: Iterable[TimedEvent] = ()):
        events = tuple(events)
        for previous, current in zip(events, events[1:]):
            if current.frame < previous.frame:
                raise ValueError(
                    f"Events out of order: frame {current.frame} follows {previous.frame}"
                )
        for event in events[:-1]:
            if event.notification.is_terminal:
                raise ValueError(f"Terminal event {event} is not the last event")
        self._events: Tuple[TimedEvent, ...] = events

    @property
    def events(self) -> Tuple[TimedEvent, ...]:
        return self._events

    @property
    def terminal(self) -> Optional[TimedEvent]:
        """The closing error/completion event, or None for an open stream."""
        if self._events and self._events[-1].notification.is_terminal:
            return self._events[-1]
        return None

    @property
    def frames(self) -> List[int]:
        return [event.frame for event in self._events]

    def shifted(self, offset: int) -> TimedEventSequence:
        """Return a copy with every frame moved by `offset`."""
        return TimedEventSequence(
            TimedEvent(event.frame + offset, event.notification) for event in self._events
        )

    def to_comparable(self) -> List[Dict[str, Any]]:
        return [event.to_comparable() for event in self._events]

    def __iter__(self) -> Iterator[TimedEvent]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __getitem__(self, index: int) -> TimedEvent:
        return self._events[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimedEventSequence):
            return NotImplemented
        return self._events == other._events

    def __hash__(self) -> int:
        return hash(self._events)

    def __str__(self) -> str:
        return "[" + ", ".join(str(event) for event in self._events) + "]"

    __repr__ = __str__
