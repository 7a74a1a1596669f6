# timeline/notification.py

"""
Notification
============

Immutable record of one signal pushed by a stream: a value, an error, or
completion. Error and completion are terminal; nothing follows them on the
same subscription.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, TYPE_CHECKING

from utils.comparable import comparable_error

if TYPE_CHECKING:
    from harness.observable import Subscriber


class StreamTerminalError(Exception):
    """Default payload for an error declared with ``#`` in a diagram.

    This is modeled data travelling through the error channel, not a fault
    of the harness; it is never raised by the scheduler.
    """

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.args))


class NotificationKind(Enum):
    """Tag of a notification, using the classic single-letter codes."""

    NEXT = "N"
    ERROR = "E"
    COMPLETE = "C"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Notification:
    kind: NotificationKind
    value: Any = None
    error: Any = None

    @classmethod
    def next(cls, value: Any) -> Notification:
        return cls(NotificationKind.NEXT, value=value)

    @classmethod
    def failure(cls, error: Any) -> Notification:
        return cls(NotificationKind.ERROR, error=error)

    @classmethod
    def complete(cls) -> Notification:
        return cls(NotificationKind.COMPLETE)

    @property
    def is_terminal(self) -> bool:
        """True for error and completion."""
        return self.kind is not NotificationKind.NEXT

    def accept(self, subscriber: Subscriber) -> None:
        """Deliver this notification to the matching subscriber callback."""
        if self.kind is NotificationKind.NEXT:
            subscriber.on_next(self.value)
        elif self.kind is NotificationKind.ERROR:
            subscriber.on_error(self.error)
        else:
            subscriber.on_completed()

    def to_comparable(self) -> Dict[str, Any]:
        """Plain-data form used by assertion sinks."""
        if self.kind is NotificationKind.NEXT:
            return {"kind": "N", "value": self.value}
        if self.kind is NotificationKind.ERROR:
            return {"kind": "E", "error": comparable_error(self.error)}
        return {"kind": "C"}

    def __str__(self) -> str:
        if self.kind is NotificationKind.NEXT:
            return f"Next({self.value!r})"
        if self.kind is NotificationKind.ERROR:
            return f"Error({self.error!r})"
        return "Complete"
