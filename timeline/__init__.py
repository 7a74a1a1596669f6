# timeline/__init__.py

"""
Value objects for virtual-time stream testing: notifications, frame-stamped
events and their validated sequences, subscription windows and logs, and the
virtual clock that orders scheduled actions. These types carry no knowledge
of marble notation or of the expectation engine.
"""

from .notification import Notification, NotificationKind, StreamTerminalError
from .timed_event import TimedEvent, TimedEventSequence
from .subscription import SubscriptionLog, SubscriptionWindow
from .virtual_clock import NegativeFrameError, ScheduledAction, VirtualClock

__all__ = [
    "Notification",
    "NotificationKind",
    "StreamTerminalError",
    "TimedEvent",
    "TimedEventSequence",
    "SubscriptionLog",
    "SubscriptionWindow",
    "NegativeFrameError",
    "ScheduledAction",
    "VirtualClock",
]
