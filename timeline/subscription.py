# timeline/subscription.py

"""
Subscription windows and the append-only log a synthetic stream keeps of
every consumer that attached to it.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterator, List, Optional

from utils.logger import get_logger

logger = get_logger()


@dataclass(frozen=True, slots=True)
class SubscriptionWindow:
    """Frames between which one consumer was attached.

    Attributes:
      subscribed: Frame of the subscribe call.
      unsubscribed: Frame of the unsubscribe/terminal teardown, or None
                    while the consumer is still attached.
    """
    subscribed: int
    unsubscribed: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.unsubscribed is None

    def to_comparable(self) -> Dict[str, Any]:
        return {"subscribed": self.subscribed, "unsubscribed": self.unsubscribed}

    def __str__(self) -> str:
        end = "∞" if self.unsubscribed is None else self.unsubscribed
        return f"[{self.subscribed}, {end})"


class SubscriptionLog:
    """Ordered record of subscription windows, one per subscribe call.

    Entries are appended in subscription order. Closing a window replaces
    the entry in place; entries are never removed.
    """

    def __init__(self):
        self._windows: List[SubscriptionWindow] = []

    def log_subscribed(self, frame: int) -> int:
        """Open a new window and return its index for the matching close."""
        self._windows.append(SubscriptionWindow(frame))
        index = len(self._windows) - 1
        logger.subscription_logged("subscribe", frame, index)
        return index

    def log_unsubscribed(self, index: int, frame: int) -> None:
        """Close window `index` at `frame`. Closing twice keeps the first frame."""
        window = self._windows[index]
        if not window.is_open:
            return
        self._windows[index] = replace(window, unsubscribed=frame)
        logger.subscription_logged("unsubscribe", frame, index)

    @property
    def windows(self) -> tuple:
        return tuple(self._windows)

    def to_comparable(self) -> List[Dict[str, Any]]:
        return [window.to_comparable() for window in self._windows]

    def __iter__(self) -> Iterator[SubscriptionWindow]:
        return iter(tuple(self._windows))

    def __len__(self) -> int:
        return len(self._windows)

    def __getitem__(self, index: int) -> SubscriptionWindow:
        return self._windows[index]

    def __str__(self) -> str:
        return "[" + ", ".join(str(window) for window in self._windows) + "]"
