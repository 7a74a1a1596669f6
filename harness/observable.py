# harness/observable.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Minimal push-based stream abstraction

"""Minimal push-based stream contract used by the harness.

Only what the marble machinery needs is implemented: subscribing with
three callbacks, a cancellation handle with a ``closed`` flag, and teardown
registration. There are no operators; transforms under test are plain
Observables built around another Observable's ``subscribe``.

Example:
    >>> def produce(subscriber):
    ...     subscriber.on_next(1)
    ...     subscriber.on_completed()
    >>> seen = []
    >>> sub = Observable(produce).subscribe(seen.append)
    >>> seen, sub.closed
    ([1], True)
"""

from __future__ import annotations
from typing import Any, Callable, List, Optional

Teardown = Callable[[], None]


class Subscription:
    """Cancellation handle for one consumer.

    Teardowns run once, in registration order, on the first call to
    ``unsubscribe``. Adding a teardown to a closed subscription runs it
    immediately.
    """

    def __init__(self):
        self._closed = False
        self._teardowns: List[Teardown] = []

    @property
    def closed(self) -> bool:
        """True once terminated or explicitly unsubscribed."""
        return self._closed

    def add(self, teardown: Optional[Teardown]) -> None:
        if teardown is None:
            return
        if self._closed:
            teardown()
        else:
            self._teardowns.append(teardown)

    def unsubscribe(self) -> None:
        if self._closed:
            return
        self._closed = True
        teardowns, self._teardowns = self._teardowns, []
        for teardown in teardowns:
            teardown()


class Subscriber(Subscription):
    """Subscription that also guards delivery to the consumer's callbacks.

    Nothing is delivered once the subscriber is closed. Error and
    completion close the subscriber before the consumer callback runs, so a
    callback observing ``closed`` sees True.
    """

    def __init__(
        self,
        on_next: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[Any], None]] = None,
        on_completed: Optional[Callable[[], None]] = None,
    ):
        super().__init__()
        self._on_next = on_next
        self._on_error = on_error
        self._on_completed = on_completed

    def on_next(self, value: Any) -> None:
        if not self._closed and self._on_next is not None:
            self._on_next(value)

    def on_error(self, error: Any) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            if self._on_error is not None:
                self._on_error(error)
        finally:
            self._run_teardowns()

    def on_completed(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            if self._on_completed is not None:
                self._on_completed()
        finally:
            self._run_teardowns()

    def _run_teardowns(self) -> None:
        teardowns, self._teardowns = self._teardowns, []
        for teardown in teardowns:
            teardown()


class Observable:
    """A stream described by a subscribe function.

    Args:
        subscribe: Called with a Subscriber for every subscription; may
                   return a teardown callable run on unsubscribe
    """

    def __init__(self, subscribe: Optional[Callable[[Subscriber], Optional[Teardown]]] = None):
        self._subscribe_fn = subscribe

    def _subscribe(self, subscriber: Subscriber) -> Optional[Teardown]:
        if self._subscribe_fn is None:
            return None
        return self._subscribe_fn(subscriber)

    def subscribe(
        self,
        on_next: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[Any], None]] = None,
        on_completed: Optional[Callable[[], None]] = None,
    ) -> Subscription:
        """Attach a consumer and return its cancellation handle."""
        subscriber = Subscriber(on_next, on_error, on_completed)
        subscriber.add(self._subscribe(subscriber))
        return subscriber
