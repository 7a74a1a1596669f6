# harness/hot_observable.py

"""
HotObservable broadcasts one shared, absolutely-timed diagram to whoever is
subscribed when each event fires.
"""

from __future__ import annotations
from functools import partial
from typing import List

from timeline.notification import Notification
from timeline.subscription import SubscriptionLog
from timeline.timed_event import TimedEventSequence
from timeline.virtual_clock import VirtualClock
from utils.logger import get_logger
from .observable import Observable, Subscriber

logger = get_logger()


class HotObservable(Observable):
    """
    Shared live timeline anchored at the frame the stream was created.

    The timeline is scheduled once, by `setup()`. The harness calls it at the
    start of a drain, after expectations have queued their subscriptions, so
    a consumer subscribing at frame S also receives an event fired at S.
    Events lying before the clock position at setup time are history and
    are never delivered.

    Completion and error are global: they end the timeline for every current
    subscriber. Consumers subscribing after that are inert; they receive
    nothing and stay open until they unsubscribe.

    Attributes:
      messages: Compiled diagram, frame 0 = `anchor` ("^" already applied).
      clock: Clock on which the timeline is scheduled.
      anchor: Absolute frame of the diagram's zero frame.
      subscriptions: One window per subscribe call, in subscription order.
    """

    def __init__(self, messages: TimedEventSequence, clock: VirtualClock):
        super().__init__()
        self.messages = messages
        self.clock = clock
        self.anchor = clock.now()
        self.subscriptions = SubscriptionLog()
        self._subscribers: List[Subscriber] = []
        self._is_setup = False
        self._terminated = False

    @property
    def is_setup(self) -> bool:
        return self._is_setup

    @property
    def terminated(self) -> bool:
        """True once a completion or error fired on the timeline."""
        return self._terminated

    def setup(self) -> None:
        """Schedule the shared timeline on the clock. Later calls do nothing."""
        if self._is_setup:
            return
        self._is_setup = True

        now = self.clock.now()
        scheduled = 0
        for event in self.messages:
            frame = self.anchor + event.frame
            if frame < now:
                continue
            self.clock.schedule(frame, partial(self._broadcast, event.notification))
            scheduled += 1
        logger.debug(
            f"Hot timeline anchored at frame {self.anchor}: "
            f"{scheduled} of {len(self.messages)} event(s) scheduled"
        )

    def _subscribe(self, subscriber: Subscriber):
        index = self.subscriptions.log_subscribed(self.clock.now())
        subscriber.add(lambda: self.subscriptions.log_unsubscribed(index, self.clock.now()))

        if self._terminated:
            logger.debug(f"Hot subscription #{index} joined after the terminal event")
            return None

        self._subscribers.append(subscriber)

        def detach():
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return detach

    def _broadcast(self, notification: Notification) -> None:
        if notification.is_terminal:
            self._terminated = True
        for subscriber in list(self._subscribers):
            notification.accept(subscriber)
