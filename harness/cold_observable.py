# harness/cold_observable.py

"""
ColdObservable replays a compiled diagram for every subscriber, starting
from the frame at which that subscriber attached.
"""

from __future__ import annotations
from functools import partial

from timeline.subscription import SubscriptionLog
from timeline.timed_event import TimedEventSequence
from timeline.virtual_clock import VirtualClock
from utils.logger import get_logger
from .observable import Observable, Subscriber

logger = get_logger()


class ColdObservable(Observable):
    """
    Subscriber-relative synthetic stream.

    Frame 0 of the diagram is the subscribe frame, so re-subscribing replays
    the whole timeline again. Unsubscribing cancels that subscriber's pending
    deliveries without touching other subscribers.

    Attributes:
      messages: Compiled diagram, frames relative to each subscription.
      clock: Clock on which deliveries are scheduled.
      subscriptions: One window per subscribe call, in subscription order.
    """

    def __init__(self, messages: TimedEventSequence, clock: VirtualClock):
        super().__init__()
        self.messages = messages
        self.clock = clock
        self.subscriptions = SubscriptionLog()

    def _subscribe(self, subscriber: Subscriber):
        start = self.clock.now()
        index = self.subscriptions.log_subscribed(start)
        subscriber.add(lambda: self.subscriptions.log_unsubscribed(index, self.clock.now()))

        actions = [
            self.clock.schedule(start + event.frame, partial(event.notification.accept, subscriber))
            for event in self.messages
        ]
        logger.debug(f"Cold subscription #{index} at frame {start}: {len(actions)} delivery(ies)")

        def cancel_pending():
            for action in actions:
                action.cancel()

        return cancel_pending
