# harness/expectation.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Deferred, frame-accurate expectations on streams and subscription logs

"""Expectation engine for marble tests.

An expectation never compares anything when it is declared. Declaring one
parses the expected diagram (so notation mistakes fail immediately),
schedules the subscription to the stream under test on the virtual clock,
and registers a FlushTest with the scheduler. After the scheduler has
drained its clock it hands each FlushTest's actual and expected comparable
structures to the assertion sink, exactly once.
"""

from __future__ import annotations
from dataclasses import dataclass
from pprint import pformat
from typing import Any, Callable, List, Mapping, Optional, Sequence, Union, TYPE_CHECKING

from notation import render_marbles
from timeline.notification import Notification
from timeline.subscription import SubscriptionLog, SubscriptionWindow
from timeline.timed_event import TimedEvent, TimedEventSequence
from utils.logger import get_logger
from .observable import Observable, Subscription

if TYPE_CHECKING:
    from .scheduler import MarbleScheduler

AssertionSink = Callable[[Any, Any], None]


def default_assertion_sink(actual: Any, expected: Any) -> None:
    """Raise AssertionError when the two comparable structures differ.

    Args:
        actual: Comparable structure recorded from the stream or log
        expected: Comparable structure compiled from the expected diagram

    Raises:
        AssertionError: Structures are not equal
    """
    if actual != expected:
        raise AssertionError(
            "Observed timeline does not match the expected diagram\n"
            f"actual:\n{pformat(actual)}\n"
            f"expected:\n{pformat(expected)}"
        )


@dataclass
class FlushTest:
    """A comparison waiting for the clock to drain.

    Attributes:
        label: Human-readable description used in logs
        actual: Produces the actual comparable structure at flush time
        expected: Expected comparable structure, compiled up front
        describe_actual: Optional renderer for debug logs on mismatch
    """

    label: str
    actual: Callable[[], Any]
    expected: Any
    describe_actual: Optional[Callable[[], str]] = None

    def run(self, sink: AssertionSink) -> None:
        logger = get_logger()
        actual = self.actual()
        matched = actual == self.expected
        logger.comparison_result(self.label, matched)
        if not matched and self.describe_actual is not None:
            logger.debug(f"    observed: {self.describe_actual()}")
        sink(actual, self.expected)


class ObservableExpectation:
    """Expectation on the timeline a stream produces for one subscription.

    Args:
        scheduler: Owning scheduler (clock, frame time factor, flush tests)
        observable: Stream under test
        subscription_diagram: Optional "^...!" diagram choosing when to
                              subscribe and unsubscribe; default frame 0
    """

    def __init__(
        self,
        scheduler: MarbleScheduler,
        observable: Observable,
        subscription_diagram: Optional[str] = None,
    ):
        self._scheduler = scheduler
        self.observable = observable
        self.window: SubscriptionWindow = scheduler.parse_subscription(subscription_diagram)
        self._subscription_diagram = subscription_diagram

    def to_be(
        self,
        expected: str,
        values: Optional[Mapping[str, Any]] = None,
        error: Any = None,
    ) -> None:
        """Expect the stream to produce exactly `expected`.

        Args:
            expected: Expected marble diagram, frames absolute on the clock
            values: Value map for the expected diagram
            error: Expected error payload for "#"

        Raises:
            MalformedDiagramError, UnknownTokenError: immediately, on bad notation
        """
        expected_sequence = self._scheduler.parse_marbles(expected, values, error, strict=True)
        label = f"expect_observable(..., {self._subscription_diagram!r}).to_be({expected!r})"
        self.to_equal(expected_sequence, label)

    def to_equal(self, expected: TimedEventSequence, label: Optional[str] = None) -> None:
        """Expect the stream to produce an already compiled sequence."""
        clock = self._scheduler.clock
        recorded: List[TimedEvent] = []
        handle: List[Subscription] = []

        def record(notification: Notification) -> None:
            recorded.append(TimedEvent(clock.now(), notification))

        def subscribe() -> None:
            handle.append(
                self.observable.subscribe(
                    lambda value: record(Notification.next(value)),
                    lambda err: record(Notification.failure(err)),
                    lambda: record(Notification.complete()),
                )
            )

        def unsubscribe() -> None:
            for subscription in handle:
                subscription.unsubscribe()

        clock.schedule(self.window.subscribed, subscribe)
        if self.window.unsubscribed is not None:
            clock.schedule(self.window.unsubscribed, unsubscribe)

        factor = self._scheduler.frame_time_factor
        self._scheduler.register_flush_test(
            FlushTest(
                label=label or "expect_observable(...).to_equal(...)",
                actual=lambda: TimedEventSequence(recorded).to_comparable(),
                expected=expected.to_comparable(),
                describe_actual=lambda: _describe(recorded, factor),
            )
        )


class SubscriptionExpectation:
    """Expectation on the windows recorded in a stream's subscription log."""

    def __init__(self, scheduler: MarbleScheduler, log: SubscriptionLog):
        self._scheduler = scheduler
        self.log = log

    def to_be(self, expected: Union[str, Sequence[str]]) -> None:
        """Expect the log to hold exactly the windows of `expected`.

        Args:
            expected: One subscription diagram or a list of them, in
                      subscription order

        Raises:
            MalformedDiagramError: immediately, on bad notation
        """
        diagrams = [expected] if isinstance(expected, str) else list(expected)
        windows = [self._scheduler.parse_subscription(diagram) for diagram in diagrams]
        self._scheduler.register_flush_test(
            FlushTest(
                label=f"expect_subscriptions(...).to_be({diagrams!r})",
                actual=self.log.to_comparable,
                expected=[window.to_comparable() for window in windows],
                describe_actual=lambda: str(self.log),
            )
        )


def _describe(recorded: Sequence[TimedEvent], frame_time_factor: int) -> str:
    try:
        rendered = render_marbles(TimedEventSequence(recorded), frame_time_factor)
    except ValueError as exc:
        return f"<not renderable: {exc}>"
    return f"'{rendered.diagram}' values={rendered.values!r}"
