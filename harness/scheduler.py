# harness/scheduler.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Run harness binding factories and expectations to one virtual clock

"""Run harness for marble tests.

MarbleScheduler is a single engine parameterized by SchedulerConfig. Two
calibrations are provided:

- STANDALONE_MODE: 10 frames per diagram character; the caller flushes
  explicitly (typically from a fixture teardown).
- RUN_MODE: 1 frame per character; ``run(body)`` builds a fresh scheduler
  and clock, calls the body and flushes automatically when it returns.

Notation and comparison semantics are identical in both calibrations.

Example:
    >>> scheduler = MarbleScheduler()
    >>> def body(ctx):
    ...     source = ctx.cold("-a-b|", {"a": 1, "b": 2})
    ...     ctx.expect_observable(source).to_be("-a-b|", {"a": 1, "b": 2})
    >>> scheduler.run(body)
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Mapping, Optional, TypeVar, Union

from notation import DEFAULT_FRAME_TIME_FACTOR, parse_marbles, parse_subscription
from timeline.subscription import SubscriptionLog, SubscriptionWindow
from timeline.timed_event import TimedEventSequence
from timeline.virtual_clock import VirtualClock
from utils.logger import get_logger
from .cold_observable import ColdObservable
from .expectation import (
    AssertionSink,
    FlushTest,
    ObservableExpectation,
    SubscriptionExpectation,
    default_assertion_sink,
)
from .hot_observable import HotObservable
from .observable import Observable

T = TypeVar("T")


@dataclass(frozen=True)
class SchedulerConfig:
    """Calibration of a MarbleScheduler.

    Attributes:
        frame_time_factor: Frames per diagram character
        auto_flush: Flush automatically when a run body returns
        max_frames: Optional horizon beyond which flush stops draining
    """

    frame_time_factor: int = DEFAULT_FRAME_TIME_FACTOR
    auto_flush: bool = False
    max_frames: Optional[int] = None

    def __post_init__(self):
        if self.frame_time_factor < 1:
            raise ValueError(
                f"frame_time_factor must be positive, got {self.frame_time_factor}"
            )
        if self.max_frames is not None and self.max_frames < 0:
            raise ValueError(f"max_frames must not be negative, got {self.max_frames}")


STANDALONE_MODE = SchedulerConfig()
RUN_MODE = SchedulerConfig(frame_time_factor=1, auto_flush=True)


@dataclass(frozen=True)
class RunContext:
    """Helpers handed to a run body, all bound to one fresh clock."""

    scheduler: MarbleScheduler
    cold: Callable[..., ColdObservable]
    hot: Callable[..., HotObservable]
    expect_observable: Callable[..., ObservableExpectation]
    expect_subscriptions: Callable[[SubscriptionLog], SubscriptionExpectation]
    flush: Callable[[], None]
    clock: VirtualClock


class MarbleScheduler:
    """Owns one virtual clock, the hot streams built on it and the pending
    flush tests registered against it.

    Args:
        assert_deep_equal: Assertion sink receiving (actual, expected)
        config: Calibration; STANDALONE_MODE by default
    """

    def __init__(
        self,
        assert_deep_equal: AssertionSink = default_assertion_sink,
        config: SchedulerConfig = STANDALONE_MODE,
    ):
        self.assert_deep_equal = assert_deep_equal
        self.config = config
        self.clock = VirtualClock(config.max_frames)
        self._hot_observables: List[HotObservable] = []
        self._flush_tests: List[FlushTest] = []
        self._draining = False
        self._logger = get_logger()

    @property
    def frame_time_factor(self) -> int:
        return self.config.frame_time_factor

    def now(self) -> int:
        return self.clock.now()

    # Notation helpers bound to this scheduler's calibration
    def parse_marbles(
        self,
        diagram: str,
        values: Optional[Mapping[str, Any]] = None,
        error: Any = None,
        **options,
    ) -> TimedEventSequence:
        return parse_marbles(
            diagram, values, error, frame_time_factor=self.frame_time_factor, **options
        )

    def parse_subscription(self, diagram: Optional[str]) -> SubscriptionWindow:
        return parse_subscription(diagram, frame_time_factor=self.frame_time_factor)

    # Stream factories
    def cold(
        self,
        diagram: str,
        values: Optional[Mapping[str, Any]] = None,
        error: Any = None,
    ) -> ColdObservable:
        """Build a stream that replays `diagram` relative to each subscription.

        Raises:
            MalformedDiagramError: The diagram contains "^" or "!"
            UnknownTokenError: A value character is missing from `values`
        """
        messages = self.parse_marbles(diagram, values, error)
        return ColdObservable(messages, self.clock)

    def hot(
        self,
        diagram: str,
        values: Optional[Mapping[str, Any]] = None,
        error: Any = None,
    ) -> HotObservable:
        """Build a stream broadcasting `diagram` on one absolute timeline.

        The diagram's "^" (or its first character) is anchored at the
        current frame.
        """
        messages = self.parse_marbles(diagram, values, error, allow_subscription_marker=True)
        observable = HotObservable(messages, self.clock)
        if self._draining:
            observable.setup()
        else:
            self._hot_observables.append(observable)
        return observable

    # Expectations
    def expect_observable(
        self, observable: Observable, subscription_diagram: Optional[str] = None
    ) -> ObservableExpectation:
        return ObservableExpectation(self, observable, subscription_diagram)

    def expect_subscriptions(self, log: SubscriptionLog) -> SubscriptionExpectation:
        return SubscriptionExpectation(self, log)

    def register_flush_test(self, test: FlushTest) -> None:
        self._logger.debug(f"Registered deferred comparison: {test.label}")
        self._flush_tests.append(test)

    def assert_observable(
        self, actual: Observable, expected: Union[ColdObservable, HotObservable]
    ) -> None:
        """Compare `actual` against another synthetic stream's timeline now.

        Subscribes to `actual` at the current frame, flushes, and passes both
        timelines to the assertion sink. A cold `expected` is read relative
        to the current frame, a hot one at its own anchor.
        """
        if isinstance(expected, HotObservable):
            expected_sequence = expected.messages.shifted(expected.anchor)
        else:
            expected_sequence = expected.messages.shifted(self.clock.now())
        expectation = ObservableExpectation(self, actual)
        expectation.window = SubscriptionWindow(self.clock.now())
        expectation.to_equal(expected_sequence, label="assert_observable(...)")
        self.flush()

    # Draining
    def flush(self) -> None:
        """Drain the clock, then run every pending comparison exactly once."""
        self._drain(self.clock.flush)

        tests, self._flush_tests = self._flush_tests, []
        self._logger.debug(f"Running {len(tests)} deferred comparison(s)")
        for test in tests:
            test.run(self.assert_deep_equal)

    def advance_to(self, frame: int) -> None:
        """Drain the clock up to `frame` without running comparisons."""
        self._drain(lambda: self.clock.advance_to(frame))

    def _drain(self, drain: Callable[[], None]) -> None:
        hot_observables, self._hot_observables = self._hot_observables, []
        for observable in hot_observables:
            observable.setup()

        self._draining = True
        try:
            drain()
        finally:
            self._draining = False

    # Run scope
    def context(self) -> RunContext:
        return RunContext(
            scheduler=self,
            cold=self.cold,
            hot=self.hot,
            expect_observable=self.expect_observable,
            expect_subscriptions=self.expect_subscriptions,
            flush=self.flush,
            clock=self.clock,
        )

    def run(self, body: Callable[[RunContext], T]) -> T:
        """Execute `body` in a fresh run scope and flush afterwards.

        The scope gets its own clock calibrated with RUN_MODE (keeping this
        scheduler's max_frames) and shares only the assertion sink. Nothing
        created inside the scope survives it.

        Returns:
            Whatever `body` returns
        """
        scheduler = MarbleScheduler(
            self.assert_deep_equal, replace(RUN_MODE, max_frames=self.config.max_frames)
        )
        self._logger.debug("Entering run scope (frame_time_factor=1, auto_flush)")
        result = body(scheduler.context())
        if scheduler.config.auto_flush:
            scheduler.flush()
        self._logger.debug(f"Run scope finished at frame {scheduler.now()}")
        return result
