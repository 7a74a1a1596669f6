# tests/integration_tests/test_marble_scenarios.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# End-to-end marble scenarios for a value-doubling transform

"""Integration test suite exercising the full pipeline.

Each scenario declares a source, applies the multiply-by-two transform
under test, and compares the result against an expected diagram:

- Synchronous sources: all values and completion in one frame
- Clock-driven sources: an interval-like producer on the virtual clock
- Cold sources in run mode versus standalone mode
- Hot sources observed by several overlapping subscriptions
- Error propagation and truncation after the terminal event
"""

import pytest
from harness import MarbleScheduler, Observable


DOUBLED = {"a": 2, "b": 4, "c": 6}


def interval_source(clock, period, count):
    """Emit 1..count every `period` frames on `clock`, then complete."""

    def subscribe(subscriber):
        actions = []

        def emit(value):
            subscriber.on_next(value)
            if value == count:
                subscriber.on_completed()
            else:
                actions.append(clock.schedule_after(period, lambda: emit(value + 1)))

        actions.append(clock.schedule_after(period, lambda: emit(1)))

        def cancel():
            for action in actions:
                action.cancel()

        return cancel

    return Observable(subscribe)


class TestSynchronousSource:

    @pytest.fixture
    def source(self):
        def produce(subscriber):
            for value in (1, 2, 3):
                subscriber.on_next(value)
            subscriber.on_completed()

        return Observable(produce)

    def test_subscribe_and_assert(self, source, doubled):
        results = []
        subscription = doubled(source).subscribe(results.append)
        assert results == [2, 4, 6]
        assert subscription.closed

    def test_marble_diagram(self, source, doubled):
        def body(ctx):
            ctx.expect_observable(doubled(source)).to_be("(abc|)", DOUBLED)

        MarbleScheduler().run(body)


class TestClockDrivenSource:

    def test_progressions_between_values(self, doubled):
        def body(ctx):
            source = interval_source(ctx.clock, 10, 3)
            ctx.expect_observable(doubled(source)).to_be("10ms a 9ms b 9ms (c|)", DOUBLED)

        MarbleScheduler().run(body)

    def test_equivalent_dash_diagram(self, doubled):
        def body(ctx):
            source = interval_source(ctx.clock, 10, 3)
            ctx.expect_observable(doubled(source)).to_be(
                "----------a---------b---------(c|)", DOUBLED
            )

        MarbleScheduler().run(body)

    def test_unsubscribe_stops_the_producer(self, doubled):
        def body(ctx):
            source = interval_source(ctx.clock, 10, 3)
            ctx.expect_observable(doubled(source), "^ 15ms !").to_be("10ms a", DOUBLED)

        MarbleScheduler().run(body)


class TestColdSourceCalibrations:

    def test_run_mode_dashes_against_progressions(self, doubled, abc):
        def body(ctx):
            source = ctx.cold("----------a----------b----------(c|)", abc)
            ctx.expect_observable(doubled(source)).to_be("10ms a 10ms b 10ms (c|)", DOUBLED)

        MarbleScheduler().run(body)

    def test_standalone_mode_against_expected_stream(self, scheduler, doubled, abc):
        source = scheduler.cold("-a-b-(c|)", abc)
        expected = scheduler.cold("10ms a 10ms b 10ms (c|)", DOUBLED)
        scheduler.assert_observable(doubled(source), expected)


class TestHotSubscriptions:

    def test_multiple_subscriptions(self):
        values = {c: i for i, c in enumerate("abcdefg", start=1)}

        def body(ctx):
            stream = ctx.hot("-a-b-c-d-e-f-g-", values)

            subscription1 = "^--!"
            subscription2 = "--^-----!"
            subscription3 = "--------^"

            ctx.expect_observable(stream, subscription1).to_be("-a", {"a": 1})
            ctx.expect_observable(stream, subscription2).to_be(
                "---b-c-d-", {"b": 2, "c": 3, "d": 4}
            )
            ctx.expect_observable(stream, subscription3).to_be(
                "---------e-f-g", {"e": 5, "f": 6, "g": 7}
            )
            ctx.expect_subscriptions(stream.subscriptions).to_be(
                [subscription1, subscription2, subscription3]
            )

        MarbleScheduler().run(body)

    def test_wrong_window_fails(self):
        def body(ctx):
            stream = ctx.hot("-a-b-")
            ctx.expect_observable(stream, "^--!").to_be("-a")
            ctx.expect_subscriptions(stream.subscriptions).to_be("^---!")

        with pytest.raises(AssertionError):
            MarbleScheduler().run(body)


class TestErrors:

    def test_error_truncates_source(self, doubled, abc):
        def body(ctx):
            source = ctx.cold("-a-#-b-c", abc, ValueError("some error"))
            ctx.expect_observable(doubled(source)).to_be(
                "-a-#", {"a": 2}, ValueError("some error")
            )

        MarbleScheduler().run(body)

    def test_different_error_fails(self, doubled, abc):
        def body(ctx):
            source = ctx.cold("-a-#", abc, ValueError("some error"))
            ctx.expect_observable(doubled(source)).to_be(
                "-a-#", {"a": 2}, ValueError("another error")
            )

        with pytest.raises(AssertionError):
            MarbleScheduler().run(body)
