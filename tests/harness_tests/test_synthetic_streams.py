# tests/harness_tests/test_synthetic_streams.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Test suite for cold and hot synthetic streams

"""Cold replay and hot broadcast behavior, checked through the harness.

All scenarios run in run mode (one frame per character) so that frames can
be read directly off the diagrams.
"""

import pytest
from harness import ColdObservable, HotObservable, MarbleScheduler


@pytest.fixture
def run(sink_calls):
    """Run a body in a fresh run scope and return the recorded comparisons."""

    def execute(body):
        MarbleScheduler(sink_calls.sink).run(body)
        return list(sink_calls)

    return execute


def assert_all_matched(comparisons):
    assert comparisons
    for actual, expected in comparisons:
        assert actual == expected


class TestColdObservable:

    def test_replays_relative_to_subscription(self, run, abc):
        def body(ctx):
            source = ctx.cold("-a-b|", abc)
            ctx.expect_observable(source, "--^").to_be("---a-b|", abc)
            ctx.expect_subscriptions(source.subscriptions).to_be("--^---!")

        assert_all_matched(run(body))

    def test_each_subscriber_gets_the_whole_timeline(self, run, abc):
        def body(ctx):
            source = ctx.cold("a|", abc)
            ctx.expect_observable(source).to_be("a|", abc)
            ctx.expect_observable(source, "---^").to_be("---a|", abc)
            ctx.expect_subscriptions(source.subscriptions).to_be(["^!", "---^!"])

        assert_all_matched(run(body))

    def test_unsubscribe_cancels_pending_deliveries(self, run, abc):
        def body(ctx):
            source = ctx.cold("-a-b-c|", abc)
            ctx.expect_observable(source, "^--!").to_be("-a", abc)
            ctx.expect_subscriptions(source.subscriptions).to_be("^--!")

        assert_all_matched(run(body))

    def test_error_closes_subscription_window(self, run):
        boom = ValueError("boom")

        def body(ctx):
            source = ctx.cold("--#", error=boom)
            ctx.expect_observable(source).to_be("--#", error=ValueError("boom"))
            ctx.expect_subscriptions(source.subscriptions).to_be("^-!")

        assert_all_matched(run(body))

    def test_never_subscribed_has_empty_log(self, run):
        def body(ctx):
            source = ctx.cold("-a|")
            ctx.expect_subscriptions(source.subscriptions).to_be([])

        assert run(body) == [([], [])]

    def test_caret_is_rejected(self):
        from notation import MalformedDiagramError

        with pytest.raises(MalformedDiagramError):
            MarbleScheduler().cold("-^-a")

    def test_is_a_cold_observable(self):
        assert isinstance(MarbleScheduler().cold("a"), ColdObservable)


class TestHotObservable:

    def test_multiple_subscriptions_share_one_timeline(self, run, abc):
        def body(ctx):
            source = ctx.hot("--a--b--c--|", abc)
            ctx.expect_observable(source).to_be("--a--b--c--|", abc)
            ctx.expect_observable(source, "---^---!").to_be("-----b", abc)
            ctx.expect_subscriptions(source.subscriptions).to_be(
                ["^----------!", "---^---!"]
            )

        assert_all_matched(run(body))

    def test_caret_anchors_the_zero_frame(self, run, abc):
        def body(ctx):
            source = ctx.hot("--a-^-b-|", abc)
            ctx.expect_observable(source).to_be("--b-|", abc)

        assert_all_matched(run(body))

    def test_subscriber_at_event_frame_receives_it(self, run, abc):
        def body(ctx):
            source = ctx.hot("--a-b|", abc)
            ctx.expect_observable(source, "--^").to_be("--a-b|", abc)

        assert_all_matched(run(body))

    def test_late_subscriber_is_inert(self, run, abc):
        def body(ctx):
            source = ctx.hot("-a|", abc)
            ctx.expect_observable(source, "---^").to_be("")
            ctx.expect_subscriptions(source.subscriptions).to_be(["---^"])

        comparisons = run(body)
        assert_all_matched(comparisons)

    def test_terminal_ends_every_subscriber(self, run):
        def body(ctx):
            source = ctx.hot("---|")
            ctx.expect_observable(source).to_be("---|")
            ctx.expect_observable(source, "-^").to_be("---|")
            ctx.expect_subscriptions(source.subscriptions).to_be(["^--!", "-^-!"])

        assert_all_matched(run(body))

    def test_terminated_flag(self):
        scheduler = MarbleScheduler()
        source = scheduler.hot("-|")
        assert not source.terminated
        scheduler.flush()
        assert source.terminated
        assert source.is_setup

    def test_anchor_is_creation_frame(self):
        scheduler = MarbleScheduler()
        scheduler.advance_to(30)
        source = scheduler.hot("-a|")
        assert isinstance(source, HotObservable)
        assert source.anchor == 30
        scheduler.expect_observable(source, "---^").to_be("----a|")
        scheduler.flush()

    def test_history_before_setup_is_never_delivered(self):
        scheduler = MarbleScheduler()
        source = scheduler.hot("a-^-b|", {"a": 1, "b": 2})
        seen = []
        scheduler.clock.schedule(0, lambda: source.subscribe(seen.append))
        scheduler.flush()
        assert seen == [2]
