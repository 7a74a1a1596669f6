# harness/__init__.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Public API of the marble test harness

"""Virtual-time harness for testing push-based streams with marble diagrams.

Primary Components:
    Observable, Subscription: minimal push-based stream contract
    ColdObservable: diagram replayed relative to each subscription
    HotObservable: diagram broadcast on one absolute timeline
    MarbleScheduler: run harness owning the virtual clock
    ObservableExpectation, SubscriptionExpectation: deferred comparisons

Example:
    >>> from harness import MarbleScheduler
    >>> def body(ctx):
    ...     stream = ctx.hot("-a-b-c-d-e-f-g-", {c: i for i, c in enumerate("abcdefg", 1)})
    ...     ctx.expect_observable(stream, "--^-----!").to_be("---b-c-d-", {"b": 2, "c": 3, "d": 4})
    ...     ctx.expect_subscriptions(stream.subscriptions).to_be("--^-----!")
    >>> MarbleScheduler().run(body)
"""

from .observable import Observable, Subscriber, Subscription
from .cold_observable import ColdObservable
from .hot_observable import HotObservable
from .expectation import (
    FlushTest,
    ObservableExpectation,
    SubscriptionExpectation,
    default_assertion_sink,
)
from .scheduler import (
    RUN_MODE,
    STANDALONE_MODE,
    MarbleScheduler,
    RunContext,
    SchedulerConfig,
)

__all__ = [
    "Observable",
    "Subscriber",
    "Subscription",
    "ColdObservable",
    "HotObservable",
    "FlushTest",
    "ObservableExpectation",
    "SubscriptionExpectation",
    "default_assertion_sink",
    "MarbleScheduler",
    "RunContext",
    "SchedulerConfig",
    "RUN_MODE",
    "STANDALONE_MODE",
]

__version__ = "1.0.0"
__description__ = "Virtual-time marble testing harness"
