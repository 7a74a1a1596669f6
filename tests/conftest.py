# tests/conftest.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Test configuration and shared fixtures for pytest

"""Test configuration and shared fixtures for Marbletime tests.

The configuration handles:
- Python path setup for module imports
- A standalone scheduler flushed at teardown
- The multiply-by-two transform used as stream under test
"""

import sys
from pathlib import Path

import pytest

# Ensure project modules can be imported
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Verify module availability before any test runs.

    Raises:
        pytest.skip: If required modules cannot be imported
    """
    try:
        import notation
        import timeline
        import harness
        import utils
    except ImportError as e:
        pytest.skip(f"Cannot import required modules: {e}")

    yield


@pytest.fixture
def scheduler():
    """Standalone scheduler (10 frames per character), flushed at teardown.

    Yields:
        MarbleScheduler: Scheduler using the default assertion sink
    """
    from harness import MarbleScheduler

    marble_scheduler = MarbleScheduler()
    yield marble_scheduler
    marble_scheduler.flush()


@pytest.fixture
def sink_calls():
    """Recording assertion sink for tests that inspect comparisons.

    Returns:
        list: (actual, expected) pairs, with a ``sink`` attribute to pass on
    """

    class Recorder(list):
        def sink(self, actual, expected):
            self.append((actual, expected))

    return Recorder()


@pytest.fixture
def doubled():
    """Transform under test: multiplies every value by two.

    Returns:
        Callable[[Observable], Observable]
    """
    from harness import Observable

    def multiply_by_two(source):
        def subscribe(subscriber):
            inner = source.subscribe(
                lambda value: subscriber.on_next(value * 2),
                subscriber.on_error,
                subscriber.on_completed,
            )
            return inner.unsubscribe

        return Observable(subscribe)

    return multiply_by_two


@pytest.fixture
def abc():
    """Value map used throughout the scenarios."""
    return {"a": 1, "b": 2, "c": 3}
