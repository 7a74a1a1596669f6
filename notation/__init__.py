# notation/__init__.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Marble diagram parsing, compilation and rendering

"""Marble diagram parsing for virtual-time stream testing.

A marble diagram describes, one character per frame, what a stream emits
and when. The parsing pipeline tokenizes the text with SLY, builds a small
AST with an LALR grammar and compiles that AST into either a
TimedEventSequence (stream diagrams) or a SubscriptionWindow (subscription
diagrams).

Core Functions:
    parse_marbles: stream diagram -> TimedEventSequence
    parse_subscription: subscription diagram -> SubscriptionWindow
    render_marbles: TimedEventSequence -> diagram text and value map

Notation:
    -        one frame passes
    a        value, looked up in the value map
    |        completion (terminal)
    #        error (terminal)
    (ab|)    synchronous group sharing one frame
    ^        zero frame (hot diagrams) / subscribe point
    !        unsubscribe point (subscription diagrams)
    10ms     raw time progression, whitespace delimited

Example:
    >>> from notation import parse_marbles
    >>> seq = parse_marbles("-a-b-(c|)", {"a": 1, "b": 2, "c": 3})
    >>> seq.frames
    [10, 30, 50, 50]
"""

from typing import Any, Mapping, Optional

from .exceptions import DiagramError, MalformedDiagramError, UnknownTokenError
from .grammar import _MarbleParser
from .compiler import (
    DEFAULT_FRAME_TIME_FACTOR,
    DiagramCompiler,
    SubscriptionCompiler,
    log_compiled,
)
from .renderer import RenderedDiagram, render_marbles
from timeline.subscription import SubscriptionWindow
from timeline.timed_event import TimedEventSequence
from utils.logger import get_logger


def parse(source: str):
    """Parse diagram text into its AST without assigning frames.

    Uses a fresh parser instance for each invocation.

    Args:
        source: Marble diagram text

    Returns:
        Root Diagram node

    Raises:
        MalformedDiagramError: Diagram syntax is violated
    """
    return _MarbleParser().parse(source)


def parse_marbles(
    diagram: str,
    values: Optional[Mapping[str, Any]] = None,
    error: Any = None,
    *,
    frame_time_factor: int = DEFAULT_FRAME_TIME_FACTOR,
    allow_subscription_marker: bool = False,
    strict: bool = False,
) -> TimedEventSequence:
    """Compile a stream diagram into a TimedEventSequence.

    Args:
        diagram: Marble diagram text
        values: Map from value characters to payloads; when omitted each
                character is its own payload
        error: Payload for "#"; defaults to StreamTerminalError("error")
        frame_time_factor: Frames per diagram character
        allow_subscription_marker: Accept "^" as the zero frame (hot diagrams)
        strict: Reject events after a terminal instead of dropping them

    Returns:
        Validated, immutable TimedEventSequence

    Raises:
        MalformedDiagramError: Syntax or marker placement is invalid
        UnknownTokenError: A value character is missing from `values`

    Example:
        >>> parse_marbles("-a-#-b-c", {"a": 1}, "E").frames
        [10, 30]
    """
    logger = get_logger()
    logger.debug(f"Compiling stream diagram '{diagram}' (factor={frame_time_factor})")

    compiler = DiagramCompiler(
        frame_time_factor=frame_time_factor,
        values=values,
        error=error,
        allow_subscription_marker=allow_subscription_marker,
        strict=strict,
    )
    sequence = compiler.compile(parse(diagram))
    log_compiled(diagram, sequence)
    return sequence


def parse_subscription(
    diagram: Optional[str],
    *,
    frame_time_factor: int = DEFAULT_FRAME_TIME_FACTOR,
) -> SubscriptionWindow:
    """Compile a subscription diagram such as "--^---!" into a window.

    Args:
        diagram: Subscription diagram text; None means subscribed from frame
                 0 and never unsubscribed
        frame_time_factor: Frames per diagram character

    Returns:
        SubscriptionWindow with subscribe and (optional) unsubscribe frames

    Raises:
        MalformedDiagramError: Diagram contains signals or repeated markers
    """
    if diagram is None:
        return SubscriptionWindow(0)

    logger = get_logger()
    logger.debug(f"Compiling subscription diagram '{diagram}' (factor={frame_time_factor})")

    window = SubscriptionCompiler(frame_time_factor).compile(parse(diagram))
    logger.debug(f"Subscription diagram '{diagram}' → {window}")
    return window


__all__ = [
    "parse",
    "parse_marbles",
    "parse_subscription",
    "render_marbles",
    "RenderedDiagram",
    "DiagramError",
    "MalformedDiagramError",
    "UnknownTokenError",
    "DEFAULT_FRAME_TIME_FACTOR",
]

__version__ = "1.0.0"
__description__ = "Marble diagram parsing, compilation and rendering"
