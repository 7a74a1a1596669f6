# notation/renderer.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Re-encoding of timed event sequences as marble diagrams

"""Renders TimedEventSequences back into marble notation.

The renderer is the inverse of the compiler for sequences that start at
frame 0 or later: compiling the rendered diagram with the same frame time
factor and value map yields the original frames and notifications. Gaps
that are a whole number of characters become dashes; any remainder is
written as a raw ``<n>ms`` progression.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from itertools import groupby
from typing import Any, Dict, List, Optional

from .compiler import DEFAULT_FRAME_TIME_FACTOR
from timeline.notification import NotificationKind
from timeline.timed_event import TimedEventSequence

# Characters handed out to distinct values, in order
TOKEN_ALPHABET = (
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "0123456789"
)


@dataclass(frozen=True)
class RenderedDiagram:
    """A diagram plus the value map and error payload needed to compile it."""

    diagram: str
    values: Dict[str, Any] = field(default_factory=dict)
    error: Any = None

    def __str__(self) -> str:
        return self.diagram


class _TokenTable:
    """Assigns one character per distinct value, comparing values by equality."""

    def __init__(self):
        self._values: List[Any] = []

    def token_for(self, value: Any) -> str:
        for index, known in enumerate(self._values):
            if known == value:
                return TOKEN_ALPHABET[index]
        if len(self._values) == len(TOKEN_ALPHABET):
            raise ValueError(
                f"Cannot render more than {len(TOKEN_ALPHABET)} distinct values"
            )
        self._values.append(value)
        return TOKEN_ALPHABET[len(self._values) - 1]

    def as_map(self) -> Dict[str, Any]:
        return {TOKEN_ALPHABET[i]: value for i, value in enumerate(self._values)}


def render_marbles(
    sequence: TimedEventSequence,
    frame_time_factor: int = DEFAULT_FRAME_TIME_FACTOR,
) -> RenderedDiagram:
    """Encode a sequence as a marble diagram.

    Args:
        sequence: Events to render; frames must not be negative
        frame_time_factor: Frames represented by one diagram character

    Returns:
        RenderedDiagram with diagram text, value map and error payload

    Raises:
        ValueError: Negative frames, events closer than one character, or
                    more distinct values than tokens
    """
    if frame_time_factor < 1:
        raise ValueError(f"Frame time factor must be positive, got {frame_time_factor}")
    if sequence.frames and sequence.frames[0] < 0:
        raise ValueError("Cannot render events at negative frames")

    tokens = _TokenTable()
    error: Optional[Any] = None
    parts: List[str] = []
    cursor = 0

    for frame, group in groupby(sequence, key=lambda event: event.frame):
        symbols = []
        for event in group:
            notification = event.notification
            if notification.kind is NotificationKind.NEXT:
                symbols.append(tokens.token_for(notification.value))
            elif notification.kind is NotificationKind.ERROR:
                error = notification.error
                symbols.append("#")
            else:
                symbols.append("|")

        if frame < cursor:
            raise ValueError(
                f"Events at frames {cursor - frame_time_factor} and {frame} are closer than "
                f"one character and cannot be rendered"
            )
        dashes, remainder = divmod(frame - cursor, frame_time_factor)
        parts.append("-" * dashes)
        if remainder:
            parts.append(f" {remainder}ms ")
        parts.append(symbols[0] if len(symbols) == 1 else "(" + "".join(symbols) + ")")
        cursor = frame + frame_time_factor

    return RenderedDiagram("".join(parts).strip(), tokens.as_map(), error)
