# notation/compiler.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Frame assignment for parsed marble diagrams

"""Compiles diagram ASTs into timed event sequences and subscription windows.

The compiler walks the element list left to right with a frame cursor:

1. "-", values, terminals, markers and whole groups advance the cursor by
   one frame time factor; members of a group share the group's frame.
2. Time progressions advance the cursor by their raw unit count.
3. In hot diagrams the frame of "^" becomes frame 0 and every event is
   shifted accordingly, so events before the marker get negative frames.
4. Once a terminal event is collected, later signals are either dropped
   (lenient) or rejected (strict).
"""

from __future__ import annotations
from typing import Any, List, Mapping, Optional

from . import ast_nodes as ast
from .exceptions import MalformedDiagramError, UnknownTokenError
from timeline.notification import Notification, StreamTerminalError
from timeline.subscription import SubscriptionWindow
from timeline.timed_event import TimedEvent, TimedEventSequence
from utils.logger import get_logger

# Virtual-time units per diagram character outside a run scope
DEFAULT_FRAME_TIME_FACTOR = 10


class DiagramCompiler(ast.Visitor):
    """Visitor assigning frames to the elements of one stream diagram.

    Attributes:
        frame_time_factor: Frames advanced per diagram character
        values: Value map, or None to use each character as its own value
        error: Payload for "#" events
        allow_subscription_marker: Whether "^" may anchor the zero frame
        strict: Reject (instead of drop) events after a terminal
    """

    def __init__(
        self,
        frame_time_factor: int = DEFAULT_FRAME_TIME_FACTOR,
        values: Optional[Mapping[str, Any]] = None,
        error: Any = None,
        allow_subscription_marker: bool = False,
        strict: bool = False,
    ):
        if frame_time_factor < 1:
            raise ValueError(f"Frame time factor must be positive, got {frame_time_factor}")
        self.frame_time_factor = frame_time_factor
        self.values = values
        self.error = StreamTerminalError("error") if error is None else error
        self.allow_subscription_marker = allow_subscription_marker
        self.strict = strict
        self._reset()

    def _reset(self) -> None:
        self._frame = 0
        self._group_frame: Optional[int] = None
        self._zero_frame: Optional[int] = None
        self._events: List[TimedEvent] = []
        self._terminated = False

    def compile(self, root: ast.Diagram) -> TimedEventSequence:
        """Compile a diagram AST into a validated TimedEventSequence.

        Raises:
            MalformedDiagramError: Markers in the wrong kind of diagram, or
                                   events after a terminal in strict mode
            UnknownTokenError: Value character missing from the value map
        """
        self._reset()
        for element in root.elements:
            element.accept(self)

        events = self._events
        if self._zero_frame:
            events = [TimedEvent(e.frame - self._zero_frame, e.notification) for e in events]
        return TimedEventSequence(events)

    @property
    def zero_frame(self) -> int:
        """Raw frame of the "^" marker in the last compiled diagram, 0 if absent."""
        return self._zero_frame or 0

    # Cursor handling
    def _current_frame(self) -> int:
        return self._frame if self._group_frame is None else self._group_frame

    def _advance(self) -> None:
        if self._group_frame is None:
            self._frame += self.frame_time_factor

    def _skip_after_terminal(self, element: ast.Element) -> bool:
        """True when `element` must be dropped because the stream already ended."""
        if not self._terminated:
            return False
        if self.strict:
            raise MalformedDiagramError(
                f"Unexpected '{element}' at position {element.position}: "
                f"nothing may follow a terminal event"
            )
        return True

    def _emit(self, notification: Notification) -> None:
        self._events.append(TimedEvent(self._current_frame(), notification))
        if notification.is_terminal:
            self._terminated = True

    # Visitor methods
    def visit_tick(self, n: ast.Tick):
        self._advance()

    def visit_time(self, n: ast.TimeProgression):
        self._frame += n.units

    def visit_value(self, n: ast.ValueToken):
        if not self._skip_after_terminal(n):
            self._emit(Notification.next(self._lookup(n)))
        self._advance()

    def visit_complete(self, n: ast.CompleteToken):
        if not self._skip_after_terminal(n):
            self._emit(Notification.complete())
        self._advance()

    def visit_error(self, n: ast.ErrorToken):
        if not self._skip_after_terminal(n):
            self._emit(Notification.failure(self.error))
        self._advance()

    def visit_group(self, n: ast.Group):
        self._group_frame = self._frame
        try:
            for member in n.members:
                member.accept(self)
        finally:
            self._group_frame = None
        self._advance()

    def visit_subscription(self, n: ast.SubscriptionPoint):
        if not self.allow_subscription_marker:
            raise MalformedDiagramError(
                f"Subscription marker '^' at position {n.position} is only allowed "
                f"in hot and subscription diagrams"
            )
        if self._zero_frame is not None:
            raise MalformedDiagramError(
                f"Second subscription marker '^' at position {n.position}"
            )
        self._skip_after_terminal(n)
        self._zero_frame = self._current_frame()
        self._advance()

    def visit_unsubscription(self, n: ast.UnsubscriptionPoint):
        raise MalformedDiagramError(
            f"Unsubscription marker '!' at position {n.position} is only allowed "
            f"in subscription diagrams"
        )

    def _lookup(self, n: ast.ValueToken) -> Any:
        if self.values is None:
            return n.token
        try:
            return self.values[n.token]
        except KeyError:
            raise UnknownTokenError(n.token, n.position) from None


class SubscriptionCompiler(ast.Visitor):
    """Visitor reading a subscription window out of a subscription diagram.

    Only "-", time progressions, "^", "!" and groups of markers are
    allowed. Without "^" the window opens at frame 0; without "!" it stays
    open.
    """

    def __init__(self, frame_time_factor: int = DEFAULT_FRAME_TIME_FACTOR):
        if frame_time_factor < 1:
            raise ValueError(f"Frame time factor must be positive, got {frame_time_factor}")
        self.frame_time_factor = frame_time_factor
        self._frame = 0
        self._group_frame: Optional[int] = None
        self._subscribed: Optional[int] = None
        self._unsubscribed: Optional[int] = None

    def compile(self, root: ast.Diagram) -> SubscriptionWindow:
        self._frame = 0
        self._group_frame = None
        self._subscribed = None
        self._unsubscribed = None
        for element in root.elements:
            element.accept(self)

        subscribed = 0 if self._subscribed is None else self._subscribed
        if self._unsubscribed is not None and self._unsubscribed < subscribed:
            raise MalformedDiagramError(
                f"Unsubscription at frame {self._unsubscribed} precedes "
                f"subscription at frame {subscribed}"
            )
        return SubscriptionWindow(subscribed, self._unsubscribed)

    def _current_frame(self) -> int:
        return self._frame if self._group_frame is None else self._group_frame

    def _advance(self) -> None:
        if self._group_frame is None:
            self._frame += self.frame_time_factor

    def _reject(self, n: ast.Element):
        raise MalformedDiagramError(
            f"Unexpected '{n}' at position {n.position}: subscription diagrams "
            f"may only contain '-', '^', '!' and time progressions"
        )

    def visit_tick(self, n: ast.Tick):
        self._advance()

    def visit_time(self, n: ast.TimeProgression):
        self._frame += n.units

    def visit_value(self, n: ast.ValueToken):
        self._reject(n)

    def visit_complete(self, n: ast.CompleteToken):
        self._reject(n)

    def visit_error(self, n: ast.ErrorToken):
        self._reject(n)

    def visit_group(self, n: ast.Group):
        if any(member.is_signal for member in n.members):
            self._reject(n)
        self._group_frame = self._frame
        try:
            for member in n.members:
                member.accept(self)
        finally:
            self._group_frame = None
        self._advance()

    def visit_subscription(self, n: ast.SubscriptionPoint):
        if self._subscribed is not None:
            raise MalformedDiagramError(f"Second subscription marker '^' at position {n.position}")
        self._subscribed = self._current_frame()
        self._advance()

    def visit_unsubscription(self, n: ast.UnsubscriptionPoint):
        if self._unsubscribed is not None:
            raise MalformedDiagramError(
                f"Second unsubscription marker '!' at position {n.position}"
            )
        self._unsubscribed = self._current_frame()
        self._advance()


def log_compiled(diagram: str, sequence: TimedEventSequence) -> None:
    """Debug-log the outcome of compiling `diagram`."""
    terminal = sequence.terminal
    get_logger().diagram_parsed(
        diagram, len(sequence), str(terminal.notification) if terminal else None
    )
