# notation/ast_nodes.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Abstract Syntax Tree node classes for marble diagrams

"""AST node classes for parsed marble diagrams.

A diagram is a flat list of elements; only synchronous groups nest, and
only one level deep. Nodes are immutable and carry the character position
they came from so that later compilation errors can point at the source.

Node Types:
    Tick: one frame of silence ("-")
    TimeProgression: raw time advance ("10ms")
    ValueToken, CompleteToken, ErrorToken: signals
    Group: synchronous group of signals sharing one frame
    SubscriptionPoint, UnsubscriptionPoint: "^" and "!" markers

All nodes support the visitor design pattern for compilation and rendering.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Protocol, Tuple


class Visitor(Protocol):
    """Interface for diagram visitors."""

    def visit_tick(self, n: Tick): ...

    def visit_time(self, n: TimeProgression): ...

    def visit_value(self, n: ValueToken): ...

    def visit_complete(self, n: CompleteToken): ...

    def visit_error(self, n: ErrorToken): ...

    def visit_group(self, n: Group): ...

    def visit_subscription(self, n: SubscriptionPoint): ...

    def visit_unsubscription(self, n: UnsubscriptionPoint): ...


@dataclass(frozen=True, slots=True)
class Element:
    """Base class for all diagram elements.

    Attributes:
        position: Character index in the source diagram (not compared)
    """

    position: int = field(default=-1, compare=False)

    def accept(self, v: Visitor):
        """Dispatch to the appropriate visitor method.

        Raises:
            NotImplementedError: Must be implemented by subclasses
        """
        raise NotImplementedError

    @property
    def is_signal(self) -> bool:
        """True for elements that produce a notification."""
        return False


@dataclass(frozen=True, slots=True)
class Tick(Element):
    """One frame of silence."""

    def accept(self, v: Visitor):
        return v.visit_tick(self)

    def __str__(self) -> str:
        return "-"


@dataclass(frozen=True, slots=True)
class TimeProgression(Element):
    """Raw advance of the frame counter, independent of the frame time factor.

    Attributes:
        units: Number of raw time units to advance
    """

    units: int = 0

    def accept(self, v: Visitor):
        return v.visit_time(self)

    def __str__(self) -> str:
        return f" {self.units}ms "


@dataclass(frozen=True, slots=True)
class ValueToken(Element):
    """A value emission, looked up in the caller's value map.

    Attributes:
        token: The single character naming the value
    """

    token: str = ""

    def accept(self, v: Visitor):
        return v.visit_value(self)

    @property
    def is_signal(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.token


@dataclass(frozen=True, slots=True)
class CompleteToken(Element):
    """Successful completion ("|")."""

    def accept(self, v: Visitor):
        return v.visit_complete(self)

    @property
    def is_signal(self) -> bool:
        return True

    def __str__(self) -> str:
        return "|"


@dataclass(frozen=True, slots=True)
class ErrorToken(Element):
    """Error termination ("#")."""

    def accept(self, v: Visitor):
        return v.visit_error(self)

    @property
    def is_signal(self) -> bool:
        return True

    def __str__(self) -> str:
        return "#"


@dataclass(frozen=True, slots=True)
class SubscriptionPoint(Element):
    """Subscription / zero-frame marker ("^")."""

    def accept(self, v: Visitor):
        return v.visit_subscription(self)

    def __str__(self) -> str:
        return "^"


@dataclass(frozen=True, slots=True)
class UnsubscriptionPoint(Element):
    """Unsubscription marker ("!")."""

    def accept(self, v: Visitor):
        return v.visit_unsubscription(self)

    def __str__(self) -> str:
        return "!"


@dataclass(frozen=True, slots=True)
class Group(Element):
    """Synchronous group: every member shares the frame of the "(".

    Attributes:
        members: Signals and markers inside the parentheses, in order
    """

    members: Tuple[Element, ...] = ()

    def accept(self, v: Visitor):
        return v.visit_group(self)

    def __str__(self) -> str:
        return "(" + "".join(str(m) for m in self.members) + ")"


@dataclass(frozen=True, slots=True)
class Diagram:
    """Root of a parsed diagram.

    Attributes:
        elements: Top-level elements in source order
    """

    elements: Tuple[Element, ...] = ()

    def __str__(self) -> str:
        return "".join(str(e) for e in self.elements).strip()
