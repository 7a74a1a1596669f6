# notation/exceptions.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Custom exceptions for marble diagram parsing

"""Domain-specific exceptions for marble diagram processing.

These are raised at parse time, never at flush time: a diagram that cannot
be compiled is an error in the test itself and fails that test immediately.
"""


class DiagramError(RuntimeError):
    """Base class for every marble diagram failure."""

    pass


class MalformedDiagramError(DiagramError):
    """Diagram syntax is violated.

    Covers events after a terminal token in strict mode, unmatched or nested
    group delimiters, markers used where they are not allowed, and
    characters the lexer cannot classify.
    """

    pass


class UnknownTokenError(DiagramError):
    """A value character has no entry in the supplied value map."""

    def __init__(self, token: str, position: int):
        super().__init__(f"Unknown value token '{token}' at position {position}")
        self.token = token
        self.position = position
