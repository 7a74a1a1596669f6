# utils/comparable.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Plain-data rendering of recorded streams for assertion sinks

"""Conversion of timeline objects into plain comparable structures.

Assertion sinks receive lists of dictionaries rather than domain objects so
that any framework's deep-equality semantics apply. Exception payloads are
the one exception to pass-through rendering: Python exceptions compare by
identity, so they are reduced to their type name and arguments.
"""

from typing import Any


def comparable_error(error: Any) -> Any:
    """Render an error payload so that equal errors compare equal.

    Args:
        error: Payload carried by an error notification

    Returns:
        ``{"type": name, "args": args}`` for exceptions, the payload otherwise
    """
    if isinstance(error, BaseException):
        return {"type": type(error).__name__, "args": tuple(error.args)}
    return error

