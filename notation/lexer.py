# notation/lexer.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Lexical analyzer for marble diagrams using SLY

"""Lexical analyzer for marble diagram strings.

Every character of a diagram is a token except whitespace, which only
separates time progressions from their neighbours.

Supported Tokens:
- Frames: -
- Terminals: | (complete), # (error)
- Grouping: ( )
- Subscription markers: ^ (subscribe / zero frame), ! (unsubscribe)
- Time progressions: <n>ms, <n>s, <n>m delimited by whitespace or the ends
- Values: any other single character
"""

from sly import Lexer

from .exceptions import MalformedDiagramError
from utils.logger import get_logger

# Raw time units per suffix of a time progression
TIME_UNITS = {"ms": 1, "s": 1000, "m": 60000}


class MarbleLexer(Lexer):
    """SLY-based lexer for marble diagram tokenization.

    Token patterns are tried in definition order, so TIME must precede VALUE
    for "10ms" to become a single progression instead of four values.

    Attributes:
        tokens: Set of valid token types
        ignore: Characters to skip during tokenization
    """

    tokens = {
        "TIME",
        "FRAME",
        "COMPLETE",
        "ERROR",
        "LPAREN",
        "RPAREN",
        "SUBSCRIBE",
        "UNSUBSCRIBE",
        "VALUE",
    }

    ignore = " \t\r\n"

    # A progression must be preceded and followed by whitespace or an end
    @_(r"(?<!\S)\d+(?:ms|s|m)(?!\S)")
    def TIME(self, t):
        digits = t.value.rstrip("ms")
        unit = t.value[len(digits):]
        t.value = int(digits) * TIME_UNITS[unit]
        return t

    FRAME = r"-"
    COMPLETE = r"\|"
    ERROR = r"\#"
    LPAREN = r"\("
    RPAREN = r"\)"
    SUBSCRIBE = r"\^"
    UNSUBSCRIBE = r"!"
    VALUE = r"[^\s\-|#()^!]"

    def error(self, t):
        """Handle characters that match no token pattern.

        Args:
            t: SLY token object containing error context

        Raises:
            MalformedDiagramError: Always raised with character and position
        """
        logger = get_logger()

        illegal_char = t.value[0]
        error_pos = self.index

        logger.debug(f"Illegal character '{illegal_char}' at position {error_pos}")

        self.index += 1

        raise MalformedDiagramError(
            f"Illegal character '{illegal_char}' encountered at position {error_pos}"
        )
