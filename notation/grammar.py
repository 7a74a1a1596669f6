# notation/grammar.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# LALR(1) grammar and parser for marble diagrams using SLY

"""Marble diagram grammar implementation using SLY parser generator.

The grammar only decides structure: which characters form a synchronous
group and where groups open and close. Frame arithmetic, value lookup and
the rules about which markers a given kind of diagram may contain live in
the compiler, so one grammar serves stream and subscription diagrams alike.

Grammar:
    diagram  : elements
    elements : elements element | empty
    element  : FRAME | TIME | SUBSCRIBE | UNSUBSCRIBE | signal | group
    group    : LPAREN members RPAREN
    members  : members member | empty
    member   : signal | SUBSCRIBE | UNSUBSCRIBE
    signal   : VALUE | COMPLETE | ERROR
"""

from sly import Parser

from .lexer import MarbleLexer
from .ast_nodes import (
    CompleteToken,
    Diagram,
    ErrorToken,
    Group,
    SubscriptionPoint,
    Tick,
    TimeProgression,
    UnsubscriptionPoint,
    ValueToken,
)
from .exceptions import DiagramError, MalformedDiagramError
from utils.logger import get_logger


class _MarbleParser(Parser):
    """SLY-based LALR(1) parser for marble diagrams.

    Attributes:
        tokens: Token types from MarbleLexer
    """

    tokens = MarbleLexer.tokens

    @_("elements")
    def diagram(self, p) -> Diagram:
        """Start rule: a diagram is a sequence of elements."""
        return Diagram(tuple(p.elements))

    @_("elements element")
    def elements(self, p):
        return p.elements + [p.element]

    @_("empty")
    def elements(self, p):
        return []

    @_("")
    def empty(self, p):
        pass

    @_("FRAME")
    def element(self, p):
        return Tick(position=p.index)

    @_("TIME")
    def element(self, p):
        return TimeProgression(position=p.index, units=p.TIME)

    @_("SUBSCRIBE")
    def element(self, p):
        return SubscriptionPoint(position=p.index)

    @_("UNSUBSCRIBE")
    def element(self, p):
        return UnsubscriptionPoint(position=p.index)

    @_("signal")
    def element(self, p):
        return p.signal

    @_("group")
    def element(self, p):
        return p.group

    @_("LPAREN members RPAREN")
    def group(self, p) -> Group:
        """Synchronous group; position is that of the opening parenthesis."""
        return Group(position=p.index, members=tuple(p.members))

    @_("members member")
    def members(self, p):
        return p.members + [p.member]

    @_("empty")
    def members(self, p):
        return []

    @_("signal")
    def member(self, p):
        return p.signal

    @_("SUBSCRIBE")
    def member(self, p):
        return SubscriptionPoint(position=p.index)

    @_("UNSUBSCRIBE")
    def member(self, p):
        return UnsubscriptionPoint(position=p.index)

    @_("VALUE")
    def signal(self, p):
        return ValueToken(position=p.index, token=p.VALUE)

    @_("COMPLETE")
    def signal(self, p):
        return CompleteToken(position=p.index)

    @_("ERROR")
    def signal(self, p):
        return ErrorToken(position=p.index)

    def parse(self, text: str) -> Diagram:
        """Parse marble diagram text into an AST.

        Args:
            text: Marble diagram to parse

        Returns:
            Root Diagram node; an empty diagram yields no elements

        Raises:
            MalformedDiagramError: If the diagram contains syntax errors
        """
        logger = get_logger()
        logger.debug(f"Parsing diagram: '{text}'")

        try:
            ast_result = super().parse(MarbleLexer().tokenize(text))

            if ast_result is None:
                # SLY returns None for an empty token stream
                ast_result = Diagram(())

            logger.debug(f"Parsed diagram into {len(ast_result.elements)} element(s)")
            return ast_result

        except DiagramError:
            logger.debug("Diagram error encountered")
            raise
        except Exception as e:
            logger.debug(f"Unexpected parsing error: {e}")
            raise MalformedDiagramError(f"Parse failed: {e}") from e

    def error(self, token):
        """Handle syntax errors during parsing.

        Args:
            token: Problematic token or None for end-of-diagram errors

        Raises:
            MalformedDiagramError: Always raised with position information
        """
        if token:
            error_msg = (
                f"Unexpected '{token.value}' (type: {token.type}) at position {token.index}"
            )
            if token.type == "LPAREN":
                error_msg += ": synchronous groups cannot be nested"
            elif token.type == "RPAREN":
                error_msg += ": no group is open"
            elif token.type in ("FRAME", "TIME"):
                error_msg += ": time cannot pass inside a synchronous group"
        else:
            error_msg = "Unexpected end of diagram: unclosed synchronous group"

        raise MalformedDiagramError(error_msg)
