# tests/notation_tests/test_marble_lexer.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Test suite for marble lexer tokenization

"""Test suite for marble lexer functionality.

Verifies tokenization of every notation symbol, whitespace handling, and
the whitespace-delimited recognition of time progressions.
"""

import pytest
from notation.lexer import MarbleLexer
from utils.logger import get_logger


class TestMarbleLexer:
    """Test cases for marble lexer tokenization."""

    def setup_method(self):
        """Initialize lexer for each test method."""
        self.lexer = MarbleLexer()
        self.logger = get_logger()

    def _tokenize_to_types(self, text: str) -> list[str]:
        self.logger.debug(f"Tokenizing: '{text}'")
        return [token.type for token in self.lexer.tokenize(text)]

    VALID_TOKENIZATION_CASES = [
        ("-", ["FRAME"]),
        ("a", ["VALUE"]),
        ("-a-|", ["FRAME", "VALUE", "FRAME", "COMPLETE"]),
        ("--#", ["FRAME", "FRAME", "ERROR"]),
        ("(ab|)", ["LPAREN", "VALUE", "VALUE", "COMPLETE", "RPAREN"]),
        ("--^--!", ["FRAME", "FRAME", "SUBSCRIBE", "FRAME", "FRAME", "UNSUBSCRIBE"]),
        # Whitespace never produces a token
        (" - a \t| ", ["FRAME", "VALUE", "COMPLETE"]),
        ("", []),
        # Time progressions need whitespace or an end on both sides
        ("10ms a 9ms b", ["TIME", "VALUE", "TIME", "VALUE"]),
        ("1s", ["TIME"]),
        ("a 2m", ["VALUE", "TIME"]),
        ("-10ms", ["FRAME", "VALUE", "VALUE", "VALUE", "VALUE"]),
        ("10msa", ["VALUE", "VALUE", "VALUE", "VALUE", "VALUE"]),
        # Digits and letters alone are ordinary values
        ("1", ["VALUE"]),
        ("m", ["VALUE"]),
    ]

    @pytest.mark.parametrize("input_text, expected_types", VALID_TOKENIZATION_CASES)
    def test_valid_tokenization(self, input_text, expected_types):
        actual_types = self._tokenize_to_types(input_text)

        assert actual_types == expected_types, (
            f"Tokenization mismatch for '{input_text}':\n"
            f"Expected: {expected_types}\n"
            f"Actual: {actual_types}"
        )

    @pytest.mark.parametrize(
        "text, units",
        [("10ms", 10), ("0ms", 0), ("3s", 3000), ("2m", 120000), ("250ms", 250)],
    )
    def test_time_progression_values_in_raw_units(self, text, units):
        tokens = list(self.lexer.tokenize(text))
        assert len(tokens) == 1
        assert tokens[0].value == units

    def test_token_positions_follow_source_text(self):
        tokens = list(self.lexer.tokenize("- a (b)"))
        assert [t.index for t in tokens] == [0, 2, 4, 5, 6]
        assert [t.value for t in tokens] == ["-", "a", "(", "b", ")"]
