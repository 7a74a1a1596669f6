# tests/notation_tests/test_diagram_errors.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Test suite for marble diagram validation and error handling

"""Malformed diagrams and unknown tokens fail at parse time."""

import pytest
from notation import (
    DiagramError,
    MalformedDiagramError,
    UnknownTokenError,
    parse_marbles,
)


class TestMalformedDiagrams:
    """Syntax violations raise MalformedDiagramError immediately."""

    INVALID_SYNTAX_CASES = [
        ("(ab", "Unclosed group"),
        ("ab)", "Unopened group"),
        ("((a))", "Nested group"),
        ("(a-b)", "Time inside a group"),
        ("(a 10ms b)", "Progression inside a group"),
        ("a!", "Unsubscribe marker in a stream diagram"),
        ("-^-a", "Subscribe marker in a cold diagram"),
    ]

    @pytest.mark.parametrize("diagram, description", INVALID_SYNTAX_CASES)
    def test_malformed(self, diagram, description):
        with pytest.raises(MalformedDiagramError):
            parse_marbles(diagram)

    def test_second_caret_in_hot_diagram(self):
        with pytest.raises(MalformedDiagramError):
            parse_marbles("^-^", allow_subscription_marker=True)

    def test_message_points_at_position(self):
        with pytest.raises(MalformedDiagramError, match="position 3"):
            parse_marbles("--a)")

    def test_all_diagram_errors_share_a_base(self):
        assert issubclass(MalformedDiagramError, DiagramError)
        assert issubclass(UnknownTokenError, DiagramError)
        assert issubclass(DiagramError, RuntimeError)

    @pytest.mark.parametrize("factor", [0, -10])
    def test_frame_time_factor_must_be_positive(self, factor):
        with pytest.raises(ValueError):
            parse_marbles("-a", frame_time_factor=factor)


class TestStrictTerminals:
    """Strict mode (expected diagrams) rejects anything after a terminal."""

    @pytest.mark.parametrize("diagram", ["a|b", "#a", "|#", "(a|b)", "a|(b)", "-#-b-c"])
    def test_events_after_terminal_rejected(self, diagram):
        with pytest.raises(MalformedDiagramError, match="terminal"):
            parse_marbles(diagram, strict=True)

    @pytest.mark.parametrize("diagram", ["a|b", "#a", "|#", "(a|b)", "-#-b-c"])
    def test_events_after_terminal_dropped_when_lenient(self, diagram):
        seq = parse_marbles(diagram)
        assert seq.terminal is seq[-1]

    @pytest.mark.parametrize("diagram", ["a|", "a|---", "a| 10ms", "#--"])
    def test_trailing_time_allowed(self, diagram):
        parse_marbles(diagram, strict=True)


class TestUnknownTokens:

    def test_missing_value_raises(self):
        with pytest.raises(UnknownTokenError) as info:
            parse_marbles("-a-x|", {"a": 1})
        assert info.value.token == "x"
        assert info.value.position == 3

    def test_missing_value_inside_group(self):
        with pytest.raises(UnknownTokenError):
            parse_marbles("(ab)", {"a": 1})

    def test_empty_map_rejects_every_value(self):
        with pytest.raises(UnknownTokenError):
            parse_marbles("a", {})

    def test_control_characters_need_no_entry(self):
        seq = parse_marbles("-(a|)", {"a": 1})
        assert len(seq) == 2
