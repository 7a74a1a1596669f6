#!/usr/bin/env python3
# run_marbles.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Command-line inspector for marble diagrams

import sys
import json
import argparse
from typing import Any, Dict, List, Optional

from notation import (
    DiagramError,
    parse_marbles,
    parse_subscription,
    render_marbles,
)
from timeline.notification import StreamTerminalError
from timeline.timed_event import TimedEventSequence
from utils.logger import LogLevel, get_logger


def configure_logging_for_inspector(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging levels for the inspector.

    Args:
        verbose: Enable INFO level logging
        debug: Enable DEBUG level logging (overrides verbose)
    """
    logger = get_logger()

    if debug:
        logger.set_level(LogLevel.DEBUG)
    else:
        logger.set_level(LogLevel.INFO)


def load_values(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    """Decode the --values JSON object.

    Raises:
        ValueError: Not valid JSON, or not an object
    """
    if raw is None:
        return None
    try:
        values = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"--values is not valid JSON: {e}")
    if not isinstance(values, dict):
        raise ValueError("--values must be a JSON object mapping characters to values")
    return values


def print_timeline(sequence: TimedEventSequence, frame_time_factor: int, show_render: bool) -> None:
    """Print one line per event plus the canonical re-rendered diagram."""
    logger = get_logger()

    if not len(sequence):
        logger.info("(no events: the stream never emits and never completes)")
    for event in sequence:
        logger.info(f"  frame {event.frame:>6}  {event.notification}")

    terminal = sequence.terminal
    if terminal is None:
        logger.info("Stream stays open")
    else:
        logger.info(f"Stream ends at frame {terminal.frame} with {terminal.notification}")

    if show_render:
        rendered = render_marbles(sequence, frame_time_factor)
        logger.info(f"Canonical diagram: '{rendered.diagram}' values={rendered.values!r}")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser for command line interface.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Marbletime diagram inspector",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_marbles.py --values '{"a": 1, "b": 2, "c": 3}' -- "-a-b-(c|)"
  python run_marbles.py "10ms a 9ms b 9ms (c|)" --frame-time-factor 1
  python run_marbles.py --hot -- "--^--a--|"
  python run_marbles.py --subscription -- "--^-----!"
        """,
    )

    parser.add_argument("diagram", help="Marble diagram to compile")

    parser.add_argument(
        "--values", help="JSON object mapping value characters to payloads"
    )

    parser.add_argument(
        "--error", help="Payload for '#' (wrapped in StreamTerminalError)"
    )

    parser.add_argument(
        "-f",
        "--frame-time-factor",
        type=int,
        default=10,
        help="Frames per diagram character (10 standalone, 1 in run mode)",
    )

    kind = parser.add_mutually_exclusive_group()
    kind.add_argument(
        "--hot", action="store_true", help="Allow '^' to anchor the zero frame"
    )
    kind.add_argument(
        "--subscription",
        action="store_true",
        help="Compile as a subscription diagram ('^' and '!')",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject events after a terminal instead of dropping them",
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )

    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output (overrides --verbose)"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the diagram inspector.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    configure_logging_for_inspector(verbose=args.verbose, debug=args.debug)
    logger = get_logger()

    try:
        if args.subscription:
            window = parse_subscription(
                args.diagram, frame_time_factor=args.frame_time_factor
            )
            logger.info(f"Subscribed at frame {window.subscribed}")
            if window.unsubscribed is None:
                logger.info("Never unsubscribed")
            else:
                logger.info(f"Unsubscribed at frame {window.unsubscribed}")
            return 0

        values = load_values(args.values)
        error = StreamTerminalError(args.error) if args.error is not None else None
        sequence = parse_marbles(
            args.diagram,
            values,
            error,
            frame_time_factor=args.frame_time_factor,
            allow_subscription_marker=args.hot,
            strict=args.strict,
        )
        logger.info(f"📋 Diagram: '{args.diagram}' (frame time factor {args.frame_time_factor})")
        has_negative = bool(sequence.frames) and sequence.frames[0] < 0
        print_timeline(sequence, args.frame_time_factor, show_render=not has_negative)
        return 0

    except DiagramError as e:
        logger.error(f"ERROR: {e}")
        return 2

    except ValueError as e:
        logger.error(f"ERROR: {e}")
        return 3


if __name__ == "__main__":
    sys.exit(main())
