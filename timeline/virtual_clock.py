# timeline/virtual_clock.py

"""
Virtual clock: an integer frame counter plus an ordered action queue.

Time only moves when the queue is drained. Actions run in (frame, sequence)
order, where `sequence` is assigned at scheduling time, so actions sharing a
frame run first-in first-out. Everything happens on the calling thread;
`flush` and `advance_to` return only once they have drained what they were
asked to drain.
"""

from __future__ import annotations
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from utils.logger import get_logger

logger = get_logger()


class NegativeFrameError(RuntimeError):
    """Raised when an action is scheduled at a frame the clock has passed."""


@dataclass(order=True, slots=True)
class ScheduledAction:
    frame: int
    sequence: int
    run: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        """Turn this action into a no-op; it is discarded when popped."""
        self.cancelled = True


class VirtualClock:
    """Deterministic frame clock owning one action queue.

    Attributes:
      max_frames: Optional horizon; drains stop before any action beyond it
                  and leave such actions queued.
    """

    def __init__(self, max_frames: Optional[int] = None):
        self.max_frames = max_frames
        self._frame = 0
        self._queue: List[ScheduledAction] = []
        self._sequence = itertools.count()

    def now(self) -> int:
        """Current virtual frame."""
        return self._frame

    @property
    def pending(self) -> int:
        """Number of queued actions that are still live."""
        return sum(1 for action in self._queue if not action.cancelled)

    def schedule(self, frame: int, run: Callable[[], None]) -> ScheduledAction:
        """Queue `run` at absolute `frame`.

        Raises:
            NegativeFrameError: `frame` lies before the current frame
        """
        if frame < self._frame:
            raise NegativeFrameError(
                f"Cannot schedule at frame {frame}: clock is already at frame {self._frame}"
            )
        action = ScheduledAction(frame, next(self._sequence), run)
        heapq.heappush(self._queue, action)
        logger.action_scheduled(action.frame, action.sequence, self._frame)
        return action

    def schedule_after(self, delay: int, run: Callable[[], None]) -> ScheduledAction:
        """Queue `run` `delay` frames from now."""
        if delay < 0:
            raise NegativeFrameError(f"Cannot schedule with negative delay {delay}")
        return self.schedule(self._frame + delay, run)

    def flush(self) -> None:
        """Run every queued action in (frame, sequence) order until none remain.

        Actions scheduled by a running action join the queue and are picked
        up in order. Calling flush on an empty queue does nothing.
        """
        self._drain(self.max_frames)

    def advance_to(self, frame: int) -> None:
        """Run actions up to and including `frame`, then move the clock there.

        Actions beyond `frame` stay queued for a later drain.
        """
        if frame < self._frame:
            raise NegativeFrameError(
                f"Cannot advance to frame {frame}: clock is already at frame {self._frame}"
            )
        self._drain(frame)
        self._move_to(frame)

    def _drain(self, limit: Optional[int]) -> None:
        executed = 0
        skipped = 0
        while self._queue:
            action = self._queue[0]
            if limit is not None and action.frame > limit:
                break
            heapq.heappop(self._queue)
            if action.cancelled:
                skipped += 1
                continue
            self._move_to(action.frame)
            action.run()
            executed += 1
        logger.flush_summary(executed, skipped, self._frame)

    def _move_to(self, frame: int) -> None:
        logger.frame_advanced(self._frame, frame)
        self._frame = frame

    def __repr__(self) -> str:
        return f"VirtualClock(frame={self._frame}, pending={self.pending})"
