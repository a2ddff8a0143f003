"""
Rolling History of Grid Snapshots

Fixed-capacity ring buffer of past frames with absolute tick bookkeeping.
Offsets count backward from the latest push: 0 is the newest frame, -1 the
one before it, and so on down to -(count - 1). Asking for anything outside
that window returns None; running out of history is a normal outcome for
the backward tracer, not an error.
"""

import logging

import numpy as np

from .components import GridMismatchError

logger = logging.getLogger(__name__)


class HistoryStore:
    """Ring buffer of read-only int8 snapshots for one width x height grid."""

    def __init__(self, capacity, width, height):
        if capacity < 1:
            raise ValueError(f"history capacity must be at least 1, got {capacity}")
        self.capacity = int(capacity)
        self.width = int(width)
        self.height = int(height)
        self.size = self.width * self.height
        self.frames = [None] * self.capacity
        self.head = 0          # next write position
        self.count = 0         # valid frames in the buffer
        self.total_ticks = 0   # frames ever pushed

    def __len__(self):
        return self.count

    def check_dimensions(self, width, height):
        if (width, height) != (self.width, self.height):
            raise GridMismatchError(
                f"history holds {self.width}x{self.height} frames, "
                f"got a {width}x{height} query"
            )

    def push(self, snapshot):
        """Copy a grid state into the buffer, evicting the oldest when full."""
        frame = np.array(snapshot, dtype=np.int8).reshape(-1)
        if frame.size != self.size:
            raise GridMismatchError(
                f"snapshot has {frame.size} cells, expected "
                f"{self.width}x{self.height} = {self.size}"
            )
        frame.flags.writeable = False

        self.frames[self.head] = frame
        self.head = (self.head + 1) % self.capacity
        if self.count < self.capacity:
            self.count += 1
        self.total_ticks += 1

    def frame_at(self, offset):
        """Snapshot |offset| steps before the latest, or None if unavailable."""
        if offset > 0 or offset <= -self.count:
            return None
        return self.frames[(self.head - 1 + offset) % self.capacity]

    def tick_at(self, offset):
        """Absolute tick number of the frame at offset."""
        return self.total_ticks - 1 + offset

    def reset(self, width, height):
        """Drop every stored frame and switch to a new grid size.

        total_ticks keeps counting, so ticks recorded after a resize never
        reuse numbers from before it.
        """
        logger.debug(
            "resetting history to %dx%d, dropping %d frames at tick %d",
            width, height, self.count, self.total_ticks,
        )
        self.width = int(width)
        self.height = int(height)
        self.size = self.width * self.height
        self.frames = [None] * self.capacity
        self.head = 0
        self.count = 0
