"""
Spacetime Voxel Assembly

Stacks the frames of a backward and a forward trace into one voxel cloud:
grid x and y become the horizontal plane (centered, y pointing up) and the
tick offset from "now" becomes depth. Past voxels ramp from deep blue to
white at now; future voxels ramp from white to red.
"""

import colorsys
import logging
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)

PAST_HUE = 0.6
FUTURE_HUE = 0.0


@dataclass
class Voxels:
    """Parallel arrays: positions (N, 3), colors (N, 3) RGB in [0, 1], times (N,)."""
    positions: np.ndarray
    colors: np.ndarray
    times: np.ndarray

    def __len__(self):
        return len(self.times)


def past_color(offset, depth=200):
    """RGB for a frame |offset| ticks in the past: deep blue far back, white at now."""
    t = 1.0 - min(abs(offset) / depth, 1.0) if depth > 0 else 1.0
    return colorsys.hls_to_rgb(PAST_HUE, 0.2 + 0.8 * t, 1.0)


def future_color(offset, depth=200):
    """RGB for a frame offset ticks ahead: white at now, red far ahead."""
    t = min(offset / depth, 1.0) if depth > 0 else 1.0
    return colorsys.hls_to_rgb(FUTURE_HUE, 1.0 - 0.5 * t, 1.0)


def assemble_spacetime(backward, forward, width, height, max_voxels=20000, depth=200):
    """Merge traces into a Voxels cloud of at most max_voxels entries.

    Args:
        backward: TraceResult keyed by absolute tick; its max tick is "now"
        forward: TraceResult keyed by relative offsets 1..k
        width, height: Grid dimensions
        max_voxels: Hard cap; emission stops mid-frame when reached
        depth: Tick distance over which the color ramps run to completion
    """
    now = max(backward.frames) if backward.frames else 0

    positions = []
    colors = []
    times = []

    def emit(cells, offset, color):
        for idx in sorted(cells):
            if len(times) >= max_voxels:
                return False
            x = idx % width
            y = idx // width
            positions.append((x - width / 2, height / 2 - y, offset))
            colors.append(color)
            times.append(offset)
        return True

    complete = True
    for tick, cells in backward.frames.items():
        offset = tick - now
        if not emit(cells, offset, past_color(offset, depth)):
            complete = False
            break
    if complete:
        for offset, cells in forward.frames.items():
            if not emit(cells, offset, future_color(offset, depth)):
                complete = False
                break

    if not complete:
        logger.debug("voxel cap of %d reached, structure truncated", max_voxels)

    return Voxels(
        positions=np.array(positions, dtype=np.float32).reshape(-1, 3),
        colors=np.array(colors, dtype=np.float32).reshape(-1, 3),
        times=np.array(times, dtype=np.int64),
    )
