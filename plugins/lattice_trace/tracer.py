"""
Causal History Tracer

Follows one blob of alive cells backward through recorded history and
forward through a cloned, independently stepped engine.

Each step looks only at the blob's footprint plus its one-cell Moore halo in
the neighboring time slice, takes every alive cell there as a seed, and
grows the seeds into their full connected components. The union becomes the
blob for that slice. This tracks spatial overlap, not the engine's actual
update rule, so a structure that moves more than one cell between recorded
frames loses its lineage.
"""

import enum
import logging
from dataclasses import dataclass, field

from .components import GridMismatchError, check_blob, expand_components, frontier
from .engine_base import ALIVE

logger = logging.getLogger(__name__)


class StopReason(enum.Enum):
    MAX_FRAMES = "max_frames"
    HISTORY_EXHAUSTED = "history_exhausted"
    DIED = "died"
    EXPANDED = "expanded"


@dataclass
class TraceResult:
    """Blobs keyed by tick, in the order they were traced.

    Backward traces use absolute ticks; forward traces use offsets 1..k.
    """
    frames: dict = field(default_factory=dict)
    stop_reason: StopReason = StopReason.MAX_FRAMES

    def __len__(self):
        return len(self.frames)

    @property
    def ticks(self):
        return sorted(self.frames)

    @property
    def total_cells(self):
        return sum(len(blob) for blob in self.frames.values())


def follow_blob(frame, blob, width, height):
    """Blob in an adjacent time slice: alive cells on or around blob, grown to full components."""
    candidates = set(blob) | frontier(blob, width, height)
    seeds = {idx for idx in candidates if frame[idx] == ALIVE}
    return expand_components(frame, seeds, width, height)


def trace_backward(history, blob, width, height, max_frames=200):
    """Trace blob's ancestry from the latest frame back through history.

    Stops when history runs out, when no ancestor is alive (the empty blob is
    recorded at that tick), or after max_frames steps back from now.
    """
    history.check_dimensions(width, height)
    check_blob(blob, width, height)

    frames = {}
    stop_reason = StopReason.MAX_FRAMES
    active = set(blob)
    for offset in range(0, -max_frames - 1, -1):
        frame = history.frame_at(offset)
        if frame is None:
            stop_reason = StopReason.HISTORY_EXHAUSTED
            break

        ancestors = follow_blob(frame, active, width, height)
        frames[history.tick_at(offset)] = frozenset(ancestors)
        if not ancestors:
            stop_reason = StopReason.DIED
            break
        active = ancestors

    logger.debug("backward trace: %d frames, stopped on %s", len(frames), stop_reason.value)
    return TraceResult(frames, stop_reason)


def trace_forward(engine, blob, width, height, max_frames=200, stop_on_expanded=0.5):
    """Trace blob's descendants by stepping a clone of engine.

    The live engine is never advanced. Stops when the blob dies, when it
    grows past stop_on_expanded of the grid area, or after max_frames ticks.
    """
    if (engine.width, engine.height) != (width, height):
        raise GridMismatchError(
            f"engine is {engine.width}x{engine.height}, "
            f"trace requested on {width}x{height}"
        )
    check_blob(blob, width, height)

    sim = engine.clone()
    limit = stop_on_expanded * width * height
    frames = {}
    stop_reason = StopReason.MAX_FRAMES
    active = set(blob)
    for step in range(1, max_frames + 1):
        sim.tick()
        descendants = follow_blob(sim.cell_buffer(), active, width, height)
        if not descendants:
            stop_reason = StopReason.DIED
            break

        frames[step] = frozenset(descendants)
        active = descendants
        if len(descendants) > limit:
            stop_reason = StopReason.EXPANDED
            break

    logger.debug("forward trace: %d frames, stopped on %s", len(frames), stop_reason.value)
    return TraceResult(frames, stop_reason)
