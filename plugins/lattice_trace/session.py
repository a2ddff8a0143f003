"""
Trace Session

Owns one engine and the history recorded from it. Every step ticks the
engine and pushes the new frame, so history always ends at the engine's
current state before any trace runs against it.
"""

import logging
from dataclasses import dataclass

from .components import connected_component, largest_component
from .history import HistoryStore
from .life import Life
from .presets import LatticeConfig, TraceSettings
from .spacetime import assemble_spacetime
from .tracer import TraceResult, trace_backward, trace_forward

logger = logging.getLogger(__name__)

ENGINE_CLASSES = {cls.engine_name: cls for cls in (Life,)}


def build_engine(config):
    """Instantiate and seed the engine described by a LatticeConfig."""
    cls = ENGINE_CLASSES[config.engine]
    engine = cls(width=config.width, height=config.height, rule=config.rule, seed=config.seed)
    if config.density > 0:
        engine.seed(config.density)
    return engine


@dataclass
class SpacetimeTrace:
    blob: frozenset
    backward: TraceResult
    forward: TraceResult


class TraceSession:

    def __init__(self, engine, settings=None):
        self.engine = engine
        self.settings = settings or TraceSettings()
        self.history = HistoryStore(self.settings.history_capacity, engine.width, engine.height)
        self.record()

    @classmethod
    def from_config(cls, config=None):
        config = config or LatticeConfig()
        return cls(build_engine(config), config.trace)

    @property
    def width(self):
        return self.engine.width

    @property
    def height(self):
        return self.engine.height

    def record(self):
        """Push the engine's current state into history."""
        self.history.push(self.engine.cell_buffer())

    def step(self, n=1):
        """Advance the engine n ticks, recording each one."""
        for _ in range(n):
            self.engine.tick()
            self.record()

    def set_resolution(self, width, height):
        """Resize the engine. Frames of the old size can't be traced, so history is dropped."""
        self.engine.set_resolution(width, height)
        self.history.reset(width, height)
        self.record()

    def current_frame(self):
        return self.history.frame_at(0)

    def select(self, x, y):
        """Blob under grid cell (x, y) in the current frame; empty on background."""
        idx = (y % self.height) * self.width + (x % self.width)
        return connected_component(self.current_frame(), idx, self.width, self.height)

    def select_largest(self):
        return largest_component(self.current_frame(), self.width, self.height)

    def trace(self, blob):
        """Trace blob both ways with the session's bounds."""
        s = self.settings
        backward = trace_backward(self.history, blob, self.width, self.height, s.max_frames)
        forward = trace_forward(
            self.engine, blob, self.width, self.height,
            max_frames=s.max_frames, stop_on_expanded=s.stop_on_expanded,
        )
        logger.debug(
            "traced %d cells: %d frames back (%s), %d forward (%s)",
            len(blob), len(backward), backward.stop_reason.value,
            len(forward), forward.stop_reason.value,
        )
        return SpacetimeTrace(frozenset(blob), backward, forward)

    def voxels(self, trace):
        """Assemble a SpacetimeTrace into a capped voxel cloud."""
        s = self.settings
        return assemble_spacetime(
            trace.backward, trace.forward, self.width, self.height,
            max_voxels=s.max_voxels, depth=max(s.max_frames, 1),
        )
