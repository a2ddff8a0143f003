"""
Lattice Trace - causal history of blobs in toroidal cellular automata.

Records a rolling history of grid frames, follows one connected blob of
alive cells backward through that history and forward through a cloned
engine, and stacks the result into a colored voxel structure.
"""

from .components import GridMismatchError, connected_component, frontier
from .history import HistoryStore
from .life import Life
from .presets import LatticeConfig, TraceSettings, load_config
from .session import TraceSession
from .spacetime import Voxels, assemble_spacetime
from .tracer import StopReason, TraceResult, trace_backward, trace_forward

__all__ = [
    "GridMismatchError",
    "HistoryStore",
    "LatticeConfig",
    "Life",
    "StopReason",
    "TraceResult",
    "TraceSession",
    "TraceSettings",
    "Voxels",
    "assemble_spacetime",
    "connected_component",
    "frontier",
    "load_config",
    "trace_backward",
    "trace_forward",
]
