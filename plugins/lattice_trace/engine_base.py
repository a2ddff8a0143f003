"""
Abstract Base Class for Lattice Engines

Every engine the tracer can follow implements this interface: a toroidal
width x height grid of tri-state cells (0 dead, 1 alive, -1 other) that can
be advanced one tick at a time and forked into an independent copy.
"""

import copy
from abc import ABC, abstractmethod

import numpy as np

ALIVE = 1


class LatticeEngine(ABC):
    """Base class for lattice simulation engines."""

    engine_name = ""   # e.g. "life"

    def __init__(self, width=64, height=None, seed=None):
        self.width = int(width)
        self.height = int(height if height is not None else width)
        self.cells = np.zeros((self.height, self.width), dtype=np.int8)
        self.generation = 0
        self.rng = np.random.default_rng(seed)

    @abstractmethod
    def tick(self):
        """Advance one time step."""

    def step_n(self, n):
        """Advance n steps. Returns final cell grid."""
        for _ in range(n):
            self.tick()
        return self.cells

    def cell_buffer(self):
        """Flat read-only view of the cells, indexed by y * width + x."""
        view = self.cells.reshape(-1).view()
        view.flags.writeable = False
        return view

    def clone(self):
        """Fork an independent engine, random generator state included."""
        return copy.deepcopy(self)

    def seed(self, density=0.35):
        """Fill the grid randomly with the given alive density."""
        self.cells = (self.rng.random((self.height, self.width)) < density).astype(np.int8)
        self.generation = 0

    def place(self, pattern, x, y):
        """Stamp a 2D 0/1 pattern with its top-left corner at (x, y).

        The pattern wraps around the grid edges like everything else.
        """
        pattern = np.asarray(pattern, dtype=np.int8)
        ph, pw = pattern.shape
        rows = (np.arange(ph) + y) % self.height
        cols = (np.arange(pw) + x) % self.width
        self.cells[np.ix_(rows, cols)] = pattern

    def set_resolution(self, width, height):
        """Resize the grid. Existing state is discarded."""
        self.width = int(width)
        self.height = int(height)
        self.cells = np.zeros((self.height, self.width), dtype=np.int8)
        self.generation = 0

    @property
    def stats(self):
        """Return current grid statistics."""
        alive_count = int((self.cells == ALIVE).sum())
        return {
            "generation": self.generation,
            "alive": alive_count,
            "alive_pct": alive_count / self.cells.size * 100,
        }
