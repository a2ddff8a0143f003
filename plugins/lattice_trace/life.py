"""
Game of Life Engine - Classic and Variant Cellular Automata

Supports arbitrary B/S (birth/survival) rule notation:
- B3/S23: Conway's Game of Life
- B36/S23: HighLife (self-replicating)
- B3678/S34678: Day & Night

Only cells equal to ALIVE count as neighbors; any other state is background
and is cleared on the next tick unless a birth rule fires there.
"""

import numpy as np
from .engine_base import LatticeEngine, ALIVE


def parse_rule(rule_str):
    """Parse B/S notation like 'B3/S23' into (birth_set, survive_set)."""
    rule_str = rule_str.upper().replace(" ", "")
    parts = rule_str.split("/")
    birth = set()
    survive = set()
    for part in parts:
        if part.startswith("B"):
            birth = {int(c) for c in part[1:]}
        elif part.startswith("S"):
            survive = {int(c) for c in part[1:]}
    return birth, survive


def format_rule(birth, survival):
    """Inverse of parse_rule: ([3], [2, 3]) -> 'B3/S23'."""
    b = "".join(str(n) for n in sorted(set(birth)))
    s = "".join(str(n) for n in sorted(set(survival)))
    return f"B{b}/S{s}"


def _count_neighbors_moore(grid):
    """Count Moore neighborhood (8 neighbors) using np.roll with periodic boundaries."""
    n = np.zeros(grid.shape, dtype=np.int32)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dy == 0 and dx == 0:
                continue
            n += np.roll(np.roll(grid, dy, axis=0), dx, axis=1)
    return n


class Life(LatticeEngine):

    engine_name = "life"

    def __init__(self, width=64, height=None, rule="B3/S23", seed=None):
        """
        Args:
            width: Grid width in cells
            height: Grid height in cells (defaults to width)
            rule: B/S rule notation string
            seed: Seed for the engine's random generator
        """
        super().__init__(width, height, seed)
        self.rule_str = rule
        self.birth, self.survive = parse_rule(rule)

    def tick(self):
        """Advance one generation."""
        alive = self.cells == ALIVE
        neighbors = _count_neighbors_moore(alive.astype(np.int32))

        new_cells = np.zeros_like(self.cells)
        dead = ~alive

        for n in self.birth:
            new_cells[dead & (neighbors == n)] = ALIVE
        for n in self.survive:
            new_cells[alive & (neighbors == n)] = ALIVE

        self.cells = new_cells
        self.generation += 1

