#!/usr/bin/env python3
"""
Tests for flood fill and neighborhood helpers on the torus.

Verifies:
1. Background seeds never expand
2. Components wrap across both edges and corners
3. Flood fill agrees with whole-frame labelling (sound and complete)
4. Frontier is the exact Moore halo
"""

import numpy as np
import pytest

from lattice_trace.components import (
    GridMismatchError,
    connected_component,
    expand_components,
    frontier,
    label_components,
    largest_component,
    moore_neighbors,
)


def _grid(width, height, alive):
    frame = np.zeros(width * height, dtype=np.int8)
    for x, y in alive:
        frame[y * width + x] = 1
    return frame


def test_background_seed_is_empty():
    frame = _grid(10, 10, [(3, 3)])
    frame[5] = -1
    assert connected_component(frame, 0, 10, 10) == set(), "dead seed should not expand"
    assert connected_component(frame, 5, 10, 10) == set(), "non-alive state should not expand"


def test_component_wraps_edges():
    print("Testing wraparound adjacency...")
    # (9, 0) touches (0, 1) diagonally across the right edge
    frame = _grid(10, 10, [(9, 0), (0, 1)])
    assert connected_component(frame, 9, 10, 10) == {9, 10}

    # opposite corners are neighbors on a torus
    frame = _grid(10, 10, [(0, 0), (9, 9)])
    assert connected_component(frame, 0, 10, 10) == {0, 99}

    # two cells apart is not adjacent
    frame = _grid(10, 10, [(0, 0), (2, 0)])
    assert connected_component(frame, 0, 10, 10) == {0}
    print("  ✓ wraparound working correctly")


def test_flood_fill_matches_labelling():
    """Every cell reachable from a seed is returned, and nothing else."""
    rng = np.random.default_rng(0)
    width, height = 20, 15
    frame = (rng.random(width * height) < 0.3).astype(np.int8)
    labels, count = label_components(frame, width, height)
    labels = labels.ravel()
    assert count > 1

    for seed in np.flatnonzero(frame == 1):
        component = connected_component(frame, int(seed), width, height)
        expected = set(np.flatnonzero(labels == labels[seed]).tolist())
        assert component == expected, f"component from {seed} disagrees with labelling"
        assert all(frame[i] == 1 for i in component)


def test_seed_out_of_range():
    frame = _grid(4, 4, [])
    with pytest.raises(GridMismatchError):
        connected_component(frame, 16, 4, 4)


def test_frontier_single_cell():
    halo = frontier({0}, 10, 10)
    assert halo == {99, 90, 91, 9, 1, 19, 10, 11}
    assert 0 not in halo, "a lone cell is not its own neighbor"


def test_frontier_includes_adjacent_inputs():
    halo = frontier({0, 1}, 10, 10)
    assert 0 in halo and 1 in halo, "each input touches the other"
    assert len(halo) == 12

    halo = frontier({0, 5}, 10, 10)
    assert 0 not in halo and 5 not in halo


def test_frontier_is_exact_halo():
    width, height = 7, 6
    cells = {3, 10, 41}
    halo = frontier(cells, width, height)
    expected = set()
    for idx in cells:
        x, y = idx % width, idx // width
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if dx or dy:
                    expected.add(((y + dy) % height) * width + (x + dx) % width)
    assert halo == expected


def test_tiny_grids():
    assert moore_neighbors(0, 1, 1) == set()
    assert moore_neighbors(0, 2, 2) == {1, 2, 3}
    assert frontier({0}, 1, 1) == set()


def test_expand_components_unions_seeds():
    frame = _grid(10, 10, [(1, 1), (2, 2), (6, 6), (7, 6)])
    blob = expand_components(frame, {11, 66}, 10, 10)
    assert blob == {11, 22, 66, 67}
    assert expand_components(frame, set(), 10, 10) == set()


def test_labelling_joins_across_edges():
    print("Testing whole-frame labelling...")
    # one blob split by the left/right seam, one separate pair
    frame = _grid(12, 8, [(0, 3), (11, 3), (11, 4), (5, 5), (6, 5)])
    labels, count = label_components(frame, 12, 8)
    assert count == 2, f"seam blob should count once: {count}"
    assert labels[3, 0] == labels[3, 11] == labels[4, 11]
    assert labels[5, 5] == labels[5, 6] != labels[3, 0]

    assert largest_component(frame, 12, 8) == {3 * 12, 3 * 12 + 11, 4 * 12 + 11}
    assert largest_component(_grid(5, 5, []), 5, 5) == set()
    print("  ✓ labelling working correctly")


if __name__ == "__main__":
    print("\n=== Testing Components ===\n")

    test_background_seed_is_empty()
    test_component_wraps_edges()
    test_flood_fill_matches_labelling()
    test_seed_out_of_range()
    test_frontier_single_cell()
    test_frontier_includes_adjacent_inputs()
    test_frontier_is_exact_halo()
    test_tiny_grids()
    test_expand_components_unions_seeds()
    test_labelling_joins_across_edges()

    print("\n✓ All tests passed!\n")
