"""
Connected Components on a Toroidal Grid

Flood fill and neighborhood helpers shared by the backward and forward
tracers. Frames are flat buffers indexed by y * width + x; both axes wrap,
and adjacency is the 8-cell Moore neighborhood the engines themselves use.
"""

import numpy as np
from scipy import ndimage

from .engine_base import ALIVE

MOORE_OFFSETS = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if dx or dy
)


class GridMismatchError(ValueError):
    """Raised when cell indices or buffers don't fit the grid they're used with."""


def check_blob(blob, width, height):
    """Raise GridMismatchError if any index in blob lies outside the grid."""
    size = width * height
    for idx in blob:
        if not 0 <= idx < size:
            raise GridMismatchError(
                f"cell index {idx} is outside a {width}x{height} grid"
            )


def moore_neighbors(idx, width, height):
    """Set of the wrapped Moore neighbors of idx, never including idx itself."""
    x = idx % width
    y = idx // width
    neighbors = {
        ((y + dy) % height) * width + (x + dx) % width
        for dx, dy in MOORE_OFFSETS
    }
    neighbors.discard(idx)
    return neighbors


def connected_component(frame, start, width, height):
    """Flood fill the alive component containing start.

    Returns an empty set when the start cell isn't alive, so querying the
    background never expands.
    """
    if not 0 <= start < width * height:
        raise GridMismatchError(
            f"start index {start} is outside a {width}x{height} grid"
        )
    component = set()
    if frame[start] != ALIVE:
        return component

    component.add(start)
    stack = [start]
    while stack:
        idx = stack.pop()
        for n in moore_neighbors(idx, width, height):
            if n not in component and frame[n] == ALIVE:
                component.add(n)
                stack.append(n)
    return component


def frontier(indices, width, height):
    """Geometric halo: every cell Moore-adjacent to some index, alive or not."""
    halo = set()
    for idx in indices:
        halo |= moore_neighbors(idx, width, height)
    return halo


def expand_components(frame, seeds, width, height):
    """Union of the full components of every seed cell in frame."""
    blob = set()
    for idx in seeds:
        if idx not in blob:
            blob |= connected_component(frame, idx, width, height)
    return blob


def label_components(frame, width, height):
    """Label every alive component of a frame, wrapping across the edges.

    Returns (labels, count) where labels is a (height, width) int array with
    0 for background and 1..count for components.
    """
    grid = np.asarray(frame).reshape(height, width) == ALIVE
    labels, n = ndimage.label(grid, structure=np.ones((3, 3), dtype=int))
    if n == 0:
        return labels, 0

    # ndimage.label doesn't wrap: join labels that touch across an edge.
    parent = np.arange(n + 1)

    def find(a):
        while parent[a] != a:
            parent[a] = parent[parent[a]]
            a = parent[a]
        return a

    for dx, dy in MOORE_OFFSETS:
        shifted = np.roll(np.roll(labels, dy, axis=0), dx, axis=1)
        touching = (labels > 0) & (shifted > 0) & (labels != shifted)
        for a, b in zip(labels[touching], shifted[touching]):
            ra, rb = find(a), find(b)
            if ra != rb:
                parent[max(ra, rb)] = min(ra, rb)

    roots = np.array([find(a) for a in range(n + 1)])
    unique_roots = np.unique(roots[1:])
    remap = np.zeros(n + 1, dtype=labels.dtype)
    for new_label, root in enumerate(unique_roots, start=1):
        remap[roots == root] = new_label
    return remap[labels], len(unique_roots)


def largest_component(frame, width, height):
    """Indices of the biggest alive component, or an empty set."""
    labels, count = label_components(frame, width, height)
    if count == 0:
        return set()
    sizes = np.bincount(labels.ravel(), minlength=count + 1)
    sizes[0] = 0
    best = int(sizes.argmax())
    return set(np.flatnonzero(labels.ravel() == best).tolist())
