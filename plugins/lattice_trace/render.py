"""
2D Frame Rendering

Draws a single grid frame as a pixel-art image, optionally highlighting the
cells of one traced blob. Colors come from a small lookup table indexed per
cell, the same way colormaps are applied to a float field.
"""

import numpy as np
from PIL import Image

from .engine_base import ALIVE

COLOR_DEAD = (5, 5, 5)
COLOR_ALIVE = (255, 255, 255)
COLOR_BLOB = (80, 160, 255)

_LUT = np.array([COLOR_DEAD, COLOR_ALIVE, COLOR_BLOB], dtype=np.uint8)


def render_frame(frame, width, height, blob=None, cell_size=4):
    """
    Render a flat frame to an RGB image.

    Args:
        frame: Flat cell buffer of length width * height
        width, height: Grid dimensions
        blob: Optional iterable of indices drawn in COLOR_BLOB
        cell_size: Pixels per cell edge

    Returns:
        PIL.Image of size (width * cell_size, height * cell_size)
    """
    states = (np.asarray(frame).reshape(-1) == ALIVE).astype(np.uint8)
    if blob is not None and len(blob):
        states[np.fromiter(blob, dtype=np.int64)] = 2
    rgb = _LUT[states.reshape(height, width)]
    if cell_size > 1:
        rgb = rgb.repeat(cell_size, axis=0).repeat(cell_size, axis=1)
    return Image.fromarray(rgb)


def save_frame(path, frame, width, height, blob=None, cell_size=4):
    """Render a frame and save it as PNG. Returns path."""
    render_frame(frame, width, height, blob, cell_size).save(path)
    return path
