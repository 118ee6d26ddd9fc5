"""
Random Initial Condition

A starts at 1.0 everywhere. B starts at 0.0 with between 1 and 9 solid
rectangles of B = 1.0 stamped at random positions. Half-widths are drawn
from [5, 49], so the grid has to be at least 99 cells along each axis
for a rectangle of the largest size to fit.
"""

import logging

import numpy as np

from .errors import InvalidConfigurationError
from .grid import Grid

log = logging.getLogger(__name__)

MIN_RECTS, MAX_RECTS = 1, 9
MIN_HALF_WIDTH, MAX_HALF_WIDTH = 5, 49
MIN_SEED_SIZE = 2 * MAX_HALF_WIDTH + 1


def make_rng(rng=None):
    """Accept a Generator, an int seed, or None (fresh entropy)."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def draw_rectangles(height, width, rng=None):
    """Return a list of (row0, row1, col0, col1) half-open rectangles.

    Every rectangle lies fully inside [0, height) x [0, width).
    """
    if height < MIN_SEED_SIZE or width < MIN_SEED_SIZE:
        raise InvalidConfigurationError(
            f"grid {height}x{width} is too small to seed; "
            f"need at least {MIN_SEED_SIZE}x{MIN_SEED_SIZE}"
        )
    rng = make_rng(rng)
    count = int(rng.integers(MIN_RECTS, MAX_RECTS, endpoint=True))
    rects = []
    for _ in range(count):
        hr = int(rng.integers(MIN_HALF_WIDTH, MAX_HALF_WIDTH, endpoint=True))
        hc = int(rng.integers(MIN_HALF_WIDTH, MAX_HALF_WIDTH, endpoint=True))
        # Center drawn so [r - hr, r + hr) stays inside the grid
        r = int(rng.integers(hr, height - hr))
        c = int(rng.integers(hc, width - hc))
        rects.append((r - hr, r + hr, c - hc, c + hc))
    return rects


def seed_initial_condition(height, width, rng=None):
    """Return (A, B) grids for a fresh simulation.

    Raises InvalidConfigurationError if the grid is too small to hold a
    rectangle of the maximum size.
    """
    a = Grid.create(height, width, 1.0)
    b = Grid.create(height, width, 0.0)
    rects = draw_rectangles(height, width, rng)
    for row0, row1, col0, col1 in rects:
        b.fill_rect(row0, row1, col0, col1, 1.0)
    log.debug("Seeded %dx%d grid with %d rectangles", height, width, len(rects))
    return a, b
