"""
Evolution Step - One Synchronous Time Update of the Field

Two interchangeable rules, chosen by EvolutionParams.mode:

- smoothing: contrast inflation around the 3x3 local mean. Edge cells
  average over their in-grid neighbours only (no padding value).
- spreading: cells at or above a threshold push (value - distance * decay)
  into their 8 neighbours; every cell keeps the max of itself and what it
  receives, so a step can only raise temperatures.

Both read the whole previous grid and return a new clamped Field.
"""

import numpy as np
from scipy.ndimage import uniform_filter

from .config import EvolutionParams, SMOOTHING, SPREADING


# (dy, dx, Manhattan distance) of the 8 surrounding cells
_NEIGHBOURS = [(dy, dx, abs(dy) + abs(dx))
               for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dy, dx) != (0, 0)]


def local_mean(grid):
    """Mean of each cell's 3x3 neighbourhood, restricted to the grid."""
    sums = uniform_filter(grid, size=3, mode="constant", cval=0.0)
    counts = uniform_filter(np.ones_like(grid), size=3, mode="constant", cval=0.0)
    return sums / counts


def smooth_step(field, params):
    old = field.values
    avg = local_mean(old)
    evolved = (old - avg) * params.inflation + avg
    if params.hotspot_threshold is not None:
        evolved = evolved + np.where(old >= params.hotspot_threshold, params.hotspot_bonus, 0.0)
    return field.replace(evolved)


def spread_step(field, params):
    old = field.values
    n = field.size
    emit = np.where(old >= params.spread_threshold, old, -np.inf)
    padded = np.full((n + 2, n + 2), -np.inf)
    padded[1:-1, 1:-1] = emit

    result = old.copy()
    for dy, dx, dist in _NEIGHBOURS:
        # Value arriving at (i, j) from the neighbour at (i + dy, j + dx)
        incoming = padded[1 + dy:n + 1 + dy, 1 + dx:n + 1 + dx] - dist * params.decay_rate
        np.maximum(result, incoming, out=result)
    return field.replace(result)


def evolve(field, params=None):
    """Advance the field by one step with the configured rule."""
    if params is None:
        params = EvolutionParams()
    if params.mode == SMOOTHING:
        return smooth_step(field, params)
    if params.mode == SPREADING:
        return spread_step(field, params)
    raise ValueError(f"Unknown evolution mode: {params.mode!r}")
