"""
Perturbation Brushes

Each brush is a small frozen parameter record; apply_brush() dispatches
on its type and returns a new Field:

- Ripple:  concentric Manhattan rings of fixed temperatures
- Bump:    additive Gaussian, sigma = radius / 2
- Erase:   multiplicative pull toward zero with the same Gaussian weight
- Speckle: random polar scatter of small bumps around the center
- Cycle:   single-cell step that wraps back to the minimum

Neighbours that fall off the grid are skipped (no wraparound), and an
off-grid center leaves the Field untouched.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .config import RAISE, OVERWRITE, RIPPLE_MODES


@dataclass(frozen=True)
class Bump:
    radius: float = 3.0
    amplitude: float = 1.0


@dataclass(frozen=True)
class Erase:
    radius: float = 3.0
    strength: float = 0.7


@dataclass(frozen=True)
class Speckle:
    count: int = 12
    radius: float = 3.0
    amplitude: float = 0.4


@dataclass(frozen=True)
class Cycle:
    step: float = 1.0


@dataclass(frozen=True)
class Ripple:
    """Rings of (manhattan_distance, temperature), kept sorted by distance.

    A cell at distance d takes the temperature of the innermost ring whose
    distance is >= d. Mode "raise" keeps max(existing, ring temperature);
    mode "overwrite" assigns the ring temperature.
    """

    rings: Tuple[Tuple[int, float], ...] = ((0, 3.0), (1, 2.0), (2, 1.0), (3, 0.0))
    mode: str = OVERWRITE

    def __post_init__(self):
        if self.mode not in RIPPLE_MODES:
            raise ValueError(f"Unknown ripple mode: {self.mode!r}")
        rings = tuple(sorted((int(d), float(t)) for d, t in self.rings))
        distances = [d for d, _ in rings]
        if any(d < 0 for d in distances) or len(set(distances)) != len(distances):
            raise ValueError(f"Ring distances must be unique and non-negative: {distances}")
        object.__setattr__(self, "rings", rings)


def ripple_stages(ripple):
    """Cumulative ring prefixes for staged (animated) injection.

    Applying the stages in order, with nothing in between, yields the
    same Field as applying the full ripple at once.
    """
    return [Ripple(ripple.rings[:k + 1], ripple.mode) for k in range(len(ripple.rings))]


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------

def _gaussian_weights(size, row, col, radius):
    """Gaussian weights exp(-r^2 / (2 sigma^2)) inside radius, zero outside."""
    Y, X = np.ogrid[:size, :size]
    dist_sq = (Y - row) ** 2 + (X - col) ** 2
    inside = dist_sq <= radius * radius
    if radius > 0:
        sigma = radius / 2.0
        weights = np.exp(-dist_sq / (2.0 * sigma * sigma))
    else:
        weights = (dist_sq == 0).astype(np.float64)
    return np.where(inside, weights, 0.0)


def apply_bump(field, row, col, brush):
    if not field.contains(row, col):
        return field
    grid = field.copy_values()
    grid += brush.amplitude * _gaussian_weights(field.size, row, col, brush.radius)
    return field.replace(grid)


def apply_erase(field, row, col, brush):
    """Scale cells by (1 - strength * weight).

    Negative cells move up toward zero as well; erase never drives a
    cell toward min_temp.
    """
    if not field.contains(row, col):
        return field
    weights = _gaussian_weights(field.size, row, col, brush.radius)
    grid = field.copy_values() * (1.0 - brush.strength * weights)
    return field.replace(grid)


def speckle_points(size, row, col, brush, rng):
    """Sample brush.count grid points in polar coordinates around (row, col).

    Angle is uniform in [0, 2pi), radius uniform in [0, 1.5 * brush.radius].
    Off-grid samples are dropped.
    """
    points = []
    for _ in range(brush.count):
        angle = rng.uniform(0.0, 2.0 * math.pi)
        dist = rng.uniform(0.0, 1.5 * brush.radius)
        r = int(round(row + dist * math.sin(angle)))
        c = int(round(col + dist * math.cos(angle)))
        if 0 <= r < size and 0 <= c < size:
            points.append((r, c))
    return points


def apply_speckle(field, row, col, brush, rng=None):
    if not field.contains(row, col):
        return field
    if rng is None:
        rng = np.random.default_rng()
    dot_radius = max(1.0, brush.radius / 3.0)
    grid = field.copy_values()
    for r, c in speckle_points(field.size, row, col, brush, rng):
        grid += brush.amplitude * _gaussian_weights(field.size, r, c, dot_radius)
        np.clip(grid, field.min_temp, field.max_temp, out=grid)
    return field.replace(grid)


def apply_cycle(field, row, col, brush):
    """Step one cell by brush.step, wrapping to min_temp past max_temp."""
    if not field.contains(row, col):
        return field
    grid = field.copy_values()
    nxt = grid[row, col] + brush.step
    if nxt > field.max_temp:
        nxt = field.min_temp
    grid[row, col] = nxt
    return field.replace(grid)


def apply_ripple(field, row, col, ripple):
    if not field.contains(row, col) or not ripple.rings:
        return field
    distances = np.array([d for d, _ in ripple.rings])
    temps = np.array([t for _, t in ripple.rings])
    reach = int(distances[-1])

    r0, r1 = max(0, row - reach), min(field.size, row + reach + 1)
    c0, c1 = max(0, col - reach), min(field.size, col + reach + 1)
    Y, X = np.ogrid[r0:r1, c0:c1]
    manhattan = np.abs(Y - row) + np.abs(X - col)

    # Innermost ring covering each cell; len(distances) means "outside"
    ring_idx = np.searchsorted(distances, manhattan, side="left")
    covered = ring_idx < len(distances)
    ring_temp = temps[np.minimum(ring_idx, len(distances) - 1)]

    grid = field.copy_values()
    window = grid[r0:r1, c0:c1]
    if ripple.mode == RAISE:
        written = np.maximum(window, ring_temp)
    else:
        written = np.minimum(field.max_temp, ring_temp)
    grid[r0:r1, c0:c1] = np.where(covered, written, window)
    return field.replace(grid)


def apply_brush(field, row, col, brush, rng=None):
    """Apply any brush at (row, col) and return the new Field."""
    if isinstance(brush, Bump):
        return apply_bump(field, row, col, brush)
    if isinstance(brush, Erase):
        return apply_erase(field, row, col, brush)
    if isinstance(brush, Speckle):
        return apply_speckle(field, row, col, brush, rng)
    if isinstance(brush, Cycle):
        return apply_cycle(field, row, col, brush)
    if isinstance(brush, Ripple):
        return apply_ripple(field, row, col, brush)
    raise ValueError(f"Unknown brush: {brush!r}")
