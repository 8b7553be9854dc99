"""
Field - Immutable Square Temperature Grid

The simulation state is an NxN float64 grid clamped to a closed
temperature range. A Field never changes after construction: its array
is flagged read-only and every operator returns a brand-new Field, so a
snapshot handed to the extractor can never be observed half-updated.
"""

import operator

import numpy as np


def clamp(value, min_temp, max_temp):
    """Clamp a scalar or array into [min_temp, max_temp]."""
    if isinstance(value, np.ndarray):
        return np.clip(value, min_temp, max_temp)
    return max(min_temp, min(max_temp, value))


class Field:
    """Square grid of temperatures within [min_temp, max_temp]."""

    def __init__(self, values, min_temp=-3.0, max_temp=3.0):
        """
        Args:
            values: 2D square array-like of temperatures (copied, then clamped)
            min_temp: Lower temperature bound
            max_temp: Upper temperature bound (must exceed min_temp)
        """
        if not min_temp < max_temp:
            raise ValueError(f"min_temp ({min_temp}) must be < max_temp ({max_temp})")
        grid = np.array(values, dtype=np.float64)
        if grid.ndim != 2 or grid.shape[0] != grid.shape[1] or grid.shape[0] < 1:
            raise ValueError(f"Field needs a non-empty square grid, got shape {grid.shape}")
        np.clip(grid, min_temp, max_temp, out=grid)
        grid.flags.writeable = False
        self._values = grid
        self.min_temp = float(min_temp)
        self.max_temp = float(max_temp)

    # -----------------------------------------------------------------------
    # Factories
    # -----------------------------------------------------------------------

    @classmethod
    def uniform(cls, size, value, min_temp=-3.0, max_temp=3.0):
        _check_size(size)
        return cls(np.full((size, size), value, dtype=np.float64), min_temp, max_temp)

    @classmethod
    def minimum(cls, size, min_temp=-3.0, max_temp=3.0):
        return cls.uniform(size, min_temp, min_temp, max_temp)

    @classmethod
    def jittered(cls, size, base, amplitude, rng, min_temp=-3.0, max_temp=3.0):
        """Base value plus uniform noise in [-amplitude, amplitude]."""
        _check_size(size)
        noise = rng.uniform(-amplitude, amplitude, size=(size, size))
        return cls(base + noise, min_temp, max_temp)

    # -----------------------------------------------------------------------
    # Accessors
    # -----------------------------------------------------------------------

    @property
    def values(self):
        """Read-only view of the grid."""
        return self._values

    @property
    def size(self):
        return self._values.shape[0]

    def contains(self, row, col):
        """True if (row, col) is a valid grid index. Non-integral positions are not."""
        try:
            row, col = operator.index(row), operator.index(col)
        except TypeError:
            return False
        return 0 <= row < self.size and 0 <= col < self.size

    def clamp(self, value):
        return clamp(value, self.min_temp, self.max_temp)

    def replace(self, values):
        """New Field with the same bounds and the given (clamped) values."""
        return Field(values, self.min_temp, self.max_temp)

    def copy_values(self):
        """Writable copy of the grid for building a successor Field."""
        return self._values.copy()

    def __getitem__(self, index):
        return self._values[index]

    def __eq__(self, other):
        if not isinstance(other, Field):
            return NotImplemented
        return (self.min_temp == other.min_temp and self.max_temp == other.max_temp
                and np.array_equal(self._values, other._values))

    __hash__ = None

    def __repr__(self):
        return (f"Field(size={self.size}, range=[{self.min_temp}, {self.max_temp}], "
                f"mean={self._values.mean():.3f})")

    @property
    def stats(self):
        """Return current field statistics."""
        return {
            "mean": float(self._values.mean()),
            "min": float(self._values.min()),
            "max": float(self._values.max()),
            "std": float(self._values.std()),
            "hot_pct": float((self._values > 0.0).sum()) / self._values.size * 100,
        }


def _check_size(size):
    if not isinstance(size, (int, np.integer)) or size < 1:
        raise ValueError(f"Grid size must be a positive integer, got {size!r}")
