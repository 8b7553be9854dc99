#!/usr/bin/env python3
"""
Tests for the evolution step (smoothing and spreading rules).
"""

import numpy as np
import pytest

from cosmic_field.config import EvolutionParams
from cosmic_field.evolution import evolve, local_mean
from cosmic_field.field import Field


def _random_field(seed=0, size=16, lo=-3.0, hi=3.0):
    rng = np.random.default_rng(seed)
    return Field(rng.uniform(lo, hi, size=(size, size)), lo, hi)


def test_local_mean_uses_in_grid_neighbours_only():
    grid = np.zeros((3, 3))
    grid[0, 0] = 1.0
    avg = local_mean(grid)
    assert avg[0, 0] == pytest.approx(1.0 / 4.0)
    assert avg[0, 1] == pytest.approx(1.0 / 6.0)
    assert avg[1, 1] == pytest.approx(1.0 / 9.0)
    assert avg[2, 2] == pytest.approx(0.0)


def test_smoothing_inflates_around_local_mean():
    grid = np.zeros((3, 3))
    grid[0, 0] = 1.0
    params = EvolutionParams(inflation=1.02, hotspot_threshold=None)

    out = evolve(Field(grid), params)

    assert out[0, 0] == pytest.approx((1.0 - 0.25) * 1.02 + 0.25)
    assert out[1, 1] == pytest.approx((0.0 - 1.0 / 9.0) * 1.02 + 1.0 / 9.0)


def test_smoothing_hotspot_bonus():
    field = Field.uniform(5, 2.6)
    out = evolve(field, EvolutionParams(hotspot_threshold=2.5, hotspot_bonus=0.1))
    np.testing.assert_allclose(out.values, 2.7)

    out = evolve(field, EvolutionParams(hotspot_threshold=None))
    np.testing.assert_allclose(out.values, 2.6)


def test_smoothing_is_deterministic():
    field = _random_field(seed=5)
    params = EvolutionParams()
    a = evolve(field, params)
    b = evolve(field, params)
    assert np.array_equal(a.values, b.values)


def test_spreading_pushes_decayed_heat_to_neighbours():
    grid = np.full((5, 5), -3.0)
    grid[2, 2] = 3.0
    params = EvolutionParams(mode="spreading", spread_threshold=1.5, decay_rate=0.3)

    out = evolve(Field(grid), params)

    assert out[2, 2] == 3.0
    for r, c in [(1, 2), (3, 2), (2, 1), (2, 3)]:
        assert out[r, c] == pytest.approx(2.7)
    for r, c in [(1, 1), (1, 3), (3, 1), (3, 3)]:
        # Diagonals sit at Manhattan distance 2
        assert out[r, c] == pytest.approx(3.0 - 2 * 0.3), f"diagonal ({r},{c}) = {out[r, c]}"
    assert out[0, 0] == -3.0
    assert out[2, 0] == -3.0, "only one ring of neighbours per step"


def test_spreading_ignores_cells_below_threshold():
    grid = np.full((5, 5), -3.0)
    grid[2, 2] = 1.0
    out = evolve(Field(grid), EvolutionParams(mode="spreading", spread_threshold=1.5))
    assert out == Field(grid)


def test_spreading_never_lowers_a_cell():
    field = _random_field(seed=9, size=20)
    params = EvolutionParams(mode="spreading", spread_threshold=0.5, decay_rate=0.2)
    for _ in range(5):
        nxt = evolve(field, params)
        assert np.all(nxt.values >= field.values)
        field = nxt


@pytest.mark.parametrize("params", [
    EvolutionParams(inflation=1.5, hotspot_bonus=2.0),
    EvolutionParams(mode="spreading", spread_threshold=-3.0, decay_rate=0.0),
])
def test_evolution_stays_in_bounds(params):
    field = _random_field(seed=2, lo=-3.0, hi=10.0)
    for _ in range(10):
        field = evolve(field, params)
        assert field.values.min() >= -3.0
        assert field.values.max() <= 10.0


def test_unknown_mode_raises():
    with pytest.raises(ValueError):
        evolve(Field.uniform(3, 0.0), EvolutionParams(mode="melting"))


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-v"]))
