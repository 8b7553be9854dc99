#!/usr/bin/env python3
"""
Tests for the spectral extractor, curve utilities and match scorer.
"""

import numpy as np
import pytest

from cosmic_field.config import SpectrumParams
from cosmic_field.curves import (
    normalize, resample, tick_indices, prepare_target, parse_records, fallback_curve,
)
from cosmic_field.field import Field
from cosmic_field.scoring import match_score, rmse
from cosmic_field.spectrum import (
    box_blur, blur_pyramid, population_variance, raw_spectrum, extract_spectrum,
    telescoping_bands,
)


def _noise_field(seed=0, size=32):
    rng = np.random.default_rng(seed)
    return Field(rng.uniform(-3, 3, size=(size, size)))


# ---------------------------------------------------------------------------
# Blur pyramid
# ---------------------------------------------------------------------------

def test_blur_replicates_edges():
    grid = np.zeros((3, 3))
    grid[2, 2] = 9.0
    blurred = box_blur(grid, 1)
    # Clamped window at the corner sees the corner cell 4 times out of 9
    assert blurred[2, 2] == pytest.approx(4.0)
    assert blurred[0, 0] == pytest.approx(0.0)


def test_blur_radius_zero_is_identity():
    field = _noise_field()
    np.testing.assert_array_equal(box_blur(field.values, 0), field.values)


def test_uniform_field_gives_flat_spectrum():
    field = Field.uniform(16, 1.25)
    radii = (1, 2, 3, 4, 6, 8, 12)
    for blurred in blur_pyramid(field, radii):
        np.testing.assert_allclose(blurred, 1.25)
        assert population_variance(blurred) == pytest.approx(0.0, abs=1e-12)

    np.testing.assert_allclose(raw_spectrum(field), 0.0, atol=1e-12)
    assert np.all(extract_spectrum(field) == 0.0)

    tele = SpectrumParams(strategy="telescoping")
    assert np.all(raw_spectrum(field, tele) == 0.0)
    assert np.all(extract_spectrum(field, tele) == 0.0)


def test_population_variance():
    grid = np.array([[1.0, 3.0], [1.0, 3.0]])
    assert population_variance(grid) == pytest.approx(1.0)


# ---------------------------------------------------------------------------
# Band strategies
# ---------------------------------------------------------------------------

def test_direct_curve_runs_coarse_to_fine():
    params = SpectrumParams(strategy="direct")
    curve = raw_spectrum(_noise_field(seed=4), params)
    assert len(curve) == len(params.scales)
    # Heavier blur (coarse end) leaves less variance in white noise
    assert curve[0] < curve[-1]


def test_direct_spectrum_is_deterministic_and_normalized():
    field = _noise_field(seed=8)
    a = extract_spectrum(field)
    b = extract_spectrum(field)
    np.testing.assert_array_equal(a, b)
    assert a.min() == pytest.approx(0.0)
    assert a.max() == pytest.approx(1.0)


def test_telescoping_bands_are_non_negative_and_partition_variance():
    params = SpectrumParams(strategy="telescoping")
    field = _noise_field(seed=6)
    bands = telescoping_bands(field, params)

    assert len(bands) == len(params.band_radii)
    assert np.all(bands >= 0.0)
    raw_variance = population_variance(field.values)
    assert bands.sum() == pytest.approx(raw_variance, rel=1e-9)


def test_telescoping_curve_shape():
    params = SpectrumParams(strategy="telescoping", curve_length=80)
    curve = extract_spectrum(_noise_field(seed=1), params)
    assert curve.shape == (80,)
    assert curve.min() == pytest.approx(0.0)
    assert curve.max() == pytest.approx(1.0)


def test_unknown_strategy_raises():
    with pytest.raises(ValueError):
        raw_spectrum(Field.uniform(4, 0.0), SpectrumParams(strategy="fourier"))


# ---------------------------------------------------------------------------
# Curve utilities
# ---------------------------------------------------------------------------

def test_normalize():
    assert np.all(normalize([2.0, 2.0, 2.0]) == 0.0)
    out = normalize([3.0, -1.0, 1.0, 7.0])
    assert out.min() == 0.0 and out.max() == 1.0
    assert out[0] == pytest.approx(0.5)
    assert normalize([]).size == 0


def test_resample_identity_and_interpolation():
    seq = [0.0, 0.3, 0.9, 0.2, 1.0]
    np.testing.assert_allclose(resample(seq, len(seq)), seq)
    np.testing.assert_allclose(resample([0.0, 1.0], 3), [0.0, 0.5, 1.0])
    np.testing.assert_allclose(resample([0.0, 1.0, 0.0], 5), [0.0, 0.5, 1.0, 0.5, 0.0])


def test_resample_degenerate_lengths():
    np.testing.assert_array_equal(resample([], 4), np.zeros(4))
    assert resample([1.0, 2.0], 0).size == 0
    np.testing.assert_array_equal(resample([0.7], 3), [0.7, 0.7, 0.7])
    np.testing.assert_array_equal(resample([0.2, 0.9], 1), [0.2])


def test_tick_indices():
    ticks = tick_indices(80, 5)
    assert ticks[0] == 0 and ticks[-1] == 79
    assert len(ticks) == 5
    assert tick_indices(3, 10) == [0, 1, 2]
    assert tick_indices(0, 5) == []


def test_parse_records_accepts_aliases_and_sorts():
    records = [
        {"ell": 800, "D_ell": 2500},
        {"Scale": 2, "Power": 1000},
        {"multipole": 220, "cl": 5700},
        {"ell": "bad", "D_ell": 1},
        {"ell": 30},
        "not a record",
    ]
    assert parse_records(records) == [(2.0, 1000.0), (220.0, 5700.0), (800.0, 2500.0)]


def test_prepare_target_normalizes_and_resamples():
    records = [{"ell": 10, "power": 5.0}, {"ell": 1, "power": 1.0}, {"ell": 5, "power": 9.0}]
    target = prepare_target(records, 5)
    np.testing.assert_allclose(target, [0.0, 0.5, 1.0, 0.75, 0.5])


@pytest.mark.parametrize("records", [
    None, [], [{"foo": 1}], [{"ell": float("nan"), "power": 2}],
    42, "ell,power", {"ell": 1, "power": 2},
])
def test_prepare_target_falls_back_with_warning(records, capsys):
    target = prepare_target(records, 7)
    np.testing.assert_allclose(target, fallback_curve(7))
    assert "fallback" in capsys.readouterr().out


def test_fallback_curve_is_normalized():
    curve = fallback_curve(80)
    assert curve.shape == (80,)
    assert curve.min() == pytest.approx(0.0)
    assert curve.max() == pytest.approx(1.0)


# ---------------------------------------------------------------------------
# Match score
# ---------------------------------------------------------------------------

def test_match_score_extremes():
    curve = fallback_curve(40)
    assert match_score(curve, curve) == 100
    assert match_score(np.zeros(10), np.ones(10)) == 0
    assert match_score([], curve) is None
    assert match_score(curve, []) is None


def test_match_score_uses_shared_length():
    assert rmse([0.0, 0.0, 1.0], [0.0, 0.0]) == 0.0
    assert match_score([0.5, 0.5], [0.0, 0.0, 0.0, 0.0]) == 50


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-v"]))
