"""
Spectral Extractor - Multi-Scale Variance as a Power Spectrum Proxy

The field is box-blurred at a ladder of radii. The variance left after
blurring at radius r measures how much structure the field holds at
scales larger than r, so the variance ladder behaves like a coarse
angular power spectrum.

Two band strategies (SpectrumParams.strategy):

- direct:      one point per blur radius, coarse (largest radius) first
- telescoping: differenced variances between successive radii, used to
               weight a baseline envelope and three peak kernels laid out
               on a fixed-length curve

Blurring replicates edge cells (coordinates are clamped to the grid),
unlike the brushes and the evolution step which skip off-grid cells.
"""

import numpy as np
from scipy.ndimage import uniform_filter

from .config import SpectrumParams, DIRECT, TELESCOPING
from .curves import normalize, bump_kernel, baseline_envelope


def box_blur(grid, radius):
    """Mean over the (2r+1)x(2r+1) window with edge replication."""
    if radius <= 0:
        return np.array(grid, dtype=np.float64)
    return uniform_filter(np.asarray(grid, dtype=np.float64), size=2 * int(radius) + 1,
                          mode="nearest")


def blur_pyramid(field, radii):
    """Blurred copies of the field, one per radius, in the given order."""
    return [box_blur(field.values, r) for r in radii]


def population_variance(grid):
    """E[x^2] - E[x]^2 over all cells, floored at zero."""
    mean = grid.mean()
    return max(0.0, float((grid * grid).mean() - mean * mean))


def scale_variances(field, radii):
    return [population_variance(g) for g in blur_pyramid(field, radii)]


def direct_curve(field, params):
    """Variance at each blur radius, ordered coarse (largest radius) to fine."""
    radii = sorted(params.scales, reverse=True)
    return np.array(scale_variances(field, radii))


def telescoping_bands(field, params):
    """Variance captured between successive radii, coarsest band first.

    band_0 is the variance surviving the coarsest blur; band_k is the extra
    variance revealed by the k-th, finer radius. The bands sum to the
    variance at the finest radius whenever the ladder is monotone.
    """
    variances = scale_variances(field, params.band_radii)
    bands = [variances[0]]
    for k in range(1, len(variances)):
        bands.append(max(0.0, variances[k] - variances[k - 1]))
    return np.array(bands)


def telescoping_curve(field, params):
    bands = telescoping_bands(field, params)
    total = float(bands.sum())
    length = params.curve_length
    if total < params.epsilon:
        return np.zeros(length)

    weights = [
        gain * (band / total) / expected
        for band, gain, expected in zip(bands, params.band_gains, params.expected_fractions)
    ]
    x = np.linspace(0.0, 1.0, length)
    curve = weights[0] * baseline_envelope(x)
    for w, center, width in zip(weights[1:], params.peak_positions, params.peak_widths):
        curve = curve + w * bump_kernel(x, center, width)
    return curve


def raw_spectrum(field, params=None):
    """Un-normalized spectrum curve for the configured strategy."""
    if params is None:
        params = SpectrumParams()
    if params.strategy == DIRECT:
        return direct_curve(field, params)
    if params.strategy == TELESCOPING:
        return telescoping_curve(field, params)
    raise ValueError(f"Unknown spectrum strategy: {params.strategy!r}")


def extract_spectrum(field, params=None):
    """Normalized spectrum curve in [0, 1]; all zeros for a flat field."""
    if params is None:
        params = SpectrumParams()
    return normalize(raw_spectrum(field, params), params.epsilon)
