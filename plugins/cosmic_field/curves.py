"""
Curve Utilities

Helpers shared by the spectrum extractor and the scorer:

- normalize: min-max scaling to [0, 1], all zeros for a flat sequence
- resample: linear interpolation to a target length
- tick_indices: evenly spaced label positions for charting
- prepare_target: reference (scale, power) records -> normalized curve
- fallback_curve: built-in analytic reference used when no data is given
"""

import math

import numpy as np


EPSILON = 1e-9

SCALE_KEYS = ("scale", "ell", "l", "multipole", "k", "x")
POWER_KEYS = ("power", "d_ell", "dl", "cl", "p", "y", "value")

# Baseline plateau plus three acoustic-style peaks of falling height
FALLBACK_PEAKS = ((0.22, 0.07, 1.00), (0.48, 0.06, 0.48), (0.72, 0.05, 0.42))


def normalize(seq, epsilon=EPSILON):
    """(v - min) / (max - min) elementwise; all zeros when max - min < epsilon."""
    arr = np.asarray(seq, dtype=np.float64)
    if arr.size == 0:
        return np.zeros(0)
    lo, hi = float(arr.min()), float(arr.max())
    if hi - lo < epsilon:
        return np.zeros_like(arr)
    return (arr - lo) / (hi - lo)


def resample(seq, length):
    """Linearly resample seq to `length` points spanning the same index range."""
    src = np.asarray(seq, dtype=np.float64)
    length = max(0, int(length))
    n = src.size
    if n == 0 or length == 0:
        return np.zeros(length)
    if length == 1:
        return src[:1].copy()
    x = np.arange(length) * (n - 1) / (length - 1)
    lo = np.floor(x).astype(int)
    hi = np.minimum(np.ceil(x).astype(int), n - 1)
    t = x - lo
    return src[lo] * (1.0 - t) + src[hi] * t


def tick_indices(length, count=5):
    """Evenly spaced, unique indices in [0, length-1], both ends included."""
    if length <= 0 or count <= 0:
        return []
    if count == 1 or length == 1:
        return [0]
    raw = np.linspace(0, length - 1, min(count, length))
    return sorted({int(round(v)) for v in raw})


# ---------------------------------------------------------------------------
# Analytic shapes
# ---------------------------------------------------------------------------

def bump_kernel(x, center, width):
    """Gaussian bump exp(-0.5 ((x - center) / width)^2)."""
    return np.exp(-0.5 * ((np.asarray(x) - center) / width) ** 2)


def baseline_envelope(x):
    """Slowly falling plateau shared by the analytic curves."""
    x = np.asarray(x)
    return 0.35 * np.exp(-x / 0.6) + 0.05


def fallback_curve(length=80):
    """Built-in reference spectrum, normalized to [0, 1]."""
    x = np.linspace(0.0, 1.0, max(0, int(length)))
    curve = baseline_envelope(x)
    for center, width, height in FALLBACK_PEAKS:
        curve = curve + height * bump_kernel(x, center, width)
    return normalize(curve)


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

def _lookup(record, aliases):
    lowered = {str(k).lower(): v for k, v in record.items()}
    for key in aliases:
        if key in lowered:
            return lowered[key]
    return None


def _as_number(value):
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_records(records):
    """Extract (scale, power) pairs from mappings, sorted by scale.

    Field names are matched case-insensitively against SCALE_KEYS and
    POWER_KEYS; records missing either value are dropped. Anything other
    than a list or tuple of records yields no pairs.
    """
    if not isinstance(records, (list, tuple)):
        return []
    pairs = []
    for record in records:
        if not hasattr(record, "items"):
            continue
        scale = _as_number(_lookup(record, SCALE_KEYS))
        power = _as_number(_lookup(record, POWER_KEYS))
        if scale is None or power is None:
            continue
        pairs.append((scale, power))
    pairs.sort(key=lambda p: p[0])
    return pairs


def prepare_target(records, length):
    """Normalized reference curve of `length` points.

    Falls back to fallback_curve() (with a warning) when records are
    missing or contain no usable (scale, power) pair.
    """
    pairs = parse_records(records)
    if not pairs:
        if records is None:
            print("[CF] No reference spectrum supplied, using built-in fallback curve")
        else:
            print("[CF] Reference spectrum has no usable (scale, power) records, "
                  "using built-in fallback curve")
        return fallback_curve(length)
    powers = normalize([p for _, p in pairs])
    return resample(powers, length)
