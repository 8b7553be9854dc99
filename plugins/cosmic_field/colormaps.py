"""
Temperature Colormap

Maps field temperatures to RGB the way the CMB-style display colors
cells: cold is deep blue (hue 240), hot is red (hue 0), with lightness
rising slightly toward the hot end.
"""

import numpy as np


def _hsl_to_rgb(hue, saturation, lightness):
    """Vectorized HSL -> RGB. hue in degrees, saturation/lightness in [0, 1]."""
    c = (1.0 - np.abs(2.0 * lightness - 1.0)) * saturation
    h = (hue % 360.0) / 60.0
    x = c * (1.0 - np.abs(h % 2.0 - 1.0))
    zero = np.zeros_like(h)

    sector = np.floor(h).astype(int) % 6
    r = np.choose(sector, [c, x, zero, zero, x, c])
    g = np.choose(sector, [x, c, c, x, zero, zero])
    b = np.choose(sector, [zero, zero, x, c, c, x])
    m = lightness - c / 2.0
    return np.stack([r + m, g + m, b + m], axis=-1)


def temperature_rgb(field):
    """(N, N, 3) uint8 image of the field's temperatures."""
    span = field.max_temp - field.min_temp
    norm = (field.clamp(field.values) - field.min_temp) / span
    hue = 240.0 - norm * 240.0
    lightness = (50.0 + (norm - 0.5) * 20.0) / 100.0
    rgb = _hsl_to_rgb(hue, np.ones_like(norm), lightness)
    return np.clip(np.round(rgb * 255.0), 0, 255).astype(np.uint8)


def upscale(rgb, factor):
    """Nearest-neighbour enlargement so each cell is factor x factor pixels."""
    if factor <= 1:
        return rgb
    return np.repeat(np.repeat(rgb, factor, axis=0), factor, axis=1)
