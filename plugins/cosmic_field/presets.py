"""
Cosmic Field Session Presets

Each preset names a temperature range, an initial field, an evolution
rule and a spectrum strategy known to give readable feedback. Keys that
are not SessionConfig fields ("name", "description") are display-only.
"""

from .config import (
    SessionConfig, EvolutionParams, SpectrumParams, BrushParams,
    SMOOTHING, SPREADING, DIRECT, TELESCOPING, RAISE, OVERWRITE,
    INIT_MINIMUM, INIT_JITTER,
)

PRESETS = {
    "ripple": {
        "name": "Cosmic Ripple",
        "description": "Cold start, click to inject ripples, inflation smoothing",
        "min_temp": -3.0, "max_temp": 3.0,
        "init_mode": INIT_MINIMUM,
        "mode": SMOOTHING, "inflation": 1.02,
        "hotspot_threshold": 2.5, "hotspot_bonus": 0.1,
        "strategy": DIRECT,
        "ripple_mode": OVERWRITE, "ripple_stage_delay": 0.1,
    },
    "tutorial": {
        "name": "Tutorial",
        "description": "Filled hotspots on a wider [-3, 10] range that spread outward",
        "min_temp": -3.0, "max_temp": 10.0,
        "init_mode": INIT_MINIMUM,
        "tick_interval": 0.3,
        "mode": SPREADING, "spread_threshold": 1.5, "decay_rate": 0.3,
        "strategy": DIRECT,
        "ripple_mode": RAISE, "ripple_stage_delay": 0.0,
        "ripple_rings": ((0, 10.0), (1, 6.0), (2, 4.0), (3, 2.0)),
    },
    "painter": {
        "name": "Fluctuation Painter",
        "description": "Jittered field, Gaussian brushes, gentle smoothing",
        "min_temp": -3.0, "max_temp": 3.0,
        "init_mode": INIT_JITTER, "base_value": 0.0, "jitter": 0.1,
        "mode": SMOOTHING, "inflation": 1.02, "hotspot_threshold": None,
        "strategy": DIRECT,
        "ripple_mode": RAISE,
    },
    "spreading": {
        "name": "Heat Spreading",
        "description": "Hot cells spread outward, temperatures only rise",
        "min_temp": -3.0, "max_temp": 3.0,
        "init_mode": INIT_MINIMUM,
        "mode": SPREADING, "spread_threshold": 1.5, "decay_rate": 0.3,
        "strategy": DIRECT,
        "ripple_mode": RAISE,
    },
    "telescoping": {
        "name": "Acoustic Peaks",
        "description": "Jittered field scored through telescoping spectrum bands",
        "min_temp": -3.0, "max_temp": 3.0,
        "init_mode": INIT_JITTER, "base_value": 0.0, "jitter": 0.2,
        "mode": SMOOTHING, "inflation": 1.02, "hotspot_threshold": None,
        "strategy": TELESCOPING, "curve_length": 80,
        "ripple_mode": RAISE,
    },
}

PRESET_ORDER = ["ripple", "tutorial", "painter", "spreading", "telescoping"]

_EVOLUTION_KEYS = ("mode", "inflation", "hotspot_threshold", "hotspot_bonus",
                   "spread_threshold", "decay_rate")
_SPECTRUM_KEYS = ("strategy", "curve_length")
_BRUSH_KEYS = ("ripple_mode", "ripple_rings")
_SESSION_KEYS = ("min_temp", "max_temp", "init_mode", "base_value", "jitter",
                 "tick_interval", "ripple_stage_delay")


def get_preset(name):
    """Get a preset by name. Returns None if not found."""
    return PRESETS.get(name)


def list_presets():
    """Return list of (key, name, description) for presets."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in PRESET_ORDER if k in PRESETS]


def config_from_preset(name, size=64, seed=None):
    """Build a SessionConfig from a named preset."""
    preset = get_preset(name)
    if preset is None:
        raise ValueError(f"Unknown preset: {name!r}. Available: {PRESET_ORDER}")

    def pick(keys):
        return {k: preset[k] for k in keys if k in preset}

    return SessionConfig(
        size=size,
        seed=seed,
        evolution=EvolutionParams(**pick(_EVOLUTION_KEYS)),
        spectrum=SpectrumParams(**pick(_SPECTRUM_KEYS)),
        brushes=BrushParams(**pick(_BRUSH_KEYS)),
        **pick(_SESSION_KEYS),
    )
