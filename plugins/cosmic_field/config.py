"""
Session Configuration for the Cosmic Field Simulator

Groups every tunable of a simulation session into small dataclasses:

- EvolutionParams: time-update rule and its constants
- SpectrumParams: blur scales and band synthesis constants
- BrushParams: default parameters for each paint brush
- SessionConfig: grid geometry, temperature range, cadence, seed

Bounds are checked by validate_config(); FieldSimulator refuses to start
on an invalid configuration.
"""

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple


SMOOTHING = "smoothing"
SPREADING = "spreading"
EVOLUTION_MODES = (SMOOTHING, SPREADING)

DIRECT = "direct"
TELESCOPING = "telescoping"
SPECTRUM_STRATEGIES = (DIRECT, TELESCOPING)

RAISE = "raise"
OVERWRITE = "overwrite"
RIPPLE_MODES = (RAISE, OVERWRITE)

INIT_UNIFORM = "uniform"
INIT_JITTER = "jitter"
INIT_MINIMUM = "minimum"
INIT_MODES = (INIT_UNIFORM, INIT_JITTER, INIT_MINIMUM)


# ============================================================================
# Time update
# ============================================================================

@dataclass
class EvolutionParams:
    """Constants of the evolution step.

    smoothing: new = (old - local_mean) * inflation + local_mean
    spreading: hot cells push (value - distance * decay) into neighbours
    """

    mode: str = SMOOTHING

    inflation: float = 1.02
    """Contrast gain around the 3x3 local mean (slightly > 1)."""

    hotspot_threshold: Optional[float] = 2.5
    """Cells at or above this value get hotspot_bonus. None disables."""

    hotspot_bonus: float = 0.1

    spread_threshold: float = 1.5
    """Only cells at or above this value emit into their neighbours."""

    decay_rate: float = 0.3
    """Temperature lost per unit of neighbour distance when spreading."""


# ============================================================================
# Spectrum extraction
# ============================================================================

@dataclass
class SpectrumParams:
    """Blur scales and band synthesis constants for the spectrum proxy."""

    strategy: str = DIRECT

    scales: Tuple[int, ...] = (1, 2, 3, 4, 6, 8, 12)
    """Box-blur radii for the direct strategy (ascending)."""

    band_radii: Tuple[int, ...] = (12, 6, 2, 0)
    """Telescoping radii, coarsest first. 0 is the raw field."""

    curve_length: int = 80
    """Output length of the telescoping curve."""

    expected_fractions: Tuple[float, ...] = (0.40, 0.30, 0.20, 0.10)
    """Share of total variance each band is expected to carry."""

    band_gains: Tuple[float, ...] = (1.0, 1.2, 1.0, 0.8)

    peak_positions: Tuple[float, ...] = (0.22, 0.48, 0.72)
    """Fractional positions of the three peak kernels along the curve."""

    peak_widths: Tuple[float, ...] = (0.07, 0.06, 0.05)

    epsilon: float = 1e-9


# ============================================================================
# Brushes
# ============================================================================

@dataclass
class BrushParams:
    """Default parameters used when painting by brush name."""

    bump_radius: float = 3.0
    bump_amplitude: float = 1.0

    erase_radius: float = 3.0
    erase_strength: float = 0.7

    speckle_count: int = 12
    speckle_radius: float = 3.0
    speckle_amplitude: float = 0.4

    cycle_step: float = 1.0

    ripple_rings: Optional[Tuple[Tuple[int, float], ...]] = None
    """(distance, temperature) rings. None derives them from the range."""

    ripple_mode: str = OVERWRITE


# ============================================================================
# Session
# ============================================================================

@dataclass
class SessionConfig:
    """Complete configuration of one simulation session."""

    size: int = 64
    min_temp: float = -3.0
    max_temp: float = 3.0

    init_mode: str = INIT_MINIMUM
    base_value: float = 0.0
    jitter: float = 0.1

    tick_interval: float = 0.5
    """Seconds between evolution steps at speed 1."""

    ripple_stage_delay: float = 0.0
    """Seconds between staged ripple rings. 0 applies all rings at once."""

    seed: Optional[int] = None

    evolution: EvolutionParams = field(default_factory=EvolutionParams)
    spectrum: SpectrumParams = field(default_factory=SpectrumParams)
    brushes: BrushParams = field(default_factory=BrushParams)

    def default_rings(self):
        """Ripple rings for this range: MAX at the center, then 2, 1, 0."""
        if self.brushes.ripple_rings is not None:
            return tuple(self.brushes.ripple_rings)
        return ((0, self.max_temp), (1, 2.0), (2, 1.0), (3, 0.0))


# ============================================================================
# Validation
# ============================================================================

def validate_config(config: SessionConfig) -> Tuple[bool, str]:
    """
    Check configuration for consistency.

    Returns:
        (is_valid, error_message)
    """
    errors = []

    if not isinstance(config.size, int) or config.size < 1:
        errors.append("size must be a positive integer")
    if not (math.isfinite(config.min_temp) and math.isfinite(config.max_temp)):
        errors.append("temperature bounds must be finite")
    elif config.min_temp >= config.max_temp:
        errors.append("min_temp must be < max_temp")
    if config.init_mode not in INIT_MODES:
        errors.append(f"init_mode must be one of {INIT_MODES}")
    if config.tick_interval <= 0:
        errors.append("tick_interval must be positive")
    if config.ripple_stage_delay < 0:
        errors.append("ripple_stage_delay must be non-negative")

    evo = config.evolution
    if evo.mode not in EVOLUTION_MODES:
        errors.append(f"evolution mode must be one of {EVOLUTION_MODES}")
    if evo.decay_rate < 0:
        errors.append("decay_rate must be non-negative")

    sp = config.spectrum
    if sp.strategy not in SPECTRUM_STRATEGIES:
        errors.append(f"spectrum strategy must be one of {SPECTRUM_STRATEGIES}")
    if not sp.scales or any(r < 0 for r in sp.scales):
        errors.append("scales must be non-empty and non-negative")
    if len(sp.band_radii) != len(sp.expected_fractions):
        errors.append("band_radii and expected_fractions must match in length")
    if len(sp.band_radii) != len(sp.band_gains):
        errors.append("band_radii and band_gains must match in length")
    if len(sp.peak_positions) != len(sp.band_radii) - 1:
        errors.append("need one peak kernel per band after the first")
    if len(sp.peak_positions) != len(sp.peak_widths):
        errors.append("peak_positions and peak_widths must match in length")
    if any(f <= 0 for f in sp.expected_fractions):
        errors.append("expected_fractions must be positive")
    if sp.curve_length < 1:
        errors.append("curve_length must be positive")

    if config.brushes.ripple_mode not in RIPPLE_MODES:
        errors.append(f"ripple_mode must be one of {RIPPLE_MODES}")
    if config.brushes.speckle_count < 0:
        errors.append("speckle_count must be non-negative")

    if errors:
        return False, "; ".join(errors)
    return True, "OK"
