"""
FieldSimulator - Stateful Session Controller

Owns the current Field and everything derived from it (spectrum curve,
prepared reference curve, match score) and exposes the commands a UI
layer drives: paint, inject, set_running, set_speed, reset.

Time is pushed in from outside through advance(dt). Evolution steps are
released by a fractional accumulator (speed 2 at a 0.5 s interval means
4 steps per second) and staged ripple rings by their own wall-clock
timer. Every Field replacement recomputes curve and score together, so
observers never see a curve that belongs to an older Field.

Usage:
    from cosmic_field.simulator import FieldSimulator
    sim = FieldSimulator.from_preset("ripple", size=64, seed=7)
    sim.inject(32, 32)
    sim.set_running(True)
    sim.advance(1.0)
    print(sim.score)
"""

import math

from .brushes import Bump, Erase, Speckle, Cycle, Ripple, apply_brush, ripple_stages
from .config import SessionConfig, validate_config, INIT_JITTER, INIT_MINIMUM
from .curves import prepare_target
from .evolution import evolve
from .field import Field
from .presets import config_from_preset
from .rng_utils import make_rng
from .scoring import match_score
from .spectrum import extract_spectrum


BRUSH_KINDS = ("bump", "erase", "speckle", "cycle", "ripple")


class FieldSimulator:
    """Headless simulation session.

    Args:
        config: SessionConfig (validated; ValueError if inconsistent)
        target_records: Reference spectrum as (scale, power) mappings, or
            None to score against the built-in fallback curve
    """

    def __init__(self, config=None, target_records=None):
        if config is None:
            config = SessionConfig()
        ok, message = validate_config(config)
        if not ok:
            raise ValueError(f"Invalid session config: {message}")
        self.config = config

        self._field_rng = make_rng(config.seed, "field")
        self._brush_rng = make_rng(config.seed, "speckle")

        self.running = False
        self.speed = 1.0
        self.age = 0.0
        self.generation = 0
        self._step_accumulator = 0.0
        # Staged ripples still landing, each on its own timer:
        # [row, col, remaining stages, seconds since last stage]
        self._pending_ripples = []

        self._target_records = target_records
        self.field = None
        self.curve = None
        self.target = None
        self.score = None
        self._install_field(self._initial_field(), refresh_target=True)

    @classmethod
    def from_preset(cls, name, size=64, seed=None, target_records=None):
        return cls(config_from_preset(name, size=size, seed=seed), target_records)

    # -----------------------------------------------------------------------
    # Commands
    # -----------------------------------------------------------------------

    def paint(self, row, col, brush_kind="bump"):
        """Apply a named brush at (row, col). Off-grid positions are ignored.

        Returns True if the field was touched.
        """
        if brush_kind == "ripple":
            return self.inject(row, col)
        brush = self.make_brush(brush_kind)
        if not self.field.contains(row, col):
            return False
        self._install_field(apply_brush(self.field, row, col, brush, self._brush_rng))
        return True

    def inject(self, row, col):
        """Inject a ripple at (row, col), staged if ripple_stage_delay > 0."""
        if not self.field.contains(row, col):
            return False
        ripple = self.make_brush("ripple")
        if self.config.ripple_stage_delay > 0:
            stages = ripple_stages(ripple)
            if not stages:
                return False
            first, *rest = stages
            self._install_field(apply_brush(self.field, row, col, first))
            if rest:
                self._pending_ripples.append([row, col, rest, 0.0])
        else:
            self._install_field(apply_brush(self.field, row, col, ripple))
        return True

    def set_running(self, running):
        self.running = bool(running)

    def set_speed(self, multiplier):
        multiplier = float(multiplier)
        if not math.isfinite(multiplier) or multiplier <= 0:
            raise ValueError(f"Speed multiplier must be positive, got {multiplier}")
        self.speed = multiplier

    def reset(self):
        """Start over from a fresh initial field; the clock stops."""
        self.running = False
        self.age = 0.0
        self.generation = 0
        self._step_accumulator = 0.0
        self._pending_ripples = []
        self._install_field(self._initial_field())

    def set_target(self, records):
        """Replace the reference spectrum and rescore."""
        self._target_records = records
        self.target = prepare_target(records, len(self.curve))
        self.score = match_score(self.curve, self.target)

    def step(self):
        """Run exactly one evolution step, regardless of the running flag."""
        self._install_field(evolve(self.field, self.config.evolution))
        self.generation += 1
        return self.field

    def advance(self, dt):
        """Advance the session clock by dt wall-clock seconds.

        Ages the universe by dt * speed, lands due ripple stages and, while
        running, performs every evolution step that came due.

        Returns:
            Number of evolution steps performed
        """
        if dt <= 0:
            return 0
        self.age += dt * self.speed
        self._release_stages(dt)

        if not self.running:
            return 0
        steps = 0
        self._step_accumulator += dt * self.speed / self.config.tick_interval
        while self._step_accumulator >= 1.0:
            self.step()
            self._step_accumulator -= 1.0
            steps += 1
        return steps

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def make_brush(self, kind):
        """Brush record for a brush name, built from the session defaults."""
        bp = self.config.brushes
        if kind == "bump":
            return Bump(bp.bump_radius, bp.bump_amplitude)
        if kind == "erase":
            return Erase(bp.erase_radius, bp.erase_strength)
        if kind == "speckle":
            return Speckle(bp.speckle_count, bp.speckle_radius, bp.speckle_amplitude)
        if kind == "cycle":
            return Cycle(bp.cycle_step)
        if kind == "ripple":
            return Ripple(self.config.default_rings(), bp.ripple_mode)
        raise ValueError(f"Unknown brush: {kind!r}. Supported: {list(BRUSH_KINDS)}")

    @property
    def pending_stages(self):
        return sum(len(stages) for _, _, stages, _ in self._pending_ripples)

    @property
    def stats(self):
        """Return current session statistics."""
        stats = dict(self.field.stats)
        stats.update({
            "generation": self.generation,
            "age": self.age,
            "speed": self.speed,
            "running": self.running,
            "score": self.score,
        })
        return stats

    def _initial_field(self):
        cfg = self.config
        if cfg.init_mode == INIT_MINIMUM:
            return Field.minimum(cfg.size, cfg.min_temp, cfg.max_temp)
        if cfg.init_mode == INIT_JITTER:
            return Field.jittered(cfg.size, cfg.base_value, cfg.jitter, self._field_rng,
                                  cfg.min_temp, cfg.max_temp)
        return Field.uniform(cfg.size, cfg.base_value, cfg.min_temp, cfg.max_temp)

    def _release_stages(self, dt):
        # Older ripples land first within a tick; a newer ripple never waits
        # behind an older one.
        delay = self.config.ripple_stage_delay
        for pending in self._pending_ripples:
            row, col, stages, _ = pending
            pending[3] += dt
            while stages and pending[3] >= delay:
                self._install_field(apply_brush(self.field, row, col, stages.pop(0)))
                pending[3] -= delay
        self._pending_ripples = [p for p in self._pending_ripples if p[2]]

    def _install_field(self, field, refresh_target=False):
        curve = extract_spectrum(field, self.config.spectrum)
        target = self.target
        if refresh_target or target is None:
            target = prepare_target(self._target_records, len(curve))
        score = match_score(curve, target)
        self.field, self.curve, self.target, self.score = field, curve, target, score
