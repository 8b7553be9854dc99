"""
Cosmic Field - Headless Runner

Usage:
    python -m cosmic_field [preset] [--size N] [--steps N] [--speed X]
                           [--seed N] [--target FILE.json] [--snap PATH]

Examples:
    python -m cosmic_field
    python -m cosmic_field tutorial --steps 40
    python -m cosmic_field telescoping --target planck.json --snap field.png

Seeds a handful of ripples, runs the requested number of evolution steps
and prints the universe age and match score as it goes. The target file
is a JSON list of records such as {"ell": 220, "D_ell": 5750}.

Use --list to see all available presets.
"""

import json
import sys

import numpy as np

from .presets import PRESET_ORDER, list_presets
from .simulator import FieldSimulator
from .colormaps import temperature_rgb, upscale


def load_target(path):
    """Read reference records from a JSON file; None if unreadable."""
    try:
        with open(path) as fh:
            data = json.load(fh)
    except (OSError, ValueError) as e:
        print(f"Could not read target {path}: {e}")
        return None
    if isinstance(data, dict):
        data = data.get("data") or data.get("records")
    return data if isinstance(data, list) else None


def seed_ripples(sim, count=5):
    """Drop `count` ripples at random cells from a seeded generator."""
    rng = np.random.default_rng(sim.config.seed)
    size = sim.config.size
    for _ in range(count):
        sim.inject(int(rng.integers(size)), int(rng.integers(size)))
    # Let any staged rings land before the clock starts
    while sim.pending_stages:
        sim.advance(sim.config.ripple_stage_delay)


def snap(sim, path, cell_px=8):
    """Save the colored field as a PNG."""
    from PIL import Image
    img = Image.fromarray(upscale(temperature_rgb(sim.field), cell_px))
    img.save(path)
    print(f"  saved: {path}")


def run(preset, size, steps, speed, seed, target_path, snap_path):
    records = load_target(target_path) if target_path else None
    sim = FieldSimulator.from_preset(preset, size=size, seed=seed, target_records=records)
    sim.set_speed(speed)
    seed_ripples(sim)

    print(f"Running {preset} @ {size}x{size}, {steps} steps, speed {speed}x")
    print(f"  start: score={sim.score}")
    sim.set_running(True)
    report_every = max(1, steps // 10)
    while sim.generation < steps:
        if not sim.advance(sim.config.tick_interval / sim.speed):
            continue
        if sim.generation % report_every == 0 or sim.generation >= steps:
            print(f"  gen {sim.generation:4d}  age {sim.age:7.1f} Myr  "
                  f"mean {sim.field.stats['mean']:+.3f}  score {sim.score}")

    if snap_path:
        snap(sim, snap_path)


def main():
    preset = "ripple"
    size = 64
    steps = 20
    speed = 1.0
    seed = None
    target_path = None
    snap_path = None

    args = sys.argv[1:]
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--size" and i + 1 < len(args):
            size = int(args[i + 1])
            i += 2
        elif arg == "--steps" and i + 1 < len(args):
            steps = int(args[i + 1])
            i += 2
        elif arg == "--speed" and i + 1 < len(args):
            speed = float(args[i + 1])
            i += 2
        elif arg == "--seed" and i + 1 < len(args):
            seed = int(args[i + 1])
            i += 2
        elif arg == "--target" and i + 1 < len(args):
            target_path = args[i + 1]
            i += 2
        elif arg == "--snap" and i + 1 < len(args):
            snap_path = args[i + 1]
            i += 2
        elif arg == "--list":
            print("\nAvailable presets:")
            for key, name, desc in list_presets():
                print(f"    {key:14s} {name:22s} {desc}")
            print()
            return
        elif arg in ("--help", "-h"):
            print(__doc__)
            return
        elif arg in PRESET_ORDER:
            preset = arg
            i += 1
        else:
            print(f"Unknown argument: {arg}")
            print("Use --list to see available presets")
            return

    try:
        run(preset, size, steps, speed, seed, target_path, snap_path)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
