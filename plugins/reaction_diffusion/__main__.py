"""
Reaction-Diffusion Viewer - Entry Point

Usage:
    python -m reaction_diffusion [preset] [--size N|HxW] [--dt X] [--seed N]
                                 [--scale N] [--out DIR] [--snap STEPS]
                                 [--log-level LEVEL]

Examples:
    python -m reaction_diffusion
    python -m reaction_diffusion mitosis
    python -m reaction_diffusion maze --size 400x300 --scale 2
    python -m reaction_diffusion coral --snap 5000 --seed 7

--snap runs headless for STEPS steps, saves a PNG to --out and exits.

Use --list to see all available presets.
"""

import logging
import sys

from .errors import ReactionDiffusionError
from .params import Parameters
from .presets import PRESET_ORDER, list_presets
from .simulation import Simulation

DEFAULT_SIZE = 300


def config_log(log_level):
    """Global logging configuration for command-line runs."""
    logging.basicConfig(
        level=log_level,
        format="[%(asctime)s,%(msecs)03d] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    return logging.getLogger(__name__)


def parse_size(text):
    """'300' -> (300, 300); '400x300' -> (300, 400) as (height, width)."""
    if "x" in text:
        w, h = text.split("x", 1)
        return int(h), int(w)
    n = int(text)
    return n, n


def snap(sim, steps, out_dir, scale=1, preset="default"):
    """Headless mode: run N steps, save a PNG, return its path."""
    from . import render

    print(f"  {preset}: running {steps} steps...", end="", flush=True)
    pair = sim.step_n(steps)
    if not sim.is_finite():
        print(" (fields are no longer finite)", end="")
    pixels = render.upscale(render.to_rgb(pair.a, pair.b), scale)
    path = render.save_png(pixels, out_dir, name=f"rd_{preset}_{steps}")
    print(f" saved: {path}")
    return path


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)

    preset = "default"
    height = width = DEFAULT_SIZE
    dt = 1.0
    seed = None
    scale = 2
    out_dir = "images"
    snap_steps = 0
    log_level = "WARNING"

    i = 0
    try:
        while i < len(args):
            arg = args[i]
            if arg == "--size" and i + 1 < len(args):
                height, width = parse_size(args[i + 1])
                i += 2
            elif arg == "--dt" and i + 1 < len(args):
                dt = float(args[i + 1])
                i += 2
            elif arg == "--seed" and i + 1 < len(args):
                seed = int(args[i + 1])
                if seed < 0:
                    raise ValueError("seed must be a non-negative integer")
                i += 2
            elif arg == "--scale" and i + 1 < len(args):
                scale = int(args[i + 1])
                i += 2
            elif arg == "--out" and i + 1 < len(args):
                out_dir = args[i + 1]
                i += 2
            elif arg == "--snap" and i + 1 < len(args):
                snap_steps = int(args[i + 1])
                i += 2
            elif arg == "--log-level" and i + 1 < len(args):
                log_level = args[i + 1].upper()
                i += 2
            elif arg == "--list":
                print("\nAvailable presets:")
                for key, name, desc in list_presets():
                    print(f"    {key:12s} {name:12s} {desc}")
                print()
                return 0
            elif arg in ("--help", "-h"):
                print(__doc__)
                return 0
            elif arg in PRESET_ORDER:
                preset = arg
                i += 1
            else:
                print(f"Unknown argument: {arg}")
                print("Use --list to see available presets")
                return 2
    except ValueError as e:
        print(f"Bad value for {args[i]}: {e}")
        return 2

    try:
        log = config_log(log_level)
    except ValueError as e:
        print(f"Bad log level: {e}")
        return 2

    try:
        params = Parameters.from_preset(preset, dt=dt)
        sim = Simulation(height, width, params=params, rng=seed)
    except ReactionDiffusionError as e:
        print(f"Configuration error: {e}")
        return 2
    log.info("Simulation %dx%d, preset %s, %s", height, width, preset, params.snapshot())

    if snap_steps > 0:
        print(f"Headless snap mode: {preset} @ {width}x{height}, {snap_steps} steps")
        snap(sim, snap_steps, out_dir, scale=scale, preset=preset)
        return 0

    from .viewer import Viewer

    print("Starting Reaction-Diffusion Viewer")
    print(f"  Preset: {preset}")
    print(f"  Grid: {width}x{height} (scale {scale})")
    print()

    viewer = Viewer(sim, scale=scale, preset_key=preset, screenshot_dir=out_dir)
    viewer.run()
    log.info("Goodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
