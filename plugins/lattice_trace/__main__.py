"""
Lattice Trace - Headless Entry Point

Usage:
    python -m lattice_trace [preset] [--size N] [--steps N] [--seed N]
                            [--at X,Y] [--config FILE] [--out DIR]

Runs the preset for --steps ticks while recording history, picks the blob
under cell X,Y (default: the largest blob), traces it backward and forward,
and writes spacetime_structure.gltf plus frame.png to --out.

Examples:
    python -m lattice_trace
    python -m lattice_trace highlife --size 96 --steps 150
    python -m lattice_trace --config lattice.json --at 40,12

Use --list to see all available presets.
"""

import json
import os
import sys

from pydantic import ValidationError

from .gltf_export import DEFAULT_FILENAME, save_gltf
from .presets import PRESET_ORDER, list_presets, load_config, merge_config
from .render import save_frame
from .session import TraceSession


def run(config, steps, at=None, out_dir="."):
    """Simulate, trace one blob, and write the outputs. Returns the trace."""
    session = TraceSession.from_config(config)
    print(f"  {config.preset}: running {steps} steps...", end="", flush=True)
    session.step(steps)
    stats = session.engine.stats
    print(f" done (generation {stats['generation']}, "
          f"{stats['alive']} alive, {stats['alive_pct']:.1f}%)")

    blob = session.select(*at) if at else session.select_largest()
    if not blob:
        print("  No alive blob to trace")
        return None

    trace = session.trace(blob)
    print(f"  Blob: {len(blob)} cells")
    print(f"  Backward: {len(trace.backward)} frames ({trace.backward.stop_reason.value})")
    print(f"  Forward:  {len(trace.forward)} frames ({trace.forward.stop_reason.value})")

    voxels = session.voxels(trace)
    os.makedirs(out_dir, exist_ok=True)
    gltf_path = save_gltf(voxels, os.path.join(out_dir, DEFAULT_FILENAME))
    png_path = save_frame(
        os.path.join(out_dir, "frame.png"), session.current_frame(),
        session.width, session.height, blob, config.cell_size,
    )
    print(f"  Voxels: {len(voxels)}")
    print(f"  saved: {gltf_path}")
    print(f"  saved: {png_path}")
    return trace


def main(argv=None):
    overrides = {}
    config_path = None
    steps = 100
    at = None
    out_dir = "."

    args = sys.argv[1:] if argv is None else list(argv)
    i = 0
    try:
        while i < len(args):
            arg = args[i]
            if arg == "--size" and i + 1 < len(args):
                overrides["width"] = overrides["height"] = int(args[i + 1])
                i += 2
            elif arg == "--steps" and i + 1 < len(args):
                steps = int(args[i + 1])
                i += 2
            elif arg == "--seed" and i + 1 < len(args):
                overrides["seed"] = int(args[i + 1])
                i += 2
            elif arg == "--at" and i + 1 < len(args):
                x, y = args[i + 1].split(",")
                at = (int(x), int(y))
                i += 2
            elif arg == "--config" and i + 1 < len(args):
                config_path = args[i + 1]
                i += 2
            elif arg == "--out" and i + 1 < len(args):
                out_dir = args[i + 1]
                i += 2
            elif arg == "--list":
                print("\nAvailable presets:\n")
                for key, name, desc in list_presets():
                    print(f"  {key:16s} {name:20s} {desc}")
                print()
                return 0
            elif arg in ("--help", "-h"):
                print(__doc__)
                return 0
            elif arg in PRESET_ORDER:
                overrides["preset"] = arg
                i += 1
            else:
                print(f"Unknown argument: {arg}")
                print("Use --list to see available presets")
                return 1
    except ValueError:
        print(f"Bad value for {args[i]}: {args[i + 1]}")
        return 1

    try:
        source = {}
        if config_path:
            with open(config_path) as f:
                source = json.load(f)
        config = load_config(merge_config(source, overrides))
    except (KeyError, ValidationError, ValueError, OSError) as e:
        print(f"Invalid configuration: {e}")
        return 1

    print(f"Lattice trace: {config.preset} ({config.rule}) @ {config.width}x{config.height}")
    run(config, steps, at, out_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
