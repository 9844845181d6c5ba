#!/usr/bin/env python3
"""Genera -- CLI Interface.

Renders one composition for a seed and parameter set and saves it as PNG.

Usage:
    python -m genera.main [--seed 42] [--width 600] [--height 600]
                          [--set density=0.6 --set layout=radial ...]
                          [--out output/genera.png] [--digest]
                          [--write-baseline tests/baselines/default_600_seed42.sha256]
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from pydantic import ValidationError

from genera.canvas.raster import RasterSurface
from genera.core.params import DEFAULT_PARAMS, Params
from genera.pipeline.generate import generate

OUTPUT_DIR = Path("output")


def parse_args(argv: list[str] | None = None):
    p = argparse.ArgumentParser(description="Genera: deterministic generative compositions")
    p.add_argument("--seed", type=int, default=42, help="Composition seed (default: 42)")
    p.add_argument("--width", type=int, default=600, help="Canvas width in pixels (default: 600)")
    p.add_argument("--height", type=int, default=600, help="Canvas height in pixels (default: 600)")
    p.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override one parameter, e.g. --set layout=grid (repeatable)",
    )
    p.add_argument("--out", type=Path, default=None, help="Output PNG path (default: output/genera_<seed>.png)")
    p.add_argument("--digest", action="store_true", help="Print the SHA-256 digest of the pixels")
    p.add_argument("--write-baseline", type=Path, default=None, metavar="PATH",
                   help="Write the pixel digest to PATH for regression tests")
    return p.parse_args(argv)


def parse_override(text: str) -> tuple[str, str]:
    """Split 'key=value', checking the key against the parameter fields."""
    key, sep, value = text.partition("=")
    key = key.strip().replace("-", "_")
    if not sep:
        raise ValueError(f"Override must look like key=value, got {text!r}")
    if key not in Params.model_fields:
        raise ValueError(f"Unknown parameter: {key!r}. Available: {list(Params.model_fields)}")
    return key, value.strip()


def build_params(overrides: list[str]) -> Params:
    """Defaults with string overrides applied; pydantic coerces the values."""
    if not overrides:
        return DEFAULT_PARAMS
    data = DEFAULT_PARAMS.model_dump()
    data.update(parse_override(o) for o in overrides)
    return Params.model_validate(data)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        params = build_params(args.overrides)
    except (ValueError, ValidationError) as e:
        print(f"Error: {e}")
        return 2

    print("=== Genera ===")
    print(f"Seed: {args.seed} | Size: {args.width}x{args.height}")
    if args.overrides:
        print(f"Overrides: {', '.join(args.overrides)}")

    t0 = time.perf_counter()
    surface = RasterSurface(args.width, args.height)
    generate(surface, args.width, args.height, params, args.seed)
    elapsed = time.perf_counter() - t0

    out = args.out or OUTPUT_DIR / f"genera_{args.seed}.png"
    out.parent.mkdir(parents=True, exist_ok=True)
    surface.to_image().save(out)
    print(f"Rendered in {elapsed:.2f}s -- saved to: {out}")

    if args.digest or args.write_baseline:
        digest = surface.digest()
        print(f"Digest: {digest}")
        if args.write_baseline:
            args.write_baseline.parent.mkdir(parents=True, exist_ok=True)
            args.write_baseline.write_text(digest + "\n")
            print(f"Baseline written to: {args.write_baseline}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
