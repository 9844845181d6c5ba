"""Seeded color harmonies.

Palette colors are HSL triples (h in [0, 360), s and l in [0, 100]).
Paint values handed to a drawing surface are (R, G, B, A) tuples of floats
in [0, 1].
"""

from __future__ import annotations

import colorsys
from typing import Callable

from genera.core.rng import DeterministicRNG, clamp

HSL = tuple[float, float, float]
RGBA = tuple[float, float, float, float]

PALETTE_SIZE = 7

TRANSPARENT: RGBA = (0.0, 0.0, 0.0, 0.0)


def hex_to_rgb(h: str) -> tuple:
    """Convert '#RRGGBB' to (r, g, b) floats in [0, 1]."""
    h = h.lstrip("#")
    return tuple(int(h[i : i + 2], 16) / 255.0 for i in (0, 2, 4))


def rgb_to_hex(rgb: tuple) -> str:
    """Convert (r, g, b) floats in [0, 1] to '#rrggbb'."""
    return "#" + "".join(f"{int(round(clamp(c, 0.0, 1.0) * 255)):02x}" for c in rgb[:3])


def hsla(h: float, s: float, l: float, a: float) -> RGBA:
    """HSL(A) to an RGBA paint, clamping s/l/a the way CSS does."""
    s = clamp(s, 0.0, 100.0) / 100.0
    l = clamp(l, 0.0, 100.0) / 100.0
    r, g, b = colorsys.hls_to_rgb((h % 360.0) / 360.0, l, s)
    return (r, g, b, clamp(a, 0.0, 1.0))


def hsl(h: float, s: float, l: float) -> RGBA:
    return hsla(h, s, l, 1.0)


def rgba(r: int, g: int, b: int, a: float) -> RGBA:
    return (r / 255.0, g / 255.0, b / 255.0, clamp(a, 0.0, 1.0))


# ------------------------------------------------------------------
# Harmony formulas
# ------------------------------------------------------------------

def _analogous(bh: float, rng: DeterministicRNG) -> list[HSL]:
    return [
        ((bh + i * 20 - 60 + 360) % 360, rng.uniform(50, 92), rng.uniform(38, 72))
        for i in range(PALETTE_SIZE)
    ]


def _complementary(bh: float, rng: DeterministicRNG) -> list[HSL]:
    c = (bh + 180) % 360
    return [
        (bh, rng.uniform(60, 90), rng.uniform(42, 65)),
        (bh, rng.uniform(45, 75), rng.uniform(58, 78)),
        (c, rng.uniform(60, 90), rng.uniform(42, 65)),
        (c, rng.uniform(45, 75), rng.uniform(55, 75)),
        ((bh + 90) % 360, rng.uniform(35, 55), rng.uniform(50, 70)),
        ((bh + 270) % 360, rng.uniform(40, 65), rng.uniform(48, 68)),
        # Dark anchor in the base hue
        (bh, rng.uniform(20, 40), rng.uniform(15, 30)),
    ]


def _triadic(bh: float, rng: DeterministicRNG) -> list[HSL]:
    return [
        ((bh + o) % 360, rng.uniform(48, 88), rng.uniform(40, 68))
        for o in (0, 120, 240, 60, 180, 300, 30)
    ]


def _warm(bh: float, rng: DeterministicRNG) -> list[HSL]:
    hues = [
        rng.uniform(0, 15), rng.uniform(15, 40), rng.uniform(35, 55),
        rng.uniform(40, 60), rng.uniform(0, 10), rng.uniform(45, 65),
        rng.uniform(20, 35),
    ]
    return [(h, rng.uniform(55, 95), rng.uniform(40, 70)) for h in hues]


def _neon(bh: float, rng: DeterministicRNG) -> list[HSL]:
    return [
        ((bh + i * 51) % 360, rng.uniform(88, 100), rng.uniform(50, 64))
        for i in range(PALETTE_SIZE)
    ]


def _mono(bh: float, rng: DeterministicRNG) -> list[HSL]:
    return [(bh, rng.uniform(30, 90), 12 + i * 11) for i in range(PALETTE_SIZE)]


_HARMONIES: dict[str, Callable[[float, DeterministicRNG], list[HSL]]] = {
    "analogous": _analogous,
    "complementary": _complementary,
    "triadic": _triadic,
    "warm": _warm,
    "neon": _neon,
    "mono": _mono,
}


def gen_palette(rng: DeterministicRNG, mode: str) -> list[HSL]:
    """Seven colors for a harmony mode; unknown modes fall back to analogous.

    The base hue is always drawn first, even by modes that ignore it, so the
    stream position after this call does not depend on the mode.
    """
    bh = rng.uniform(0, 360)
    return _HARMONIES.get(mode, _analogous)(bh, rng)


def color_pool(palette: list[HSL], rng: DeterministicRNG) -> Callable[[], HSL]:
    """Sampler over a weighted multiset: each color appears 1-6 times."""
    weighted: list[HSL] = []
    for c in palette:
        weighted.extend([c] * rng.uniform_int(1, 6))
    return lambda: rng.pick(weighted)
