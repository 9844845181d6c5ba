"""Per-element color assignment strategies.

  - pool  -> weighted sampling from the seeded color pool
  - noise -> interpolation between two neighbouring palette colors, indexed
             by the local noise value
  - field -> inverse-distance blend toward per-color attractor points

Field attractors sit at fixed golden-angle-like offsets derived from the
palette index, not from the RNG, so they move only with canvas size.
"""

from __future__ import annotations

import math
from typing import Callable

from genera.art.palettes import HSL
from genera.core.rng import lerp


def noise_gradient_color(palette: list[HSL], nv: float) -> HSL:
    n = len(palette)
    idx = int(math.floor(nv * n)) % n
    nxt = (idx + 1) % n
    bl = (nv * n) % 1
    a, b = palette[idx], palette[nxt]
    return (lerp(a[0], b[0], bl), lerp(a[1], b[1], bl), lerp(a[2], b[2], bl))


def field_attractors(palette: list[HSL], width: float,
                     height: float) -> list[tuple[float, float, HSL]]:
    return [
        (((j * 137.5) % 360) / 360 * width,
         ((j * 97.3 + 50) % 360) / 360 * height,
         c)
        for j, c in enumerate(palette)
    ]


def field_color(attractors: list[tuple[float, float, HSL]],
                x: float, y: float) -> HSL:
    total = 0.0
    h = s = l = 0.0
    for ax, ay, c in attractors:
        influence = 1 / (1 + math.hypot(x - ax, y - ay) * 0.004)
        h += c[0] * influence
        s += c[1] * influence
        l += c[2] * influence
        total += influence
    return (h / total, s / total, l / total)


class ColorAssigner:
    """Binds one strategy to a palette, pool sampler and canvas extent."""

    def __init__(self, strategy: str, palette: list[HSL],
                 sample_pool: Callable[[], HSL], width: float, height: float):
        self.strategy = strategy
        self.palette = palette
        self._sample_pool = sample_pool
        self._attractors = field_attractors(palette, width, height)

    def color(self, x: float, y: float, nv: float) -> HSL:
        if self.strategy == "noise":
            return noise_gradient_color(self.palette, nv)
        if self.strategy == "field":
            return field_color(self._attractors, x, y)
        return self._sample_pool()
