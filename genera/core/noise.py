"""2D lattice-gradient noise over a seeded permutation table.

Single octave, quintic fade, eight gradient directions at 45 degree steps.
Values are remapped from the signed [-1, 1] range to [0, 1].
"""

from __future__ import annotations

import math

from genera.core.rng import DeterministicRNG

_GRADIENTS = (
    (1, 1), (-1, 1), (1, -1), (-1, -1),
    (1, 0), (-1, 0), (0, 1), (0, -1),
)


def _fade(t: float) -> float:
    """Perlin fade curve: 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6 - 15) + 10)


def _lerp(a: float, b: float, t: float) -> float:
    return a + t * (b - a)


def _dot(g: tuple[int, int], x: float, y: float) -> float:
    return g[0] * x + g[1] * y


class NoiseField:
    """Continuous noise function of (x, y), deterministic for a seed."""

    def __init__(self, seed: int):
        rng = DeterministicRNG(seed)
        p = list(range(256))
        for i in range(255, 0, -1):
            j = int(math.floor(rng.next() * (i + 1)))
            p[i], p[j] = p[j], p[i]
        # Doubled so corner lookups never need to wrap.
        self.perm: list[int] = p + p

    def noise(self, x: float, y: float) -> float:
        perm = self.perm
        fx = math.floor(x)
        fy = math.floor(y)
        xi = int(fx) & 255
        yi = int(fy) & 255
        xf = x - fx
        yf = y - fy
        u = _fade(xf)
        v = _fade(yf)

        aa = perm[perm[xi] + yi]
        ab = perm[perm[xi] + yi + 1]
        ba = perm[perm[xi + 1] + yi]
        bb = perm[perm[xi + 1] + yi + 1]

        x1 = _lerp(_dot(_GRADIENTS[aa % 8], xf, yf),
                   _dot(_GRADIENTS[ba % 8], xf - 1, yf), u)
        x2 = _lerp(_dot(_GRADIENTS[ab % 8], xf, yf - 1),
                   _dot(_GRADIENTS[bb % 8], xf - 1, yf - 1), u)
        return _lerp(x1, x2, v) * 0.5 + 0.5

    __call__ = noise
