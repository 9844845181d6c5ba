"""Gradient paints.

Gradients are created in user space and re-expressed in device space by the
surface at paint time, the same way a 2D canvas context treats them.
Evaluation is vectorized over numpy coordinate grids and returns
premultiplied color plus alpha.

Affine matrices are (a, b, c, d, e, f):  x' = a*x + c*y + e,  y' = b*x + d*y + f.
"""

from __future__ import annotations

import bisect
import math
from typing import Union

import numpy as np

RGBA = tuple[float, float, float, float]
Matrix = tuple[float, float, float, float, float, float]

IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


def apply_matrix(m: Matrix, x: float, y: float) -> tuple[float, float]:
    a, b, c, d, e, f = m
    return (a * x + c * y + e, b * x + d * y + f)


def matrix_scale(m: Matrix) -> float:
    a, b, c, d, _, _ = m
    return math.sqrt(abs(a * d - b * c))


class Gradient:
    def __init__(self):
        self.stops: list[tuple[float, RGBA]] = []

    def add_color_stop(self, offset: float, color: RGBA) -> None:
        offset = min(1.0, max(0.0, offset))
        # Equal offsets keep insertion order.
        idx = bisect.bisect_right([o for o, _ in self.stops], offset)
        self.stops.insert(idx, (offset, tuple(color)))

    def colors_at(self, t: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Premultiplied (..., 3) color and (...) alpha for parameter t."""
        offsets = np.array([o for o, _ in self.stops], dtype=np.float64)
        cols = np.array([c for _, c in self.stops], dtype=np.float64)
        alpha = np.interp(t, offsets, cols[:, 3])
        premult = [np.interp(t, offsets, cols[:, k] * cols[:, 3]) for k in range(3)]
        return np.stack(premult, axis=-1), alpha

    def _copy_stops(self, other: Gradient) -> Gradient:
        other.stops = list(self.stops)
        return other

    def fades_out(self) -> bool:
        return bool(self.stops) and self.stops[-1][1][3] <= 0.0


class LinearGradient(Gradient):
    def __init__(self, x0: float, y0: float, x1: float, y1: float):
        super().__init__()
        self.x0, self.y0, self.x1, self.y1 = x0, y0, x1, y1

    def transformed(self, m: Matrix) -> LinearGradient:
        x0, y0 = apply_matrix(m, self.x0, self.y0)
        x1, y1 = apply_matrix(m, self.x1, self.y1)
        return self._copy_stops(LinearGradient(x0, y0, x1, y1))

    def parameter(self, px: np.ndarray, py: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        dx = self.x1 - self.x0
        dy = self.y1 - self.y0
        length2 = dx * dx + dy * dy
        if length2 == 0:
            return np.zeros_like(px), np.zeros(px.shape, dtype=bool)
        t = ((px - self.x0) * dx + (py - self.y0) * dy) / length2
        return t, np.ones(px.shape, dtype=bool)

    def bounds(self) -> tuple[float, float, float, float] | None:
        return None


class RadialGradient(Gradient):
    """Two-circle conical gradient from (x0, y0, r0) to (x1, y1, r1)."""

    def __init__(self, x0: float, y0: float, r0: float,
                 x1: float, y1: float, r1: float):
        super().__init__()
        self.x0, self.y0, self.r0 = x0, y0, r0
        self.x1, self.y1, self.r1 = x1, y1, r1

    def transformed(self, m: Matrix) -> RadialGradient:
        s = matrix_scale(m)
        x0, y0 = apply_matrix(m, self.x0, self.y0)
        x1, y1 = apply_matrix(m, self.x1, self.y1)
        return self._copy_stops(
            RadialGradient(x0, y0, self.r0 * s, x1, y1, self.r1 * s))

    def parameter(self, px: np.ndarray, py: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        cdx = self.x1 - self.x0
        cdy = self.y1 - self.y0
        dr = self.r1 - self.r0
        pdx = px - self.x0
        pdy = py - self.y0

        a = cdx * cdx + cdy * cdy - dr * dr
        b = pdx * cdx + pdy * cdy + self.r0 * dr
        c = pdx * pdx + pdy * pdy - self.r0 * self.r0

        if abs(a) < 1e-9:
            with np.errstate(divide="ignore", invalid="ignore"):
                t = np.where(b != 0, c / (2 * b), -np.inf)
            valid = np.isfinite(t) & (self.r0 + t * dr >= 0)
            return np.where(valid, t, 0.0), valid

        disc = b * b - a * c
        root = np.sqrt(np.maximum(disc, 0.0))
        t_hi = np.maximum((b + root) / a, (b - root) / a)
        t_lo = np.minimum((b + root) / a, (b - root) / a)
        hi_ok = self.r0 + t_hi * dr >= 0
        lo_ok = self.r0 + t_lo * dr >= 0
        t = np.where(hi_ok, t_hi, t_lo)
        valid = (disc >= 0) & (hi_ok | lo_ok)
        return np.where(valid, t, 0.0), valid

    def bounds(self) -> tuple[float, float, float, float] | None:
        """Extent outside which the paint is fully transparent, if known."""
        inner = math.hypot(self.x1 - self.x0, self.y1 - self.y0) + self.r0
        if not self.fades_out() or inner > self.r1:
            return None
        r = self.r1
        return (self.x1 - r, self.y1 - r, self.x1 + r, self.y1 + r)


Paint = Union[RGBA, Gradient]
