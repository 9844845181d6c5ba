"""Abstract 2D drawing surface.

The generator talks to output backends only through this interface: a
state stack (transform, alpha, composite operation, line style, shadow),
path construction, fill / stroke with solid or gradient paints, and text.

Paths are flattened to device-space polylines here, so a backend only has
to implement the four ``_``-prefixed primitives.
"""

from __future__ import annotations

import abc
import math
from dataclasses import dataclass, field, replace

from genera.canvas.paint import (
    IDENTITY,
    Gradient,
    LinearGradient,
    Matrix,
    Paint,
    RadialGradient,
    RGBA,
    apply_matrix,
    matrix_scale,
)

# Max device-space length of one flattened curve segment, in pixels
FLATTEN_STEP = 2.0
_MIN_CURVE_SEGMENTS = 4
_MAX_CURVE_SEGMENTS = 64
_MIN_ARC_SEGMENTS = 12
_MAX_ARC_SEGMENTS = 360

_TAU = math.pi * 2


@dataclass
class DrawState:
    matrix: Matrix = IDENTITY
    global_alpha: float = 1.0
    composite: str = "source-over"
    line_width: float = 1.0
    line_cap: str = "butt"
    line_join: str = "miter"
    shadow_blur: float = 0.0
    shadow_color: RGBA = (0.0, 0.0, 0.0, 0.0)


@dataclass
class Subpath:
    points: list[tuple[float, float]] = field(default_factory=list)
    closed: bool = False


def _curve_segments(*pts: tuple[float, float]) -> int:
    hull = sum(math.hypot(q[0] - p[0], q[1] - p[1]) for p, q in zip(pts, pts[1:]))
    n = int(hull / FLATTEN_STEP) + 1
    return max(_MIN_CURVE_SEGMENTS, min(_MAX_CURVE_SEGMENTS, n))


class DrawingSurface(abc.ABC):
    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self._state = DrawState()
        self._stack: list[DrawState] = []
        self._path: list[Subpath] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def save(self) -> None:
        self._stack.append(replace(self._state))

    def restore(self) -> None:
        if self._stack:
            self._state = self._stack.pop()

    @property
    def global_alpha(self) -> float:
        return self._state.global_alpha

    @global_alpha.setter
    def global_alpha(self, value: float) -> None:
        if 0.0 <= value <= 1.0:
            self._state.global_alpha = value

    @property
    def composite(self) -> str:
        return self._state.composite

    @composite.setter
    def composite(self, op: str) -> None:
        self._state.composite = op

    @property
    def line_width(self) -> float:
        return self._state.line_width

    @line_width.setter
    def line_width(self, value: float) -> None:
        if value > 0 and math.isfinite(value):
            self._state.line_width = value

    @property
    def line_cap(self) -> str:
        return self._state.line_cap

    @line_cap.setter
    def line_cap(self, cap: str) -> None:
        self._state.line_cap = cap

    @property
    def line_join(self) -> str:
        return self._state.line_join

    @line_join.setter
    def line_join(self, join: str) -> None:
        if join in ("miter", "round"):
            self._state.line_join = join

    @property
    def shadow_blur(self) -> float:
        return self._state.shadow_blur

    @shadow_blur.setter
    def shadow_blur(self, value: float) -> None:
        if value >= 0:
            self._state.shadow_blur = value

    @property
    def shadow_color(self) -> RGBA:
        return self._state.shadow_color

    @shadow_color.setter
    def shadow_color(self, color: RGBA) -> None:
        self._state.shadow_color = tuple(color)

    def translate(self, dx: float, dy: float) -> None:
        a, b, c, d, e, f = self._state.matrix
        self._state.matrix = (a, b, c, d, a * dx + c * dy + e, b * dx + d * dy + f)

    def rotate(self, angle: float) -> None:
        a, b, c, d, e, f = self._state.matrix
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        self._state.matrix = (
            a * cos_a + c * sin_a, b * cos_a + d * sin_a,
            c * cos_a - a * sin_a, d * cos_a - b * sin_a,
            e, f,
        )

    def _map(self, x: float, y: float) -> tuple[float, float]:
        return apply_matrix(self._state.matrix, x, y)

    # ------------------------------------------------------------------
    # Path construction
    # ------------------------------------------------------------------

    def begin_path(self) -> None:
        self._path = []

    def move_to(self, x: float, y: float) -> None:
        self._path.append(Subpath([self._map(x, y)]))

    def _ensure_subpath(self, x: float, y: float) -> tuple[float, float] | None:
        """Current device point, or None after starting a fresh subpath."""
        if not self._path or not self._path[-1].points:
            self.move_to(x, y)
            return None
        sp = self._path[-1]
        if sp.closed:
            self._path.append(Subpath([sp.points[0]]))
        return self._path[-1].points[-1]

    def line_to(self, x: float, y: float) -> None:
        if self._ensure_subpath(x, y) is None:
            return
        self._path[-1].points.append(self._map(x, y))

    def close_path(self) -> None:
        if self._path and self._path[-1].points:
            self._path[-1].closed = True

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None:
        p0 = self._ensure_subpath(cpx, cpy)
        if p0 is None:
            p0 = self._path[-1].points[-1]
        p1 = self._map(cpx, cpy)
        p2 = self._map(x, y)
        n = _curve_segments(p0, p1, p2)
        pts = self._path[-1].points
        for i in range(1, n + 1):
            t = i / n
            u = 1 - t
            pts.append((
                u * u * p0[0] + 2 * u * t * p1[0] + t * t * p2[0],
                u * u * p0[1] + 2 * u * t * p1[1] + t * t * p2[1],
            ))

    def bezier_curve_to(self, cp1x: float, cp1y: float, cp2x: float, cp2y: float,
                        x: float, y: float) -> None:
        p0 = self._ensure_subpath(cp1x, cp1y)
        if p0 is None:
            p0 = self._path[-1].points[-1]
        p1 = self._map(cp1x, cp1y)
        p2 = self._map(cp2x, cp2y)
        p3 = self._map(x, y)
        n = _curve_segments(p0, p1, p2, p3)
        pts = self._path[-1].points
        for i in range(1, n + 1):
            t = i / n
            u = 1 - t
            w0, w1, w2, w3 = u * u * u, 3 * u * u * t, 3 * u * t * t, t * t * t
            pts.append((
                w0 * p0[0] + w1 * p1[0] + w2 * p2[0] + w3 * p3[0],
                w0 * p0[1] + w1 * p1[1] + w2 * p2[1] + w3 * p3[1],
            ))

    def arc(self, cx: float, cy: float, r: float, start: float, end: float) -> None:
        """Clockwise arc; a sweep of a full turn or more draws a whole circle."""
        r = max(0.0, r)
        sweep = end - start
        full = sweep >= _TAU
        sweep = _TAU if full else sweep % _TAU
        radius_px = r * matrix_scale(self._state.matrix)
        n = int(math.ceil(sweep * radius_px / FLATTEN_STEP))
        n = max(_MIN_ARC_SEGMENTS, min(_MAX_ARC_SEGMENTS, n))

        sx = cx + math.cos(start) * r
        sy = cy + math.sin(start) * r
        fresh = not self._path or not self._path[-1].points or self._path[-1].closed
        if fresh:
            self.move_to(sx, sy)
        else:
            self.line_to(sx, sy)
        pts = self._path[-1].points
        for i in range(1, n + 1):
            a = start + sweep * i / n
            pts.append(self._map(cx + math.cos(a) * r, cy + math.sin(a) * r))
        if full and fresh:
            self._path[-1].closed = True

    def _rect_points(self, x: float, y: float, w: float, h: float) -> list[tuple[float, float]]:
        return [self._map(x, y), self._map(x + w, y),
                self._map(x + w, y + h), self._map(x, y + h)]

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def create_linear_gradient(self, x0: float, y0: float,
                               x1: float, y1: float) -> LinearGradient:
        return LinearGradient(x0, y0, x1, y1)

    def create_radial_gradient(self, x0: float, y0: float, r0: float,
                               x1: float, y1: float, r1: float) -> RadialGradient:
        return RadialGradient(x0, y0, r0, x1, y1, r1)

    def _device_paint(self, paint: Paint) -> Paint | None:
        if isinstance(paint, Gradient):
            if not paint.stops:
                return None
            return paint.transformed(self._state.matrix)
        return tuple(paint)

    def fill(self, paint: Paint) -> None:
        device = self._device_paint(paint)
        subpaths = [sp for sp in self._path if len(sp.points) >= 3]
        if device is not None and subpaths:
            self._fill_subpaths(subpaths, device)

    def stroke(self, paint: Paint) -> None:
        device = self._device_paint(paint)
        subpaths = [sp for sp in self._path if len(sp.points) >= 2]
        if device is not None and subpaths:
            width = self._state.line_width * matrix_scale(self._state.matrix)
            self._stroke_subpaths(subpaths, device, width)

    def fill_rect(self, x: float, y: float, w: float, h: float, paint: Paint) -> None:
        device = self._device_paint(paint)
        if device is not None and w != 0 and h != 0:
            self._fill_subpaths([Subpath(self._rect_points(x, y, w, h), True)], device)

    def stroke_rect(self, x: float, y: float, w: float, h: float, paint: Paint) -> None:
        device = self._device_paint(paint)
        if device is not None:
            width = self._state.line_width * matrix_scale(self._state.matrix)
            self._stroke_subpaths([Subpath(self._rect_points(x, y, w, h), True)],
                                  device, width)

    def fill_text(self, text: str, x: float, y: float, size: float, paint: Paint) -> None:
        """Draw ``text`` centered on (x, y) at ``size`` px, following the transform."""
        device = self._device_paint(paint)
        if device is None or not text:
            return
        m = self._state.matrix
        dx, dy = apply_matrix(m, x, y)
        angle = math.atan2(m[1], m[0])
        self._fill_glyphs(text, dx, dy, size * matrix_scale(m), angle, device)

    # ------------------------------------------------------------------
    # Backend primitives
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def _fill_subpaths(self, subpaths: list[Subpath], paint: Paint) -> None:
        ...

    @abc.abstractmethod
    def _stroke_subpaths(self, subpaths: list[Subpath], paint: Paint,
                         width: float) -> None:
        ...

    @abc.abstractmethod
    def _fill_glyphs(self, text: str, x: float, y: float, size: float,
                     angle: float, paint: Paint) -> None:
        ...
