"""Draw Elements onto a DrawingSurface.

Each element is drawn in its own local frame: translate to (x, y), rotate,
and scale unit-frame shape coordinates by half the element size.  Filled
shapes get a radial highlight/shadow gradient whose centre is offset toward
the light; stroke-only elements get a flat, slightly lighter stroke; an
optional darker outline pass gives the inked look.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from genera.art.palettes import hsl
from genera.canvas.paint import Paint
from genera.canvas.surface import DrawingSurface
from genera.core.rng import TAU, clamp
from genera.shapes.primitives import (
    Blob,
    Circle,
    CloudCluster,
    Cross,
    Element,
    Petal,
    Polygon,
    Rings,
    Target,
)


@dataclass
class _Style:
    """Per-element paint decisions shared by all shape painters."""
    surface: DrawingSurface
    el: Element
    half: float
    light_dx: float
    light_dy: float
    light_intensity: float
    gradient_shapes: bool
    outline_weight: float

    @property
    def draw_outline(self) -> bool:
        return self.outline_weight > 0 and not self.el.stroke_only

    @property
    def outline_width(self) -> float:
        return max(0.5, self.outline_weight * 3)

    def outline_color(self) -> Paint:
        h, s, l = self.el.color
        return hsl(h, s * 0.7, max(5, l - 25))

    def stroke_color(self) -> Paint:
        h, s, l = self.el.color
        return hsl(h, s, min(90, l + 12))

    def fill_paint(self) -> Paint:
        h, s, l = self.el.color
        if not self.gradient_shapes or self.el.stroke_only:
            return hsl(h, s, l)
        k = self.half * 0.3 * self.light_intensity
        grad = self.surface.create_radial_gradient(
            self.light_dx * k, self.light_dy * k, 0, 0, 0, self.half)
        grad.add_color_stop(0, hsl(h, min(100, s * 1.1), min(97, l + self.light_intensity * 25)))
        grad.add_color_stop(0.5, hsl(h, s, l))
        grad.add_color_stop(1, hsl(h, s * 0.8, max(5, l - self.light_intensity * 20)))
        return grad

    def fill_and_outline(self) -> None:
        surface = self.surface
        if self.el.stroke_only:
            surface.line_width = self.el.line_width
            surface.stroke(self.stroke_color())
            return
        surface.fill(self.fill_paint())
        if self.draw_outline:
            surface.line_width = self.outline_width
            surface.stroke(self.outline_color())


# ------------------------------------------------------------------
# Shape painters
# ------------------------------------------------------------------

def _paint_circle(st: _Style, shape: Circle) -> None:
    st.surface.begin_path()
    st.surface.arc(0, 0, st.half, 0, TAU)
    st.fill_and_outline()


def _paint_polygon(st: _Style, shape: Polygon) -> None:
    surface = st.surface
    half = st.half
    surface.begin_path()
    for i, (px, py) in enumerate(shape.points):
        if i == 0:
            surface.move_to(px * half, py * half)
        else:
            surface.line_to(px * half, py * half)
    surface.close_path()
    st.fill_and_outline()


def _paint_blob(st: _Style, shape: Blob) -> None:
    surface = st.surface
    half = st.half
    cps = shape.controls
    surface.begin_path()
    surface.move_to(cps[0].x * half, cps[0].y * half)
    for i, cp in enumerate(cps):
        nxt = cps[(i + 1) % len(cps)]
        surface.quadratic_curve_to(cp.cpx * half, cp.cpy * half, nxt.x * half, nxt.y * half)
    surface.close_path()
    st.fill_and_outline()


def _paint_rings(st: _Style, shape: Rings) -> None:
    surface = st.surface
    h, s, l = st.el.color
    for ring in shape.rings:
        surface.begin_path()
        surface.arc(0, 0, ring.r * st.half, 0, TAU)
        surface.line_width = ring.lw * st.el.size
        surface.stroke(hsl(h, s, l))


def _paint_target(st: _Style, shape: Target) -> None:
    surface = st.surface
    h, s, l = st.el.color
    li = st.light_intensity
    # Outermost disc first so inner discs paint over it.
    for i in range(shape.rings, 0, -1):
        r = i / shape.rings * st.half
        surface.begin_path()
        surface.arc(0, 0, r, 0, TAU)
        tl = min(95, l + 20) if i % 2 == 0 else max(10, l - 15)
        if st.gradient_shapes and not st.el.stroke_only:
            k = r * 0.2 * li
            fill = surface.create_radial_gradient(st.light_dx * k, st.light_dy * k, 0, 0, 0, r)
            fill.add_color_stop(0, hsl(h, s, min(97, tl + li * 15)))
            fill.add_color_stop(1, hsl(h, s * 0.9, tl))
        else:
            fill = hsl(h, s, tl)
        surface.fill(fill)
        surface.line_width = st.outline_width if st.draw_outline else 0.8
        surface.stroke(hsl(h, s * 0.6, max(5, tl - 10)))


def _paint_cross(st: _Style, shape: Cross) -> None:
    surface = st.surface
    size = st.el.size
    half = st.half
    t = shape.thickness * size
    h, s, l = st.el.color
    bars = ((-half, -t / 2, size, t), (-t / 2, -half, t, size))
    for bar in bars:
        surface.fill_rect(*bar, hsl(h, s, l))
    if st.draw_outline:
        surface.line_width = st.outline_width
        for bar in bars:
            surface.stroke_rect(*bar, st.outline_color())


def _paint_cloud_cluster(st: _Style, shape: CloudCluster) -> None:
    surface = st.surface
    half = st.half
    fill = st.fill_paint()
    for c in shape.circles:
        surface.begin_path()
        surface.arc(c.cx * half, c.cy * half, c.r * half, 0, TAU)
        if st.el.stroke_only:
            surface.line_width = st.el.line_width
            surface.stroke(st.stroke_color())
        else:
            surface.fill(fill)
            # Clusters are outlined even when outline_weight is 0.
            surface.line_width = max(0.5, st.outline_width * 0.7)
            surface.stroke(st.outline_color())


def _paint_petal(st: _Style, shape: Petal) -> None:
    surface = st.surface
    tip_y = -st.half
    base_y = st.half * shape.taper
    bulge_x = st.half * shape.bulge
    surface.begin_path()
    surface.move_to(0, tip_y)
    surface.bezier_curve_to(bulge_x * 0.6, tip_y * 0.5, bulge_x, base_y * 0.2, 0, base_y)
    surface.bezier_curve_to(-bulge_x, base_y * 0.2, -bulge_x * 0.6, tip_y * 0.5, 0, tip_y)
    surface.close_path()
    st.fill_and_outline()


_SHAPE_PAINTERS: dict[type, Callable] = {
    Circle: _paint_circle,
    Polygon: _paint_polygon,
    Blob: _paint_blob,
    Rings: _paint_rings,
    Target: _paint_target,
    Cross: _paint_cross,
    CloudCluster: _paint_cloud_cluster,
    Petal: _paint_petal,
}


def render_element(surface: DrawingSurface, el: Element, light_angle: float,
                   light_intensity: float, gradient_shapes: bool,
                   outline_weight: float = 0) -> None:
    """Draw one element.  ``light_angle`` is in radians.

    Surface state (transform, alpha, line width) is saved and restored
    around the element.
    """
    painter = _SHAPE_PAINTERS.get(type(el.shape))
    if painter is None:
        raise ValueError(
            f"Unknown shape variant: {type(el.shape).__name__!r}. "
            f"Available: {[cls.__name__ for cls in _SHAPE_PAINTERS]}"
        )
    surface.save()
    try:
        surface.translate(el.x, el.y)
        surface.rotate(el.rotation)
        surface.global_alpha = clamp(el.opacity, 0, 1)
        st = _Style(
            surface=surface,
            el=el,
            half=el.size / 2,
            light_dx=math.cos(light_angle),
            light_dy=math.sin(light_angle),
            light_intensity=light_intensity,
            gradient_shapes=gradient_shapes,
            outline_weight=outline_weight,
        )
        painter(st, el.shape)
    finally:
        surface.restore()
