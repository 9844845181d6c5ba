"""Freehand painting with generative brushes.

A host application turns pointer movement into dabs: ``interpolate_points``
fills in evenly spaced points between two pointer samples, and
``paint_at_point`` stamps one dab at each.  Every dab gets its own RNG,
seeded from the session's running counter, so a stroke replays identically
from the same starting counter.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Callable, Literal, NamedTuple, get_args

from genera.art.palettes import HSL, color_pool, gen_palette, hsl
from genera.canvas.surface import DrawingSurface
from genera.core.rng import TAU, DeterministicRNG, round_half_up
from genera.effects.linework import bead_paint
from genera.shapes.primitives import Element, make_shape
from genera.shapes.renderer import render_element

BrushType = Literal["scatter", "chain", "spray", "eraser"]
BRUSH_TYPES: tuple[str, ...] = get_args(BrushType)

MIN_SPACING = 2.0
_MAX_RESEED = 999999

_OPAQUE: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)


class Point(NamedTuple):
    x: float
    y: float


def interpolate_points(start: Point, end: Point, spacing: float) -> list[Point]:
    """Evenly spaced points from ``start`` (exclusive) to ``end`` (inclusive)."""
    spacing = max(MIN_SPACING, spacing)
    dx = end.x - start.x
    dy = end.y - start.y
    dist = math.hypot(dx, dy)
    if dist < spacing:
        return [Point(end.x, end.y)]
    steps = int(math.ceil(dist / spacing))
    return [Point(start.x + dx * i / steps, start.y + dy * i / steps)
            for i in range(1, steps + 1)]


@dataclass
class BrushContext:
    brush_type: str = "scatter"
    brush_size: float = 40.0
    opacity: float = 0.8
    palette: list[HSL] = field(default_factory=list)
    complexity: float = 0.5
    organicness: float = 0.3
    light_angle: float = 315.0      # degrees
    light_intensity: float = 0.5
    gradient_shapes: bool = True

    def __post_init__(self):
        if self.brush_type not in BRUSH_TYPES:
            raise ValueError(f"Unknown brush type: {self.brush_type!r}. Available: {list(BRUSH_TYPES)}")
        if not self.palette and self.brush_type != "eraser":
            raise ValueError(f"Brush {self.brush_type!r} needs a non-empty palette")

    @property
    def light_rad(self) -> float:
        return self.light_angle / 360 * TAU


class BrushSession:
    """Owns the dab counter for one painting session."""

    def __init__(self, counter: int = 0):
        self.counter = counter

    def next_seed(self) -> int:
        self.counter += 1
        return self.counter

    def reseed(self, seed: int | None = None) -> int:
        """Restart the counter at ``seed``, or at a random value when omitted."""
        self.counter = random.randrange(_MAX_RESEED) if seed is None else seed
        return self.counter


# ------------------------------------------------------------------
# Brushes
# ------------------------------------------------------------------

def _paint_scatter(surface: DrawingSurface, point: Point, bc: BrushContext, seed: int) -> None:
    rng = DeterministicRNG(seed)
    sample_color = color_pool(bc.palette, rng)
    shape_count = max(1, round_half_up(1 + rng.next() * 2))
    for _ in range(shape_count):
        shape = make_shape(rng, bc.complexity, bc.organicness)
        size = bc.brush_size * rng.uniform(0.3, 1)
        offset_x = (rng.next() - 0.5) * bc.brush_size * 0.5
        offset_y = (rng.next() - 0.5) * bc.brush_size * 0.5
        rotation = rng.uniform(0, TAU)
        color = sample_color()
        opacity = bc.opacity * rng.uniform(0.5, 1)
        stroke_only = rng.next() < 0.2
        line_width = rng.uniform(0.8, 2.5)
        el = Element(shape, point.x + offset_x, point.y + offset_y, rotation, size,
                     color, opacity, stroke_only, line_width)
        render_element(surface, el, bc.light_rad, bc.light_intensity, bc.gradient_shapes)


def _paint_chain(surface: DrawingSurface, point: Point, bc: BrushContext, seed: int) -> None:
    rng = DeterministicRNG(seed)
    color = rng.pick(bc.palette)
    bead_size = bc.brush_size * rng.uniform(0.08, 0.2)
    surface.save()
    surface.global_alpha = bc.opacity * rng.uniform(0.6, 1)
    paint = bead_paint(surface, point.x, point.y, bead_size, color,
                       bc.light_rad, bc.light_intensity, bc.gradient_shapes)
    surface.begin_path()
    surface.arc(point.x, point.y, bead_size * (0.7 + rng.next() * 0.3), 0, TAU)
    surface.fill(paint)
    surface.restore()


def _paint_spray(surface: DrawingSurface, point: Point, bc: BrushContext, seed: int) -> None:
    rng = DeterministicRNG(seed)
    count = max(3, round_half_up(bc.brush_size * 0.3))
    radius = bc.brush_size / 2
    for _ in range(count):
        angle = rng.uniform(0, TAU)
        dist = rng.uniform(0, radius) * rng.next()
        h, s, l = rng.pick(bc.palette)
        dot = rng.uniform(1, 4)
        surface.save()
        surface.global_alpha = bc.opacity * rng.uniform(0.15, 0.5)
        surface.begin_path()
        surface.arc(point.x + math.cos(angle) * dist, point.y + math.sin(angle) * dist,
                    dot, 0, TAU)
        surface.fill(hsl(h, s, l))
        surface.restore()


def _paint_eraser(surface: DrawingSurface, point: Point, bc: BrushContext, seed: int) -> None:
    surface.save()
    surface.composite = "destination-out"
    surface.global_alpha = bc.opacity
    surface.begin_path()
    surface.arc(point.x, point.y, bc.brush_size / 2, 0, TAU)
    surface.fill(_OPAQUE)
    surface.restore()


_BRUSHES: dict[str, Callable[[DrawingSurface, Point, BrushContext, int], None]] = {
    "scatter": _paint_scatter,
    "chain": _paint_chain,
    "spray": _paint_spray,
    "eraser": _paint_eraser,
}


def paint_at_point(surface: DrawingSurface, point: Point, bc: BrushContext,
                   session: BrushSession) -> int:
    """Stamp one dab; returns the seed it used.  The eraser consumes a seed too."""
    seed = session.next_seed()
    _BRUSHES[bc.brush_type](surface, point, bc, seed)
    return seed


def palette_for_drawing(mode: str, seed: int) -> list[HSL]:
    return gen_palette(DeterministicRNG(seed), mode)
