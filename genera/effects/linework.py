"""Linework drawn over the shape layers: bead chains, tangles, glyphs."""

from __future__ import annotations

import math

from genera.art.palettes import HSL, hsl
from genera.canvas.paint import Paint
from genera.canvas.surface import DrawingSurface
from genera.core.noise import NoiseField
from genera.core.rng import TAU, DeterministicRNG, clamp

GLYPHS = ("×", "+", "•", "1", "2", "3", "4", "5", "6", "7", "8", "9", "0")
GLYPH_SIZES = (8, 10, 12, 14, 18, 22, 28)


def bead_paint(surface: DrawingSurface, x: float, y: float, size: float,
               color: HSL, light_angle: float, light_intensity: float,
               gradient_shapes: bool) -> Paint:
    """Shaded fill for a single bead centred on (x, y); ``light_angle`` in radians."""
    h, s, l = color
    if not gradient_shapes:
        return hsl(h, s, l)
    k = size * 0.2 * light_intensity
    grad = surface.create_radial_gradient(
        x + math.cos(light_angle) * k, y + math.sin(light_angle) * k, 0, x, y, size)
    grad.add_color_stop(0, hsl(h, s, min(97, l + 20)))
    grad.add_color_stop(1, hsl(h, s * 0.8, max(10, l - 10)))
    return grad


def draw_bead_chain(surface: DrawingSurface, rng: DeterministicRNG, noise: NoiseField,
                    width: float, height: float, color: HSL, light_angle: float,
                    light_intensity: float, gradient_shapes: bool) -> None:
    """A trail of beads that steers along the noise field, fading in as it goes."""
    x = rng.uniform(0, width)
    y = rng.uniform(0, height)
    bead_count = rng.uniform_int(15, 80)
    bead_size = rng.uniform(2, 6)
    spacing = rng.uniform(5, 12)
    angle = rng.uniform(0, TAU)
    curvature = rng.uniform(0.02, 0.12)

    for i in range(bead_count):
        angle += (noise(x * 0.008, y * 0.008) - 0.5) * curvature * 2

        surface.save()
        surface.global_alpha = clamp(0.6 + i / bead_count * 0.3, 0, 1)
        paint = bead_paint(surface, x, y, bead_size, color, light_angle,
                           light_intensity, gradient_shapes)
        surface.begin_path()
        surface.arc(x, y, bead_size * (0.6 + rng.next() * 0.4), 0, TAU)
        surface.fill(paint)
        surface.restore()

        x += math.cos(angle) * spacing
        y += math.sin(angle) * spacing


def _steer(rng: DeterministicRNG, noise: NoiseField, x: float, y: float,
           angle: float) -> float:
    return angle + (noise(x * 0.006, y * 0.006) - 0.5) * 1.8 + (rng.next() - 0.5) * 0.6


def draw_tangles(surface: DrawingSurface, rng: DeterministicRNG, noise: NoiseField,
                 width: float, height: float, palette: list[HSL], count: int,
                 outline_weight: float) -> None:
    """Wandering bezier threads, each followed by a separate walk of node dots."""
    for _ in range(count):
        h, s, l = rng.pick(palette)
        segs = rng.uniform_int(8, 30)
        x = rng.uniform(width * -0.1, width * 1.1)
        y = rng.uniform(height * -0.1, height * 1.1)
        angle = rng.uniform(0, TAU)
        line_width = rng.uniform(0.5, 2.5 + outline_weight * 2)
        drift = rng.uniform(30, 120)

        surface.save()
        surface.global_alpha = clamp(rng.uniform(0.3, 0.85), 0, 1)
        surface.line_width = line_width
        surface.line_cap = "round"
        surface.line_join = "round"
        surface.begin_path()
        surface.move_to(x, y)
        for _ in range(segs):
            angle = _steer(rng, noise, x, y, angle)
            step = drift * (0.5 + rng.next())
            cp1x = x + math.cos(angle + rng.next() * 0.8) * step * 0.6
            cp1y = y + math.sin(angle + rng.next() * 0.8) * step * 0.6
            nx = x + math.cos(angle) * step
            ny = y + math.sin(angle) * step
            cp2x = nx - math.cos(angle + rng.next() * 0.8) * step * 0.3
            cp2y = ny - math.sin(angle + rng.next() * 0.8) * step * 0.3
            surface.bezier_curve_to(cp1x, cp1y, cp2x, cp2y, nx, ny)
            x, y = nx, ny
        surface.stroke(hsl(h, s * 0.9, l))

        if outline_weight > 0.2:
            surface.line_width = line_width + outline_weight * 1.5
            surface.global_alpha = surface.global_alpha * 0.3
            surface.stroke(hsl(h, s * 0.6, max(5, l - 20)))
        surface.restore()

        node_chance = 0.3 + outline_weight * 0.3
        x = rng.uniform(width * -0.1, width * 1.1)
        y = rng.uniform(height * -0.1, height * 1.1)
        angle = rng.uniform(0, TAU)
        for _ in range(segs):
            angle = _steer(rng, noise, x, y, angle)
            step = drift * (0.5 + rng.next())
            x += math.cos(angle) * step
            y += math.sin(angle) * step
            if rng.next() >= node_chance:
                continue
            radius = rng.uniform(1.5, 5)
            surface.save()
            surface.global_alpha = rng.uniform(0.4, 0.9)
            surface.begin_path()
            surface.arc(x, y, radius, 0, TAU)
            surface.fill(hsl(h, s, min(95, l + 15)))
            if outline_weight > 0:
                surface.line_width = max(0.3, outline_weight)
                surface.stroke(hsl(h, s * 0.7, max(5, l - 20)))
            surface.restore()


def draw_glyph_scatter(surface: DrawingSurface, rng: DeterministicRNG, width: float,
                       height: float, palette: list[HSL], count: int) -> None:
    for _ in range(count):
        x = rng.uniform(-20, width + 20)
        y = rng.uniform(-20, height + 20)
        char = rng.pick(GLYPHS)
        size = rng.pick(GLYPH_SIZES)
        h, s, l = rng.pick(palette)
        opacity = rng.uniform(0.15, 0.65)

        surface.save()
        surface.translate(x, y)
        surface.rotate(rng.uniform(-0.4, 0.4))
        surface.global_alpha = opacity
        surface.fill_text(char, 0, 0, size, hsl(h, s, l))
        surface.restore()
