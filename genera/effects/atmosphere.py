"""Atmospheric effects.

Rays, clouds and blooms sit behind the shape layers; ribbons weave over
the finished composition.  Every effect takes an intensity in [0, 1] that
scales both its repetition count and its alpha.
"""

from __future__ import annotations

import math

from genera.art.palettes import HSL, TRANSPARENT, hsla, rgba
from genera.canvas.surface import DrawingSurface
from genera.core.rng import TAU, DeterministicRNG, lerp, round_half_up


def _repeats(intensity: float, scale: int) -> int:
    return max(0, round_half_up(intensity * scale))


# ------------------------------------------------------------------
# Soft clouds
# ------------------------------------------------------------------

def draw_clouds(surface: DrawingSurface, rng: DeterministicRNG, width: float,
                height: float, palette: list[HSL], intensity: float) -> None:
    min_dim = min(width, height)
    max_dim = max(width, height)
    for _ in range(_repeats(intensity, 8)):
        h, s, l = rng.pick(palette)
        cx = rng.uniform(width * -0.1, width * 1.1)
        cy = rng.uniform(height * -0.1, height * 1.1)
        radius = rng.uniform(min_dim * 0.2, max_dim * 0.6)
        alpha = rng.uniform(0.06, 0.18) * intensity
        sat = s * 0.4

        grad = surface.create_radial_gradient(cx, cy, 0, cx, cy, radius)
        grad.add_color_stop(0, hsla(h, sat, l, alpha))
        grad.add_color_stop(0.4, hsla(h, sat * 0.8, l, alpha * 0.6))
        grad.add_color_stop(0.7, hsla(h, sat * 0.5, l, alpha * 0.2))
        grad.add_color_stop(1, TRANSPARENT)
        surface.fill_rect(0, 0, width, height, grad)


# ------------------------------------------------------------------
# Aurora ribbons
# ------------------------------------------------------------------

def _trace_ribbon(surface: DrawingSurface, pts: list[tuple[float, float]]) -> None:
    surface.begin_path()
    surface.move_to(*pts[0])
    if len(pts) == 3:
        surface.quadratic_curve_to(*pts[1], *pts[2])
        return
    # Pairs after the first point are (control, end); a lone trailing
    # point is joined with a straight segment.
    for j in range(1, len(pts) - 1, 2):
        end = pts[j + 1] if j + 1 < len(pts) else pts[j]
        surface.quadratic_curve_to(*pts[j], *end)
    if len(pts) % 2 == 0:
        surface.line_to(*pts[-1])


def draw_ribbons(surface: DrawingSurface, rng: DeterministicRNG, width: float,
                 height: float, palette: list[HSL], intensity: float) -> None:
    for _ in range(_repeats(intensity, 5)):
        h, s, l = rng.pick(palette)
        sat = s * 0.5
        base_width = rng.uniform(20, 80)
        cp_count = rng.uniform_int(3, 5)
        pts = [
            (rng.uniform(width * -0.1, width * 1.1), rng.uniform(height * -0.1, height * 1.1))
            for _ in range(cp_count)
        ]

        passes = rng.uniform_int(5, 8)
        for p in range(passes):
            surface.save()
            surface.global_alpha = lerp(0.12, 0.02, p / passes) * intensity
            surface.line_width = base_width * lerp(0.3, 2.5, p / passes)
            surface.line_cap = "round"
            surface.line_join = "round"
            if p == 0:
                surface.shadow_blur = rng.uniform(20, 60)
                surface.shadow_color = hsla(h, sat, l, 0.3)
            _trace_ribbon(surface, pts)
            surface.stroke(hsla(h, sat, l, 1))
            surface.restore()


# ------------------------------------------------------------------
# Ink blooms
# ------------------------------------------------------------------

def draw_blooms(surface: DrawingSurface, rng: DeterministicRNG, width: float,
                height: float, palette: list[HSL], intensity: float) -> None:
    for _ in range(_repeats(intensity, 6)):
        h, s, l = rng.pick(palette)
        cx = rng.uniform(width * 0.05, width * 0.95)
        cy = rng.uniform(height * 0.05, height * 0.95)
        cluster_radius = rng.uniform(30, min(width, height) * 0.2)
        circle_count = rng.uniform_int(8, 25)
        sat = s * 0.5

        for _ in range(circle_count):
            # Sum of two uniforms: triangular spread around the centre.
            dx = (rng.next() + rng.next() - 1) * cluster_radius
            dy = (rng.next() + rng.next() - 1) * cluster_radius
            r = rng.uniform(10, 60)
            alpha = rng.uniform(0.03, 0.08) * intensity

            grad = surface.create_radial_gradient(cx + dx, cy + dy, 0, cx + dx, cy + dy, r)
            grad.add_color_stop(0, hsla(h, sat, l, alpha))
            grad.add_color_stop(0.5, hsla(h, sat * 0.7, l, alpha * 0.5))
            grad.add_color_stop(1, TRANSPARENT)
            surface.fill_rect(0, 0, width, height, grad)


# ------------------------------------------------------------------
# Volumetric light rays
# ------------------------------------------------------------------

def draw_light_rays(surface: DrawingSurface, rng: DeterministicRNG, width: float,
                    height: float, light_angle: float, intensity: float) -> None:
    """Additive light shafts fanning in from a source beyond the canvas edge.

    ``light_angle`` is in degrees.
    """
    count = _repeats(intensity, 12)
    if count == 0:
        return

    light_rad = light_angle / 360 * TAU
    reach = max(width, height) * 0.6
    source_x = width / 2 + math.cos(light_rad) * reach
    source_y = height / 2 + math.sin(light_rad) * reach
    max_len = math.hypot(width, height) * 1.2

    surface.save()
    surface.composite = "lighter"
    for _ in range(count):
        ray_angle = light_rad + math.pi + rng.uniform(-0.5, 0.5)
        spread = rng.uniform(0.01, 0.06)
        length = rng.uniform(max_len * 0.4, max_len)
        alpha = rng.uniform(0.02, 0.05) * intensity

        end_x = source_x + math.cos(ray_angle) * length
        end_y = source_y + math.sin(ray_angle) * length
        half_w = length * spread
        left = (end_x + math.cos(ray_angle + math.pi / 2) * half_w,
                end_y + math.sin(ray_angle + math.pi / 2) * half_w)
        right = (end_x + math.cos(ray_angle - math.pi / 2) * half_w,
                 end_y + math.sin(ray_angle - math.pi / 2) * half_w)

        grad = surface.create_linear_gradient(source_x, source_y, end_x, end_y)
        grad.add_color_stop(0, rgba(255, 248, 230, alpha))
        grad.add_color_stop(0.3, rgba(255, 240, 210, alpha * 0.6))
        grad.add_color_stop(1, TRANSPARENT)

        surface.begin_path()
        surface.move_to(source_x, source_y)
        surface.line_to(*left)
        surface.line_to(*right)
        surface.close_path()
        surface.fill(grad)
    surface.restore()
