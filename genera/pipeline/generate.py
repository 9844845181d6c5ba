"""Composition pipeline.

One call to ``generate`` draws a complete composition for a
``(seed, params, width, height)`` triple.  All randomness flows from a
single DeterministicRNG, so the order of draws below is what makes output
reproducible:

  1. palette, colour pool
  2. background washes
  3. light rays, clouds, blooms
  4. shape layers (shape pool, cluster anchors, elements)
  5. bead chains, tangles, glyph scatter
  6. ribbons
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterator

from genera.art.coloring import ColorAssigner
from genera.art.palettes import HSL, color_pool, gen_palette
from genera.canvas.surface import DrawingSurface
from genera.core.noise import NoiseField
from genera.core.params import Params
from genera.core.rng import TAU, DeterministicRNG, clamp, lerp, round_half_up
from genera.effects.atmosphere import draw_blooms, draw_clouds, draw_light_rays, draw_ribbons
from genera.effects.background import draw_background
from genera.effects.linework import draw_bead_chain, draw_glyph_scatter, draw_tangles
from genera.shapes.layout import LayoutEngine
from genera.shapes.primitives import Element, make_shape
from genera.shapes.renderer import render_element
from genera.shapes.symmetry import replicate


@dataclass
class GenerationContext:
    """Per-call state: nothing here outlives a single ``generate``."""
    params: Params
    width: float
    height: float
    rng: DeterministicRNG
    noise: NoiseField
    palette: list[HSL]
    sample_color: Callable[[], HSL]


def prepare(seed: int, params: Params, width: float, height: float) -> GenerationContext:
    rng = DeterministicRNG(seed)
    noise = NoiseField(seed)
    palette = gen_palette(rng, params.palette_mode)
    sample_color = color_pool(palette, rng)
    return GenerationContext(params, width, height, rng, noise, palette, sample_color)


def element_count(density: float) -> int:
    """Total elements across all layers (before symmetry copies)."""
    if density <= 0:
        return 0
    return int(math.floor(25 + density * 975))


def layer_total(layer_count: float) -> int:
    return max(1, round_half_up(layer_count))


def iter_layers(ctx: GenerationContext) -> Iterator[list[Element]]:
    """Yield each layer's elements, symmetry copies included, sorted by ascending size.

    Draws from ``ctx.rng``; a layer's elements are fully built before it is
    yielded, so callers may render between iterations.
    """
    p = ctx.params
    w, h = ctx.width, ctx.height
    rng = ctx.rng
    layers = layer_total(p.layer_count)
    n = element_count(p.density) // layers
    layout = LayoutEngine(p.layout, rng, ctx.noise, w, h, p.noise_scale, p.noise_influence)
    colors = ColorAssigner(p.color_strategy, ctx.palette, ctx.sample_color, w, h)

    for layer in range(layers):
        layer_op = 1.0 if layers == 1 else 1 - (layer / layers) * p.layer_fade
        shape_pool = [make_shape(rng, p.complexity, p.organicness)
                      for _ in range(rng.uniform_int(3, 8))]
        layout.begin_layer()

        elements: list[Element] = []
        for i in range(n):
            shape = rng.pick(shape_pool)
            x, y = layout.place(i, n)
            flow = layout.flow(x, y)
            color = colors.color(flow.x, flow.y, flow.nv)

            osc = math.sin(i / n * p.oscillator_freq * TAU) * p.oscillator_amp
            base_size = lerp(p.size_min, p.size_max, rng.next()) * (0.8 + flow.nv2 * 0.5)
            size = max(2, base_size + osc * 20)
            opacity = clamp(
                lerp(p.opacity_min, p.opacity_max, rng.next()) * layer_op + osc * 0.08,
                0.02, 1,
            )
            rotation = (flow.angle * p.rotation_spread
                        + (rng.next() - 0.5) * (1 - p.rotation_spread) * TAU)
            stroke_only = rng.next() < p.stroke_ratio
            line_width = rng.uniform(0.8, 2.5)

            el = Element(shape, flow.x, flow.y, rotation, size, color,
                         opacity, stroke_only, line_width)
            elements.append(el)
            elements.extend(replicate(el, p.symmetry_mode, w, h))

        # Stable: equal sizes keep generation order.
        elements.sort(key=lambda e: e.size)
        yield elements


def draw_backdrop(surface: DrawingSurface, ctx: GenerationContext) -> None:
    """Background washes, then the atmosphere that sits behind the shape layers."""
    p = ctx.params
    rng = ctx.rng
    width, height = ctx.width, ctx.height

    draw_background(surface, width, height, ctx.palette, rng, False, p.bg_style)

    if p.atmo_rays > 0:
        draw_light_rays(surface, rng, width, height, p.light_angle, p.atmo_rays)
    if p.atmo_clouds > 0:
        draw_clouds(surface, rng, width, height, ctx.palette, p.atmo_clouds)
    if p.atmo_blooms > 0:
        draw_blooms(surface, rng, width, height, ctx.palette, p.atmo_blooms)


def draw_overlays(surface: DrawingSurface, ctx: GenerationContext) -> None:
    """Linework, then the ribbons that weave over the whole composition."""
    p = ctx.params
    rng = ctx.rng
    width, height = ctx.width, ctx.height
    light_rad = p.light_angle / 360 * TAU

    for _ in range(max(0, round_half_up(p.bead_chains * 8))):
        draw_bead_chain(surface, rng, ctx.noise, width, height, ctx.sample_color(),
                        light_rad, p.light_intensity, p.gradient_shapes)

    tangle_count = max(0, round_half_up(p.tangles * 12))
    if tangle_count > 0:
        draw_tangles(surface, rng, ctx.noise, width, height, ctx.palette,
                     tangle_count, p.outline_weight)

    glyph_count = max(0, round_half_up(p.typo_scatter * 80))
    if glyph_count > 0:
        draw_glyph_scatter(surface, rng, width, height, ctx.palette, glyph_count)

    if p.atmo_ribbons > 0:
        draw_ribbons(surface, rng, width, height, ctx.palette, p.atmo_ribbons)


def generate(surface: DrawingSurface, width: float, height: float,
             params: Params, seed: int) -> list[HSL]:
    """Draw one full composition onto ``surface`` and return its palette."""
    ctx = prepare(seed, params, width, height)
    p = params
    light_rad = p.light_angle / 360 * TAU

    draw_backdrop(surface, ctx)
    for elements in iter_layers(ctx):
        for el in elements:
            render_element(surface, el, light_rad, p.light_intensity,
                           p.gradient_shapes, p.outline_weight)
    draw_overlays(surface, ctx)
    return ctx.palette
