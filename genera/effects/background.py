"""Canvas background: a paper base colour plus soft radial washes."""

from __future__ import annotations

from genera.art.palettes import HSL, TRANSPARENT, hex_to_rgb, hsla
from genera.canvas.surface import DrawingSurface
from genera.core.rng import DeterministicRNG, lerp

LIGHT_BASE = "#f5f2ec"
DARK_BASE = "#0c0c0e"

_WASH_ALPHA = {"subtle": (0.15, 0.06), "gradient": (0.35, 0.15)}


def draw_background(surface: DrawingSurface, width: float, height: float,
                    palette: list[HSL], rng: DeterministicRNG,
                    dark: bool = False, style: str = "gradient") -> None:
    """Fill the canvas.

    ``flat`` paints only the base colour.  ``subtle`` and ``gradient`` add
    2-4 radial washes tinted from the palette, ``subtle`` at lower alpha.
    """
    base = hex_to_rgb(DARK_BASE if dark else LIGHT_BASE)
    surface.fill_rect(0, 0, width, height, (*base, 1.0))
    if style == "flat":
        return

    inner_a, mid_a = _WASH_ALPHA.get(style, _WASH_ALPHA["gradient"])
    for _ in range(rng.uniform_int(2, 4)):
        cx = rng.uniform(width * 0.1, width * 0.9)
        cy = rng.uniform(height * 0.1, height * 0.9)
        radius = rng.uniform(min(width, height) * 0.3, max(width, height) * 0.8)
        h, s, l = rng.pick(palette)
        wash = surface.create_radial_gradient(cx, cy, 0, cx, cy, radius)
        wash.add_color_stop(0, hsla(h, s * 0.6, l * 0.25 if dark else lerp(l, 95, 0.7), inner_a))
        wash.add_color_stop(0.6, hsla(h, s * 0.3, l * 0.12 if dark else lerp(l, 95, 0.85), mid_a))
        wash.add_color_stop(1, TRANSPARENT)
        surface.fill_rect(0, 0, width, height, wash)
