"""numpy / PIL raster backend for DrawingSurface.

Coverage masks are rasterized with ImageDraw on a supersampled 'L' layer
limited to the primitive's bounding box, box-filtered back down to device
resolution, and blended into premultiplied float buffers.  Axis-aligned
rectangles (background washes, full-canvas gradient fills) skip PIL and get
exact analytic coverage.
"""

from __future__ import annotations

import hashlib
import math
from functools import lru_cache

import numpy as np
from PIL import Image, ImageDraw, ImageFilter, ImageFont

from genera.art.compositor import composite, unpremultiply
from genera.canvas.paint import Gradient, Paint
from genera.canvas.surface import DrawingSurface, Subpath

_SUPERSAMPLE = 4
_MITER_LIMIT = 10.0

Box = tuple[int, int, int, int]


@lru_cache(maxsize=32)
def _font(size: int) -> ImageFont.ImageFont:
    return ImageFont.load_default(size=size)


def _points_bounds(points: list[tuple[float, float]], pad: float) -> tuple[float, float, float, float]:
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs) - pad, min(ys) - pad, max(xs) + pad, max(ys) + pad)


def _is_axis_rect(poly: list[tuple[float, float]]) -> bool:
    if len(poly) != 4:
        return False
    for (x0, y0), (x1, y1) in zip(poly, poly[1:] + poly[:1]):
        if abs(x0 - x1) > 1e-9 and abs(y0 - y1) > 1e-9:
            return False
    return True


def _span_coverage(lo: float, hi: float, start: int, count: int) -> np.ndarray:
    cells = np.arange(start, start + count, dtype=np.float64)
    return np.clip(np.minimum(hi, cells + 1) - np.maximum(lo, cells), 0.0, 1.0)


def _miter_wedges(pts: list[tuple[float, float]], half_width: float,
                  closed: bool) -> list[list[tuple[float, float]]]:
    """Fill polygons for the outer corner of each join, beveled past the miter limit."""
    verts = pts[:-1] if closed else pts
    n = len(verts)
    if n < 3 and not (closed and n == 2):
        return []
    wedges = []
    for i in (range(n) if closed else range(1, n - 1)):
        px, py = verts[i]
        ax, ay = verts[i - 1]
        bx, by = verts[(i + 1) % n]
        l1 = math.hypot(px - ax, py - ay)
        l2 = math.hypot(bx - px, by - py)
        if l1 == 0 or l2 == 0:
            continue
        d1x, d1y = (px - ax) / l1, (py - ay) / l1
        d2x, d2y = (bx - px) / l2, (by - py) / l2
        cross = d1x * d2y - d1y * d2x
        if abs(cross) < 1e-9:
            continue
        side = -1.0 if cross > 0 else 1.0
        n1x, n1y = -d1y * side, d1x * side
        n2x, n2y = -d2y * side, d2x * side
        outer_a = (px + n1x * half_width, py + n1y * half_width)
        outer_b = (px + n2x * half_width, py + n2y * half_width)
        mx, my = n1x + n2x, n1y + n2y
        cos_half = math.hypot(mx, my) / 2
        if cos_half * _MITER_LIMIT < 1:
            wedges.append([(px, py), outer_a, outer_b])
            continue
        reach = half_width / cos_half / (2 * cos_half)
        tip = (px + mx * reach, py + my * reach)
        wedges.append([(px, py), outer_a, tip, outer_b])
    return wedges


class RasterSurface(DrawingSurface):
    """In-memory RGBA canvas; starts fully transparent."""

    def __init__(self, width: int, height: int):
        super().__init__(width, height)
        self._color = np.zeros((self.height, self.width, 3), dtype=np.float64)
        self._alpha = np.zeros((self.height, self.width), dtype=np.float64)

    # ------------------------------------------------------------------
    # Geometry helpers
    # ------------------------------------------------------------------

    def _shadow_margin(self) -> float:
        if self.shadow_blur > 0 and self.shadow_color[3] > 0:
            return self.shadow_blur * 1.5
        return 0.0

    def _clip(self, bounds: tuple[float, float, float, float],
              paint: Paint) -> Box | None:
        x0, y0, x1, y1 = bounds
        if isinstance(paint, Gradient):
            extent = paint.bounds()
            if extent is not None:
                x0, y0 = max(x0, extent[0]), max(y0, extent[1])
                x1, y1 = min(x1, extent[2]), min(y1, extent[3])
        margin = self._shadow_margin()
        ix0 = max(0, int(math.floor(x0 - margin)))
        iy0 = max(0, int(math.floor(y0 - margin)))
        ix1 = min(self.width, int(math.ceil(x1 + margin)))
        iy1 = min(self.height, int(math.ceil(y1 + margin)))
        if ix1 <= ix0 or iy1 <= iy0:
            return None
        return (ix0, iy0, ix1, iy1)

    def _polygon_coverage(self, polys: list[list[tuple[float, float]]], box: Box) -> np.ndarray:
        x0, y0, x1, y1 = box
        if len(polys) == 1 and _is_axis_rect(polys[0]):
            xs = [p[0] for p in polys[0]]
            ys = [p[1] for p in polys[0]]
            cov_x = _span_coverage(min(xs), max(xs), x0, x1 - x0)
            cov_y = _span_coverage(min(ys), max(ys), y0, y1 - y0)
            return np.outer(cov_y, cov_x)

        ss = _SUPERSAMPLE
        layer = Image.new("L", ((x1 - x0) * ss, (y1 - y0) * ss), 0)
        draw = ImageDraw.Draw(layer)
        for poly in polys:
            draw.polygon([((x - x0) * ss, (y - y0) * ss) for x, y in poly], fill=255)
        return self._downsample(layer, box)

    def _stroke_coverage(self, subpaths: list[Subpath], width: float, box: Box) -> np.ndarray:
        x0, y0, x1, y1 = box
        ss = _SUPERSAMPLE
        px_width = width * ss
        line_w = max(1, int(round(px_width)))
        round_join = self.line_join == "round"
        layer = Image.new("L", ((x1 - x0) * ss, (y1 - y0) * ss), 0)
        draw = ImageDraw.Draw(layer)
        for sp in subpaths:
            pts: list[tuple[float, float]] = []
            for x, y in sp.points:
                p = ((x - x0) * ss, (y - y0) * ss)
                if not pts or p != pts[-1]:
                    pts.append(p)
            if sp.closed and len(pts) > 1 and pts[-1] != pts[0]:
                pts.append(pts[0])
            if len(pts) < 2:
                continue
            draw.line(pts, fill=255, width=line_w, joint="curve" if round_join else None)
            if line_w <= 2:
                continue
            if not round_join:
                for wedge in _miter_wedges(pts, line_w / 2.0, sp.closed):
                    draw.polygon(wedge, fill=255)
            if sp.closed:
                ends = [pts[0]] if round_join else []
            else:
                ends = [pts[0], pts[-1]] if self.line_cap == "round" else []
            r = line_w / 2.0
            for ex, ey in ends:
                draw.ellipse([ex - r, ey - r, ex + r, ey + r], fill=255)
        mask = self._downsample(layer, box)
        if px_width < 1:
            # Hairlines: trade width for opacity.
            mask *= px_width
        return mask

    def _downsample(self, layer: Image.Image, box: Box) -> np.ndarray:
        x0, y0, x1, y1 = box
        small = layer.resize((x1 - x0, y1 - y0), Image.BOX)
        return np.asarray(small, dtype=np.float64) / 255.0

    # ------------------------------------------------------------------
    # Blending
    # ------------------------------------------------------------------

    def _sample(self, paint: Paint, box: Box) -> tuple[np.ndarray, np.ndarray]:
        x0, y0, x1, y1 = box
        if isinstance(paint, Gradient):
            xs = np.arange(x0, x1, dtype=np.float64) + 0.5
            ys = np.arange(y0, y1, dtype=np.float64) + 0.5
            px, py = np.meshgrid(xs, ys)
            t, valid = paint.parameter(px, py)
            color, alpha = paint.colors_at(t)
            return color * valid[..., np.newaxis], alpha * valid
        r, g, b, a = paint
        return np.array([r * a, g * a, b * a], dtype=np.float64), np.float64(a)

    def _blend(self, box: Box, src: np.ndarray, src_a: np.ndarray) -> None:
        x0, y0, x1, y1 = box
        region = (slice(y0, y1), slice(x0, x1))
        color, alpha = composite(self._color[region], self._alpha[region],
                                 src, src_a, self.composite)
        self._color[region] = color
        self._alpha[region] = alpha

    def _paint(self, mask: np.ndarray, paint: Paint, box: Box) -> None:
        color, alpha = self._sample(paint, box)
        coverage = mask * self.global_alpha
        src_a = alpha * coverage
        src = color * coverage[..., np.newaxis]

        if self._shadow_margin() > 0:
            shadow = Image.fromarray(
                np.clip(np.rint(src_a * 255), 0, 255).astype(np.uint8), "L")
            shadow = shadow.filter(ImageFilter.GaussianBlur(self.shadow_blur / 2))
            sr, sg, sb, sa = self.shadow_color
            shadow_a = np.asarray(shadow, dtype=np.float64) / 255.0 * sa
            shadow_src = np.multiply.outer(shadow_a, np.array([sr, sg, sb]))
            self._blend(box, shadow_src, shadow_a)

        self._blend(box, src, src_a)

    # ------------------------------------------------------------------
    # Backend primitives
    # ------------------------------------------------------------------

    def _fill_subpaths(self, subpaths: list[Subpath], paint: Paint) -> None:
        points = [p for sp in subpaths for p in sp.points]
        box = self._clip(_points_bounds(points, 1.0), paint)
        if box is None:
            return
        mask = self._polygon_coverage([sp.points for sp in subpaths], box)
        self._paint(mask, paint, box)

    def _stroke_subpaths(self, subpaths: list[Subpath], paint: Paint,
                         width: float) -> None:
        points = [p for sp in subpaths for p in sp.points]
        box = self._clip(_points_bounds(points, width / 2 + 1.0), paint)
        if box is None:
            return
        mask = self._stroke_coverage(subpaths, width, box)
        self._paint(mask, paint, box)

    def _fill_glyphs(self, text: str, x: float, y: float, size: float,
                     angle: float, paint: Paint) -> None:
        ss = _SUPERSAMPLE
        font = _font(max(1, int(round(size * ss))))
        probe = ImageDraw.Draw(Image.new("L", (1, 1)))
        left, top, right, bottom = probe.textbbox((0, 0), text, font=font)
        if right <= left or bottom <= top:
            return
        glyphs = Image.new("L", (right - left + 2 * ss, bottom - top + 2 * ss), 0)
        ImageDraw.Draw(glyphs).text((ss - left, ss - top), text, fill=255, font=font)
        if angle:
            glyphs = glyphs.rotate(-math.degrees(angle), resample=Image.BICUBIC,
                                   expand=True)

        # Pad to a multiple of the supersample factor before box-filtering.
        gw = int(math.ceil(glyphs.width / ss))
        gh = int(math.ceil(glyphs.height / ss))
        padded = Image.new("L", (gw * ss, gh * ss), 0)
        padded.paste(glyphs, ((gw * ss - glyphs.width) // 2, (gh * ss - glyphs.height) // 2))
        mask = np.asarray(padded.resize((gw, gh), Image.BOX), dtype=np.float64) / 255.0

        left_px = int(round(x - gw / 2))
        top_px = int(round(y - gh / 2))
        box = self._clip((left_px, top_px, left_px + gw, top_px + gh), paint)
        if box is None:
            return
        # The box may be smaller (canvas edge) or larger (shadow margin)
        # than the glyph layer; copy their overlap.
        bx0, by0, bx1, by1 = box
        full = np.zeros((by1 - by0, bx1 - bx0))
        ox0, oy0 = max(bx0, left_px), max(by0, top_px)
        ox1, oy1 = min(bx1, left_px + gw), min(by1, top_px + gh)
        if ox1 > ox0 and oy1 > oy0:
            full[oy0 - by0:oy1 - by0, ox0 - bx0:ox1 - bx0] = \
                mask[oy0 - top_px:oy1 - top_px, ox0 - left_px:ox1 - left_px]
        self._paint(full, paint, box)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def to_array(self) -> np.ndarray:
        """(H, W, 4) uint8 straight-alpha RGBA."""
        rgb = unpremultiply(self._color, self._alpha)
        rgba = np.dstack([rgb, self._alpha])
        return np.clip(np.rint(rgba * 255), 0, 255).astype(np.uint8)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.to_array(), "RGBA")

    def digest(self) -> str:
        """SHA-256 of the RGBA pixel bytes; identical renders share a digest."""
        return hashlib.sha256(self.to_array().tobytes()).hexdigest()
