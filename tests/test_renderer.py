"""Tests for genera/shapes/renderer.py"""

import math

import pytest

from genera.art.palettes import hsl
from genera.canvas.paint import IDENTITY, RadialGradient
from genera.shapes.primitives import (
    Circle,
    CloudCircle,
    CloudCluster,
    Cross,
    Element,
    Petal,
    Polygon,
    Ring,
    Rings,
    Target,
)
from genera.shapes.renderer import render_element


def _el(shape, stroke_only=False, opacity=0.6, size=40.0, color=(200, 60, 50)):
    return Element(shape, 100.0, 100.0, 0.3, size, color, opacity, stroke_only, 1.7)


def _render(surface, el, gradient=True, outline=0.0):
    render_element(surface, el, math.radians(315), 0.5, gradient, outline)


class TestFillModel:

    def test_gradient_fill_toward_light(self, recorder):
        _render(recorder, _el(Circle()))
        (call,) = recorder.calls
        assert call.kind == "fill"
        assert isinstance(call.paint, RadialGradient)
        assert call.alpha == pytest.approx(0.6)
        # Focal point is offset from the centre; end circle is the element.
        assert (call.paint.x0, call.paint.y0) != pytest.approx((call.paint.x1, call.paint.y1))
        assert call.paint.r1 == pytest.approx(20.0)
        offsets = [o for o, _ in call.paint.stops]
        assert offsets == [0, 0.5, 1]

    def test_highlight_and_shadow_lightness(self, recorder):
        _render(recorder, _el(Circle()))
        stops = recorder.calls[0].paint.stops
        assert stops[0][1] == pytest.approx(hsl(200, 66, 62.5))
        assert stops[1][1] == pytest.approx(hsl(200, 60, 50))
        assert stops[2][1] == pytest.approx(hsl(200, 48, 40))

    def test_flat_fill_when_gradients_off(self, recorder):
        _render(recorder, _el(Circle()), gradient=False)
        assert recorder.calls[0].paint == pytest.approx(hsl(200, 60, 50))

    def test_stroke_only_uses_flat_lighter_stroke(self, recorder):
        _render(recorder, _el(Polygon(((0, -1), (1, 1), (-1, 1))), stroke_only=True), outline=1.0)
        (call,) = recorder.calls
        assert call.kind == "stroke"
        assert call.width == pytest.approx(1.7)
        assert call.paint == pytest.approx(hsl(200, 60, 62))

    def test_outline_after_fill(self, recorder):
        _render(recorder, _el(Petal(0.6, 0.3)), outline=0.5)
        assert recorder.kinds() == ["fill", "stroke"]
        outline = recorder.calls[1]
        assert outline.width == pytest.approx(1.5)
        assert outline.paint == pytest.approx(hsl(200, 42, 25))

    def test_outline_width_floor(self, recorder):
        _render(recorder, _el(Circle()), outline=0.05)
        assert recorder.calls[1].width == pytest.approx(0.5)

    def test_element_transform(self, recorder):
        _render(recorder, _el(Polygon(((1, 0), (0, 1), (-1, 0)))))
        pts = recorder.calls[0].subpaths[0].points
        # (1, 0) in the unit frame, scaled by half size and rotated by 0.3
        assert pts[0] == pytest.approx((100 + 20 * math.cos(0.3), 100 + 20 * math.sin(0.3)))

    def test_state_restored(self, recorder):
        _render(recorder, _el(Circle()), outline=1.0)
        assert recorder._state.matrix == IDENTITY
        assert recorder.global_alpha == 1.0
        assert recorder.line_width == 1.0


class TestVariants:

    def test_rings_stroke_each_ring(self, recorder):
        shape = Rings((Ring(0.5, 0.05), Ring(1.0, 0.02)))
        _render(recorder, _el(shape), outline=1.0)
        assert recorder.kinds() == ["stroke", "stroke"]
        assert [c.width for c in recorder.calls] == pytest.approx([2.0, 0.8])

    def test_target_alternates_lightness(self, recorder):
        _render(recorder, _el(Target(3)), gradient=False)
        assert recorder.kinds() == ["fill", "stroke"] * 3
        fills = [c.paint for c in recorder.calls if c.kind == "fill"]
        # i = 3, 2, 1: odd rings darker, even rings lighter
        assert fills[0] == pytest.approx(hsl(200, 60, 35))
        assert fills[1] == pytest.approx(hsl(200, 60, 70))
        assert fills[2] == pytest.approx(hsl(200, 60, 35))
        assert all(c.width == pytest.approx(0.8) for c in recorder.calls if c.kind == "stroke")

    def test_target_gradient_per_disc(self, recorder):
        _render(recorder, _el(Target(2)))
        fills = [c.paint for c in recorder.calls if c.kind == "fill"]
        assert all(isinstance(p, RadialGradient) for p in fills)
        assert [p.r1 for p in fills] == pytest.approx([20.0, 10.0])

    def test_cross_two_bars(self, recorder):
        _render(recorder, _el(Cross(0.2)), outline=0.5)
        assert recorder.kinds() == ["fill", "fill", "stroke", "stroke"]

    def test_cloud_cluster_always_outlined(self, recorder):
        shape = CloudCluster((CloudCircle(0, 0, 0.5), CloudCircle(0.6, 0, 0.4)))
        _render(recorder, _el(shape), outline=0.0)
        assert recorder.kinds() == ["fill", "stroke", "fill", "stroke"]
        fills = [c.paint for c in recorder.calls if c.kind == "fill"]
        # One shared gradient for every sub-circle
        assert fills[0].stops == fills[1].stops
        assert (fills[0].x1, fills[0].y1) == (fills[1].x1, fills[1].y1)
        assert recorder.calls[1].width == pytest.approx(0.5)

    def test_cloud_cluster_stroke_only(self, recorder):
        shape = CloudCluster((CloudCircle(0, 0, 0.5), CloudCircle(0.6, 0, 0.4)))
        _render(recorder, _el(shape, stroke_only=True), outline=1.0)
        assert recorder.kinds() == ["stroke", "stroke"]

    def test_unknown_variant_raises(self, recorder):
        with pytest.raises(ValueError, match="Unknown shape variant"):
            _render(recorder, _el(object()))
