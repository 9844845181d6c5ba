"""Tests for genera/brush/session.py"""

import pytest

from genera.art.palettes import gen_palette
from genera.brush.session import (
    BrushContext,
    BrushSession,
    Point,
    interpolate_points,
    paint_at_point,
    palette_for_drawing,
)
from genera.canvas.raster import RasterSurface
from genera.core.rng import DeterministicRNG


def _context(brush_type="scatter", **kw):
    return BrushContext(brush_type=brush_type, palette=palette_for_drawing("warm", 5), **kw)


class TestInterpolation:

    def test_even_steps_to_end(self):
        assert interpolate_points(Point(0, 0), Point(10, 0), 5) == [(5, 0), (10, 0)]

    def test_short_move_returns_end(self):
        assert interpolate_points(Point(0, 0), Point(3, 4), 10) == [(3, 4)]

    def test_partial_step_rounds_up(self):
        pts = interpolate_points(Point(0, 0), Point(11, 0), 5)
        assert len(pts) == 3
        assert pts[-1] == (11, 0)

    def test_spacing_floor(self):
        pts = interpolate_points(Point(0, 0), Point(10, 0), 0)
        assert len(pts) == 5
        assert pts[0] == pytest.approx((2, 0))


class TestSession:

    def test_counter_advances(self):
        session = BrushSession()
        assert [session.next_seed() for _ in range(3)] == [1, 2, 3]

    def test_reseed_explicit(self):
        session = BrushSession(counter=10)
        assert session.reseed(100) == 100
        assert session.next_seed() == 101

    def test_reseed_random_in_range(self):
        session = BrushSession()
        value = session.reseed()
        assert 0 <= value < 999999
        assert session.counter == value

    def test_palette_for_drawing(self):
        assert palette_for_drawing("neon", 3) == gen_palette(DeterministicRNG(3), "neon")


class TestBrushes:

    @pytest.mark.parametrize("brush", ["scatter", "chain", "spray"])
    def test_same_seed_same_dab(self, brush):
        surfaces = []
        for _ in range(2):
            s = RasterSurface(80, 80)
            seed = paint_at_point(s, Point(40, 40), _context(brush), BrushSession(counter=7))
            assert seed == 8
            surfaces.append(s)
        assert surfaces[0].digest() == surfaces[1].digest()
        assert surfaces[0].to_array()[..., 3].any()

    def test_consecutive_dabs_differ(self):
        session = BrushSession()
        a, b = RasterSurface(80, 80), RasterSurface(80, 80)
        paint_at_point(a, Point(40, 40), _context("scatter"), session)
        paint_at_point(b, Point(40, 40), _context("scatter"), session)
        assert a.digest() != b.digest()

    def test_spray_dot_count(self, recorder):
        paint_at_point(recorder, Point(100, 100), _context("spray", brush_size=40), BrushSession())
        assert recorder.kinds() == ["fill"] * 12

    def test_spray_minimum_dots(self, recorder):
        paint_at_point(recorder, Point(100, 100), _context("spray", brush_size=2), BrushSession())
        assert len(recorder.calls) == 3

    def test_chain_single_bead(self, recorder):
        paint_at_point(recorder, Point(100, 100), _context("chain"), BrushSession())
        assert recorder.kinds() == ["fill"]

    def test_eraser_clears_alpha(self):
        s = RasterSurface(60, 60)
        s.fill_rect(0, 0, 60, 60, (0.5, 0.5, 0.5, 1.0))
        session = BrushSession()
        seed = paint_at_point(s, Point(30, 30), _context("eraser", brush_size=20, opacity=1.0), session)
        alpha = s.to_array()[..., 3]
        assert alpha[30, 30] == 0
        assert alpha[5, 5] == 255
        assert seed == 1 and session.counter == 1

    def test_eraser_uses_destination_out(self, recorder):
        paint_at_point(recorder, Point(50, 50), _context("eraser"), BrushSession())
        (call,) = recorder.calls
        assert call.composite == "destination-out"
        assert call.alpha == pytest.approx(0.8)
        assert recorder.composite == "source-over"

    def test_unknown_brush(self):
        with pytest.raises(ValueError, match="Unknown brush type"):
            BrushContext(brush_type="smudge")

    @pytest.mark.parametrize("brush", ["scatter", "chain", "spray"])
    def test_colour_brushes_need_palette(self, brush):
        with pytest.raises(ValueError, match="non-empty palette"):
            BrushContext(brush_type=brush)

    def test_eraser_without_palette(self):
        s = RasterSurface(20, 20)
        s.fill_rect(0, 0, 20, 20, (0.5, 0.5, 0.5, 1.0))
        paint_at_point(s, Point(10, 10), BrushContext(brush_type="eraser", opacity=1.0), BrushSession())
        assert s.to_array()[10, 10, 3] == 0
