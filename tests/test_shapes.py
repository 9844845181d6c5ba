"""Tests for genera/shapes/primitives.py"""

import math

import pytest

from genera.core.rng import DeterministicRNG
from genera.shapes.primitives import (
    Blob,
    Circle,
    CloudCluster,
    Cross,
    Petal,
    Polygon,
    Rings,
    Target,
    make_shape,
)


class ScriptedRNG(DeterministicRNG):
    """Returns the scripted values first, then a constant."""

    def __init__(self, values, rest=0.5):
        super().__init__(0)
        self._values = list(values)
        self._rest = rest

    def next(self):
        if self._values:
            return self._values.pop(0)
        return self._rest

    __call__ = next


class TestVariantSelection:

    @pytest.mark.parametrize("t, cls", [
        (0.0, Circle),
        (0.139, Circle),
        (0.14, Polygon),
        (0.25, Polygon),
        (0.40, Blob),
        (0.50, Rings),
        (0.55, Target),
        (0.62, Polygon),
        (0.70, Cross),
        (0.80, CloudCluster),
        (0.86, Petal),
        (0.999, Petal),
    ])
    def test_thresholds(self, t, cls):
        assert isinstance(make_shape(ScriptedRNG([t]), 0.5, 0.3), cls)

    def test_regular_polygon_sides_follow_complexity(self):
        # uniform_int(3, 3 + floor(0.5 * 8)) at 0.5 -> floor(5.5)
        shape = make_shape(ScriptedRNG([0.2]), 0.5, 0.0)
        assert len(shape.points) == 5
        for x, y in shape.points:
            assert math.hypot(x, y) == pytest.approx(1.0)
        assert shape.points[0] == pytest.approx((0.0, -1.0))

    def test_star_alternates_radii(self):
        shape = make_shape(ScriptedRNG([0.3]), 0.5, 0.0)
        # arms = floor(lerp(3, 9, 0.5)) = 6
        assert len(shape.points) == 12
        inner = 0.375
        for i, (x, y) in enumerate(shape.points):
            assert math.hypot(x, y) == pytest.approx(1.0 if i % 2 == 0 else inner)

    def test_hexagon_is_regular(self):
        shape = make_shape(ScriptedRNG([0.62]), 0.9, 0.9)
        assert len(shape.points) == 6
        assert shape.points[0] == pytest.approx((1.0, 0.0))

    def test_rings_evenly_spaced(self):
        shape = make_shape(ScriptedRNG([0.5]), 0.5, 0.3)
        assert [r.r for r in shape.rings] == pytest.approx([1 / 3, 2 / 3, 1.0])
        for ring in shape.rings:
            assert 0.02 <= ring.lw <= 0.07

    def test_target_ring_count(self):
        assert make_shape(ScriptedRNG([0.55]), 0.5, 0.3) == Target(4)

    def test_cross_thickness(self):
        assert make_shape(ScriptedRNG([0.7]), 0.5, 0.3).thickness == pytest.approx(0.175)

    def test_petal_parameters(self):
        shape = make_shape(ScriptedRNG([0.9]), 0.5, 0.5)
        assert shape.bulge == pytest.approx(0.65 * 0.8)
        assert shape.taper == pytest.approx(0.275)


class TestSynthesisWithRealStream:

    def test_variant_frequencies(self):
        rng = DeterministicRNG(2024)
        shapes = [make_shape(rng, 0.5, 0.5) for _ in range(4000)]
        circles = sum(isinstance(s, Circle) for s in shapes) / len(shapes)
        petals = sum(isinstance(s, Petal) for s in shapes) / len(shapes)
        assert circles == pytest.approx(0.14, abs=0.04)
        assert petals == pytest.approx(0.14, abs=0.04)

    def test_deterministic(self):
        a = DeterministicRNG(9)
        b = DeterministicRNG(9)
        assert [make_shape(a, 0.7, 0.4) for _ in range(50)] == [make_shape(b, 0.7, 0.4) for _ in range(50)]

    def test_cloud_circles_attach_to_earlier_ones(self):
        rng = DeterministicRNG(31)
        clusters = []
        while len(clusters) < 20:
            s = make_shape(rng, 0.8, 0.6)
            if isinstance(s, CloudCluster):
                clusters.append(s)
        for cluster in clusters:
            assert cluster.circles[0].cx == 0 and cluster.circles[0].cy == 0
            for i, c in enumerate(cluster.circles[1:], start=1):
                attached = any(
                    p.r + c.r * 0.3 - 1e-9
                    <= math.hypot(c.cx - p.cx, c.cy - p.cy)
                    <= p.r + c.r * 0.7 + 1e-9
                    for p in cluster.circles[:i]
                )
                assert attached

    def test_blob_has_at_least_three_segments(self):
        rng = DeterministicRNG(5)
        blobs = [s for s in (make_shape(rng, 0.0, 0.0) for _ in range(500)) if isinstance(s, Blob)]
        assert blobs
        for blob in blobs:
            assert len(blob.controls) >= 3
