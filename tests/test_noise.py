"""Tests for genera/core/noise.py"""

import numpy as np
import pytest

from genera.core.noise import NoiseField


class TestNoiseField:

    def test_permutation_table(self):
        perm = NoiseField(42).perm
        assert len(perm) == 512
        assert sorted(perm[:256]) == list(range(256))
        assert perm[:256] == perm[256:]

    def test_values_bounded(self):
        field = NoiseField(7)
        for x in np.linspace(-50, 50, 60):
            for y in np.linspace(-50, 50, 60):
                v = field.noise(float(x), float(y))
                assert 0.0 <= v <= 1.0

    def test_lattice_points_are_midpoint(self):
        field = NoiseField(3)
        for x in range(-3, 4):
            for y in range(-3, 4):
                assert field.noise(x, y) == 0.5

    def test_deterministic(self):
        a = NoiseField(1234)
        b = NoiseField(1234)
        pts = [(i * 0.37, i * 0.91) for i in range(100)]
        assert [a(x, y) for x, y in pts] == [b(x, y) for x, y in pts]

    def test_seed_changes_field(self):
        a = NoiseField(1)
        b = NoiseField(2)
        pts = [(i * 0.37 + 0.1, i * 0.53 + 0.2) for i in range(50)]
        assert [a(x, y) for x, y in pts] != [b(x, y) for x, y in pts]

    def test_continuity(self):
        field = NoiseField(9)
        for i in range(200):
            x = i * 0.173
            y = i * 0.311
            assert abs(field(x + 1e-4, y) - field(x, y)) < 1e-2
            assert abs(field(x, y + 1e-4) - field(x, y)) < 1e-2

    def test_wraps_every_256_cells(self):
        field = NoiseField(5)
        assert field(3.3, 4.7) == pytest.approx(field(3.3 + 256, 4.7), abs=1e-9)
