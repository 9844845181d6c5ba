"""Tests for genera/pipeline/generate.py"""

from pathlib import Path

import numpy as np
import pytest

from genera.art.palettes import gen_palette
from genera.canvas.raster import RasterSurface
from genera.core.params import DEFAULT_PARAMS
from genera.core.rng import DeterministicRNG
from genera.effects.background import draw_background
from genera.pipeline.generate import (
    draw_backdrop,
    element_count,
    generate,
    iter_layers,
    layer_total,
    prepare,
)
from genera.shapes.primitives import CloudCluster, Polygon

BASELINE = Path(__file__).parent / "baselines" / "default_600_seed42.sha256"

QUIET = dict(density=0, bead_chains=0, tangles=0, typo_scatter=0,
             atmo_clouds=0, atmo_ribbons=0, atmo_blooms=0, atmo_rays=0)


def _params(**overrides):
    return DEFAULT_PARAMS.model_copy(update=overrides)


def _render(params=DEFAULT_PARAMS, seed=42, w=96, h=96):
    surface = RasterSurface(w, h)
    generate(surface, w, h, params, seed)
    return surface


class TestCounts:

    def test_element_count(self):
        assert element_count(0) == 0
        assert element_count(-1) == 0
        assert element_count(0.35) == 366
        assert element_count(1) == 1000

    def test_layer_total(self):
        assert layer_total(0) == 1
        assert layer_total(2) == 2
        assert layer_total(-3) == 1


class TestDeterminism:

    def test_same_seed_same_pixels(self):
        assert _render().digest() == _render().digest()

    def test_different_seed_differs(self):
        assert _render(seed=42).digest() != _render(seed=43).digest()

    def test_returns_palette(self):
        palette = generate(RasterSurface(32, 32), 32, 32, DEFAULT_PARAMS, 7)
        assert palette == gen_palette(DeterministicRNG(7), "warm")

    def test_golden_image(self):
        if not BASELINE.exists():
            pytest.skip("no baseline recorded; run the CLI with --write-baseline")
        expected = BASELINE.read_text().strip()
        assert _render(w=600, h=600).digest() == expected


class TestBackgroundOnly:

    def test_flat_background_is_paper(self):
        arr = _render(_params(bg_style="flat", **QUIET), w=24, h=24).to_array()
        assert (arr == np.array([245, 242, 236, 255], dtype=np.uint8)).all()

    def test_matches_background_alone(self):
        params = _params(**QUIET)
        ctx = prepare(42, params, 48, 48)
        expected = RasterSurface(48, 48)
        draw_background(expected, 48, 48, ctx.palette, ctx.rng, False, params.bg_style)
        assert _render(params, w=48, h=48).digest() == expected.digest()

    def test_negative_intensities_draw_nothing_extra(self):
        negative = {k: -0.5 for k in QUIET}
        assert _render(_params(**negative), w=32, h=32).digest() == \
            _render(_params(**QUIET), w=32, h=32).digest()


class TestLayers:

    def _layers(self, **overrides):
        return list(iter_layers(prepare(42, _params(**overrides), 600, 600)))

    def test_ranges_and_order(self):
        for layer in self._layers():
            assert len(layer) == 183
            sizes = [e.size for e in layer]
            assert sizes == sorted(sizes)
            for el in layer:
                assert el.size >= 2
                assert 0.02 <= el.opacity <= 1

    @pytest.mark.parametrize("mode", ["quad", "rotational"])
    def test_four_way_symmetry_quadruples(self, mode):
        layers = self._layers(symmetry_mode=mode)
        assert [len(layer) for layer in layers] == [4 * 183] * 2

    def test_bilateral_partners(self):
        (layer,) = self._layers(symmetry_mode="bilateral", layer_count=1, density=0.1)
        assert len(layer) == 2 * 122
        positions = {(round(e.x, 6), round(e.y, 6), e.size) for e in layer}
        for el in layer:
            assert (round(600 - el.x, 6), round(el.y, 6), el.size) in positions

    def test_single_layer_full_opacity(self):
        (layer,) = self._layers(layer_count=1, opacity_min=1, opacity_max=1)
        assert all(el.opacity == pytest.approx(1.0) for el in layer)

    def test_later_layers_fade(self):
        first, second = self._layers(opacity_min=1, opacity_max=1)
        assert all(el.opacity == pytest.approx(1.0) for el in first)
        assert all(el.opacity == pytest.approx(0.85) for el in second)


class TestEffectsOrder:

    def test_default_glyph_count(self, recorder):
        generate(recorder, 200, 200, DEFAULT_PARAMS, 42)
        assert recorder.kinds().count("text") == 16
        # Ribbons come last, glyphs just before them.
        kinds = recorder.kinds()
        last_text = len(kinds) - 1 - kinds[::-1].index("text")
        assert all(k == "stroke" for k in kinds[last_text + 1:])

    def test_rays_are_additive(self, recorder):
        generate(recorder, 200, 200, _params(atmo_rays=1.0), 42)
        assert any(c.composite == "lighter" and c.kind == "fill" for c in recorder.calls)

    def test_no_rays_by_default(self, recorder):
        generate(recorder, 200, 200, DEFAULT_PARAMS, 42)
        assert all(c.composite != "lighter" for c in recorder.calls)


# Element stream for DEFAULT_PARAMS, 600x600, seed 42.  Each layer is listed
# in draw order (ascending size): first and last element, then column sums.
GOLDEN_PALETTE = [
    (6.724358384963125, 89.61898593232036, 54.16951165301725),
    (36.311644837260246, 64.99694936908782, 66.4617650047876),
    (48.394680828787386, 84.82950259931386, 49.21004540286958),
    (43.496277974918485, 62.8901535179466, 55.02188463229686),
    (5.265925421845168, 82.46448071673512, 58.31862695282325),
    (50.46455988660455, 55.15371807850897, 54.12345771212131),
    (29.371169809019193, 88.49349703639746, 41.536277988925576),
]

GOLDEN_LAYERS = [
    {
        "first": (CloudCluster, 489.98084371976466, 415.2601241529705, 2.7018892864846444,
                  5.8763942766666215, GOLDEN_PALETTE[0], 0.32001726070418957, False,
                  2.364853412704542),
        "last": (CloudCluster, 117.87717992757794, 116.32103502911883, 1.5595899124803914,
                 90.2203542070515, GOLDEN_PALETTE[4], 0.2368254664586857, False,
                 1.9468518364010379),
        "sums": (57343.934174269074, 48223.69855074594, 7914.893817721493,
                 96.32944195236074, 666.180077587792, 301.11467437716186),
        "stroke_only": 38,
    },
    {
        "first": (CloudCluster, 619.9095710350136, 258.01662150712633, 3.7298916856044535,
                  4.648948810113156, GOLDEN_PALETTE[6], 0.13376952741690912, False,
                  2.3897895441623405),
        "last": (Polygon, 290.54542741028257, 378.5344093790021, 1.0437496327649716,
                 89.05241870664122, GOLDEN_PALETTE[6], 0.45988495545717895, False,
                 1.9601489469874651),
        "sums": (67048.74803505625, 42211.624847537336, 7867.816228799428,
                 79.78750994990911, 643.3547318529717, 297.89817928806895),
        "stroke_only": 35,
    },
]


def _assert_element(el, expected):
    cls, x, y, rotation, size, color, opacity, stroke_only, line_width = expected
    assert type(el.shape) is cls
    assert (el.x, el.y, el.rotation, el.size) == pytest.approx((x, y, rotation, size), rel=1e-9)
    assert el.color == color
    assert el.opacity == pytest.approx(opacity, rel=1e-9)
    assert el.stroke_only is stroke_only
    assert el.line_width == pytest.approx(line_width, rel=1e-9)


class TestGoldenComposition:

    @pytest.fixture
    def composition(self, recorder):
        ctx = prepare(42, DEFAULT_PARAMS, 600, 600)
        draw_backdrop(recorder, ctx)
        return ctx, list(iter_layers(ctx))

    def test_palette(self, composition):
        ctx, _ = composition
        assert ctx.palette == GOLDEN_PALETTE

    def test_layer_sizes(self, composition):
        _, layers = composition
        assert [len(layer) for layer in layers] == [183, 183]

    @pytest.mark.parametrize("index", [0, 1])
    def test_first_and_last_elements(self, composition, index):
        _, layers = composition
        _assert_element(layers[index][0], GOLDEN_LAYERS[index]["first"])
        _assert_element(layers[index][-1], GOLDEN_LAYERS[index]["last"])

    @pytest.mark.parametrize("index", [0, 1])
    def test_column_sums(self, composition, index):
        _, layers = composition
        layer = layers[index]
        sums = (
            sum(e.x for e in layer),
            sum(e.y for e in layer),
            sum(e.size for e in layer),
            sum(e.opacity for e in layer),
            sum(e.rotation for e in layer),
            sum(e.line_width for e in layer),
        )
        assert sums == pytest.approx(GOLDEN_LAYERS[index]["sums"], rel=1e-9)
        assert sum(e.stroke_only for e in layer) == GOLDEN_LAYERS[index]["stroke_only"]
