"""Element placement.

Six layout modes map an element index to a canvas position:

  - scatter : uniform over the canvas plus a 30px bleed
  - grid    : jittered cell centres, cols x rows >= n
  - radial  : concentric rings about the centre
  - noise   : rejection sampling weighted by the noise field (20 tries)
  - cluster : around the layer's cluster anchors
  - burst   : power-curve radial falloff from the centre

Every position is then pushed along a noise flow field by ``flow``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from genera.core.noise import NoiseField
from genera.core.rng import TAU, DeterministicRNG

_NOISE_ATTEMPTS = 20
_FLOW_DISPLACEMENT = 45


@dataclass
class Cluster:
    x: float
    y: float
    spread: float


@dataclass
class FlowSample:
    x: float
    y: float
    nv: float       # drives flow angle and noise colouring
    nv2: float      # secondary sample, modulates size
    angle: float


def grid_dimensions(n: int, width: float, height: float) -> tuple[int, int]:
    """(cols, rows) of a grid holding at least ``n`` cells, shaped like the canvas."""
    cols = max(1, int(math.ceil(math.sqrt(n * (width / height)))))
    rows = max(1, int(math.ceil(n / cols)))
    return cols, rows


# ------------------------------------------------------------------
# Placers: (engine, index, count) -> (x, y)
# ------------------------------------------------------------------

def _place_scatter(engine: LayoutEngine, i: int, n: int) -> tuple[float, float]:
    rng = engine.rng
    return rng.uniform(-30, engine.width + 30), rng.uniform(-30, engine.height + 30)


def _place_grid(engine: LayoutEngine, i: int, n: int) -> tuple[float, float]:
    rng = engine.rng
    cols, rows = grid_dimensions(n, engine.width, engine.height)
    cw = engine.width / cols
    ch = engine.height / rows
    jitter = engine.noise_influence
    x = (i % cols) * cw + cw / 2 + rng.uniform(-cw * 0.3, cw * 0.3) * jitter
    y = (i // cols) * ch + ch / 2 + rng.uniform(-ch * 0.3, ch * 0.3) * jitter
    return x, y


def _place_radial(engine: LayoutEngine, i: int, n: int) -> tuple[float, float]:
    rng = engine.rng
    rings = int(math.ceil(math.sqrt(n / 3)))
    ring = int(math.floor(rng.next() * rings))
    r = ring / rings * min(engine.width, engine.height) * 0.45 + rng.uniform(-15, 15)
    a = rng.uniform(0, TAU)
    return engine.width / 2 + math.cos(a) * r, engine.height / 2 + math.sin(a) * r


def _place_noise(engine: LayoutEngine, i: int, n: int) -> tuple[float, float]:
    rng = engine.rng
    scale = engine.noise_scale * 0.01
    for _ in range(_NOISE_ATTEMPTS):
        x = rng.uniform(0, engine.width)
        y = rng.uniform(0, engine.height)
        if engine.noise(x * scale, y * scale) >= rng.next() * 0.65:
            break
    # Falls through with the last candidate once attempts run out.
    return x, y


def _place_cluster(engine: LayoutEngine, i: int, n: int) -> tuple[float, float]:
    rng = engine.rng
    cl = rng.pick(engine.clusters)
    a = rng.uniform(0, TAU)
    d = rng.uniform(0, cl.spread) * rng.next()
    return cl.x + math.cos(a) * d, cl.y + math.sin(a) * d


def _place_burst(engine: LayoutEngine, i: int, n: int) -> tuple[float, float]:
    rng = engine.rng
    a = rng.uniform(0, TAU)
    max_r = min(engine.width, engine.height) * 0.48
    r = max_r * rng.next() ** 0.35
    x = engine.width / 2 + math.cos(a) * r + rng.uniform(-10, 10)
    y = engine.height / 2 + math.sin(a) * r + rng.uniform(-10, 10)
    return x, y


_LAYOUTS: dict[str, Callable[[LayoutEngine, int, int], tuple[float, float]]] = {
    "scatter": _place_scatter,
    "grid": _place_grid,
    "radial": _place_radial,
    "noise": _place_noise,
    "cluster": _place_cluster,
    "burst": _place_burst,
}


class LayoutEngine:
    """Positions elements for one generation call.

    ``begin_layer`` must be called before placing a layer's elements: it
    draws that layer's cluster anchors, which consumes RNG state whatever
    the layout mode is.
    """

    def __init__(self, mode: str, rng: DeterministicRNG, noise: NoiseField,
                 width: float, height: float,
                 noise_scale: float = 1.0, noise_influence: float = 0.0):
        self.mode = mode
        self.rng = rng
        self.noise = noise
        self.width = width
        self.height = height
        self.noise_scale = noise_scale
        self.noise_influence = noise_influence
        self.clusters: list[Cluster] = []
        self._placer = _LAYOUTS.get(mode, _place_scatter)

    def begin_layer(self) -> list[Cluster]:
        rng = self.rng
        w, h = self.width, self.height
        self.clusters = [
            Cluster(
                x=rng.uniform(w * 0.12, w * 0.88),
                y=rng.uniform(h * 0.12, h * 0.88),
                spread=rng.uniform(50, min(w, h) * 0.4),
            )
            for _ in range(rng.uniform_int(2, 5))
        ]
        return self.clusters

    def place(self, i: int, n: int) -> tuple[float, float]:
        return self._placer(self, i, n)

    def flow(self, x: float, y: float) -> FlowSample:
        s = self.noise_scale
        nv = self.noise(x * s * 0.008, y * s * 0.008)
        nv2 = self.noise(x * s * 0.012 + 100, y * s * 0.012 + 100)
        angle = nv * TAU * 2
        push = self.noise_influence * _FLOW_DISPLACEMENT
        return FlowSample(
            x=x + math.cos(angle) * push,
            y=y + math.sin(angle) * push,
            nv=nv,
            nv2=nv2,
            angle=angle,
        )
