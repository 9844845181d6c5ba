"""Shape primitives and the positioned Element record.

Shapes live in a unit frame centred on the origin (roughly [-1, 1] on each
axis) and are scaled by half the element size when rendered.  Each variant
is a small frozen dataclass; the renderer dispatches on the class.

``make_shape`` draws the variant and its parameters from the RNG stream.
The draw order inside each branch is fixed so that a seed reproduces the
same composition.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from genera.art.palettes import HSL
from genera.core.rng import TAU, DeterministicRNG

# Upper bounds of the variant selection draw, checked in order.
_CIRCLE = 0.14
_REGULAR_POLYGON = 0.24
_STAR = 0.34
_BLOB = 0.44
_RINGS = 0.52
_TARGET = 0.60
_HEXAGON = 0.66
_CROSS = 0.72
_CLOUD_CLUSTER = 0.86

Point = tuple[float, float]


# ------------------------------------------------------------------
# Variants
# ------------------------------------------------------------------

@dataclass(frozen=True)
class Circle:
    pass


@dataclass(frozen=True)
class Polygon:
    points: tuple[Point, ...]


@dataclass(frozen=True)
class BlobControl:
    x: float
    y: float
    cpx: float
    cpy: float


@dataclass(frozen=True)
class Blob:
    """Closed quadratic curve: control i bends the segment from vertex i to i+1."""
    controls: tuple[BlobControl, ...]


@dataclass(frozen=True)
class Ring:
    r: float
    lw: float


@dataclass(frozen=True)
class Rings:
    rings: tuple[Ring, ...]


@dataclass(frozen=True)
class Target:
    rings: int


@dataclass(frozen=True)
class Cross:
    thickness: float


@dataclass(frozen=True)
class CloudCircle:
    cx: float
    cy: float
    r: float


@dataclass(frozen=True)
class CloudCluster:
    circles: tuple[CloudCircle, ...]


@dataclass(frozen=True)
class Petal:
    bulge: float
    taper: float


Shape = Union[Circle, Polygon, Blob, Rings, Target, Cross, CloudCluster, Petal]


@dataclass
class Element:
    shape: Shape
    x: float
    y: float
    rotation: float
    size: float
    color: HSL
    opacity: float
    stroke_only: bool
    line_width: float


# ------------------------------------------------------------------
# Synthesis
# ------------------------------------------------------------------

def _regular_polygon(rng: DeterministicRNG, complexity: float, organicness: float) -> Polygon:
    sides = rng.uniform_int(3, 3 + int(math.floor(complexity * 8)))
    pts = []
    for i in range(sides):
        a = i / sides * TAU - math.pi / 2
        w = 1 + (rng.next() - 0.5) * organicness * 0.6
        pts.append((math.cos(a) * w, math.sin(a) * w))
    return Polygon(tuple(pts))


def _star(rng: DeterministicRNG, complexity: float, organicness: float) -> Polygon:
    arms = rng.uniform_int(3, 6 + int(math.floor(complexity * 5)))
    inner = rng.uniform(0.25, 0.5)
    pts = []
    for i in range(arms * 2):
        a = i / (arms * 2) * TAU - math.pi / 2
        r = 1 if i % 2 == 0 else inner
        px = math.cos(a) * r * (1 + (rng.next() - 0.5) * organicness * 0.3)
        py = math.sin(a) * r * (1 + (rng.next() - 0.5) * organicness * 0.3)
        pts.append((px, py))
    return Polygon(tuple(pts))


def _blob(rng: DeterministicRNG, complexity: float, organicness: float) -> Blob:
    segs = rng.uniform_int(3, 5 + int(math.floor(complexity * 3)))
    pull = 0.4 + organicness * 0.6
    controls = []
    for i in range(segs):
        a = i / segs * TAU
        mid = (a + (i + 1) / segs * TAU) / 2
        x = math.cos(a) * (1 + (rng.next() - 0.5) * organicness)
        y = math.sin(a) * (1 + (rng.next() - 0.5) * organicness)
        cpx = math.cos(mid) * rng.uniform(0.5, 1.4) * pull
        cpy = math.sin(mid) * rng.uniform(0.5, 1.4) * pull
        controls.append(BlobControl(x, y, cpx, cpy))
    return Blob(tuple(controls))


def _rings(rng: DeterministicRNG, complexity: float) -> Rings:
    count = rng.uniform_int(2, 3 + int(math.floor(complexity * 3)))
    return Rings(tuple(Ring((i + 1) / count, rng.uniform(0.02, 0.07)) for i in range(count)))


def _hexagon() -> Polygon:
    return Polygon(tuple(
        (math.cos(i / 6 * TAU), math.sin(i / 6 * TAU)) for i in range(6)
    ))


def _cloud_cluster(rng: DeterministicRNG, complexity: float, organicness: float) -> CloudCluster:
    count = rng.uniform_int(3, 6 + int(math.floor(complexity * 4)))
    circles = [CloudCircle(0.0, 0.0, rng.uniform(0.4, 0.7))]
    for _ in range(1, count):
        # Each new circle hangs off a random existing one.
        parent = circles[int(math.floor(rng.next() * len(circles)))]
        angle = rng.uniform(0, TAU)
        r = rng.uniform(0.25, 0.65) * (1 + organicness * 0.3)
        dist = parent.r + r * rng.uniform(0.3, 0.7)
        circles.append(CloudCircle(
            parent.cx + math.cos(angle) * dist,
            parent.cy + math.sin(angle) * dist,
            r,
        ))
    return CloudCluster(tuple(circles))


def make_shape(rng: DeterministicRNG, complexity: float, organicness: float) -> Shape:
    """Draw one shape variant; ``complexity`` scales vertex / ring counts and
    ``organicness`` perturbs radii and control points."""
    t = rng.next()
    if t < _CIRCLE:
        return Circle()
    if t < _REGULAR_POLYGON:
        return _regular_polygon(rng, complexity, organicness)
    if t < _STAR:
        return _star(rng, complexity, organicness)
    if t < _BLOB:
        return _blob(rng, complexity, organicness)
    if t < _RINGS:
        return _rings(rng, complexity)
    if t < _TARGET:
        return Target(rng.uniform_int(2, 5))
    if t < _HEXAGON:
        return _hexagon()
    if t < _CROSS:
        return Cross(rng.uniform(0.1, 0.25))
    if t < _CLOUD_CLUSTER:
        return _cloud_cluster(rng, complexity, organicness)
    return Petal(
        bulge=rng.uniform(0.4, 0.9) * (0.6 + organicness * 0.4),
        taper=rng.uniform(0.15, 0.4),
    )
