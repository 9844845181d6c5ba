"""Shared fixtures: a drawing surface that records backend calls."""
from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from genera.canvas.surface import DrawingSurface, Subpath


@dataclass
class DrawCall:
    kind: str                     # "fill" | "stroke" | "text"
    paint: object
    alpha: float
    composite: str
    width: float = 0.0
    subpaths: list = field(default_factory=list)
    text: str = ""
    size: float = 0.0


class RecordingSurface(DrawingSurface):
    """Keeps every primitive handed to the backend instead of rasterizing."""

    def __init__(self, width: int = 200, height: int = 200):
        super().__init__(width, height)
        self.calls: list[DrawCall] = []

    def _fill_subpaths(self, subpaths: list[Subpath], paint) -> None:
        self.calls.append(DrawCall("fill", paint, self.global_alpha, self.composite,
                                   subpaths=[Subpath(list(sp.points), sp.closed) for sp in subpaths]))

    def _stroke_subpaths(self, subpaths: list[Subpath], paint, width: float) -> None:
        self.calls.append(DrawCall("stroke", paint, self.global_alpha, self.composite,
                                   width=width,
                                   subpaths=[Subpath(list(sp.points), sp.closed) for sp in subpaths]))

    def _fill_glyphs(self, text, x, y, size, angle, paint) -> None:
        self.calls.append(DrawCall("text", paint, self.global_alpha, self.composite,
                                   text=text, size=size))

    def kinds(self) -> list[str]:
        return [c.kind for c in self.calls]


@pytest.fixture
def recorder():
    return RecordingSurface()
