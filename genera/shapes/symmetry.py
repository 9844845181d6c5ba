"""Symmetry replication of placed elements.

  - bilateral  : mirror across the vertical centre line
  - quad       : bilateral plus horizontal and point mirrors
  - rotational : three extra copies at quarter turns about the centre

Copies share the source's shape, size, colour, opacity and stroke settings.
"""

from __future__ import annotations

import math
from dataclasses import replace

from genera.core.rng import TAU
from genera.shapes.primitives import Element


def replicate(el: Element, mode: str, width: float, height: float) -> list[Element]:
    """The mirrored copies of ``el`` for ``mode`` (``el`` itself is not included)."""
    copies: list[Element] = []
    if mode in ("bilateral", "quad"):
        copies.append(replace(el, x=width - el.x, rotation=-el.rotation))
    if mode == "quad":
        copies.append(replace(el, y=height - el.y, rotation=-el.rotation))
        copies.append(replace(el, x=width - el.x, y=height - el.y))
    if mode == "rotational":
        cx = width / 2
        cy = height / 2
        dx = el.x - cx
        dy = el.y - cy
        for s in range(1, 4):
            a = s / 4 * TAU
            copies.append(replace(
                el,
                x=cx + dx * math.cos(a) - dy * math.sin(a),
                y=cy + dx * math.sin(a) + dy * math.cos(a),
                rotation=el.rotation + a,
            ))
    return copies
