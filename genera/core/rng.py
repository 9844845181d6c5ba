"""Seeded scalar pseudo-random stream.

A 32-bit state is advanced by a fixed odd constant and passed through two
rounds of multiply / xor-shift mixing.  The constants are part of the
reproducibility contract: a given seed yields the same stream on every
platform and in every reimplementation.

Everything is done on Python ints masked to 32 bits, so the arithmetic is
exact and independent of float precision until the final normalization.
"""

from __future__ import annotations

import math
from typing import Iterator, Sequence, TypeVar

T = TypeVar("T")

TAU = math.pi * 2

_MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a * b."""
    return (a * b) & _MASK32


def clamp(v: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, v))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def round_half_up(v: float) -> int:
    """Round .5 toward +inf (Python's round() is banker's rounding)."""
    return int(math.floor(v + 0.5))


class DeterministicRNG:
    """Restartable infinite stream of floats in [0, 1)."""

    def __init__(self, seed: int):
        self.reseed(seed)

    def reseed(self, seed: int) -> None:
        self._state = int(seed) & _MASK32

    def next(self) -> float:
        s = (self._state + _INCREMENT) & _MASK32
        self._state = s
        t = _imul(s ^ (s >> 15), 1 | s)
        t = ((t + _imul(t ^ (t >> 7), 61 | t)) & _MASK32) ^ t
        return (t ^ (t >> 14)) / _TWO_POW_32

    __call__ = next

    def __iter__(self) -> Iterator[float]:
        while True:
            yield self.next()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def uniform(self, lo: float, hi: float) -> float:
        return lerp(lo, hi, self.next())

    def uniform_int(self, lo: int, hi: int) -> int:
        """Uniform integer in [lo, hi], both ends inclusive."""
        return int(math.floor(self.uniform(lo, hi + 1)))

    def pick(self, seq: Sequence[T]) -> T:
        return seq[int(math.floor(self.next() * len(seq)))]
