"""
Deterministic string-keyed random streams.

Every simulated entity (states, metros, cells, forecasts) draws from a
mulberry32 stream seeded by a hash of a descriptive key, so the same
inputs always reproduce the same demo.
"""

from __future__ import annotations

from typing import Sequence, TypeVar

MASK_32 = 0xFFFFFFFF

T = TypeVar("T")


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK_32


def hash_string(key: str) -> int:
    """
    Hash a string into an unsigned 32-bit seed.

    Iterates UTF-16 code units so keys containing non-BMP characters hash
    the same way on every platform.
    """
    units = key.encode("utf-16-le")
    n_units = len(units) // 2
    h = (1779033703 ^ n_units) & MASK_32
    for i in range(n_units):
        code = units[2 * i] | (units[2 * i + 1] << 8)
        h = _imul(h ^ code, 3432918353)
        h = ((h << 13) | (h >> 19)) & MASK_32
    return h


class SeededStream:
    """mulberry32 stream of floats in [0, 1)."""

    def __init__(self, seed: int):
        self._state = seed & MASK_32

    def __call__(self) -> float:
        self._state = (self._state + 0x6D2B79F5) & MASK_32
        t = self._state
        r = _imul(t ^ (t >> 15), 1 | t)
        r ^= (r + _imul(r ^ (r >> 7), 61 | r)) & MASK_32
        return ((r ^ (r >> 14)) & MASK_32) / 4294967296

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self()

    def jitter(self, scale: float) -> float:
        """Centered draw in [-scale/2, scale/2)."""
        return (self() - 0.5) * scale

    def choice(self, options: Sequence[T]) -> T:
        if not options:
            raise ValueError("Cannot choose from an empty sequence")
        return options[int(self() * len(options))]

    def coin(self, probability: float = 0.5) -> bool:
        return self() < probability


def stream_for(key: str) -> SeededStream:
    return SeededStream(hash_string(key))


__all__ = ["MASK_32", "SeededStream", "hash_string", "stream_for"]
