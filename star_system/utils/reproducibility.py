"""Seeded stream utilities for deterministic scene generation."""

import math
import random
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")

MASK32 = 0xFFFFFFFF

# Salts keep unrelated feature axes on independent streams.
MOONS_SALT = 0xDEADBE
RINGS_SALT = 0x13579B
MOON_PLACEMENT_SALT = 0xC0FFEE
BELT_SALT = 0xB17
NAMES_SALT = 0x51A5A5
STAR_AXIS_SALT = 0x5151
STARFIELD_SALT = 0xABCDEF


def normalize_seed(seed: int) -> int:
    """Reduce any integer seed to its unsigned 32-bit form."""
    return int(seed) & MASK32


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK32


def mix_seed(*parts: int) -> int:
    """Hash several integers into one 32-bit stream seed.

    Args:
        *parts: Base seed followed by a salt and an index

    Returns:
        Unsigned 32-bit stream seed
    """
    h = 0x9E3779B9
    for p in parts:
        x = (int(p) & MASK32) ^ (h >> 16)
        x = _imul(x, 0x45D9F3B)
        x ^= x >> 16
        x = _imul(x, 0x45D9F3B)
        x ^= x >> 16
        h ^= (x + 0x7FEB352D + ((h << 6) & MASK32) + (h >> 2)) & MASK32
    return h & MASK32


def mulberry32(seed: int) -> Callable[[], float]:
    """Return a mulberry32 generator yielding floats in [0, 1).

    Args:
        seed: Stream seed (any integer, reduced to 32 bits)

    Returns:
        Zero-argument callable producing the next value of the stream
    """
    state = normalize_seed(seed)

    def next_float() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & MASK32
        t = state
        r = _imul(t ^ (t >> 15), t | 1)
        r ^= (r + _imul(r ^ (r >> 7), r | 61)) & MASK32
        return ((r ^ (r >> 14)) & MASK32) / 4294967296.0

    return next_float


class SeededStream:
    """Convenience wrapper around a single mulberry32 stream."""

    def __init__(self, seed: int, salt: int = None, index: int = None):
        if salt is None:
            stream_seed = normalize_seed(seed)
        elif index is None:
            stream_seed = normalize_seed(seed) ^ salt
        else:
            stream_seed = mix_seed(seed, salt, index)
        self.stream_seed = stream_seed
        self._next = mulberry32(stream_seed)

    def random(self) -> float:
        return self._next()

    def uniform(self, lo: float, hi: float) -> float:
        return lo + self._next() * (hi - lo)

    def randint_below(self, n: int) -> int:
        """Integer in [0, n)."""
        return int(math.floor(self._next() * n))

    def angle(self) -> float:
        return self._next() * math.pi * 2

    def choice(self, items: Sequence[T]) -> T:
        return items[self.randint_below(len(items))]


def random_seed() -> int:
    """Fresh seed in [0, 1e9) from the process-wide random generator."""
    return random.randrange(1_000_000_000)
