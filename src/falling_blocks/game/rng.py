"""Linear-congruential generator used for reproducible shapes and obstacles.

Constants are GCC's; the arithmetic is exact integer arithmetic so the same
seed always yields the same sequence.
"""

from __future__ import annotations

import math
from typing import Iterator, Tuple

M = 0x80000000  # 2**31
A = 1103515245
C = 12345

RandomPair = Tuple[float, float]


def hash_seed(seed: int) -> int:
    return (A * seed + C) % M


def scale(h: int) -> float:
    """Map a hash in [0, M) onto [-1, 1]."""
    return (2 * h) / (M - 1) - 1


def scale_to_range(value: float, start: int, stop: int) -> int:
    """Map a value in [-1, 1] onto the inclusive integer range [start, stop]."""
    # value == 1 lands exactly on stop + 1
    return min(math.floor((value + 1) / 2 * (stop - start + 1) + start), stop)


class LCGStream:
    """Infinite iterator of scaled hashes: scale(hash(seed)), scale(hash(hash(seed))), ..."""

    def __init__(self, seed: int) -> None:
        self.seed = int(seed)
        self.state = self.seed

    def __iter__(self) -> "LCGStream":
        return self

    def __next__(self) -> float:
        self.state = hash_seed(self.state)
        return scale(self.state)


def random_pairs(seeds: Tuple[int, int]) -> Iterator[RandomPair]:
    """Two independently seeded streams advanced in lockstep."""
    first, second = seeds
    return zip(LCGStream(first), LCGStream(second))
