from __future__ import annotations

import random
import time
from typing import Sequence, Tuple, TypeVar

T = TypeVar("T")

_SEED_BITS = 64


class RandomSource:
    """A seedable, splittable supply of random numbers.

    Every source owns a private ``random.Random``; nothing here touches the
    module-level ``random`` state, so two sources built from the same seed
    and driven through the same calls produce the same numbers.
    """

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    @classmethod
    def from_time(cls) -> RandomSource:
        return cls(time.time_ns() & ((1 << _SEED_BITS) - 1))

    @property
    def seed(self) -> int:
        return self._seed

    def next_int(self, low: int, high: int) -> int:
        if low > high:
            raise ValueError(f"empty range: {low=} {high=}")
        return self._rng.randint(low, high)

    def next_bits(self, n: int) -> int:
        if n < 0:
            raise ValueError(f"negative bit count: {n=}")
        if n == 0:
            return 0
        return self._rng.getrandbits(n)

    def next_float(self) -> float:
        return self._rng.random()

    def choice(self, values: Sequence[T]) -> T:
        if not values:
            raise ValueError("cannot choose from an empty sequence")
        return values[self.next_int(0, len(values) - 1)]

    def split(self) -> Tuple[RandomSource, RandomSource]:
        # both children are seeded from the parent, so they are reproducible,
        # but neither sees what the parent or its sibling draws afterwards
        left = RandomSource(self.next_bits(_SEED_BITS))
        right = RandomSource(self.next_bits(_SEED_BITS))
        return left, right

    def __repr__(self) -> str:
        return f"RandomSource(seed={self._seed})"
