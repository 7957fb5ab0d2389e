"""
Seeded Random Sources

Everything random in the screening core (dot jitter, palette picks, answer
button order) draws from an explicit generator created from a seed. Nothing
uses the process-global random state, so a plate id always renders the same
plate.
"""

from typing import Callable, List, Protocol, Sequence, TypeVar

import numpy as np

T = TypeVar("T")

_LCG_A = 1664525
_LCG_C = 1013904223
_LCG_M = 2 ** 32
# Knuth multiplicative hash spreads small consecutive seeds apart
_SEED_MIX = 2654435761


class SeededRandom(Protocol):
    """Minimal random interface used by the generators."""

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        ...

    def uniform(self, low: float, high: float) -> float:
        ...

    def randrange(self, n: int) -> int:
        ...

    def shuffled(self, items: Sequence[T]) -> List[T]:
        ...


class LcgRandom:
    """32-bit linear congruential generator (Numerical Recipes constants)."""

    def __init__(self, seed: int):
        self.seed = seed
        self._state = (int(seed) * _SEED_MIX + 1) % _LCG_M

    def _next(self) -> int:
        self._state = (_LCG_A * self._state + _LCG_C) % _LCG_M
        return self._state

    def random(self) -> float:
        return self._next() / _LCG_M

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.random()

    def randrange(self, n: int) -> int:
        if n <= 0:
            raise ValueError(f"randrange needs a positive bound, got {n}")
        return min(int(self.random() * n), n - 1)

    def shuffled(self, items: Sequence[T]) -> List[T]:
        # Fisher-Yates
        out = list(items)
        for i in range(len(out) - 1, 0, -1):
            j = self.randrange(i + 1)
            out[i], out[j] = out[j], out[i]
        return out


class NumpyRandom:
    """Adapter over numpy's PCG64 bit generator."""

    def __init__(self, seed: int):
        self.seed = seed
        self._gen = np.random.Generator(np.random.PCG64(seed))

    def random(self) -> float:
        return float(self._gen.random())

    def uniform(self, low: float, high: float) -> float:
        return float(self._gen.uniform(low, high))

    def randrange(self, n: int) -> int:
        if n <= 0:
            raise ValueError(f"randrange needs a positive bound, got {n}")
        return int(self._gen.integers(0, n))

    def shuffled(self, items: Sequence[T]) -> List[T]:
        order = self._gen.permutation(len(items))
        return [items[i] for i in order]


RandomFactory = Callable[[int], SeededRandom]

RANDOM_SOURCES: dict[str, RandomFactory] = {
    "lcg": LcgRandom,
    "numpy": NumpyRandom,
}


def get_random_factory(name: str = "lcg") -> RandomFactory:
    """Look up a generator factory by name."""
    try:
        return RANDOM_SOURCES[name]
    except KeyError:
        raise ValueError(f"unknown random source {name!r}; expected one of {sorted(RANDOM_SOURCES)}") from None
