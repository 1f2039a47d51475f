"""
Seeded random source for initial node placement.

A plain linear-congruential generator: instances built with the same seed
produce identical sequences on every platform, independent of numpy's or
Python's global random state.
"""

from __future__ import annotations

import random
from typing import Optional, Union

import numpy as np

ShapeType = Union[None, int, tuple[int, ...], list[int]]

# Park-Miller style constants (modulus is prime).
LCG_MODULUS = 2**35 - 31
LCG_MULTIPLIER = 185852
LCG_INCREMENT = 1


class LinearCongruentialRandom:
    """
    Linear-congruential pseudo-random source.

    ``state = (a * state + c) mod m``; each draw returns ``state / m``.

    Example:
        rng = LinearCongruentialRandom(seed=42)
        rng.next()          # scalar in [0, 1)
        rng.fill((10, 2))   # 10x2 array in [0, 1)
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        if seed is None:
            seed = random.randrange(1_000_000)
        self._seed: int = int(seed)
        self._state: int = self._seed % LCG_MODULUS

    @property
    def seed(self) -> int:
        """Get the seed this source was created with."""
        return self._seed

    def next(self) -> float:
        """Advance the recurrence and return a float in [0, 1)."""
        self._state = (LCG_MULTIPLIER * self._state + LCG_INCREMENT) % LCG_MODULUS
        return self._state / LCG_MODULUS

    def fill(self, shape: ShapeType = None) -> Union[float, np.ndarray]:
        """
        Draw values for the requested shape.

        Args:
            shape: None for a scalar, an int for a 1-D array, or a tuple
                for an N-D array (filled in row-major order)

        Returns:
            A float, or a float64 array of the requested shape
        """
        if shape is None:
            return self.next()
        if isinstance(shape, int):
            shape = (shape,)
        shape = tuple(int(s) for s in shape)
        count = int(np.prod(shape)) if shape else 1
        values = np.fromiter((self.next() for _ in range(count)), dtype=np.float64, count=count)
        return values.reshape(shape)

    def uniform(
        self, low: Union[float, np.ndarray], high: Union[float, np.ndarray], shape: ShapeType
    ) -> np.ndarray:
        """Draw values uniformly in [low, high) for the requested shape."""
        values = np.asarray(self.fill(shape), dtype=np.float64)
        return low + (high - low) * values


__all__ = ["LinearCongruentialRandom", "LCG_MODULUS", "LCG_MULTIPLIER", "LCG_INCREMENT"]
