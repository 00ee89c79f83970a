"""
Random distributions for tensor factories and parameter randomization.

Each distribution draws a host array of a given shape from a NumPy
``Generator``; the storage backend turns it into a tensor.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..domain._shape import Shape


@dataclass(frozen=True)
class Uniform:
    """Uniform distribution on ``[low, high)``."""

    low: float = 0.0
    high: float = 1.0

    def __post_init__(self) -> None:
        if not self.low < self.high:
            raise ValueError(f"Uniform requires low < high, got [{self.low}, {self.high})")

    def sample(self, rng: np.random.Generator, shape: Shape) -> np.ndarray:
        return rng.uniform(self.low, self.high, size=shape.concrete)


@dataclass(frozen=True)
class Normal:
    """Normal distribution with the given mean and standard deviation."""

    mean: float = 0.0
    std: float = 1.0

    def __post_init__(self) -> None:
        if self.std < 0:
            raise ValueError(f"Normal requires std >= 0, got {self.std}")

    def sample(self, rng: np.random.Generator, shape: Shape) -> np.ndarray:
        return rng.normal(self.mean, self.std, size=shape.concrete)
