"""
Elementwise function descriptions (NumPy numerics).

These are the `UnaryOp` / `BinaryOp` values passed to `UnaryKernel` and
`BinaryKernel`. They operate on whole NumPy arrays at once.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from ...domain._kernel import BinaryOp, UnaryOp


class Exp(UnaryOp):
    name = "exp"

    def forward(self, x: np.ndarray) -> np.ndarray:
        return np.exp(x)

    def derivative(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        return y


class ReLU(UnaryOp):
    name = "relu"

    def forward(self, x: np.ndarray) -> np.ndarray:
        return np.maximum(x, 0)

    def derivative(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        return (x > 0).astype(x.dtype)


class Tanh(UnaryOp):
    name = "tanh"

    def forward(self, x: np.ndarray) -> np.ndarray:
        return np.tanh(x)

    def derivative(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        return 1 - y * y


class Square(UnaryOp):
    name = "square"

    def forward(self, x: np.ndarray) -> np.ndarray:
        return x * x

    def derivative(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        return 2 * x


class Negate(UnaryOp):
    name = "neg"

    def forward(self, x: np.ndarray) -> np.ndarray:
        return -x

    def derivative(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        return np.full_like(x, -1)


class ScalarMul(UnaryOp):
    name = "scalar_mul"

    def __init__(self, scalar: float) -> None:
        self.scalar = float(scalar)

    def forward(self, x: np.ndarray) -> np.ndarray:
        return x * self.scalar

    def derivative(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        return np.full_like(x, self.scalar)


class ScalarAdd(UnaryOp):
    name = "scalar_add"

    def __init__(self, scalar: float) -> None:
        self.scalar = float(scalar)

    def forward(self, x: np.ndarray) -> np.ndarray:
        return x + self.scalar

    def derivative(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        return np.ones_like(x)


class ScalarRSub(UnaryOp):
    name = "scalar_rsub"

    def __init__(self, scalar: float) -> None:
        self.scalar = float(scalar)

    def forward(self, x: np.ndarray) -> np.ndarray:
        return self.scalar - x

    def derivative(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        return np.full_like(x, -1)


class Add(BinaryOp):
    name = "add"

    def forward(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        return a + b

    def partials(self, a: np.ndarray, b: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        return np.ones_like(a), np.ones_like(b)


class Sub(BinaryOp):
    name = "sub"

    def forward(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        return a - b

    def partials(self, a: np.ndarray, b: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        return np.ones_like(a), np.full_like(b, -1)


class Mul(BinaryOp):
    name = "mul"

    def forward(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        return a * b

    def partials(self, a: np.ndarray, b: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        return b, a
