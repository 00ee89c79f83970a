"""
Unary mixin: elementwise activation-style functions.
"""

from __future__ import annotations

from ....ops._elementwise import Exp, ReLU, Square, Tanh
from ._tensor_unary import apply_unary


class TensorMixinUnary:

    __slots__ = ()

    def exp(self):
        """Elementwise ``e**x``. Backward: ``grad * exp(x)``."""
        return apply_unary(self, Exp())

    def relu(self):
        """Elementwise ``max(x, 0)``. Backward: ``grad * (x > 0)``."""
        return apply_unary(self, ReLU())

    def tanh(self):
        """Elementwise ``tanh(x)``. Backward: ``grad * (1 - tanh(x)**2)``."""
        return apply_unary(self, Tanh())

    def square(self):
        """Elementwise ``x**2``. Backward: ``grad * 2x``."""
        return apply_unary(self, Square())
