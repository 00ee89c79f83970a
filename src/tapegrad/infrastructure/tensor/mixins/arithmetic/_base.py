"""
Arithmetic mixin: ``+``, ``-``, ``*``, ``/`` and ``@``.

Tensor-tensor operators require identical sizes (no implicit broadcasting;
use ``broadcast_to`` explicitly). Python scalars are applied elementwise.
"""

from __future__ import annotations

from numbers import Number

from ....ops._elementwise import (
    Add,
    Mul,
    Negate,
    ScalarAdd,
    ScalarMul,
    ScalarRSub,
    Sub,
)
from ..unary._tensor_unary import apply_unary
from ._tensor_binary import apply_binary
from ._tensor_matmul import tensor_matmul


class TensorMixinArithmetic:

    __slots__ = ()

    def __add__(self, other):
        if isinstance(other, Number):
            return apply_unary(self, ScalarAdd(other))
        return apply_binary(self, other, Add())

    def __radd__(self, other):
        if isinstance(other, Number):
            return apply_unary(self, ScalarAdd(other))
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Number):
            return apply_unary(self, ScalarAdd(-other))
        return apply_binary(self, other, Sub())

    def __rsub__(self, other):
        if isinstance(other, Number):
            return apply_unary(self, ScalarRSub(other))
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Number):
            return apply_unary(self, ScalarMul(other))
        return apply_binary(self, other, Mul())

    def __rmul__(self, other):
        if isinstance(other, Number):
            return apply_unary(self, ScalarMul(other))
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, Number):
            return apply_unary(self, ScalarMul(1.0 / other))
        return NotImplemented

    def __neg__(self):
        return apply_unary(self, Negate())

    def matmul(self, other):
        """
        Matrix product with a rank-2 ``other``.

        Raises
        ------
        ValueError
            For unsupported ranks.
        ShapeMismatchError, StaticShapeError
            If the inner dimensions disagree.
        """
        return tensor_matmul(self, other)

    def __matmul__(self, other):
        return tensor_matmul(self, other)
