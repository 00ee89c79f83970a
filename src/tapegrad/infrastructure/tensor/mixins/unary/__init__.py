"""
Unary mixin for Tensor operations (``exp``, ``relu``, ``tanh``, ``square``).

Public API
----------
- ``TensorMixinUnary``
"""

from ._base import TensorMixinUnary

__all__ = [
    TensorMixinUnary.__name__,
]
