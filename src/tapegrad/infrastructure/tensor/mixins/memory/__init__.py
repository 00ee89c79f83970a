"""
Memory/structure mixin for Tensor operations.

- ``concat_along`` : join two tensors along one axis
- ``broadcast_to`` : zero-stride view over inserted axes
- ``realize``      : change static/dynamic tags without touching data

Public API
----------
- ``TensorMixinMemory``
- ``concat_along`` / ``try_concat_along`` : pair form, ``concat_along((a, b), axis)``
"""

from ._base import TensorMixinMemory
from ._tensor_concat import concat_along, try_concat_along

__all__ = [
    TensorMixinMemory.__name__,
    concat_along.__name__,
    try_concat_along.__name__,
]
