"""
Reduction mixin for Tensor operations.

- ``mean``   : arithmetic mean (composed from storage primitives)
- ``sum``    : sum over every element
- ``sum_to`` : sum over selected axes
- ``min_to`` : minimum over selected axes
- ``max_to`` : maximum over selected axes

Public API
----------
- ``TensorMixinReduction``
"""

from ._base import TensorMixinReduction

__all__ = [
    TensorMixinReduction.__name__,
]
