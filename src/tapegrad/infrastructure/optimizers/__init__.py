"""
Optimizers.

Public API
----------
- ``Sgd``
"""

from ._sgd import Sgd

__all__ = [
    Sgd.__name__,
]
