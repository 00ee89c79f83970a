"""
Container models.

Public API
----------
- ``Sequential``
"""

from ._sequential import Sequential

__all__ = [
    Sequential.__name__,
]
