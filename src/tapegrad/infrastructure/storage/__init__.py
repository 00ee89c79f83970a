"""
Storage backends.

Public API
----------
- ``Buffer`` : flat NumPy-backed element buffer
- ``Cpu``    : NumPy reference backend and tensor factories
"""

from ._buffer import Buffer
from ._cpu import Cpu

__all__ = [
    Buffer.__name__,
    Cpu.__name__,
]
