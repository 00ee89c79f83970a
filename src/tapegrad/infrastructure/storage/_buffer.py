"""
Flat NumPy-backed element buffer.

A `Buffer` owns one contiguous, one-dimensional NumPy array. Tensors address
it through (shape, strides) views, so several tensors can alias a single
buffer. When a tensor captures a buffer it freezes it: forward-pass data is
never mutated in place afterwards. Gradient buffers stay writable.
"""

from __future__ import annotations

import numpy as np

from ...domain._dtype import Dtype


class Buffer:
    """
    Contiguous element buffer.

    Parameters
    ----------
    array : np.ndarray
        Backing storage. It is flattened (without copying when already 1-D
        and contiguous) and kept by reference.
    """

    __slots__ = ("_array", "_dtype")

    def __init__(self, array: np.ndarray) -> None:
        arr = np.ascontiguousarray(array).reshape(-1)
        self._array = arr
        self._dtype = Dtype.of(arr.dtype)

    @property
    def array(self) -> np.ndarray:
        return self._array

    @property
    def dtype(self) -> Dtype:
        return self._dtype

    @property
    def writeable(self) -> bool:
        return bool(self._array.flags.writeable)

    def freeze(self) -> "Buffer":
        """Mark the backing array read-only and return ``self``."""
        self._array.flags.writeable = False
        return self

    def __len__(self) -> int:
        return int(self._array.shape[0])

    def __repr__(self) -> str:
        state = "rw" if self.writeable else "ro"
        return f"Buffer(len={len(self)}, dtype={self._dtype.name}, {state})"
