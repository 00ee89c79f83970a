"""
Strided index helpers shared by the CPU kernels.

Tensors address a flat buffer through ``(shape, strides)`` with element
strides. Gradient buffers are always dense and row-major over the shape of
the tensor they belong to, so they are addressed with
``Shape.contiguous_strides()``.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.lib.stride_tricks import as_strided


def linear_offsets(shape: Sequence[int], strides: Sequence[int]) -> np.ndarray:
    """
    Linear buffer offset of every element of a strided view.

    Returns
    -------
    np.ndarray
        Integer array of shape ``shape`` whose entry at ``idx`` is
        ``sum(idx[k] * strides[k])``.
    """
    shape = tuple(int(s) for s in shape)
    offsets = np.zeros(shape, dtype=np.intp)
    for k, (size, stride) in enumerate(zip(shape, strides)):
        bcast = [1] * len(shape)
        bcast[k] = size
        offsets += (np.arange(size, dtype=np.intp) * int(stride)).reshape(bcast)
    return offsets


def index_for_reductions(
    shape: Sequence[int], strides: Sequence[int], axes: Sequence[int]
) -> np.ndarray:
    """
    Deterministic iteration order for a reduction over ``axes``.

    Row ``i`` of the result lists the buffer offsets of every input element
    that reduces into output element ``i``. Rows follow the row-major order
    of the kept axes (the order of a dense output buffer); within a row the
    reduced axes are walked row-major as well.

    Parameters
    ----------
    shape : Sequence[int]
        Concrete input sizes.
    strides : Sequence[int]
        Element strides used to address the input.
    axes : Sequence[int]
        Strictly increasing reduced axes.

    Returns
    -------
    np.ndarray
        Integer array of shape ``(num_outputs, group_size)``. A rank-0
        destination gives a single row covering the whole input.
    """
    shape = tuple(int(s) for s in shape)
    reduced = [k for k in range(len(shape)) if k in axes]
    kept = [k for k in range(len(shape)) if k not in axes]

    num_out = int(np.prod([shape[k] for k in kept], dtype=np.int64))
    group = int(np.prod([shape[k] for k in reduced], dtype=np.int64))

    offsets = linear_offsets(shape, strides)
    return np.transpose(offsets, kept + reduced).reshape(num_out, group)


def strided_view(array: np.ndarray, shape: Sequence[int], strides: Sequence[int]) -> np.ndarray:
    """Read-only NumPy view of ``array`` with element strides."""
    itemsize = array.itemsize
    return as_strided(
        array,
        shape=tuple(int(s) for s in shape),
        strides=tuple(int(s) * itemsize for s in strides),
        writeable=False,
    )


def dense_values(tensor) -> np.ndarray:
    """Row-major copy of a tensor's elements, shaped like the tensor."""
    return np.array(
        strided_view(tensor.data.array, tensor.shape.concrete, tensor.strides)
    )


def accumulate(grad, values: np.ndarray) -> None:
    """Add ``values`` (any shape with the right size) into a dense gradient."""
    np.add(grad.array, np.asarray(values, dtype=grad.array.dtype).reshape(-1), out=grad.array)
