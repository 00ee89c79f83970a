"""
CPU reference implementations of the reduction kernels (NumPy backend).

Implemented contracts
---------------------
- `SumToKernel`     : sum over a set of axes
- `MinReduceKernel` : minimum over a set of axes
- `MaxReduceKernel` : maximum over a set of axes

Design notes
------------
- Every kernel walks its input in the order given by `index_for_reductions`,
  so repeated forward passes on identical input are bit-identical and
  backward replays exactly the grouping used in forward.
- Min/max accumulate from ``dtype.infinity`` / ``dtype.neg_infinity``. A
  rank-0 destination is a single global scan.
- Min/max backward gives the *full* upstream gradient to every input element
  equal to the reduced value. Tied extrema are not averaged.
- Gradients are accumulated with ``np.add.at`` so inputs that alias buffer
  positions (stride-0 views) still receive every contribution.
"""

from __future__ import annotations

import numpy as np

from ...domain._device import DeviceType
from ...domain._kernel import MaxReduceKernel, MinReduceKernel, SumToKernel
from ._indexing import dense_values, index_for_reductions
from ._registry import kernel_registry


def _groups(inp, axes) -> np.ndarray:
    offsets = index_for_reductions(inp.shape.concrete, inp.strides, tuple(axes))
    return inp.data.array[offsets]


def _grad_offsets(inp, axes) -> np.ndarray:
    return index_for_reductions(
        inp.shape.concrete, inp.shape.contiguous_strides(), tuple(axes)
    )


@kernel_registry.register(SumToKernel, DeviceType.CPU)
class SumToCpu(SumToKernel):

    def forward(self, dst, axes, inp):
        out = np.sum(_groups(inp, axes), axis=1, dtype=inp.data.array.dtype)
        return self.storage.from_array(out, inp.dtype)

    def backward(self, axes, inp, grad_inp, grad_out):
        offsets = _grad_offsets(inp, axes)
        np.add.at(grad_inp.array, offsets, grad_out.array[:, None])


def _extremum_backward(axes, inp, grad_inp, out, grad_out) -> None:
    vals = _groups(inp, axes)
    target = dense_values(out).reshape(-1)
    mask = vals == target[:, None]
    contrib = mask * grad_out.array[:, None]
    np.add.at(grad_inp.array, _grad_offsets(inp, axes), contrib)


@kernel_registry.register(MinReduceKernel, DeviceType.CPU)
class MinReduceCpu(MinReduceKernel):
    """
    Min-reduction.

    Example
    -------
    Reducing ``[[1, 1, 2], [3, 0, 0]]`` over axis 1 gives ``[1, 0]``; with an
    upstream gradient of ones the input gradient is ``[[1, 1, 0], [0, 1, 1]]``.
    """

    def forward(self, dst, axes, inp):
        vals = _groups(inp, axes)
        out = np.min(vals, axis=1, initial=inp.dtype.infinity)
        return self.storage.from_array(out, inp.dtype)

    def backward(self, axes, inp, grad_inp, out, grad_out):
        _extremum_backward(axes, inp, grad_inp, out, grad_out)


@kernel_registry.register(MaxReduceKernel, DeviceType.CPU)
class MaxReduceCpu(MaxReduceKernel):

    def forward(self, dst, axes, inp):
        vals = _groups(inp, axes)
        out = np.max(vals, axis=1, initial=inp.dtype.neg_infinity)
        return self.storage.from_array(out, inp.dtype)

    def backward(self, axes, inp, grad_inp, out, grad_out):
        _extremum_backward(axes, inp, grad_inp, out, grad_out)
