"""
CPU reference implementation of `BroadcastKernel`.

Broadcasting never copies data: the output is a view of the input buffer
whose strides are zero along the inserted axes. Backward sums the dense
upstream gradient over those axes.
"""

from __future__ import annotations

import numpy as np

from ...domain._device import DeviceType
from ...domain._kernel import BroadcastKernel
from ._indexing import index_for_reductions
from ._registry import kernel_registry


@kernel_registry.register(BroadcastKernel, DeviceType.CPU)
class BroadcastCpu(BroadcastKernel):

    def forward(self, dst, axes, inp):
        src_strides = iter(inp.strides)
        return tuple(0 if k in axes else next(src_strides) for k in range(dst.num_dims))

    def backward(self, axes, inp, grad_inp, out, grad_out):
        offsets = index_for_reductions(
            out.shape.concrete, out.shape.contiguous_strides(), tuple(axes)
        )
        summed = grad_out.array[offsets].sum(axis=1)
        np.add(grad_inp.array, summed, out=grad_inp.array)
