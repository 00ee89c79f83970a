"""
CPU reference implementation of `ConcatAlongKernel`.

Forward copies ``a`` into the prefix region of the output along ``axis`` and
``b`` into the suffix region. Backward splits the upstream gradient at the
same boundary, so the gradient of each input is exactly its slice of
``grad_out``.
"""

from __future__ import annotations

import numpy as np

from ...domain._device import DeviceType
from ...domain._kernel import ConcatAlongKernel
from ._indexing import accumulate, dense_values
from ._registry import kernel_registry


@kernel_registry.register(ConcatAlongKernel, DeviceType.CPU)
class ConcatAlongCpu(ConcatAlongKernel):

    def forward(self, axis, a, b, out_shape):
        out = np.concatenate([dense_values(a), dense_values(b)], axis=axis)
        return self.storage.from_array(out, a.dtype)

    def backward(self, axis, a, grad_a, b, grad_b, grad_out):
        out_sizes = list(a.shape.concrete)
        out_sizes[axis] += b.shape.size(axis)
        g = grad_out.array.reshape(out_sizes)
        g_a, g_b = np.split(g, [a.shape.size(axis)], axis=axis)
        accumulate(grad_a, g_a)
        accumulate(grad_b, g_b)
