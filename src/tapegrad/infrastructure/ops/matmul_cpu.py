"""
CPU reference implementation of `MatMulKernel`.

Supported operand ranks: vector-matrix ``(K,) @ (K, N) -> (N,)`` and
matrix-matrix ``(M, K) @ (K, N) -> (M, N)``.
"""

from __future__ import annotations

import numpy as np

from ...domain._device import DeviceType
from ...domain._kernel import MatMulKernel
from ._indexing import accumulate, dense_values
from ._registry import kernel_registry


@kernel_registry.register(MatMulKernel, DeviceType.CPU)
class MatMulCpu(MatMulKernel):

    def forward(self, lhs, rhs):
        return self.storage.from_array(
            np.matmul(dense_values(lhs), dense_values(rhs)), lhs.dtype
        )

    def backward(self, lhs, grad_lhs, rhs, grad_rhs, grad_out):
        a = dense_values(lhs)
        b = dense_values(rhs)
        if a.ndim == 1:
            g = grad_out.array
            accumulate(grad_lhs, b @ g)
            accumulate(grad_rhs, np.outer(a, g))
        else:
            g = grad_out.array.reshape(a.shape[0], b.shape[1])
            accumulate(grad_lhs, g @ b.T)
            accumulate(grad_rhs, a.T @ g)
