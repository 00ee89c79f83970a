"""
CPU reference implementations of the elementwise kernels.

`UnaryKernelCpu` and `BinaryKernelCpu` are generic over the `UnaryOp` /
`BinaryOp` they are given; the numerics live in `_elementwise`. Outputs are
always dense, and backward accumulates ``partial * grad_out`` into each
input gradient.
"""

from __future__ import annotations

from ...domain._device import DeviceType
from ...domain._kernel import BinaryKernel, UnaryKernel
from ._indexing import accumulate, dense_values
from ._registry import kernel_registry


@kernel_registry.register(UnaryKernel, DeviceType.CPU)
class UnaryKernelCpu(UnaryKernel):

    def forward(self, op, inp):
        return self.storage.from_array(op.forward(dense_values(inp)), inp.dtype)

    def backward(self, op, inp, grad_inp, out, grad_out):
        x = dense_values(inp).reshape(-1)
        y = dense_values(out).reshape(-1)
        accumulate(grad_inp, op.derivative(x, y) * grad_out.array)


@kernel_registry.register(BinaryKernel, DeviceType.CPU)
class BinaryKernelCpu(BinaryKernel):

    def forward(self, op, lhs, rhs):
        return self.storage.from_array(
            op.forward(dense_values(lhs), dense_values(rhs)), lhs.dtype
        )

    def backward(self, op, lhs, grad_lhs, rhs, grad_rhs, grad_out):
        d_lhs, d_rhs = op.partials(
            dense_values(lhs).reshape(-1), dense_values(rhs).reshape(-1)
        )
        accumulate(grad_lhs, d_lhs * grad_out.array)
        accumulate(grad_rhs, d_rhs * grad_out.array)
