"""
Elementwise binary operations through `BinaryKernel`.

Operands must live on the same device and have identical sizes. Their tapes
are merged left-then-right; the single closure accumulates into both input
gradients (which share one buffer when both operands are the same value).
"""

from __future__ import annotations

from .....domain._kernel import BinaryKernel, BinaryOp
from ..._tape import merge_tapes
from .._common import check_same_device, check_same_sizes


def apply_binary(lhs, rhs, op: BinaryOp):
    Tensor = type(lhs)
    check_same_device(lhs, rhs)
    check_same_sizes(lhs, rhs)
    storage = lhs.device
    kernel = storage.kernel(BinaryKernel)

    result = Tensor(lhs.shape, kernel.forward(op, lhs, rhs), storage)

    l, l_tape = lhs.split_tape()
    r, r_tape = rhs.split_tape()
    tape = merge_tapes(l_tape, r_tape)
    if tape.is_tracing:
        gl = l.ghost()
        gr = r.ghost()
        out = result.ghost()

        def binary_backward(grads) -> None:
            (grad_l, grad_r), grad_out = grads.muts_and_ref([gl, gr], out)
            kernel.backward(op, l, grad_l, r, grad_r, grad_out)

        binary_backward.__name__ = f"{op.name}_backward"
        tape.add_backward_op(binary_backward)
    return result.put_tape(tape)
