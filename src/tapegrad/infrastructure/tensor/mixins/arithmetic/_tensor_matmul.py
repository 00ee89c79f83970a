"""
Matrix products ``(K,) @ (K, N)`` and ``(M, K) @ (K, N)``.
"""

from __future__ import annotations

from .....domain._errors import ShapeMismatchError, StaticShapeError
from .....domain._kernel import MatMulKernel
from .....domain._shape import Shape
from ..._tape import merge_tapes
from .._common import check_same_device


def _matmul_shape(lhs: Shape, rhs: Shape) -> Shape:
    if lhs.num_dims not in (1, 2) or rhs.num_dims != 2:
        raise ValueError(
            f"matmul supports (K,)x(K,N) and (M,K)x(K,N), got {lhs!r} x {rhs!r}"
        )
    k_l, k_r = lhs[lhs.num_dims - 1], rhs[0]
    if k_l.size != k_r.size:
        if k_l.static and k_r.static:
            raise StaticShapeError(k_l.size, k_r.size, lhs.num_dims - 1)
        raise ShapeMismatchError(k_l.size, k_r.size, lhs.num_dims - 1)
    if lhs.num_dims == 1:
        return Shape((rhs[1],))
    return Shape((lhs[0], rhs[1]))


def tensor_matmul(lhs, rhs):
    Tensor = type(lhs)
    check_same_device(lhs, rhs)
    out_shape = _matmul_shape(lhs.shape, rhs.shape)
    storage = lhs.device
    kernel = storage.kernel(MatMulKernel)

    result = Tensor(out_shape, kernel.forward(lhs, rhs), storage)

    l, l_tape = lhs.split_tape()
    r, r_tape = rhs.split_tape()
    tape = merge_tapes(l_tape, r_tape)
    if tape.is_tracing:
        gl = l.ghost()
        gr = r.ghost()
        out = result.ghost()

        def matmul_backward(grads) -> None:
            (grad_l, grad_r), grad_out = grads.muts_and_ref([gl, gr], out)
            kernel.backward(l, grad_l, r, grad_r, grad_out)

        tape.add_backward_op(matmul_backward)
    return result.put_tape(tape)
