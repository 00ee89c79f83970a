"""
Concatenation of two tensors along one axis.

The output shape comes from `Shape.concat_along`, so incompatible shapes are
rejected before the kernel runs. Both input tapes are merged left-then-right
and a single closure partitions the upstream gradient between the inputs.
"""

from __future__ import annotations

from typing import Sequence, Union

from .....domain._errors import AxisError
from .....domain._kernel import ConcatAlongKernel
from .....domain._shape import Axes
from ..._tape import merge_tapes
from .._common import check_same_device


def _axis_index(axis: Union[int, Axes]) -> int:
    if isinstance(axis, Axes):
        if len(axis) != 1:
            raise AxisError(f"concat_along takes a single axis, got {axis}")
        return axis.indices[0]
    return axis


def tensor_concat_along(a, b, axis: Union[int, Axes]):
    Tensor = type(a)
    axis = _axis_index(axis)
    check_same_device(a, b)
    out_shape = a.shape.concat_along(b.shape, axis)
    storage = a.device
    kernel = storage.kernel(ConcatAlongKernel)

    result = Tensor(out_shape, kernel.forward(axis, a, b, out_shape), storage)

    a_, a_tape = a.split_tape()
    b_, b_tape = b.split_tape()
    tape = merge_tapes(a_tape, b_tape)
    if tape.is_tracing:
        ga = a_.ghost()
        gb = b_.ghost()
        out = result.ghost()

        def concat_along_backward(grads) -> None:
            (grad_a, grad_b), grad_out = grads.muts_and_ref([ga, gb], out)
            kernel.backward(axis, ga, grad_a, gb, grad_b, grad_out)

        tape.add_backward_op(concat_along_backward)
    return result.put_tape(tape)


def try_concat_along(tensors: Sequence, axis: Union[int, Axes]):
    """
    Concatenate a pair of tensors along ``axis``.

    Parameters
    ----------
    tensors : Sequence[Tensor]
        Exactly two tensors ``(a, b)``. ``a`` fills the prefix of the output
        along ``axis`` and ``b`` the suffix.
    axis : int or Axes
        Concatenation axis, in ``[0, rank)``.

    Raises
    ------
    ShapeMismatchError
        If a non-concat dimension disagrees and either side is dynamic. The
        message reports both sizes (``left: .., right: ..``).
    StaticShapeError
        If a non-concat dimension disagrees between two static dims.
    AxisError
        If ``axis`` is out of range.
    DeviceAllocationError
        If the output buffer cannot be allocated.
    """
    a, b = tensors
    return tensor_concat_along(a, b, axis)


def concat_along(tensors: Sequence, axis: Union[int, Axes]):
    """Convenience form of `try_concat_along`; errors propagate unchanged."""
    return try_concat_along(tensors, axis)
