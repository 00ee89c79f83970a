"""
Sum-reduction onto a smaller shape through `SumToKernel`.
"""

from __future__ import annotations

from typing import Optional

from .....domain._kernel import SumToKernel
from .....domain._shape import Axes, Shape


def tensor_sum_to(self, dst, axes: Optional[Axes] = None):
    Tensor = type(self)
    dst = Shape.coerce(dst)
    axes = self.shape.reduce_to(dst, axes)
    storage = self.device
    kernel = storage.kernel(SumToKernel)

    result = Tensor(dst, kernel.forward(dst, axes, self), storage)

    t, tape = self.split_tape()
    if tape.is_tracing:
        inp = t.ghost()
        out = result.ghost()

        def sum_to_backward(grads) -> None:
            (grad_inp,), grad_out = grads.muts_and_ref([inp], out)
            kernel.backward(axes, inp, grad_inp, grad_out)

        tape.add_backward_op(sum_to_backward)
    return result.put_tape(tape)
