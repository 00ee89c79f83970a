"""
Broadcast to a larger shape by inserting axes.

The output is a new identity viewing the input buffer with zero strides on
the inserted axes; no data is copied. Backward sums the upstream gradient
over those axes.
"""

from __future__ import annotations

from typing import Optional

from .....domain._kernel import BroadcastKernel
from .....domain._shape import Axes, Shape


def tensor_broadcast_to(self, dst, axes: Optional[Axes] = None):
    Tensor = type(self)
    dst = Shape.coerce(dst)
    axes = self.shape.broadcast_to(dst, axes)
    storage = self.device
    kernel = storage.kernel(BroadcastKernel)

    strides = kernel.forward(dst, axes, self)
    result = Tensor(dst, self.data, storage, strides=strides)

    t, tape = self.split_tape()
    if tape.is_tracing:
        inp = t.ghost()
        out = result.ghost()

        def broadcast_to_backward(grads) -> None:
            (grad_inp,), grad_out = grads.muts_and_ref([inp], out)
            kernel.backward(axes, inp, grad_inp, out, grad_out)

        tape.add_backward_op(broadcast_to_backward)
    return result.put_tape(tape)
