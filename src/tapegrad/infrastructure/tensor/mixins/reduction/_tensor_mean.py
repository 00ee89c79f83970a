"""
Mean over every element, composed from storage primitives.

The forward value is ``sum / n``. The recorded closure scales a constant
derivative field of ``1 / n`` (one entry per input element) by the scalar
upstream gradient and adds it into the input gradient.
"""

from __future__ import annotations

from .....domain._shape import Shape


def tensor_mean(self):
    Tensor = type(self)
    storage = self.device
    n = self.num_elements
    if n == 0:
        raise ValueError("mean() of an empty tensor is undefined")

    total = storage.sum(self.data, self.shape.concrete, self.strides)
    result = Tensor(Shape(()), storage.from_array(total / n, self.dtype), storage)

    t, tape = self.split_tape()
    if tape.is_tracing:
        deriv = storage.map(storage.try_alloc_ones(n, self.dtype), lambda v: v / n)
        inp = t.ghost()
        out = result.ghost()

        def mean_backward(grads) -> None:
            (grad_inp,), grad_out = grads.muts_and_ref([inp], out)
            g = grad_out.array[0]
            storage.add_assign(grad_inp, storage.map(deriv, lambda v: v * g))

        tape.add_backward_op(mean_backward)
    return result.put_tape(tape)
