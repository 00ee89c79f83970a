"""
Elementwise unary operations through `UnaryKernel`.

The kernel backward needs both the input and the output values (e.g. the
derivative of ``exp`` is its output), so the closure keeps untraced handles
to both.
"""

from __future__ import annotations

from .....domain._kernel import UnaryKernel, UnaryOp


def apply_unary(self, op: UnaryOp):
    Tensor = type(self)
    storage = self.device
    kernel = storage.kernel(UnaryKernel)

    result = Tensor(self.shape, kernel.forward(op, self), storage)

    t, tape = self.split_tape()
    if tape.is_tracing:
        inp = t.ghost()
        out = result.ghost()

        def unary_backward(grads) -> None:
            (grad_inp,), grad_out = grads.muts_and_ref([inp], out)
            kernel.backward(op, t, grad_inp, result, grad_out)

        unary_backward.__name__ = f"{op.name}_backward"
        tape.add_backward_op(unary_backward)
    return result.put_tape(tape)
