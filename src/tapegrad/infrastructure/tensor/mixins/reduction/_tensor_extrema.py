"""
Min- and max-reductions onto a smaller shape.

Both kernels' backward compare input values with the reduced output, so the
closure keeps untraced handles to the input and output values alongside
their identities.
"""

from __future__ import annotations

from typing import Optional, Type

from .....domain._kernel import MaxReduceKernel, MinReduceKernel
from .....domain._shape import Axes, Shape


def _extremum_to(self, dst, axes: Optional[Axes], contract: Type):
    Tensor = type(self)
    dst = Shape.coerce(dst)
    axes = self.shape.reduce_to(dst, axes)
    storage = self.device
    kernel = storage.kernel(contract)

    result = Tensor(dst, kernel.forward(dst, axes, self), storage)

    t, tape = self.split_tape()
    if tape.is_tracing:
        inp = t.ghost()
        out = result.ghost()

        def extremum_backward(grads) -> None:
            (grad_inp,), grad_out = grads.muts_and_ref([inp], out)
            kernel.backward(axes, t, grad_inp, result, grad_out)

        extremum_backward.__name__ = f"{contract.op_name}_backward"
        tape.add_backward_op(extremum_backward)
    return result.put_tape(tape)


def tensor_min_to(self, dst, axes: Optional[Axes] = None):
    return _extremum_to(self, dst, axes, MinReduceKernel)


def tensor_max_to(self, dst, axes: Optional[Axes] = None):
    return _extremum_to(self, dst, axes, MaxReduceKernel)
