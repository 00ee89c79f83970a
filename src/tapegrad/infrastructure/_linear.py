"""
Fully connected layer.

`Linear` computes ``y = x @ W + b`` for a single sample ``(in,)`` or a batch
``(B, in)``. ``W`` has shape ``(in, out)`` and ``b`` shape ``(out,)``.
Parameters start from ``Uniform(-1/sqrt(in), 1/sqrt(in))`` drawn from the
backend's random generator.
"""

from __future__ import annotations

import math

from ..domain._shape import Axes, Shape
from ._module import Module
from ._random import Uniform


class Linear(Module):
    """
    Affine transform ``x @ W + b``.

    Parameters
    ----------
    in_features : int
        Size of the last input dimension.
    out_features : int
        Size of the last output dimension.
    device : Cpu
        Storage backend that owns the parameters.
    bias : bool, optional
        Whether to add a bias. Defaults to True.
    """

    def __init__(self, in_features: int, out_features: int, *, device, bias: bool = True) -> None:
        super().__init__()
        if in_features <= 0 or out_features <= 0:
            raise ValueError(
                f"in_features and out_features must be > 0, got {in_features}, {out_features}"
            )
        self.in_features = int(in_features)
        self.out_features = int(out_features)
        bound = 1.0 / math.sqrt(self.in_features)
        init = Uniform(-bound, bound)
        self.weight = device.sample(Shape.of(self.in_features, self.out_features), init)
        self.bias = device.sample(Shape.of(self.out_features), init) if bias else None

    def forward(self, x):
        if x.ndim not in (1, 2):
            raise ValueError(f"Linear expects (in,) or (B, in) input, got {x.shape!r}")
        y = x.matmul(self.weight)
        if self.bias is None:
            return y
        # the bias picks up the tape so its broadcast is recorded too
        y, tape = y.split_tape()
        b = self.bias.put_tape(tape)
        if y.ndim == 2:
            b = b.broadcast_to(y.shape, Axes(0))
        return y + b

    def __repr__(self) -> str:
        return (
            f"Linear(in_features={self.in_features}, out_features={self.out_features}, "
            f"bias={self.bias is not None})"
        )
