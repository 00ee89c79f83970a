"""
Kernel contracts.

A kernel is a device-specific forward/backward function pair implementing the
numerics of one operation. The operation layer calls ``forward`` to build an
output buffer, then registers a backward closure on the tape that calls the
matching ``backward``.

Every contract below is implemented once per device type and registered in
the kernel registry (see `tapegrad.infrastructure.ops`). A backend resolves
an implementation with ``storage.kernel(Contract)``.

Rules shared by every ``backward``
----------------------------------
- Gradient buffers (``grad_*``) are dense, row-major over the shape of the
  tensor they belong to, regardless of that tensor's strides.
- Input gradients are *accumulated* (``+=``), never assigned: the same input
  may already hold contributions from other consumers.
- ``backward`` never mutates forward-pass data.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Tuple

from ._shape import Axes, Shape
from ._storage import IBuffer, IStorage
from ._tensor import IGhost, ITensor


class Kernel(ABC):
    """
    Base class of every kernel contract.

    Attributes
    ----------
    op_name : str
        Operation name used in error messages.
    storage : IStorage
        Backend the kernel allocates its outputs on.
    """

    op_name: ClassVar[str] = "kernel"

    def __init__(self, storage: IStorage) -> None:
        self.storage = storage


class UnaryOp(ABC):
    """
    Elementwise function description consumed by `UnaryKernel`.

    ``forward(x)`` computes ``y = f(x)``; ``derivative(x, y)`` computes
    ``f'(x)`` given both input and output values.
    """

    name: ClassVar[str] = "unary"

    @abstractmethod
    def forward(self, x: Any) -> Any: ...

    @abstractmethod
    def derivative(self, x: Any, y: Any) -> Any: ...


class BinaryOp(ABC):
    """
    Elementwise two-argument function description consumed by `BinaryKernel`.
    """

    name: ClassVar[str] = "binary"

    @abstractmethod
    def forward(self, a: Any, b: Any) -> Any: ...

    @abstractmethod
    def partials(self, a: Any, b: Any) -> Tuple[Any, Any]:
        """Return ``(df/da, df/db)`` evaluated at ``(a, b)``."""


class UnaryKernel(Kernel):
    op_name = "unary"

    @abstractmethod
    def forward(self, op: UnaryOp, inp: ITensor) -> IBuffer: ...

    @abstractmethod
    def backward(
        self,
        op: UnaryOp,
        inp: ITensor,
        grad_inp: IBuffer,
        out: ITensor,
        grad_out: IBuffer,
    ) -> None: ...


class BinaryKernel(Kernel):
    op_name = "binary"

    @abstractmethod
    def forward(self, op: BinaryOp, lhs: ITensor, rhs: ITensor) -> IBuffer: ...

    @abstractmethod
    def backward(
        self,
        op: BinaryOp,
        lhs: ITensor,
        grad_lhs: IBuffer,
        rhs: ITensor,
        grad_rhs: IBuffer,
        grad_out: IBuffer,
    ) -> None: ...


class SumToKernel(Kernel):
    """Sum-reduction of ``inp`` over ``axes`` into ``dst``."""

    op_name = "sum_to"

    @abstractmethod
    def forward(self, dst: Shape, axes: Axes, inp: ITensor) -> IBuffer: ...

    @abstractmethod
    def backward(
        self, axes: Axes, inp: IGhost, grad_inp: IBuffer, grad_out: IBuffer
    ) -> None: ...


class MinReduceKernel(Kernel):
    """
    Min-reduction of ``inp`` over ``axes`` into ``dst``.

    Forward scans every input element mapped to an output element in the
    deterministic reduction order, starting from ``dtype.infinity``. When
    ``dst`` has rank 0 this is a single global scan.

    Backward routes ``grad_out`` to every input element equal to the output
    minimum. Tied minima each receive the full upstream gradient.
    """

    op_name = "min_to"

    @abstractmethod
    def forward(self, dst: Shape, axes: Axes, inp: ITensor) -> IBuffer: ...

    @abstractmethod
    def backward(
        self,
        axes: Axes,
        inp: ITensor,
        grad_inp: IBuffer,
        out: ITensor,
        grad_out: IBuffer,
    ) -> None: ...


class MaxReduceKernel(Kernel):
    """Mirror image of `MinReduceKernel` (``-infinity`` accumulator)."""

    op_name = "max_to"

    @abstractmethod
    def forward(self, dst: Shape, axes: Axes, inp: ITensor) -> IBuffer: ...

    @abstractmethod
    def backward(
        self,
        axes: Axes,
        inp: ITensor,
        grad_inp: IBuffer,
        out: ITensor,
        grad_out: IBuffer,
    ) -> None: ...


class BroadcastKernel(Kernel):
    """
    Broadcast of ``inp`` to ``dst`` by inserting ``axes``.

    Forward produces no data: it returns the strides of a view of the input
    buffer with zero strides on the inserted axes. Backward sums the upstream
    gradient over the inserted axes.
    """

    op_name = "broadcast_to"

    @abstractmethod
    def forward(self, dst: Shape, axes: Axes, inp: ITensor) -> Tuple[int, ...]: ...

    @abstractmethod
    def backward(
        self,
        axes: Axes,
        inp: IGhost,
        grad_inp: IBuffer,
        out: IGhost,
        grad_out: IBuffer,
    ) -> None: ...


class ConcatAlongKernel(Kernel):
    """
    Concatenation of two tensors along one axis.

    Forward copies ``a`` into the prefix region along ``axis`` and ``b`` into
    the suffix region. Backward splits ``grad_out`` at the same boundary and
    accumulates each part into the matching input gradient.
    """

    op_name = "concat_along"

    @abstractmethod
    def forward(self, axis: int, a: ITensor, b: ITensor, out_shape: Shape) -> IBuffer: ...

    @abstractmethod
    def backward(
        self,
        axis: int,
        a: IGhost,
        grad_a: IBuffer,
        b: IGhost,
        grad_b: IBuffer,
        grad_out: IBuffer,
    ) -> None: ...


class MatMulKernel(Kernel):
    """Matrix product for (K,)x(K,N) and (M,K)x(K,N) operands."""

    op_name = "matmul"

    @abstractmethod
    def forward(self, lhs: ITensor, rhs: ITensor) -> IBuffer: ...

    @abstractmethod
    def backward(
        self,
        lhs: ITensor,
        grad_lhs: IBuffer,
        rhs: ITensor,
        grad_rhs: IBuffer,
        grad_out: IBuffer,
    ) -> None: ...
