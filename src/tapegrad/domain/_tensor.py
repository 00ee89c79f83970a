"""
Tensor interface definitions.

Two structural contracts are defined here:

- `ITensor`  : a strided view of a device buffer with a stable identity.
  Kernels read element data through it.
- `IGhost`   : the identity and layout of a tensor without its data. Backward
  closures capture ghosts and use them as gradient-store keys.

Both are `typing.Protocol`s so the kernel contracts in `tapegrad.domain` do
not depend on the concrete NumPy-backed implementation.
"""

from __future__ import annotations

from typing import Protocol, Tuple, runtime_checkable

from ._dtype import Dtype
from ._shape import Shape
from ._storage import IBuffer, IStorage


@runtime_checkable
class IGhost(Protocol):
    """
    Identity + layout of a tensor, never its data.

    A ghost is a valid gradient-store key for as long as something else keeps
    the identity it names alive.
    """

    @property
    def id(self) -> int: ...

    @property
    def shape(self) -> Shape: ...

    @property
    def strides(self) -> Tuple[int, ...]: ...

    @property
    def dtype(self) -> Dtype: ...

    @property
    def num_elements(self) -> int: ...


@runtime_checkable
class ITensor(IGhost, Protocol):
    """
    Strided, immutable view of a device buffer.

    Invariants
    ----------
    - For contiguous tensors ``len(data) == shape.num_elements``.
    - Broadcast views address the same buffer with zero strides on the
      broadcast axes.
    """

    @property
    def data(self) -> IBuffer: ...

    @property
    def device(self) -> IStorage: ...
