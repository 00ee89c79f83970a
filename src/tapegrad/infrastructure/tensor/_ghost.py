"""
Ghost tensors: identity and layout without data.

Backward closures capture ghosts instead of tensors so that recording an
operation does not keep its buffers alive. A ghost exposes only layout
accessors, so it cannot be used to read element data.
"""

from __future__ import annotations

from typing import Tuple

from ...domain._dtype import Dtype
from ...domain._shape import Shape
from ...domain._storage import IStorage


class GhostTensor:
    """
    Shape/stride fingerprint of a tensor, used as a gradient-store key.

    Parameters
    ----------
    id : int
        Identity of the tensor it stands for.
    shape : Shape
        Shape of that tensor.
    strides : Tuple[int, ...]
        Element strides of that tensor.
    device : IStorage
        Storage backend gradients for this identity are allocated on.
    dtype : Dtype
        Element type of that tensor.
    """

    __slots__ = ("_id", "_shape", "_strides", "_device", "_dtype")

    def __init__(
        self,
        id: int,
        shape: Shape,
        strides: Tuple[int, ...],
        device: IStorage,
        dtype: Dtype,
    ) -> None:
        self._id = id
        self._shape = shape
        self._strides = tuple(strides)
        self._device = device
        self._dtype = dtype

    @property
    def id(self) -> int:
        return self._id

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def strides(self) -> Tuple[int, ...]:
        return self._strides

    @property
    def device(self) -> IStorage:
        return self._device

    @property
    def dtype(self) -> Dtype:
        return self._dtype

    @property
    def num_elements(self) -> int:
        return self._shape.num_elements

    def __repr__(self) -> str:
        return f"GhostTensor(id={self._id}, shape={self._shape!r})"
