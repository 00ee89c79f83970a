"""
Concrete NumPy-backed tensor value.

A `Tensor` is an immutable view ``(shape, strides)`` over a flat buffer owned
by a storage backend, plus an identity and a tape handle. Operations never
mutate a tensor: they return new tensors, and tape handoffs (``trace``,
``split_tape``, ``put_tape``) return copies that share buffer and identity.

Operation methods are provided by mixins:

- reduction  : ``mean``, ``sum``, ``sum_to``, ``min_to``, ``max_to``
- memory     : ``concat_along``, ``broadcast_to``, ``realize``
- arithmetic : ``+``, ``-``, ``*``, ``/`` (by scalar), ``@``
- unary      : ``exp``, ``relu``, ``tanh``, ``square``
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

import numpy as np

from ...domain._dtype import Dtype
from ...domain._shape import Shape
from ...domain._storage import IStorage
from ..ops._indexing import strided_view
from ._ghost import GhostTensor
from ._gradients import Gradients
from ._tape import NoTape, OwnedTape, Tape, backward
from ._unique_id import unique_id
from .mixins.arithmetic import TensorMixinArithmetic
from .mixins.memory import TensorMixinMemory
from .mixins.reduction import TensorMixinReduction
from .mixins.unary import TensorMixinUnary


def _check_strides(shape: Shape, strides: Tuple[int, ...], buffer_len: int) -> None:
    """
    Every element of ``shape`` addressed through ``strides`` must lie inside
    a buffer of ``buffer_len`` elements.

    Raises
    ------
    ValueError
        On a stride count that differs from the rank, a negative stride, or
        an offset past the end of the buffer.
    """
    if len(strides) != shape.num_dims:
        raise ValueError(
            f"got {len(strides)} strides for rank {shape.num_dims} shape"
        )
    if any(s < 0 for s in strides):
        raise ValueError(f"strides must be non-negative, got {tuple(strides)}")
    if shape.num_elements == 0:
        return
    last = sum((size - 1) * stride for size, stride in zip(shape.concrete, strides))
    if last >= buffer_len:
        raise ValueError(
            f"strides {tuple(strides)} reach offset {last} of shape {shape!r}, "
            f"buffer holds {buffer_len} elements"
        )


class Tensor(
    TensorMixinReduction,
    TensorMixinMemory,
    TensorMixinArithmetic,
    TensorMixinUnary,
):
    """
    Strided view of a device buffer with an identity and a tape.

    Parameters
    ----------
    shape : Shape
        Shape of the view (static/dynamic tags included).
    data : Buffer
        Backing buffer. It is frozen (made read-only) on capture.
    device : IStorage
        Storage backend that owns ``data``.
    strides : Optional[Tuple[int, ...]], optional
        Element strides. Defaults to contiguous row-major strides, in which
        case ``len(data)`` must equal ``shape.num_elements``. Explicit strides
        must be non-negative, one per dim, and keep every element inside
        ``data``; a ValueError is raised otherwise.
    tape : optional
        `NoTape` (default) or `OwnedTape`.
    id : Optional[int], optional
        Identity to reuse. A fresh id is assigned when omitted.

    Notes
    -----
    Tensors are usually created through backend factories
    (``Cpu.zeros``, ``Cpu.tensor``...) or returned by operations.
    """

    __slots__ = ("_shape", "_strides", "_data", "_device", "_tape", "_id")

    def __init__(
        self,
        shape: Shape,
        data,
        device: IStorage,
        strides: Optional[Tuple[int, ...]] = None,
        tape: Optional[Tape] = None,
        id: Optional[int] = None,
    ) -> None:
        shape = Shape.coerce(shape)
        if strides is None:
            strides = shape.contiguous_strides()
            if len(data) != shape.num_elements:
                raise ValueError(
                    f"buffer holds {len(data)} elements, shape {shape!r} "
                    f"needs {shape.num_elements}"
                )
        else:
            _check_strides(shape, strides, len(data))
        if data.writeable:
            data.freeze()
        self._shape = shape
        self._strides = tuple(int(s) for s in strides)
        self._data = data
        self._device = device
        self._tape = NoTape() if tape is None else tape
        self._id = unique_id() if id is None else id

    # ------------------------------------------------------------------
    # Layout and identity
    # ------------------------------------------------------------------
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
    def dtype(self) -> Dtype:
        return self._data.dtype

    @property
    def data(self):
        return self._data

    @property
    def device(self) -> IStorage:
        return self._device

    @property
    def num_elements(self) -> int:
        return self._shape.num_elements

    @property
    def ndim(self) -> int:
        return self._shape.num_dims

    @property
    def is_contiguous(self) -> bool:
        return self._strides == self._shape.contiguous_strides()

    def numel(self) -> int:
        return self._shape.num_elements

    def ghost(self) -> GhostTensor:
        """Identity/layout handle of this tensor (no data)."""
        return GhostTensor(self._id, self._shape, self._strides, self._device, self.dtype)

    # ------------------------------------------------------------------
    # Host access
    # ------------------------------------------------------------------
    def view(self) -> np.ndarray:
        """Read-only strided NumPy view sharing this tensor's buffer."""
        return strided_view(self._data.array, self._shape.concrete, self._strides)

    def to_numpy(self) -> np.ndarray:
        """Row-major copy of the elements, shaped like the tensor."""
        return np.array(self.view())

    def item(self) -> float:
        """
        Python float of a single-element tensor.

        Raises
        ------
        ValueError
            If the tensor does not hold exactly one element.
        """
        if self.num_elements != 1:
            raise ValueError(
                f"item() requires a single element, tensor has {self.num_elements}"
            )
        return float(self.view().reshape(-1)[0])

    # ------------------------------------------------------------------
    # Tape handling
    # ------------------------------------------------------------------
    @property
    def tape(self) -> Tape:
        return self._tape

    @property
    def has_tape(self) -> bool:
        return self._tape.is_tracing

    def _with_tape(self, tape: Tape) -> "Tensor":
        return Tensor(self._shape, self._data, self._device, self._strides, tape, self._id)

    def trace(self, gradients: Optional[Gradients] = None) -> "Tensor":
        """
        Start recording: copy of this tensor holding a new, empty tape.

        Parameters
        ----------
        gradients : Optional[Gradients], optional
            Store that ``backward`` should accumulate into.
        """
        return self._with_tape(OwnedTape(gradients))

    def split_tape(self) -> Tuple["Tensor", Tape]:
        """Return ``(untraced copy, tape)``."""
        return self._with_tape(NoTape()), self._tape

    def put_tape(self, tape: Tape) -> "Tensor":
        """Copy of this tensor carrying ``tape``."""
        return self._with_tape(tape)

    def with_empty_tape(self) -> "Tensor":
        """Copy with a fresh, empty tape of the same kind."""
        if self._tape.is_tracing:
            return self._with_tape(OwnedTape())
        return self._with_tape(NoTape())

    def duplicate(self) -> "Tensor":
        """
        Second handle to the same value: shared buffer and identity, no tape.

        Used to feed one value to two consumers when only one of them should
        carry the tape forward.
        """
        return self._with_tape(NoTape())

    def backward(self) -> Gradients:
        """Run the reverse pass from this tensor. See `_tape.backward`."""
        return backward(self)

    def __repr__(self) -> str:
        return (
            f"Tensor(shape={self._shape!r}, dtype={self.dtype.name}, "
            f"id={self._id}, tape={self._tape!r})"
        )

    def __array__(self, dtype: Any = None, copy: Any = None) -> np.ndarray:
        arr = self.to_numpy()
        return arr if dtype is None else arr.astype(dtype)
