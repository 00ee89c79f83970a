"""
Storage (device backend) contract.

A storage backend owns raw element buffers for one device and exposes the
small set of primitives the operation layer composes:

- allocation (`try_alloc_zeros`, `try_alloc_ones`, `from_array`)
- elementwise `map` and in-place `add_assign`
- strided read access (`view`) and a full `sum` reduction
- kernel lookup (`kernel`)

Allocation failure is the only error a storage primitive reports, always as
`DeviceAllocationError`. Arithmetic is total over the dtype.

The domain layer does not depend on NumPy; buffers are typed structurally
through `IBuffer`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Protocol, Sequence, Type, TypeVar, runtime_checkable

from ._device import DeviceLike
from ._dtype import Dtype

K = TypeVar("K")


@runtime_checkable
class IBuffer(Protocol):
    """
    Flat element buffer owned by a storage backend.

    Buffers are shared by reference between tensor views that alias them.
    Once captured by a tensor they are read-only (`writeable` is False);
    gradient buffers stay writable.
    """

    @property
    def dtype(self) -> Dtype: ...

    @property
    def writeable(self) -> bool: ...

    def __len__(self) -> int: ...


class IStorage(ABC):
    """
    Abstract storage backend for a single device.

    Every method that creates a buffer may raise `DeviceAllocationError`.
    """

    @property
    @abstractmethod
    def device(self) -> DeviceLike:
        """Device descriptor this backend allocates on."""

    @property
    @abstractmethod
    def default_dtype(self) -> Dtype:
        """Dtype used when a factory is called without one."""

    @abstractmethod
    def try_alloc_zeros(self, num_elements: int, dtype: Dtype) -> IBuffer:
        """Allocate a zero-initialized buffer of ``num_elements`` elements."""

    @abstractmethod
    def try_alloc_ones(self, num_elements: int, dtype: Dtype) -> IBuffer:
        """Allocate a buffer filled with ``dtype.one``."""

    @abstractmethod
    def from_array(self, array: Any, dtype: Dtype) -> IBuffer:
        """Copy host data (any array-like) into a new flat buffer."""

    @abstractmethod
    def map(self, buffer: IBuffer, fn: Callable[[Any], Any]) -> IBuffer:
        """Apply ``fn`` elementwise, producing a new buffer."""

    @abstractmethod
    def add_assign(self, dst: IBuffer, src: IBuffer) -> None:
        """Accumulate ``src`` into ``dst`` in place (``dst += src``)."""

    @abstractmethod
    def view(
        self, buffer: IBuffer, shape: Sequence[int], strides: Sequence[int]
    ) -> Any:
        """
        Read-only strided view of ``buffer``; element ``idx`` lives at linear
        offset ``sum(idx[k] * strides[k])``.
        """

    @abstractmethod
    def sum(self, buffer: IBuffer, shape: Sequence[int], strides: Sequence[int]) -> float:
        """Sum every element addressed by ``shape``/``strides``."""

    @abstractmethod
    def kernel(self, contract: Type[K]) -> K:
        """
        Return this backend's implementation of a kernel contract.

        Raises
        ------
        DeviceNotSupportedError
            If no implementation is registered for this device.
        """
