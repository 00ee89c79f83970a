"""
Device descriptors.

A `Device` names *where* buffers live ("cpu" or "cuda:<index>"). It carries no
resources itself: storage backends (see `tapegrad.domain._storage`) own the
buffers and are looked up by `DeviceType` when kernels are dispatched.

`DeviceLike` is the structural contract the rest of the engine types against,
so alternative descriptors can be used without class-identity checks.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional, Protocol, runtime_checkable


class DeviceType(Enum):
    """Category of a computation device, independent of its index."""

    CPU = "cpu"
    CUDA = "cuda"


@runtime_checkable
class DeviceLike(Protocol):
    """Duck-typed device contract."""

    type: DeviceType
    index: Optional[int]

    def is_cpu(self) -> bool: ...
    def is_cuda(self) -> bool: ...


class Device:
    """
    Normalized device descriptor.

    Parameters
    ----------
    device : str
        ``"cpu"`` or ``"cuda:<index>"``.

    Raises
    ------
    ValueError
        If the string does not match a supported format.
    """

    __slots__ = ("type", "index")

    _CUDA_PATTERN = re.compile(r"^cuda:(\d+)$")

    def __init__(self, device: str = "cpu") -> None:
        if device == "cpu":
            self.type = DeviceType.CPU
            self.index: Optional[int] = None
            return
        m = self._CUDA_PATTERN.match(device)
        if not m:
            raise ValueError(
                f"Invalid device '{device}'. Expected 'cpu' or 'cuda:<index>'"
            )
        self.type = DeviceType.CUDA
        self.index = int(m.group(1))

    def is_cpu(self) -> bool:
        return self.type is DeviceType.CPU

    def is_cuda(self) -> bool:
        return self.type is DeviceType.CUDA

    def __str__(self) -> str:
        return "cpu" if self.type is DeviceType.CPU else f"cuda:{self.index}"

    def __repr__(self) -> str:
        return f"Device('{self}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Device):
            return NotImplemented
        return (self.type, self.index) == (other.type, other.index)

    def __hash__(self) -> int:
        return hash((self.type, self.index))
