"""
Kernel registry and per-device dispatch.

Concrete kernels register themselves against a ``(contract, device type)``
pair using a decorator; storage backends resolve them by contract class.

Usage example
-------------
Registering a CPU implementation:

    @kernel_registry.register(MinReduceKernel, DeviceType.CPU)
    class MinReduceCpu(MinReduceKernel):
        ...

Resolving it from a backend:

    kernel = storage.kernel(MinReduceKernel)

Notes
-----
- Registration keys must be unique unless explicitly overwritten.
- A missing implementation raises `DeviceNotSupportedError` at lookup time,
  before any forward computation runs.
"""

from __future__ import annotations

from typing import Callable, Dict, Tuple, Type

from typing_extensions import TypeVar

from ...domain._device import DeviceType
from ...domain._errors import DeviceNotSupportedError
from ...domain._kernel import Kernel
from .._logging import get_logger

logger = get_logger(__name__)

K = TypeVar("K", bound=Type[Kernel])


class KernelRegistry:
    """
    Registry of kernel implementations keyed by contract and device type.
    """

    def __init__(self) -> None:
        self._kernels: Dict[Tuple[Type[Kernel], DeviceType], Type[Kernel]] = {}

    def register(
        self,
        contract: Type[Kernel],
        device_type: DeviceType,
        *,
        overwrite: bool = False,
    ) -> Callable[[K], K]:
        """
        Decorator registering a kernel class for ``(contract, device_type)``.

        Parameters
        ----------
        contract : Type[Kernel]
            Kernel contract the decorated class implements.
        device_type : DeviceType
            Device category the implementation runs on.
        overwrite : bool, optional
            If False (default), raises if the key is already registered.

        Raises
        ------
        TypeError
            If the decorated class does not subclass ``contract``.
        ValueError
            If the key is already registered and ``overwrite`` is False.
        """

        def decorator(impl: K) -> K:
            if not (isinstance(impl, type) and issubclass(impl, contract)):
                raise TypeError(
                    f"{impl!r} does not implement kernel contract {contract.__name__}"
                )
            key = (contract, device_type)
            if not overwrite and key in self._kernels:
                raise ValueError(
                    f"Kernel already registered: {contract.__name__} "
                    f"on {device_type.value!r}"
                )
            self._kernels[key] = impl
            logger.debug(
                "registered %s for %s on %s",
                impl.__name__,
                contract.__name__,
                device_type.value,
            )
            return impl

        return decorator

    def resolve(self, contract: Type[Kernel], device_type: DeviceType) -> Type[Kernel]:
        """
        Look up the implementation class of ``contract`` for ``device_type``.

        Raises
        ------
        DeviceNotSupportedError
            If nothing is registered for that pair.
        """
        try:
            return self._kernels[(contract, device_type)]
        except KeyError:
            raise DeviceNotSupportedError(contract.op_name, device_type.value) from None

    def available(self, device_type: DeviceType) -> Tuple[str, ...]:
        """Names of contracts implemented for ``device_type`` (sorted)."""
        return tuple(
            sorted(c.__name__ for (c, d) in self._kernels if d is device_type)
        )

    def __contains__(self, key: object) -> bool:
        return key in self._kernels


kernel_registry = KernelRegistry()
