"""
NumPy reference storage backend.

`Cpu` implements the `IStorage` contract with flat NumPy arrays and is the
device every CPU kernel allocates on. It also hosts the tensor factories
(``zeros``, ``ones``, ``tensor``, ``sample_*``) so that every tensor is
created by the backend that owns its buffer.

Allocation failure
------------------
A `TapegradConfig.max_alloc_elements` bound makes allocation failure
deterministic: any request above it raises `DeviceAllocationError`, as does a
``MemoryError`` from NumPy itself. No allocation is ever retried.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Sequence, Type, TypeVar, Union

import numpy as np

from ...domain._device import Device, DeviceType
from ...domain._dtype import Dtype
from ...domain._errors import DeviceAllocationError, ShapeMismatchError
from ...domain._kernel import Kernel
from ...domain._module import IDistribution
from ...domain._shape import DimLike, Shape
from ...domain._storage import IStorage
from .._config import TapegradConfig
from .._logging import get_logger, set_log_level
from .._random import Normal, Uniform
from ..ops import kernel_registry
from ..ops._indexing import strided_view
from ..tensor._tensor import Tensor
from ._buffer import Buffer

logger = get_logger(__name__)

K = TypeVar("K", bound=Kernel)

ShapeLike = Union[Shape, Sequence[DimLike], int]


class Cpu(IStorage):
    """
    CPU storage backend.

    Parameters
    ----------
    config : Optional[TapegradConfig], optional
        Base configuration. Defaults to `TapegradConfig.from_env()`.
    seed : Optional[int], optional
        Overrides ``config.seed``.
    max_alloc_elements : Optional[int], optional
        Overrides ``config.max_alloc_elements``.
    default_dtype : optional
        Overrides ``config.default_dtype``.
    """

    def __init__(
        self,
        config: Optional[TapegradConfig] = None,
        *,
        seed: Optional[int] = None,
        max_alloc_elements: Optional[int] = None,
        default_dtype: Any = None,
    ) -> None:
        base = config if config is not None else TapegradConfig.from_env()
        self.config = base.with_overrides(
            seed=seed,
            max_alloc_elements=max_alloc_elements,
            default_dtype=None if default_dtype is None else Dtype.of(default_dtype),
        )
        if self.config.log_level:
            set_log_level(self.config.log_level)
        self._device = Device("cpu")
        self._rng = np.random.default_rng(self.config.seed)
        self._kernels: Dict[type, Kernel] = {}

    @property
    def device(self) -> Device:
        return self._device

    @property
    def default_dtype(self) -> Dtype:
        return self.config.default_dtype

    @property
    def rng(self) -> np.random.Generator:
        return self._rng

    def manual_seed(self, seed: int) -> None:
        """Reset the random generator to a known state."""
        self._rng = np.random.default_rng(seed)

    # ------------------------------------------------------------------
    # Storage primitives
    # ------------------------------------------------------------------
    def _check_alloc(self, num_elements: int) -> None:
        limit = self.config.max_alloc_elements
        if limit is not None and num_elements > limit:
            logger.error(
                "allocation of %d elements exceeds max_alloc_elements=%d",
                num_elements,
                limit,
            )
            raise DeviceAllocationError(
                num_elements, str(self._device), f"exceeds limit of {limit} elements"
            )

    def _alloc(self, num_elements: int, fill: Callable[[], np.ndarray]) -> Buffer:
        self._check_alloc(num_elements)
        try:
            return Buffer(fill())
        except MemoryError as e:
            logger.error("numpy failed to allocate %d elements", num_elements)
            raise DeviceAllocationError(
                num_elements, str(self._device), "out of memory"
            ) from e

    def try_alloc_zeros(self, num_elements: int, dtype: Dtype) -> Buffer:
        return self._alloc(num_elements, lambda: np.zeros(num_elements, dtype=dtype.name))

    def try_alloc_ones(self, num_elements: int, dtype: Dtype) -> Buffer:
        return self._alloc(num_elements, lambda: np.ones(num_elements, dtype=dtype.name))

    def from_array(self, array: Any, dtype: Dtype) -> Buffer:
        arr = np.asarray(array)
        return self._alloc(int(arr.size), lambda: np.array(arr, dtype=dtype.name).reshape(-1))

    def map(self, buffer: Buffer, fn: Callable[[np.ndarray], Any]) -> Buffer:
        return self.from_array(fn(buffer.array), buffer.dtype)

    def add_assign(self, dst: Buffer, src: Buffer) -> None:
        np.add(dst.array, src.array, out=dst.array)

    def view(self, buffer: Buffer, shape: Sequence[int], strides: Sequence[int]) -> np.ndarray:
        return strided_view(buffer.array, shape, strides)

    def sum(self, buffer: Buffer, shape: Sequence[int], strides: Sequence[int]) -> float:
        return float(np.sum(self.view(buffer, shape, strides)))

    def kernel(self, contract: Type[K]) -> K:
        kernel = self._kernels.get(contract)
        if kernel is None:
            kernel = kernel_registry.resolve(contract, DeviceType.CPU)(self)
            self._kernels[contract] = kernel
        return kernel

    # ------------------------------------------------------------------
    # Tensor factories
    # ------------------------------------------------------------------
    def _dtype(self, dtype: Any) -> Dtype:
        return self.default_dtype if dtype is None else Dtype.of(dtype)

    def zeros(self, shape: ShapeLike, dtype: Any = None) -> Tensor:
        shape = Shape.coerce(shape)
        return Tensor(shape, self.try_alloc_zeros(shape.num_elements, self._dtype(dtype)), self)

    def ones(self, shape: ShapeLike, dtype: Any = None) -> Tensor:
        shape = Shape.coerce(shape)
        return Tensor(shape, self.try_alloc_ones(shape.num_elements, self._dtype(dtype)), self)

    def zeros_like(self, other: Union[Tensor, ShapeLike], dtype: Any = None) -> Tensor:
        if isinstance(other, Tensor):
            return self.zeros(other.shape, other.dtype if dtype is None else dtype)
        return self.zeros(other, dtype)

    def tensor(
        self, array: Any, shape: Optional[ShapeLike] = None, dtype: Any = None
    ) -> Tensor:
        """
        Copy host data into a new tensor.

        Parameters
        ----------
        array : array-like
            Nested lists, NumPy arrays or Python scalars.
        shape : optional
            Declared shape. Defaults to a fully static shape matching
            ``array``. Use `Dyn` dims to declare runtime sizes.

        Raises
        ------
        ShapeMismatchError
            If ``array`` does not have the declared sizes.
        """
        arr = np.asarray(array)
        if shape is None:
            shape = Shape(arr.shape)
        shape = Shape.coerce(shape)
        if arr.ndim != shape.num_dims:
            raise ShapeMismatchError(arr.ndim, shape.num_dims)
        for axis, (got, want) in enumerate(zip(arr.shape, shape.concrete)):
            if got != want:
                raise ShapeMismatchError(got, want, axis)
        return Tensor(shape, self.from_array(arr, self._dtype(dtype)), self)

    def sample(self, shape: ShapeLike, distribution: IDistribution, dtype: Any = None) -> Tensor:
        shape = Shape.coerce(shape)
        self._check_alloc(shape.num_elements)
        values = distribution.sample(self._rng, shape)
        return Tensor(shape, self.from_array(values, self._dtype(dtype)), self)

    def sample_uniform(
        self, shape: ShapeLike, low: float = 0.0, high: float = 1.0, dtype: Any = None
    ) -> Tensor:
        return self.sample(shape, Uniform(low, high), dtype)

    def sample_normal(
        self, shape: ShapeLike, mean: float = 0.0, std: float = 1.0, dtype: Any = None
    ) -> Tensor:
        return self.sample(shape, Normal(mean, std), dtype)

    def __repr__(self) -> str:
        return f"Cpu(dtype={self.default_dtype.name})"
