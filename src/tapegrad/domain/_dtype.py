"""
Numeric element types.

A `Dtype` describes the element type stored in a buffer together with the
constants the kernels need: ``zero``, ``one`` and, for the floating point
reductions, ``infinity`` / ``neg_infinity``.

Only floating point dtypes are provided; every kernel in the engine is a
float kernel.
"""

from __future__ import annotations

import math
from typing import Any, ClassVar, Dict


class Dtype:
    """
    Floating point element type descriptor.

    Parameters
    ----------
    name : str
        Canonical name, matching the NumPy dtype name (e.g. ``"float32"``).
    itemsize : int
        Size of one element in bytes.

    Notes
    -----
    Instances are interned: use `Dtype.of` (or the module-level `float32` /
    `float64` singletons) instead of constructing new ones.
    """

    __slots__ = ("name", "itemsize")

    _REGISTRY: ClassVar[Dict[str, "Dtype"]] = {}

    zero: ClassVar[float] = 0.0
    one: ClassVar[float] = 1.0
    infinity: ClassVar[float] = math.inf
    neg_infinity: ClassVar[float] = -math.inf

    def __init__(self, name: str, itemsize: int) -> None:
        self.name = name
        self.itemsize = itemsize

    @classmethod
    def _register(cls, name: str, itemsize: int) -> "Dtype":
        dt = cls(name, itemsize)
        cls._REGISTRY[name] = dt
        return dt

    @classmethod
    def of(cls, value: Any) -> "Dtype":
        """
        Resolve a dtype from a `Dtype`, a name, or any object exposing a
        ``name`` attribute (such as a NumPy dtype or scalar type).

        Raises
        ------
        ValueError
            If the value does not name a supported dtype.
        """
        if isinstance(value, Dtype):
            return value
        name = value if isinstance(value, str) else getattr(value, "name", None)
        if not isinstance(name, str):
            name = getattr(value, "__name__", None)
        try:
            return cls._REGISTRY[str(name)]
        except KeyError:
            raise ValueError(
                f"Unsupported dtype {value!r}. Available: {sorted(cls._REGISTRY)}"
            ) from None

    def __repr__(self) -> str:
        return f"Dtype('{self.name}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dtype):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)


float32 = Dtype._register("float32", 4)
float64 = Dtype._register("float64", 8)
