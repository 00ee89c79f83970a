"""
Shape, dimension and axis descriptors.

A tensor shape is an ordered tuple of `Dim` values. Each dimension is either
*static* (its size is part of the shape's declared type, built with `Const`)
or *dynamic* (only known at runtime, built with `Dyn`). Ranks 0 through 6
are supported.

This module also implements the compatibility relations every operation
relies on:

- ``reduce_to``      : ``dst`` is ``src`` with some axes removed
- ``broadcast_to``   : ``src`` is ``dst`` with some axes removed
- ``concat_along``   : all dims but one agree; that one is summed
- ``realize_as``     : same sizes, different static/dynamic tagging

Disagreements involving a dynamic dimension raise `ShapeMismatchError`.
Disagreements between two static dimensions raise `StaticShapeError`.
Axis selectors that do not fit a rank raise `AxisError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from typing import Iterable, Iterator, Sequence, Tuple, Union

from ._errors import AxisError, ShapeMismatchError, StaticShapeError


@dataclass(frozen=True)
class Dim:
    """
    A single dimension of a shape.

    Attributes
    ----------
    size : int
        Number of elements along this dimension. Always >= 0.
    static : bool
        True if the size is part of the declared shape type, False if it is a
        runtime size.
    """

    size: int
    static: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.size, int) or isinstance(self.size, bool):
            raise TypeError(f"Dim size must be an int, got {type(self.size)!r}")
        if self.size < 0:
            raise ValueError(f"Dim size must be >= 0, got {self.size}")

    def __add__(self, other: "Dim") -> "Dim":
        # static + static stays static; anything dynamic makes the sum dynamic
        return Dim(self.size + other.size, self.static and other.static)

    def __repr__(self) -> str:
        return f"Const({self.size})" if self.static else f"Dyn({self.size})"


def Const(size: int) -> Dim:
    """Build a static dimension."""
    return Dim(size, True)


def Dyn(size: int) -> Dim:
    """Build a dynamic (runtime) dimension."""
    return Dim(size, False)


DimLike = Union[Dim, int]


class Axes:
    """
    Ordered selection of axis indices.

    Parameters
    ----------
    *indices : int
        Axis indices. They are validated against a rank with `check`.

    Notes
    -----
    An `Axes` value is only meaningful relative to a rank. Operations call
    ``axes.check(rank)`` before using it, so an out-of-range or unordered
    selector is rejected before any kernel runs.
    """

    __slots__ = ("indices",)

    def __init__(self, *indices: int) -> None:
        for i in indices:
            if not isinstance(i, int) or isinstance(i, bool):
                raise TypeError(f"Axis index must be an int, got {type(i)!r}")
        self.indices: Tuple[int, ...] = tuple(indices)

    @classmethod
    def all(cls, rank: int) -> "Axes":
        """Select every axis of a rank-`rank` shape."""
        return cls(*range(rank))

    def check(self, rank: int) -> "Axes":
        """
        Validate this selector for a shape of the given rank.

        Returns
        -------
        Axes
            ``self``, to allow chaining.

        Raises
        ------
        AxisError
            If an index is outside ``[0, rank)`` or indices are not strictly
            increasing.
        """
        prev = -1
        for i in self.indices:
            if i < 0 or i >= rank:
                raise AxisError(f"axis {i} out of range for rank {rank}")
            if i <= prev:
                raise AxisError(
                    f"axes must be strictly increasing, got {self.indices}"
                )
            prev = i
        return self

    def __iter__(self) -> Iterator[int]:
        return iter(self.indices)

    def __len__(self) -> int:
        return len(self.indices)

    def __contains__(self, axis: object) -> bool:
        return axis in self.indices

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Axes):
            return NotImplemented
        return self.indices == other.indices

    def __hash__(self) -> int:
        return hash(self.indices)

    def __repr__(self) -> str:
        return f"Axes{self.indices}"


def Axis(index: int) -> Axes:
    """Select a single axis."""
    return Axes(index)


def _as_dim(d: DimLike) -> Dim:
    if isinstance(d, Dim):
        return d
    return Dim(d, True)


def _check_dims_agree(left: Dim, right: Dim, axis: int) -> None:
    if left.size == right.size:
        return
    if left.static and right.static:
        raise StaticShapeError(left.size, right.size, axis)
    raise ShapeMismatchError(left.size, right.size, axis)


class Shape:
    """
    Ordered tuple of dimensions.

    Parameters
    ----------
    dims : Iterable[Dim | int]
        Dimensions. Plain ints are static dimensions; use `Dyn` for runtime
        dimensions.

    Raises
    ------
    ValueError
        If the rank exceeds `Shape.MAX_RANK`.
    """

    MAX_RANK = 6

    __slots__ = ("_dims",)

    def __init__(self, dims: Iterable[DimLike] = ()) -> None:
        dims_t = tuple(_as_dim(d) for d in dims)
        if len(dims_t) > self.MAX_RANK:
            raise ValueError(
                f"rank {len(dims_t)} exceeds the maximum supported rank {self.MAX_RANK}"
            )
        self._dims: Tuple[Dim, ...] = dims_t

    @classmethod
    def of(cls, *dims: DimLike) -> "Shape":
        return cls(dims)

    @classmethod
    def coerce(cls, value: Union["Shape", Sequence[DimLike], int]) -> "Shape":
        """
        Convert a `Shape`, a tuple of dims/ints or a single int to a `Shape`.
        """
        if isinstance(value, Shape):
            return value
        if isinstance(value, (int, Dim)):
            return cls((value,))
        return cls(value)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def dims(self) -> Tuple[Dim, ...]:
        return self._dims

    @property
    def num_dims(self) -> int:
        return len(self._dims)

    @property
    def concrete(self) -> Tuple[int, ...]:
        """Concrete sizes of every dimension."""
        return tuple(d.size for d in self._dims)

    @property
    def num_elements(self) -> int:
        n = 1
        for d in self._dims:
            n *= d.size
        return n

    @property
    def is_static(self) -> bool:
        return all(d.static for d in self._dims)

    def size(self, axis: int) -> int:
        Axis(axis).check(self.num_dims)
        return self._dims[axis].size

    def contiguous_strides(self) -> Tuple[int, ...]:
        """Row-major element strides for this shape."""
        strides = [0] * self.num_dims
        acc = 1
        for i in range(self.num_dims - 1, -1, -1):
            strides[i] = acc
            acc *= self._dims[i].size
        return tuple(strides)

    def __getitem__(self, axis: int) -> Dim:
        return self._dims[axis]

    def __len__(self) -> int:
        return len(self._dims)

    def __iter__(self) -> Iterator[Dim]:
        return iter(self._dims)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return self._dims == other._dims

    def __hash__(self) -> int:
        return hash(self._dims)

    def __repr__(self) -> str:
        return f"Shape({', '.join(repr(d) for d in self._dims)})"

    # ------------------------------------------------------------------
    # Compatibility relations
    # ------------------------------------------------------------------
    def remove_axes(self, axes: Axes) -> "Shape":
        axes.check(self.num_dims)
        return Shape(d for i, d in enumerate(self._dims) if i not in axes)

    def replace(self, axis: int, dim: DimLike) -> "Shape":
        Axis(axis).check(self.num_dims)
        dims = list(self._dims)
        dims[axis] = _as_dim(dim)
        return Shape(dims)

    def infer_reduction_axes(self, dst: "Shape") -> Axes:
        """
        Find the unique axis set whose removal turns ``self`` into ``dst``.

        Raises
        ------
        ValueError
            If no axis set matches, or if more than one does (the caller must
            then pass the axes explicitly).
        """
        n_removed = self.num_dims - dst.num_dims
        if n_removed < 0:
            raise ValueError(
                f"cannot reduce rank {self.num_dims} shape to rank {dst.num_dims}"
            )
        matches = []
        for removed in combinations(range(self.num_dims), n_removed):
            kept = [d.size for i, d in enumerate(self._dims) if i not in removed]
            if tuple(kept) == dst.concrete:
                matches.append(Axes(*removed))
        if not matches:
            raise ValueError(f"{self!r} cannot be reduced to {dst!r}")
        if len(matches) > 1:
            raise ValueError(
                f"reduction from {self!r} to {dst!r} is ambiguous "
                f"(candidates: {matches}); pass axes explicitly"
            )
        return matches[0]

    def reduce_to(self, dst: "Shape", axes: Union[Axes, int, None] = None) -> Axes:
        """
        Check that ``self`` reduces to ``dst`` along ``axes``.

        A plain ``int`` selects a single axis, like `Axis`.

        Returns
        -------
        Axes
            The validated (or inferred) reduction axes.
        """
        if axes is None:
            return self.infer_reduction_axes(dst)
        if isinstance(axes, int):
            axes = Axis(axes)
        axes.check(self.num_dims)
        kept = self.remove_axes(axes)
        if kept.num_dims != dst.num_dims:
            raise AxisError(
                f"reducing {self!r} along {axes} gives rank {kept.num_dims}, "
                f"expected rank {dst.num_dims}"
            )
        for i, (k, d) in enumerate(zip(kept, dst)):
            _check_dims_agree(k, d, i)
        return axes

    def broadcast_to(self, dst: "Shape", axes: Union[Axes, int, None] = None) -> Axes:
        """
        Check that ``self`` broadcasts to ``dst`` by inserting ``axes``.

        Returns
        -------
        Axes
            The validated (or inferred) broadcast axes, expressed in the
            coordinates of ``dst``.
        """
        return dst.reduce_to(self, axes)

    def concat_along(self, other: "Shape", axis: int) -> "Shape":
        """
        Compute the shape of ``concat(self, other)`` along ``axis``.

        All dimensions other than ``axis`` must agree. The output size along
        ``axis`` is the sum of both inputs; every other axis copies the common
        size.

        Raises
        ------
        AxisError
            If ``axis`` is outside ``[0, rank)``.
        ShapeMismatchError
            If a non-concat dimension disagrees and either side is dynamic.
        StaticShapeError
            If a non-concat dimension disagrees between two static dims.
        ValueError
            If the ranks differ.
        """
        if self.num_dims != other.num_dims:
            raise ValueError(
                f"concat requires equal ranks, got {self.num_dims} and {other.num_dims}"
            )
        Axis(axis).check(self.num_dims)
        for i in range(self.num_dims):
            if i != axis:
                _check_dims_agree(self._dims[i], other._dims[i], i)
        dims = list(self._dims)
        dims[axis] = self._dims[axis] + other._dims[axis]
        return Shape(dims)

    def realize_as(self, target: "Shape") -> "Shape":
        """
        Check that ``target`` has exactly the concrete sizes of ``self``.

        Used to convert between static and dynamic views of the same data.
        """
        if self.num_dims != target.num_dims:
            raise ShapeMismatchError(self.num_dims, target.num_dims)
        for i, (a, b) in enumerate(zip(self._dims, target._dims)):
            if a.size != b.size:
                raise ShapeMismatchError(a.size, b.size, i)
        return target


def _rank(n: int):
    def build(*sizes: int) -> Shape:
        if len(sizes) != n:
            raise TypeError(f"Rank{n} takes {n} sizes, got {len(sizes)}")
        return Shape(Const(s) for s in sizes)

    build.__name__ = f"Rank{n}"
    build.__doc__ = f"Build a fully static rank-{n} shape."
    return build


Rank0 = _rank(0)
Rank1 = _rank(1)
Rank2 = _rank(2)
Rank3 = _rank(3)
Rank4 = _rank(4)
Rank5 = _rank(5)
Rank6 = _rank(6)
