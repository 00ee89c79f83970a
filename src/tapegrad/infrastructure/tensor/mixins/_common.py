"""Checks shared by the operation mixins."""

from __future__ import annotations

from ....domain._errors import DeviceMismatchError, ShapeMismatchError, StaticShapeError


def check_same_device(lhs, rhs) -> None:
    if lhs.device.device != rhs.device.device:
        raise DeviceMismatchError(str(lhs.device.device), str(rhs.device.device))


def check_same_sizes(lhs, rhs) -> None:
    """
    Elementwise operands must have the same rank and sizes.

    Raises
    ------
    StaticShapeError
        If two static dimensions disagree.
    ShapeMismatchError
        If ranks differ or a dynamic dimension disagrees.
    """
    if lhs.shape.num_dims != rhs.shape.num_dims:
        raise ShapeMismatchError(lhs.shape.num_dims, rhs.shape.num_dims)
    for axis, (a, b) in enumerate(zip(lhs.shape, rhs.shape)):
        if a.size == b.size:
            continue
        if a.static and b.static:
            raise StaticShapeError(a.size, b.size, axis)
        raise ShapeMismatchError(a.size, b.size, axis)
