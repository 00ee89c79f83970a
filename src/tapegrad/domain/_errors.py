"""
Device-, shape- and tape-related exceptions for tapegrad.

This module defines the complete failure taxonomy of the engine:

- Device failures (`DeviceAllocationError`, `DeviceNotSupportedError`,
  `DeviceMismatchError`) are raised by storage primitives and kernel lookup,
  and propagate unchanged through every kernel and operation.
- Shape failures (`ShapeMismatchError`, `StaticShapeError`) are raised when
  dimensions disagree. Runtime (dynamic) dimensions produce
  `ShapeMismatchError`; two disagreeing static dimensions produce
  `StaticShapeError`, the closest Python analogue of a build-time rejection.
- Programming-contract violations (`AxisError`, `NoTapeError`,
  `TapeConsumedError`) signal misuse of the API rather than bad data.

Nothing in the engine retries after any of these errors.
"""

from __future__ import annotations

from typing import Optional


class DeviceNotSupportedError(RuntimeError):
    """
    Raised when an operation is requested on a device backend that has no
    registered kernel implementation.

    Attributes
    ----------
    op : str
        The name of the operation that was attempted (e.g., "min_to").
    device : str
        String representation of the device on which the operation
        was attempted.
    """

    def __init__(self, op: str, device: str) -> None:
        super().__init__(f"{op} is not implemented for device '{device}'.")
        self.op = op
        self.device = device


class DeviceMismatchError(RuntimeError):
    """
    Raised when an operation is attempted between tensors on different devices.
    """

    def __init__(self, device_a: str, device_b: str) -> None:
        super().__init__(f"Device mismatch: '{device_a}' vs '{device_b}'.")
        self.device_a = device_a
        self.device_b = device_b


class DeviceAllocationError(RuntimeError):
    """
    Raised by a storage backend when a buffer cannot be created.

    This is the single error channel shared by all storage primitives and
    kernels. It is never retried by the engine.

    Attributes
    ----------
    requested : int
        Number of elements that were requested.
    device : str
        Device on which the allocation was attempted.
    """

    def __init__(self, requested: int, device: str, reason: str = "") -> None:
        msg = f"Failed to allocate {requested} elements on device '{device}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
        self.requested = requested
        self.device = device


class ShapeMismatchError(ValueError):
    """
    Raised when runtime-checked dimensions disagree.

    The message always reports the offending left and right sizes, e.g.
    ``"Shape mismatch on axis 1: left: 10, right: 7"``.

    Attributes
    ----------
    left : int
        Size reported by the left operand.
    right : int
        Size reported by the right operand.
    axis : Optional[int]
        Axis on which the sizes disagree, when there is one.
    """

    def __init__(self, left: int, right: int, axis: Optional[int] = None) -> None:
        where = f" on axis {axis}" if axis is not None else ""
        super().__init__(f"Shape mismatch{where}: left: {left}, right: {right}")
        self.left = left
        self.right = right
        self.axis = axis


class StaticShapeError(TypeError):
    """
    Raised when two *static* dimensions disagree.

    Static dimensions are part of a shape's declared type, so a disagreement
    between them is reported as a type error rather than a value error.
    """

    def __init__(self, left: int, right: int, axis: int) -> None:
        super().__init__(
            f"Static dimensions are incompatible on axis {axis}: "
            f"left: {left}, right: {right}"
        )
        self.left = left
        self.right = right
        self.axis = axis


class AxisError(IndexError):
    """
    Raised when an axis selector does not fit the rank it is applied to, or
    when a multi-axis selector is not strictly increasing.
    """


class NoTapeError(TypeError):
    """
    Raised when a tape-dependent operation (e.g. ``backward``) is invoked on a
    tensor that does not own a tape.
    """


class TapeConsumedError(RuntimeError):
    """
    Raised when a tape that has already been drained by ``backward`` is used
    again.
    """
