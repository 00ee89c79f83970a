"""
Loss functions composed from tensor operations.
"""

from __future__ import annotations


def mse_loss(pred, target):
    """
    Mean squared error ``mean((pred - target) ** 2)`` as a rank-0 tensor.

    ``pred`` normally carries the tape; ``target`` is usually untraced. The
    tapes are merged like any binary operation.

    Raises
    ------
    ShapeMismatchError, StaticShapeError
        If the operands' sizes differ.
    """
    return (pred - target).square().mean()
