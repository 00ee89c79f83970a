"""
Reduction mixin defining the public Tensor reduction API.

Each method documents the forward value and the backward rule it records;
the numerics live in the reduction kernels resolved from the tensor's
storage backend.
"""

from __future__ import annotations

from typing import Optional

from .....domain._shape import Axes, Shape
from ._tensor_extrema import tensor_max_to, tensor_min_to
from ._tensor_mean import tensor_mean
from ._tensor_sum import tensor_sum_to


class TensorMixinReduction:
    """
    Mixin providing reductions.

    ``try_*`` methods raise the typed errors of `tapegrad.domain` on invalid
    input; the plain forms call them and let those errors propagate.
    """

    __slots__ = ()

    def try_mean(self):
        """
        Arithmetic mean over every element, as a rank-0 tensor.

        Backward rule:
            ``d(mean(x)) / dx = 1 / numel(x)`` for every element.

        Raises
        ------
        ValueError
            If the tensor is empty.
        DeviceAllocationError
            If an output or gradient buffer cannot be allocated.
        """
        return tensor_mean(self)

    def mean(self):
        return self.try_mean()

    def try_sum_to(self, dst, axes: Optional[Axes] = None):
        """
        Sum over the axes that turn this shape into ``dst``.

        Parameters
        ----------
        dst : Shape or tuple
            Destination shape; this shape with ``axes`` removed.
        axes : Optional[Union[Axes, int]], optional
            Reduced axes, or a single axis as a plain int. Inferred when the
            reduction is unambiguous.

        Raises
        ------
        AxisError
            If ``axes`` is invalid for this rank.
        ShapeMismatchError, StaticShapeError
            If the kept dimensions disagree with ``dst``.
        ValueError
            If ``axes`` is omitted and cannot be inferred uniquely.
        """
        return tensor_sum_to(self, dst, axes)

    def sum_to(self, dst, axes: Optional[Axes] = None):
        return self.try_sum_to(dst, axes)

    def sum(self):
        """Sum of every element, as a rank-0 tensor."""
        return self.try_sum_to(Shape(()), Axes.all(self.shape.num_dims))

    def try_min_to(self, dst, axes: Optional[Axes] = None):
        """
        Minimum over the axes that turn this shape into ``dst``.

        Backward rule:
            Every input element equal to its group's minimum receives the
            full upstream gradient; ties are not split.

        Errors are the same as `try_sum_to`.
        """
        return tensor_min_to(self, dst, axes)

    def min_to(self, dst, axes: Optional[Axes] = None):
        return self.try_min_to(dst, axes)

    def try_max_to(self, dst, axes: Optional[Axes] = None):
        """Mirror image of `try_min_to`."""
        return tensor_max_to(self, dst, axes)

    def max_to(self, dst, axes: Optional[Axes] = None):
        return self.try_max_to(dst, axes)
