"""
Memory/structure mixin: concatenation, broadcasting and shape realization.
"""

from __future__ import annotations

from typing import Optional, Union

from .....domain._shape import Axes, Shape
from ._tensor_broadcast import tensor_broadcast_to
from ._tensor_concat import tensor_concat_along


class TensorMixinMemory:

    __slots__ = ()

    def try_concat_along(self, other, axis: Union[int, Axes]):
        """
        Concatenate ``self`` (prefix) and ``other`` (suffix) along ``axis``.

        The output has ``self``'s dims except along ``axis``, where the size
        is the sum of both inputs. A static+static concat dim stays static;
        if either side is dynamic the result is dynamic.

        Backward rule:
            ``grad_out`` is split at ``self.shape.size(axis)``; each part is
            added into the matching input gradient.

        See `try_concat_along` in this package for the raised errors.
        """
        return tensor_concat_along(self, other, axis)

    def concat_along(self, other, axis: Union[int, Axes]):
        return self.try_concat_along(other, axis)

    def try_broadcast_to(self, dst, axes: Optional[Axes] = None):
        """
        Broadcast to ``dst`` by inserting ``axes`` (inferred when unambiguous).

        Backward rule:
            The upstream gradient is summed over the inserted axes.
        """
        return tensor_broadcast_to(self, dst, axes)

    def broadcast_to(self, dst, axes: Optional[Axes] = None):
        return self.try_broadcast_to(dst, axes)

    def realize(self, shape):
        """
        Re-tag this tensor with a shape of identical sizes (e.g. static to
        dynamic dims). Buffer, strides, identity and tape are kept, so no
        closure is recorded.

        Raises
        ------
        ShapeMismatchError
            If the concrete sizes differ.
        """
        target = self.shape.realize_as(Shape.coerce(shape))
        return type(self)(target, self.data, self.device, self.strides, self.tape, self.id)
