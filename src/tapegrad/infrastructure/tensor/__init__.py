"""
Tensor value, ghost tensors, tape and gradient store.

Public API
----------
- ``Tensor``
- ``GhostTensor``
- ``Gradients``
- ``NoTape``, ``OwnedTape``, ``TapeKind``, ``merge_tapes``, ``backward``
- ``concat_along``, ``try_concat_along``
"""

from ._ghost import GhostTensor
from ._gradients import Gradients
from ._tape import NoTape, OwnedTape, TapeKind, backward, merge_tapes
from ._tensor import Tensor
from .mixins.memory import concat_along, try_concat_along

__all__ = [
    GhostTensor.__name__,
    Gradients.__name__,
    NoTape.__name__,
    OwnedTape.__name__,
    TapeKind.__name__,
    Tensor.__name__,
    backward.__name__,
    concat_along.__name__,
    merge_tapes.__name__,
    try_concat_along.__name__,
]
