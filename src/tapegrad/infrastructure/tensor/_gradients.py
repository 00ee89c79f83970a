"""
Gradient store.

`Gradients` maps tensor identities to owned, dense gradient buffers. Entries
are created lazily (zero-filled) the first time a backward closure asks for
them, and are only ever accumulated into, never overwritten, so a value
consumed by several operations collects every contribution.

Lookups accept anything with an ``id`` (tensors and ghosts alike); entries
are allocated on the ghost's storage backend with the ghost's dtype.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from ...domain._storage import IBuffer
from ...domain._tensor import IGhost


class Gradients:
    """
    Mapping from tensor id to accumulated gradient buffer.

    Notes
    -----
    Each buffer is dense and row-major over the shape of the tensor it
    belongs to, regardless of that tensor's strides.
    """

    def __init__(self) -> None:
        self._grads: Dict[int, IBuffer] = {}
        self._shapes: Dict[int, tuple] = {}

    # ------------------------------------------------------------------
    # Backward-pass access
    # ------------------------------------------------------------------
    def try_alloc_for(self, ghost: IGhost) -> IBuffer:
        """
        Return the entry for ``ghost``, allocating a zero buffer if absent.

        Raises
        ------
        DeviceAllocationError
            If the backend cannot allocate the buffer.
        """
        grad = self._grads.get(ghost.id)
        if grad is None:
            grad = ghost.device.try_alloc_zeros(ghost.num_elements, ghost.dtype)
            self._grads[ghost.id] = grad
            self._shapes[ghost.id] = ghost.shape.concrete
        return grad

    def get_mut(self, ghost: IGhost) -> IBuffer:
        """Writable entry for ``ghost`` (lazily zero-allocated)."""
        return self.try_alloc_for(ghost)

    def get_ref(self, ghost: IGhost) -> IBuffer:
        """Entry for ``ghost`` to read from (lazily zero-allocated)."""
        return self.try_alloc_for(ghost)

    def muts_and_ref(
        self, muts: Sequence[IGhost], ref: IGhost
    ) -> Tuple[List[IBuffer], IBuffer]:
        """
        Fetch the input-gradient entries of an operation together with its
        output-gradient entry.

        Inputs may share an identity (e.g. ``x * x``), in which case they
        share one buffer and both contributions accumulate into it.

        Raises
        ------
        ValueError
            If the output identity is also one of the inputs.
        """
        if any(g.id == ref.id for g in muts):
            raise ValueError(
                f"output gradient {ref.id} cannot alias an input gradient"
            )
        grads = [self.try_alloc_for(g) for g in muts]
        return grads, self.try_alloc_for(ref)

    # ------------------------------------------------------------------
    # Caller-facing lookup
    # ------------------------------------------------------------------
    def get(self, t):
        """
        Gradient of ``t`` as a new untraced tensor of ``t``'s shape.

        Raises
        ------
        KeyError
            If no gradient was recorded for ``t``.
        """
        grad = self._grads.get(t.id)
        if grad is None:
            raise KeyError(f"no gradient recorded for tensor id {t.id}")
        return type(t)(t.shape, t.device.from_array(grad.array, grad.dtype), t.device)

    def get_or_none(self, t):
        return self.get(t) if t.id in self._grads else None

    def to_numpy(self, t) -> Optional[np.ndarray]:
        """Copy of the gradient of ``t`` shaped like ``t``, or None."""
        grad = self._grads.get(t.id)
        if grad is None:
            return None
        return np.array(grad.array).reshape(self._shapes[t.id])

    def remove(self, t) -> Optional[IBuffer]:
        """Detach and return the entry of ``t`` (None if absent)."""
        self._shapes.pop(t.id, None)
        return self._grads.pop(t.id, None)

    def ids(self) -> Tuple[int, ...]:
        return tuple(self._grads)

    def __contains__(self, t: object) -> bool:
        key = t if isinstance(t, int) else getattr(t, "id", None)
        return key in self._grads

    def __len__(self) -> int:
        return len(self._grads)

    def __iter__(self) -> Iterator[int]:
        return iter(self._grads)

    def __repr__(self) -> str:
        return f"Gradients({len(self._grads)} entries)"
