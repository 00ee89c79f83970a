"""
Gradient tape and the reverse pass.

A tensor carries one of two tape variants:

- `NoTape`    : forward-only. Recording is a no-op and the tensor can never
  be the root of ``backward``.
- `OwnedTape` : tracing. Holds the backward closures recorded by every
  operation issued since ``trace()``.

Each recorded closure receives a sequence number from a process-wide
counter. Because every consumer of a tensor is issued after its producer,
running closures in descending sequence order visits each operation only
after all of its consumers have accumulated into its output gradient.

Merging
-------
`merge_tapes` combines the tapes of a binary operation's inputs:

============  ============  ===============================================
left          right         result
============  ============  ===============================================
NoTape        NoTape        NoTape
OwnedTape     NoTape        left
NoTape        OwnedTape     right
OwnedTape     OwnedTape     left's closures followed by right's (new tape)
============  ============  ===============================================

Closures are keyed by sequence number, so merging a tape with itself or
re-merging tapes that share history never records a closure twice.
"""

from __future__ import annotations

import warnings
from enum import Enum
from itertools import count
from typing import Callable, Dict, List, Optional, Union

from ...domain._errors import NoTapeError, TapeConsumedError
from .._logging import get_logger
from ._gradients import Gradients

logger = get_logger(__name__)

BackwardOp = Callable[[Gradients], None]

_SEQUENCE = count()


class TapeKind(Enum):
    NO_TAPE = "no_tape"
    TRACING = "tracing"


class NoTape:
    """Tape variant of an untraced tensor. Records nothing."""

    __slots__ = ()

    kind = TapeKind.NO_TAPE
    is_tracing = False

    def add_backward_op(self, op: BackwardOp) -> None:
        return None

    def __len__(self) -> int:
        return 0

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NoTape)

    def __hash__(self) -> int:
        return hash(NoTape)

    def __repr__(self) -> str:
        return "NoTape()"


class OwnedTape:
    """
    Tape variant of a traced tensor.

    Parameters
    ----------
    gradients : Optional[Gradients], optional
        Existing store to accumulate into on ``backward``. A fresh store is
        created when omitted.
    """

    __slots__ = ("_ops", "gradients", "_consumed")

    kind = TapeKind.TRACING
    is_tracing = True

    def __init__(self, gradients: Optional[Gradients] = None) -> None:
        self._ops: Dict[int, BackwardOp] = {}
        self.gradients = gradients
        self._consumed = False

    @property
    def consumed(self) -> bool:
        return self._consumed

    def _check_live(self) -> None:
        if self._consumed:
            raise TapeConsumedError(
                "this tape was already drained by backward(); call trace() again"
            )

    def add_backward_op(self, op: BackwardOp) -> int:
        """Record ``op`` and return its sequence number."""
        self._check_live()
        seq = next(_SEQUENCE)
        self._ops[seq] = op
        logger.debug("recorded %s as op #%d", getattr(op, "__name__", op), seq)
        return seq

    def drain(self) -> List[BackwardOp]:
        """
        Take every recorded closure, newest first, and mark the tape consumed.
        """
        self._check_live()
        self._consumed = True
        ops = [self._ops[seq] for seq in sorted(self._ops, reverse=True)]
        self._ops.clear()
        return ops

    def __len__(self) -> int:
        return len(self._ops)

    def __repr__(self) -> str:
        state = "consumed" if self._consumed else f"{len(self._ops)} ops"
        return f"OwnedTape({state})"


Tape = Union[NoTape, OwnedTape]


def merge_tapes(left: Tape, right: Tape) -> Tape:
    """
    Combine the tapes of two operands (see the module docstring table).

    Raises
    ------
    TapeConsumedError
        If either tracing side was already drained.
    """
    if not left.is_tracing:
        return right
    if not right.is_tracing:
        return left
    if left is right:
        return left
    left._check_live()
    right._check_live()

    merged = OwnedTape(left.gradients if left.gradients is not None else right.gradients)
    merged._ops.update(left._ops)
    for seq, op in right._ops.items():
        merged._ops.setdefault(seq, op)
    logger.debug(
        "merged tapes (%d + %d ops -> %d)", len(left), len(right), len(merged)
    )
    return merged


def backward(root) -> Gradients:
    """
    Run the reverse pass from ``root``.

    The root's gradient entry is seeded with ones (exactly 1.0 for a scalar)
    before any closure runs; closures then run newest first.

    Returns
    -------
    Gradients
        The completed store (the one passed to ``trace`` if any).

    Raises
    ------
    NoTapeError
        If ``root`` is not traced.
    TapeConsumedError
        If the tape was already drained.
    DeviceAllocationError
        If a gradient buffer cannot be allocated.
    """
    tape = root.tape
    if not tape.is_tracing:
        raise NoTapeError(
            "backward() requires a traced tensor; call .trace() before the forward pass"
        )
    if root.num_elements != 1:
        warnings.warn(
            f"backward() from a non-scalar root of shape {root.shape!r} seeds "
            "every element with 1.0",
            RuntimeWarning,
            stacklevel=2,
        )

    grads = tape.gradients if tape.gradients is not None else Gradients()
    ops = tape.drain()

    storage = root.device
    seed = storage.try_alloc_ones(root.num_elements, root.dtype)
    storage.add_assign(grads.try_alloc_for(root.ghost()), seed)

    logger.debug("running %d backward ops", len(ops))
    for op in ops:
        op(grads)
    return grads
