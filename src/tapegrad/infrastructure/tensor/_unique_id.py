"""
Tensor identities.

Every freshly created tensor receives the next id from a process-wide
counter. Views that alias the same value (``duplicate``, ``realize``, tape
handoffs) keep the id so their gradients land on one gradient-store entry.
"""

from itertools import count

_COUNTER = count()


def unique_id() -> int:
    """Return the next tensor id. Ids are never reused within a process."""
    return next(_COUNTER)
