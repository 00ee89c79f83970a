"""
Stochastic Gradient Descent (SGD).

`Sgd` is the gradient provider of the update contract: for each parameter
it looks up the gradient recorded for the parameter's identity and returns
``lr * grad`` as the step to subtract. Modules apply the step themselves.

Parameters absent from the gradient store are skipped; their names are
returned by `Sgd.update` so dead branches can be detected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .._logging import get_logger
from ..tensor._gradients import Gradients

logger = get_logger(__name__)


@dataclass
class Sgd:
    """
    SGD update rule ``p <- p - lr * g``.

    Parameters
    ----------
    lr : float, optional
        Learning rate. Must be positive. Defaults to 1e-2.
    """

    lr: float = 1e-2
    _gradients: Optional[Gradients] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.lr = float(self.lr)
        if self.lr <= 0.0:
            raise ValueError(f"lr must be > 0, got {self.lr}")

    def gradient(self, param) -> Optional[np.ndarray]:
        if self._gradients is None:
            return None
        grad = self._gradients.to_numpy(param)
        if grad is None:
            return None
        return self.lr * grad

    def update(self, module, gradients: Gradients) -> List[str]:
        """
        Apply one step to every parameter of ``module``.

        Returns
        -------
        List[str]
            Qualified names of parameters that had no gradient.
        """
        unused: List[str] = []
        self._gradients = gradients
        try:
            module.update(self, unused)
        finally:
            self._gradients = None
        if unused:
            logger.debug("parameters without gradients: %s", ", ".join(unused))
        return unused
