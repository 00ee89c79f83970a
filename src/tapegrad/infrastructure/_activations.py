"""
Activation functions as parameter-free modules.
"""

from __future__ import annotations

from ._module import Module


class ReLU(Module):
    """Elementwise ``max(x, 0)``."""

    def forward(self, x):
        return x.relu()


class Tanh(Module):
    """Elementwise hyperbolic tangent."""

    def forward(self, x):
        return x.tanh()
