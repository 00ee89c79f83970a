"""
Sequential container module.

`Sequential` applies its children in order, ``y = L_n(...L_2(L_1(x)))``.
Children are registered under their position (``"0"``, ``"1"``, ...), so
parameter names read like ``"0.weight"``.
"""

from __future__ import annotations

from typing import Iterator, Tuple

from .._module import Module


class Sequential(Module):
    """
    Ordered container of modules.

    Parameters
    ----------
    *layers : Module
        Children, applied in the given order.
    """

    def __init__(self, *layers: Module) -> None:
        super().__init__()
        for layer in layers:
            self.add(layer)

    def add(self, layer: Module) -> None:
        """Append ``layer`` after the current last child."""
        setattr(self, str(len(self._modules)), layer)

    def forward(self, x):
        out = x
        for layer in self._modules.values():
            out = layer(out)
        return out

    @property
    def layers(self) -> Tuple[Module, ...]:
        return tuple(self._modules.values())

    def __len__(self) -> int:
        return len(self._modules)

    def __iter__(self) -> Iterator[Module]:
        return iter(self._modules.values())

    def __getitem__(self, idx: int) -> Module:
        return self.layers[idx]
