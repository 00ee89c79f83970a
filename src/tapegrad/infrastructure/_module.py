"""
Infrastructure module base class.

`Module` satisfies the forward, randomize and update contracts of
`tapegrad.domain._module` for layers built on `Tensor`:

- parameter and submodule registration through attribute assignment
- recursive traversal (`parameters`, `named_parameters`)
- `randomize`: redraw every parameter from a distribution
- `update`: replace every parameter with ``param - provider.gradient(param)``
- `__call__` forwarding to `forward`

Tensors are immutable, so parameters are never changed in place: updates and
randomization assign new tensors. Parameters are untraced; they receive
gradients because operations accumulate into every input, traced or not.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Tuple

from ..domain._module import IDistribution, IGradientProvider
from .tensor._tensor import Tensor


class Module:
    """
    Base class for layers and containers.

    Attributes
    ----------
    _parameters : Dict[str, Tensor]
        Parameters owned directly by this module.
    _modules : Dict[str, Module]
        Child modules, in registration order.
    """

    def __init__(self) -> None:
        super().__setattr__("_parameters", {})
        super().__setattr__("_modules", {})

    def __setattr__(self, name: str, value) -> None:
        if name in {"_parameters", "_modules"}:
            super().__setattr__(name, value)
            return
        if isinstance(value, Tensor):
            self._parameters[name] = value
        elif isinstance(value, Module):
            self._modules[name] = value
        elif value is None:
            self._parameters.pop(name, None)
            self._modules.pop(name, None)
        super().__setattr__(name, value)

    def parameters(self) -> Iterator[Tensor]:
        """Own parameters first, then each child's (recursive)."""
        for p in self._parameters.values():
            yield p
        for m in self._modules.values():
            yield from m.parameters()

    def named_parameters(self, prefix: str = "") -> Iterator[Tuple[str, Tensor]]:
        base = prefix + "." if prefix else ""
        for name, p in self._parameters.items():
            yield (f"{base}{name}", p)
        for child_name, child in self._modules.items():
            yield from child.named_parameters(f"{base}{child_name}")

    def randomize(self, storage, distribution: IDistribution) -> None:
        """
        Redraw every parameter (recursively) from ``distribution`` using the
        random generator of ``storage``. Redrawn parameters get new ids.
        """
        for name, p in list(self._parameters.items()):
            setattr(self, name, storage.sample(p.shape, distribution, p.dtype))
        for child in self._modules.values():
            child.randomize(storage, distribution)

    def update(self, provider: IGradientProvider, unused: List[str], prefix: str = "") -> None:
        """
        Apply ``param - provider.gradient(param)`` to every parameter.

        Parameters without a gradient keep their value and their qualified
        name is appended to ``unused``.
        """
        base = prefix + "." if prefix else ""
        for name, p in list(self._parameters.items()):
            step = provider.gradient(p)
            if step is None:
                unused.append(f"{base}{name}")
                continue
            new_value = p.to_numpy() - step
            setattr(self, name, p.device.tensor(new_value, p.shape, p.dtype))
        for child_name, child in self._modules.items():
            child.update(provider, unused, f"{base}{child_name}")

    def forward(self, x):
        raise NotImplementedError

    def __call__(self, x):
        return self.forward(x)

    def __repr__(self) -> str:
        children = ", ".join(f"{k}={v!r}" for k, v in self._modules.items())
        return f"{type(self).__name__}({children})"
