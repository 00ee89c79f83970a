"""
Collaborator contracts consumed by layers, optimizers and training loops.

The engine does not ship a training framework; it exposes three structural
contracts that such collaborators build on:

- forward   : `IModule`
- randomize : `IRandomize` together with `IDistribution`
- update    : `ICanUpdateWithGradients` driven by an `IGradientProvider`

All of them are `typing.Protocol`s, so any object implementing the methods
participates without inheriting from anything in tapegrad.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from ._shape import Shape
from ._tensor import ITensor


@runtime_checkable
class IModule(Protocol):
    """
    Forward contract.

    A module maps an input tensor to an output tensor. The output carries the
    tape of the input, so tracking propagates through the module: a traced
    input gives a traced output and an untraced input records nothing.
    """

    def forward(self, x: ITensor) -> Any:
        """
        Run the module on ``x``.

        Returns
        -------
        Any
            Usually a single tensor; multi-output modules may return a tuple.
        """
        ...


@runtime_checkable
class IDistribution(Protocol):
    """
    Random distribution used by the randomization contract.

    ``sample`` draws ``shape`` values from ``rng`` (a NumPy ``Generator``)
    and returns them as a host array.
    """

    def sample(self, rng: Any, shape: Shape) -> Any: ...


@runtime_checkable
class IRandomize(Protocol):
    """
    Randomization contract.

    Re-draws every parameter of the object from ``distribution``, using the
    random source owned by ``storage``.
    """

    def randomize(self, storage: Any, distribution: IDistribution) -> None: ...


@runtime_checkable
class IGradientProvider(Protocol):
    """
    Source of parameter updates.

    ``gradient(param)`` returns the host array to *subtract* from the
    parameter, or None if the gradient store holds nothing for its identity.
    The provider owns the update rule (e.g. scaling by a learning rate).
    """

    def gradient(self, param: ITensor) -> Optional[Any]: ...


@runtime_checkable
class ICanUpdateWithGradients(Protocol):
    """
    Update contract.

    Implementations replace each of their parameters with
    ``param - provider.gradient(param)`` and leave parameters without a
    gradient unchanged. Parameters that received no update are reported in
    ``unused`` (by attribute path) so callers can detect dead branches.
    """

    def update(self, provider: IGradientProvider, unused: list) -> None: ...
