"""
tapegrad: reverse-mode automatic differentiation on a gradient tape for
statically shaped tensors.

Typical use::

    from tapegrad import Cpu, Axis

    dev = Cpu(seed=0)
    a = dev.tensor([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    loss = a.trace().exp().mean()
    grads = loss.backward()
    grads.to_numpy(a)
"""

from .domain import (
    Axes,
    Axis,
    AxisError,
    Const,
    Device,
    DeviceAllocationError,
    DeviceMismatchError,
    DeviceNotSupportedError,
    DeviceType,
    Dim,
    Dtype,
    Dyn,
    NoTapeError,
    Rank0,
    Rank1,
    Rank2,
    Rank3,
    Rank4,
    Rank5,
    Rank6,
    Shape,
    ShapeMismatchError,
    StaticShapeError,
    TapeConsumedError,
    float32,
    float64,
)
from .infrastructure._activations import ReLU, Tanh
from .infrastructure._config import TapegradConfig
from .infrastructure._linear import Linear
from .infrastructure._losses import mse_loss
from .infrastructure._module import Module
from .infrastructure._random import Normal, Uniform
from .infrastructure.models import Sequential
from .infrastructure.ops import kernel_registry
from .infrastructure.optimizers import Sgd
from .infrastructure.storage import Buffer, Cpu
from .infrastructure.tensor import (
    GhostTensor,
    Gradients,
    NoTape,
    OwnedTape,
    TapeKind,
    Tensor,
    backward,
    concat_along,
    merge_tapes,
    try_concat_along,
)

__version__ = "0.1.0"
