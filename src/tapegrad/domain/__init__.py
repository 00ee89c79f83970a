"""
Domain layer of tapegrad.

Backend-agnostic contracts: shapes and dtypes, devices, the storage and
kernel contracts, tensor/ghost protocols, collaborator protocols and the
error taxonomy. Nothing in this package imports NumPy.
"""

from ._errors import (
    AxisError,
    DeviceAllocationError,
    DeviceMismatchError,
    DeviceNotSupportedError,
    NoTapeError,
    ShapeMismatchError,
    StaticShapeError,
    TapeConsumedError,
)
from ._dtype import Dtype, float32, float64
from ._shape import (
    Axes,
    Axis,
    Const,
    Dim,
    Dyn,
    Rank0,
    Rank1,
    Rank2,
    Rank3,
    Rank4,
    Rank5,
    Rank6,
    Shape,
)
from ._device import Device, DeviceLike, DeviceType
from ._storage import IBuffer, IStorage
from ._tensor import IGhost, ITensor
from ._kernel import (
    BinaryKernel,
    BinaryOp,
    BroadcastKernel,
    ConcatAlongKernel,
    Kernel,
    MatMulKernel,
    MaxReduceKernel,
    MinReduceKernel,
    SumToKernel,
    UnaryKernel,
    UnaryOp,
)
from ._module import (
    ICanUpdateWithGradients,
    IDistribution,
    IGradientProvider,
    IModule,
    IRandomize,
)
