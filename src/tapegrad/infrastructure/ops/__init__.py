"""
Kernel implementations and the kernel registry.

Importing this package registers every CPU kernel in `kernel_registry`
through import side effects. Backends resolve kernels with
``kernel_registry.resolve(contract, device_type)``.

Public API
----------
- ``kernel_registry``
- ``KernelRegistry``
- ``index_for_reductions``
"""

from . import broadcast_cpu, concat_cpu, elementwise_cpu, matmul_cpu, reduce_cpu
from ._indexing import index_for_reductions
from ._registry import KernelRegistry, kernel_registry

__all__ = [
    KernelRegistry.__name__,
    index_for_reductions.__name__,
    "kernel_registry",
]
