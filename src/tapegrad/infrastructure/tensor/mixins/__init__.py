"""
Operation mixins composed into `Tensor`.

Every differentiable operation follows the same pattern:

1. validate shapes and resolve the kernel (both before any computation),
2. run the kernel forward with no tape involvement,
3. split the tape(s) off the inputs (merging left-then-right for binary ops),
4. when tracing, record exactly one closure that captures ghosts (and only
   the tensors the kernel backward reads) and accumulates into the store,
5. put the tape on the output.
"""
