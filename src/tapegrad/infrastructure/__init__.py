"""
Infrastructure layer of tapegrad: the NumPy storage backend, CPU kernels,
the tensor/tape machinery and the collaborators built on top of it.
"""
