"""
Concrete backend tensor implementations and their registry.

Only the NumPy backend is imported eagerly; CuPy and PyTorch backends load on
first request through `get_backend`.
"""

from ._registry import (
    register_backend,
    get_backend,
    available_backends,
    canonical_backend_name,
)
from ._numpy_backend import NumpyTensor

__all__ = [
    register_backend.__name__,
    get_backend.__name__,
    available_backends.__name__,
    canonical_backend_name.__name__,
    NumpyTensor.__name__,
]
