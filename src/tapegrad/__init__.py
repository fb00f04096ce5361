"""
tapegrad: reverse-mode automatic differentiation over pluggable tensor backends.

Typical use::

    import tapegrad as tg

    x = tg.Tensor.from_data([[1.0, 2.0], [3.0, 4.0]], requires_grad=True)
    y = (x * x).sum()
    grads = y.backward()
    grads[x]            # backend tensor holding 2 * x

Backends are selected by name ("numpy", "cupy", "torch"); only NumPy is
imported eagerly.
"""

import logging

from ._config import (
    default_backend,
    default_dtype,
    get_default_backend,
    get_default_dtype,
    set_default_backend,
    set_default_dtype,
)
from .domain import (
    BackendNotAvailableError,
    Device,
    DeviceMismatchError,
    DeviceNotSupportedError,
    GradientNotTrackedError,
    GraphConsistencyError,
    IBackendTensor,
    MissingSeedGradientError,
    NoGradientError,
    ShapeMismatchError,
    TapegradError,
    TensorCheck,
)
from .infrastructure import functional
from .infrastructure.autodiff import (
    Gradients,
    GraphNode,
    OperationDescriptor,
    OpKind,
    Tape,
    build_tape,
    run_backward,
)
from .infrastructure.backends import available_backends, get_backend, register_backend
from .infrastructure.tensor import Tensor

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Tensor",
    "Gradients",
    "GraphNode",
    "OperationDescriptor",
    "OpKind",
    "Tape",
    "build_tape",
    "run_backward",
    "functional",
    "Device",
    "IBackendTensor",
    "TensorCheck",
    "get_backend",
    "register_backend",
    "available_backends",
    "get_default_backend",
    "set_default_backend",
    "default_backend",
    "get_default_dtype",
    "set_default_dtype",
    "default_dtype",
    "TapegradError",
    "ShapeMismatchError",
    "DeviceMismatchError",
    "DeviceNotSupportedError",
    "BackendNotAvailableError",
    "MissingSeedGradientError",
    "GradientNotTrackedError",
    "NoGradientError",
    "GraphConsistencyError",
]
