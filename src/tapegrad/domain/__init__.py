"""
Domain layer: backend-agnostic contracts, devices, checks and errors.

Nothing in this package imports a numeric library.
"""

from ._backend_tensor import IBackendTensor
from ._tensor import ITensor, IGradients
from ._tensor_check import TensorCheck, broadcast_shapes
from ._errors import (
    TapegradError,
    ShapeMismatchError,
    DeviceNotSupportedError,
    DeviceMismatchError,
    BackendNotAvailableError,
    MissingSeedGradientError,
    GradientNotTrackedError,
    NoGradientError,
    GraphConsistencyError,
)
from .device import Device, DeviceType, DeviceLike
