"""
GPU compute engine backed by CuPy.

Importing this module requires CuPy; the backend registry imports it lazily
and reports `BackendNotAvailableError` when the import fails.
"""

from __future__ import annotations

from typing import Any

import cupy
import cupyx
import numpy as np
from typing_extensions import Self

from ...domain.device._device import Device
from ...domain._errors import DeviceNotSupportedError
from ._array_backend import ArrayModuleTensor


class CupyTensor(ArrayModuleTensor):
    """
    Backend tensor holding a `cupy.ndarray` on a CUDA device.

    Host data is copied to the device selected by `device` ("cuda:<index>",
    default "cuda:0"). Results of operations stay on the operands' device.
    """

    __slots__ = ()

    backend_name = "cupy"
    xp = cupy

    @property
    def device(self) -> Device:
        return Device(f"cuda:{self._array.device.id}")

    @classmethod
    def _from_host(cls, array: np.ndarray, device: Any) -> Self:
        d = Device.from_any(device if device is not None else "cuda:0")
        if not d.is_cuda():
            raise DeviceNotSupportedError(op="cupy tensor", device=str(d))
        with cupy.cuda.Device(d.index):
            return cls(cupy.asarray(array))

    def _wrap(self, array: Any) -> Self:
        with self._array.device:
            return type(self)(cupy.asarray(array))

    def to_numpy(self) -> np.ndarray:
        return cupy.asnumpy(self._array)

    def _add_at(self, out: Any, index: Any, values: Any) -> None:
        with out.device:
            cupyx.scatter_add(out, index, values)
