"""
CPU array engine backed by NumPy.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from typing_extensions import Self

from ...domain.device._device import Device
from ...domain._errors import DeviceNotSupportedError
from ._array_backend import ArrayModuleTensor

_CPU = Device("cpu")


class NumpyTensor(ArrayModuleTensor):
    """
    Backend tensor holding a `numpy.ndarray` in host memory.
    """

    __slots__ = ()

    backend_name = "numpy"
    xp = np

    @property
    def device(self) -> Device:
        return _CPU

    @classmethod
    def _from_host(cls, array: np.ndarray, device: Any) -> Self:
        d = Device.from_any(device)
        if not d.is_cpu():
            raise DeviceNotSupportedError(op="numpy tensor", device=str(d))
        return cls(array)

    def to_numpy(self) -> np.ndarray:
        return np.array(self._array, copy=True)

    def _add_at(self, out: Any, index: Any, values: Any) -> None:
        np.add.at(out, index, values)
