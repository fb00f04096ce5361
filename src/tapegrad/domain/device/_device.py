"""
Device descriptors.

This module defines the placement vocabulary shared by every backend:

- `DeviceType`: the category of a device (CPU or CUDA GPU)
- `Device`: a validated descriptor parsed from strings such as "cpu",
  "cuda" or "cuda:1"

A device says *where* a value lives, not *which engine* produced it. Two
backend tensors are only combinable when both their backend names and their
devices are equal.
"""

from enum import Enum
from typing import Union
import re


class DeviceType(Enum):
    """
    Enumeration of supported device categories.

    Attributes
    ----------
    CPU : DeviceType
        Host memory.
    CUDA : DeviceType
        CUDA-capable GPU memory.
    """

    CPU = "cpu"
    CUDA = "cuda"


class Device:
    """
    Concrete computation device descriptor.

    Parameters
    ----------
    device : str
        Device identifier string. Must be one of:
        - "cpu"
        - "cuda" (shorthand for "cuda:0")
        - "cuda:<index>", where <index> is a non-negative integer

    Raises
    ------
    ValueError
        If the provided device string does not match the supported formats.

    Notes
    -----
    `__slots__` keeps descriptors small; they are created for every backend
    tensor that reports its placement.
    """

    __slots__ = ("type", "index")

    _CUDA_PATTERN = re.compile(r"^cuda(?::(\d+))?$")

    def __init__(self, device: str):
        if device == "cpu":
            self.type = DeviceType.CPU
            self.index = None
            return

        m = self._CUDA_PATTERN.match(device)
        if not m:
            raise ValueError(
                f"Invalid device '{device}'. Expected 'cpu', 'cuda' or 'cuda:<index>'"
            )
        self.type = DeviceType.CUDA
        self.index = int(m.group(1) or 0)

    @classmethod
    def from_any(cls, device: Union["Device", str, None]) -> "Device":
        """
        Normalize a user-supplied placement into a `Device`.

        Parameters
        ----------
        device : Device | str | None
            Existing descriptor, device string, or None (meaning CPU).

        Returns
        -------
        Device
            The normalized descriptor.
        """
        if device is None:
            return cls("cpu")
        if isinstance(device, Device):
            return device
        return cls(str(device))

    def __str__(self) -> str:
        return "cpu" if self.type is DeviceType.CPU else f"cuda:{self.index}"

    def __repr__(self) -> str:
        return f"Device('{self}')"

    def __eq__(self, other: object) -> bool:
        """
        Devices are equal when they share type and (for CUDA) index.
        """
        if not isinstance(other, Device):
            return NotImplemented
        return (self.type, self.index) == (other.type, other.index)

    def __hash__(self) -> int:
        return hash((self.type, self.index))

    def is_cpu(self) -> bool:
        return self.type is DeviceType.CPU

    def is_cuda(self) -> bool:
        return self.type is DeviceType.CUDA
