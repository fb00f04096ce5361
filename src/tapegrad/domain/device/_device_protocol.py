"""
Device abstraction contracts for tapegrad.

`DeviceLike` is a duck-typed protocol for placement descriptors. Backend
tensors report their placement through it, and the tensor layer compares
placements before combining operands, without depending on the concrete
`Device` class.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class DeviceLike(Protocol):
    """
    Duck-typed device contract.

    Any object that provides these members can be used as a placement
    descriptor, regardless of its concrete class identity.
    """

    type: object
    index: Optional[int]

    def is_cpu(self) -> bool: ...
    def is_cuda(self) -> bool: ...
    def __str__(self) -> str: ...
