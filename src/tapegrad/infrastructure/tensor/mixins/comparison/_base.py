from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .....domain._tensor_check import TensorCheck

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinComparisonBase:
    """
    Base of every comparison mixin.
    """

    def _compare(self: "Tensor", other: Any, op: str, name: str) -> "Tensor":
        rhs = self._lift(other)
        self._check_placement(rhs)
        TensorCheck(op).binary_ops_ew_shape(self.shape, rhs.shape).check()
        return self._constant(getattr(self.value, name)(rhs.value))

    def _as_mask(self: "Tensor", mask: Any, op: str) -> "Tensor":
        if not isinstance(mask, TensorMixinComparisonBase) or mask.dtype != "bool":
            raise TypeError(f"{op}: mask must be a boolean Tensor")
        self._check_placement(mask)
        TensorCheck(op).broadcast_to(mask.shape, self.shape).check()
        return mask
