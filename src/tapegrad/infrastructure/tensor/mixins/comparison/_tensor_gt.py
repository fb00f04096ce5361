from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ._base import TensorMixinComparisonBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinGreater(TensorMixinComparisonBase):
    def greater(self: "Tensor", other: Any) -> "Tensor":
        return self._compare(other, "Greater", "greater")

    def greater_equal(self: "Tensor", other: Any) -> "Tensor":
        return self._compare(other, "Greater Equal", "greater_equal")

    def __gt__(self, other: Any) -> "Tensor":
        return self.greater(other)

    def __ge__(self, other: Any) -> "Tensor":
        return self.greater_equal(other)
