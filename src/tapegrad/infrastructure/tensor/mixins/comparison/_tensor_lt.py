from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ._base import TensorMixinComparisonBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinLower(TensorMixinComparisonBase):
    def lower(self: "Tensor", other: Any) -> "Tensor":
        return self._compare(other, "Lower", "lower")

    def lower_equal(self: "Tensor", other: Any) -> "Tensor":
        return self._compare(other, "Lower Equal", "lower_equal")

    def __lt__(self, other: Any) -> "Tensor":
        return self.lower(other)

    def __le__(self, other: Any) -> "Tensor":
        return self.lower_equal(other)
