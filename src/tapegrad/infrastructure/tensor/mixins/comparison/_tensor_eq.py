from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ._base import TensorMixinComparisonBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinEqual(TensorMixinComparisonBase):
    def equal(self: "Tensor", other: Any) -> "Tensor":
        return self._compare(other, "Equal", "equal")
