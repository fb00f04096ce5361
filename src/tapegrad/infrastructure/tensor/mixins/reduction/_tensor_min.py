from __future__ import annotations

from typing import TYPE_CHECKING

from ....autodiff._operation import OpKind
from ._base import Axis, TensorMixinReductionBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinMin(TensorMixinReductionBase):
    def min(self: "Tensor", axis: Axis = None, keepdims: bool = False) -> "Tensor":
        return self._extremum(OpKind.MIN, "Min", "min", axis, keepdims)

    def min_dim(self: "Tensor", dim: int) -> "Tensor":
        return self.min_dim_with_indices(dim)[0]

    def min_dim_with_indices(self: "Tensor", dim: int) -> tuple["Tensor", "Tensor"]:
        return self._extremum_dim_with_indices(OpKind.MIN_DIM, "Min", "min", dim)

    def argmin(self: "Tensor", dim: int) -> "Tensor":
        return self._arg_extremum("Argmin", "argmin", dim)
