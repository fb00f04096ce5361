from __future__ import annotations

from typing import TYPE_CHECKING

from ....autodiff._operation import OpKind
from ._base import Axis, TensorMixinReductionBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinMax(TensorMixinReductionBase):
    def max(self: "Tensor", axis: Axis = None, keepdims: bool = False) -> "Tensor":
        return self._extremum(OpKind.MAX, "Max", "max", axis, keepdims)

    def max_dim(self: "Tensor", dim: int) -> "Tensor":
        """
        Maximum along `dim`, keeping it with size 1.
        """
        return self.max_dim_with_indices(dim)[0]

    def max_dim_with_indices(self: "Tensor", dim: int) -> tuple["Tensor", "Tensor"]:
        return self._extremum_dim_with_indices(OpKind.MAX_DIM, "Max", "max", dim)

    def argmax(self: "Tensor", dim: int) -> "Tensor":
        """
        int64 position of the first maximum along `dim`, kept with size 1.
        """
        return self._arg_extremum("Argmax", "argmax", dim)
