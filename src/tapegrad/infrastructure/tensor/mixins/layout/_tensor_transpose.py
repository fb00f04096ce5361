from __future__ import annotations

from typing import TYPE_CHECKING

from .....domain._tensor_check import TensorCheck
from ....autodiff._operation import OpKind

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinTranspose:
    def swap_dims(self: "Tensor", dim1: int, dim2: int) -> "Tensor":
        rank = self.ndim
        TensorCheck("Swap Dims").dim_ops(dim1, rank).dim_ops(dim2, rank).check()
        return self._make(
            OpKind.SWAP_DIMS,
            self.value.swap_dims(dim1, dim2),
            (self,),
            lambda grad: (grad.swap_dims(dim1, dim2),),
            dims=(dim1, dim2),
        )

    def transpose(self: "Tensor") -> "Tensor":
        """
        Swap the last two dimensions.
        """
        if self.ndim < 2:
            TensorCheck("Transpose").dim_ops(-2, self.ndim).check()
        return self.swap_dims(-2, -1)

    @property
    def T(self) -> "Tensor":
        return self.transpose()
