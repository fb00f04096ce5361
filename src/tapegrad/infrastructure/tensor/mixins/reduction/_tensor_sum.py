from __future__ import annotations

from typing import TYPE_CHECKING

from ....autodiff._broadcast import expand_reduced
from ....autodiff._operation import OpKind
from ._base import Axis, TensorMixinReductionBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinSum(TensorMixinReductionBase):
    def sum(self: "Tensor", axis: Axis = None, keepdims: bool = False) -> "Tensor":
        self._check_axes("Sum", axis)
        shape = self.shape
        return self._make(
            OpKind.SUM,
            self.value.sum(axis=axis, keepdims=keepdims),
            (self,),
            lambda grad: (expand_reduced(grad, shape, axis, keepdims),),
            axis=axis,
            keepdims=keepdims,
            input_shape=shape,
        )
