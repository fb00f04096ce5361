from __future__ import annotations

from typing import TYPE_CHECKING

from ....autodiff._broadcast import expand_reduced, normalize_axes
from ....autodiff._operation import OpKind
from ._base import Axis, TensorMixinReductionBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinMean(TensorMixinReductionBase):
    def mean(self: "Tensor", axis: Axis = None, keepdims: bool = False) -> "Tensor":
        self._check_axes("Mean", axis)
        shape = self.shape
        count = 1
        for a in normalize_axes(axis, len(shape)):
            count *= shape[a]

        def backward_fn(grad):
            return (expand_reduced(grad, shape, axis, keepdims).mul_scalar(1.0 / count),)

        return self._make(
            OpKind.MEAN,
            self.value.mean(axis=axis, keepdims=keepdims),
            (self,),
            backward_fn,
            axis=axis,
            keepdims=keepdims,
            input_shape=shape,
        )
