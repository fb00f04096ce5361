from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ....autodiff._broadcast import sum_to_shape
from ....autodiff._operation import OpKind
from ._base import Number, TensorMixinArithmeticBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinAddition(TensorMixinArithmeticBase):
    def add(self: "Tensor", other: Any) -> "Tensor":
        if self._is_scalar(other):
            return self.add_scalar(other)
        rhs = self._binary_operands(other, "Add")
        a_shape, b_shape = self.shape, rhs.shape
        a_req, b_req = self.requires_grad, rhs.requires_grad

        def backward_fn(grad):
            return (
                sum_to_shape(grad, a_shape) if a_req else None,
                sum_to_shape(grad, b_shape) if b_req else None,
            )

        return self._make(
            OpKind.ADD,
            self.value.add(rhs.value),
            (self, rhs),
            backward_fn,
            lhs_shape=a_shape,
            rhs_shape=b_shape,
        )

    def add_scalar(self: "Tensor", value: Number) -> "Tensor":
        return self._make(
            OpKind.ADD_SCALAR,
            self.value.add_scalar(value),
            (self,),
            lambda grad: (grad,),
            scalar=value,
        )

    def __add__(self, other: Any) -> "Tensor":
        return self.add(other)

    def __radd__(self, other: Any) -> "Tensor":
        return self.add(other)
