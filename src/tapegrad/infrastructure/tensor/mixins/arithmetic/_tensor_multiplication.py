from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ....autodiff._broadcast import sum_to_shape
from ....autodiff._operation import OpKind
from ._base import Number, TensorMixinArithmeticBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinMultiplication(TensorMixinArithmeticBase):
    def mul(self: "Tensor", other: Any) -> "Tensor":
        if self._is_scalar(other):
            return self.mul_scalar(other)
        rhs = self._binary_operands(other, "Mul")
        a, b = self.value, rhs.value
        a_shape, b_shape = self.shape, rhs.shape
        a_req, b_req = self.requires_grad, rhs.requires_grad

        def backward_fn(grad):
            return (
                sum_to_shape(grad.mul(b), a_shape) if a_req else None,
                sum_to_shape(grad.mul(a), b_shape) if b_req else None,
            )

        return self._make(
            OpKind.MUL,
            a.mul(b),
            (self, rhs),
            backward_fn,
            lhs_shape=a_shape,
            rhs_shape=b_shape,
        )

    def mul_scalar(self: "Tensor", value: Number) -> "Tensor":
        return self._make(
            OpKind.MUL_SCALAR,
            self.value.mul_scalar(value),
            (self,),
            lambda grad: (grad.mul_scalar(value),),
            scalar=value,
        )

    def __mul__(self, other: Any) -> "Tensor":
        return self.mul(other)

    def __rmul__(self, other: Any) -> "Tensor":
        return self.mul(other)
