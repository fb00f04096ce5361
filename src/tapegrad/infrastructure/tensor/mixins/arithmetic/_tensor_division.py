from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ....autodiff._broadcast import sum_to_shape
from ....autodiff._operation import OpKind
from ._base import TensorMixinArithmeticBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinDivision(TensorMixinArithmeticBase):
    def div(self: "Tensor", other: Any) -> "Tensor":
        """
        Elementwise true division.

        Scalars are lifted to constant tensors, so integer inputs divide to
        floats.
        """
        rhs = self._binary_operands(other, "Div")
        a, b = self.value, rhs.value
        a_shape, b_shape = self.shape, rhs.shape
        a_req, b_req = self.requires_grad, rhs.requires_grad

        def backward_fn(grad):
            grad_a = sum_to_shape(grad.div(b), a_shape) if a_req else None
            grad_b = None
            if b_req:
                grad_b = sum_to_shape(grad.mul(a).div(b.mul(b)).neg(), b_shape)
            return grad_a, grad_b

        return self._make(
            OpKind.DIV,
            a.div(b),
            (self, rhs),
            backward_fn,
            lhs_shape=a_shape,
            rhs_shape=b_shape,
        )

    def __truediv__(self, other: Any) -> "Tensor":
        return self.div(other)

    def __rtruediv__(self: "Tensor", other: Any) -> "Tensor":
        return self._lift(other).div(self)
