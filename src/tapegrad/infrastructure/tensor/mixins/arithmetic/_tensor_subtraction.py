from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ....autodiff._broadcast import sum_to_shape
from ....autodiff._operation import OpKind
from ._base import TensorMixinArithmeticBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinSubtraction(TensorMixinArithmeticBase):
    def sub(self: "Tensor", other: Any) -> "Tensor":
        if self._is_scalar(other):
            return self.add_scalar(-other)
        rhs = self._binary_operands(other, "Sub")
        a_shape, b_shape = self.shape, rhs.shape
        a_req, b_req = self.requires_grad, rhs.requires_grad

        def backward_fn(grad):
            return (
                sum_to_shape(grad, a_shape) if a_req else None,
                sum_to_shape(grad.neg(), b_shape) if b_req else None,
            )

        return self._make(
            OpKind.SUB,
            self.value.sub(rhs.value),
            (self, rhs),
            backward_fn,
            lhs_shape=a_shape,
            rhs_shape=b_shape,
        )

    def __sub__(self, other: Any) -> "Tensor":
        return self.sub(other)

    def __rsub__(self: "Tensor", other: Any) -> "Tensor":
        if self._is_scalar(other):
            return self.neg().add_scalar(other)
        return self._lift(other).sub(self)
