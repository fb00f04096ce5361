from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .....domain._tensor_check import TensorCheck
from ....autodiff._broadcast import sum_to_shape
from ....autodiff._operation import OpKind

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinMatmul:
    def matmul(self: "Tensor", other: Any) -> "Tensor":
        """
        Matrix product over the last two dimensions.

        Both operands need at least two dimensions; leading dimensions are
        batch dimensions and broadcast.
        """
        rhs = self._lift(other)
        self._check_placement(rhs)
        TensorCheck("Matmul").matmul(self.shape, rhs.shape).check()

        a, b = self.value, rhs.value
        a_shape, b_shape = self.shape, rhs.shape
        a_req, b_req = self.requires_grad, rhs.requires_grad

        def backward_fn(grad):
            grad_a = sum_to_shape(grad.matmul(b.transpose()), a_shape) if a_req else None
            grad_b = sum_to_shape(a.transpose().matmul(grad), b_shape) if b_req else None
            return grad_a, grad_b

        return self._make(
            OpKind.MATMUL,
            a.matmul(b),
            (self, rhs),
            backward_fn,
            lhs_shape=a_shape,
            rhs_shape=b_shape,
        )

    def __matmul__(self, other: Any) -> "Tensor":
        return self.matmul(other)

    def __rmatmul__(self: "Tensor", other: Any) -> "Tensor":
        return self._lift(other).matmul(self)
