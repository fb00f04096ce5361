"""
Activation functions: tanh, sigmoid and relu.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ....autodiff._operation import OpKind
from ._base import TensorMixinUnaryBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinActivation(TensorMixinUnaryBase):
    def tanh(self: "Tensor") -> "Tensor":
        out = self.value.tanh()
        # 1 - tanh(x)^2
        return self._unary(
            OpKind.TANH, out, lambda grad: grad.mul(out.mul(out).neg().add_scalar(1.0))
        )

    def sigmoid(self: "Tensor") -> "Tensor":
        out = self.value.sigmoid()
        return self._unary(
            OpKind.SIGMOID,
            out,
            lambda grad: grad.mul(out.mul(out.neg().add_scalar(1.0))),
        )

    def relu(self: "Tensor") -> "Tensor":
        x = self.value
        inactive = x.lower_equal(x.zeros_like())
        return self._unary(
            OpKind.RELU, x.mask_fill(inactive, 0), lambda grad: grad.mask_fill(inactive, 0)
        )
