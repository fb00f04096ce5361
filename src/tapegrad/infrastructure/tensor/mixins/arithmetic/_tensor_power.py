from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ....autodiff._operation import OpKind
from ._base import Number, TensorMixinArithmeticBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinPower(TensorMixinArithmeticBase):
    def powf_scalar(self: "Tensor", exponent: Number) -> "Tensor":
        """
        Elementwise power with a scalar exponent.

        Backward: ``d(x^p) = g * p * x^(p - 1)``.
        """
        x = self.value

        def backward_fn(grad):
            return (grad.mul(x.powf_scalar(exponent - 1).mul_scalar(exponent)),)

        return self._make(
            OpKind.POWF_SCALAR,
            x.powf_scalar(exponent),
            (self,),
            backward_fn,
            exponent=exponent,
        )

    def __pow__(self: "Tensor", exponent: Any) -> "Tensor":
        if not self._is_scalar(exponent):
            return NotImplemented
        return self.powf_scalar(exponent)
