from __future__ import annotations

from typing import TYPE_CHECKING

from ....autodiff._operation import OpKind
from ._base import TensorMixinUnaryBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinSqrt(TensorMixinUnaryBase):
    def sqrt(self: "Tensor") -> "Tensor":
        out = self.value.sqrt()
        return self._unary(OpKind.SQRT, out, lambda grad: grad.div(out.mul_scalar(2.0)))
