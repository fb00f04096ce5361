from __future__ import annotations

from typing import TYPE_CHECKING

from ....autodiff._operation import OpKind
from ._base import TensorMixinUnaryBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinExp(TensorMixinUnaryBase):
    def exp(self: "Tensor") -> "Tensor":
        out = self.value.exp()
        return self._unary(OpKind.EXP, out, lambda grad: grad.mul(out))
