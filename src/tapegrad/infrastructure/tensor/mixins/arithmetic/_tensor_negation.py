from __future__ import annotations

from typing import TYPE_CHECKING

from ....autodiff._operation import OpKind
from ._base import TensorMixinArithmeticBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinNegation(TensorMixinArithmeticBase):
    def neg(self: "Tensor") -> "Tensor":
        return self._make(
            OpKind.NEG, self.value.neg(), (self,), lambda grad: (grad.neg(),)
        )

    def __neg__(self) -> "Tensor":
        return self.neg()
