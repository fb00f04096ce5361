from __future__ import annotations

from typing import TYPE_CHECKING

from ....autodiff._operation import OpKind
from ._base import TensorMixinUnaryBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinLog(TensorMixinUnaryBase):
    def log(self: "Tensor") -> "Tensor":
        """
        Natural logarithm. Backward: ``g / x``.
        """
        x = self.value
        return self._unary(OpKind.LOG, x.log(), lambda grad: grad.div(x))
