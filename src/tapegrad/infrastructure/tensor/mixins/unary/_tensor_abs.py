from __future__ import annotations

from typing import TYPE_CHECKING

from ....autodiff._operation import OpKind
from ._base import TensorMixinUnaryBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinAbs(TensorMixinUnaryBase):
    def abs(self: "Tensor") -> "Tensor":
        """
        Absolute value. Backward: ``g * sign(x)``, zero at ``x == 0``.
        """
        x = self.value
        return self._unary(OpKind.ABS, x.abs(), lambda grad: grad.mul(x.sign()))
