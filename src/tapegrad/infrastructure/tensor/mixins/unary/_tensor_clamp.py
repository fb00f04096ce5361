from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Union

from ....autodiff._operation import OpKind
from ._base import TensorMixinUnaryBase

if TYPE_CHECKING:
    from ..._tensor import Tensor

Number = Union[int, float]


class TensorMixinClamp(TensorMixinUnaryBase):
    def clamp(
        self: "Tensor", min: Optional[Number] = None, max: Optional[Number] = None
    ) -> "Tensor":
        """
        Clamp values into ``[min, max]``.

        The gradient passes through where the input lies inside the range and
        is zero where it was clamped.

        Raises
        ------
        ValueError
            If both bounds are None.
        """
        if min is None and max is None:
            raise ValueError("clamp requires at least one of 'min' or 'max'")
        x = self.value
        below = x.lower(x.full_like(min)) if min is not None else None
        above = x.greater(x.full_like(max)) if max is not None else None

        def rule(grad):
            if below is not None:
                grad = grad.mask_fill(below, 0)
            if above is not None:
                grad = grad.mask_fill(above, 0)
            return grad

        return self._unary(OpKind.CLAMP, x.clamp(min, max), rule, min=min, max=max)

    def clamp_min(self: "Tensor", min: Number) -> "Tensor":
        return self.clamp(min=min)

    def clamp_max(self: "Tensor", max: Number) -> "Tensor":
        return self.clamp(max=max)
