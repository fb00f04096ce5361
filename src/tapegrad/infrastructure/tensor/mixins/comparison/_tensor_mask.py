from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union

from .....domain._tensor_check import TensorCheck
from ....autodiff._broadcast import sum_to_shape
from ....autodiff._operation import OpKind
from ._base import TensorMixinComparisonBase

if TYPE_CHECKING:
    from ..._tensor import Tensor

Number = Union[int, float]


class TensorMixinMask(TensorMixinComparisonBase):
    def mask_where(self: "Tensor", mask: "Tensor", value: Any) -> "Tensor":
        """
        Take elements of `value` where `mask` is True and of ``self`` elsewhere.

        `mask` and `value` must broadcast to ``self.shape``.

        Backward: the upstream gradient is split by the mask; ``self`` receives
        it where the mask is False and `value` where it is True.
        """
        mask = self._as_mask(mask, "Mask Where")
        other = self._lift(value)
        self._check_placement(other)
        TensorCheck("Mask Where").broadcast_to(other.shape, self.shape).check()

        m = mask.value
        self_req, other_req = self.requires_grad, other.requires_grad
        other_shape = other.shape

        def backward_fn(grad):
            kept = grad.mask_fill(m, 0)
            grad_value = sum_to_shape(grad.sub(kept), other_shape) if other_req else None
            return (kept if self_req else None), grad_value

        return self._make(
            OpKind.MASK_WHERE,
            self.value.mask_where(m, other.value),
            (self, other),
            backward_fn,
            value_shape=other_shape,
        )

    def mask_fill(self: "Tensor", mask: "Tensor", value: Number) -> "Tensor":
        """
        Replace elements where `mask` is True with the scalar `value`.

        Backward: the upstream gradient is zeroed at filled positions.
        """
        mask = self._as_mask(mask, "Mask Fill")
        m = mask.value
        return self._make(
            OpKind.MASK_FILL,
            self.value.mask_fill(m, value),
            (self,),
            lambda grad: (grad.mask_fill(m, 0),),
            fill_value=value,
        )
