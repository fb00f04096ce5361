from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from .....domain._tensor_check import TensorCheck
from ....autodiff._operation import OpKind
from ._base import _resolve_shape

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinReshape:
    def reshape(self: "Tensor", shape: Sequence[int]) -> "Tensor":
        """
        Return the same elements with a new shape.

        A single -1 entry is inferred from the element count.
        """
        src_shape = self.shape
        target = _resolve_shape(shape, self.numel())
        TensorCheck("Reshape").reshape(src_shape, target).check()
        return self._make(
            OpKind.RESHAPE,
            self.value.reshape(target),
            (self,),
            lambda grad: (grad.reshape(src_shape),),
            from_shape=src_shape,
            to_shape=target,
        )

    def squeeze(self: "Tensor", dim: int) -> "Tensor":
        """
        Drop dimension `dim`, which must have size 1.
        """
        shape = self.shape
        TensorCheck("Squeeze").squeeze(dim, shape).check()
        axis = dim % len(shape)
        return self.reshape(shape[:axis] + shape[axis + 1 :])

    def unsqueeze(self: "Tensor", dim: int) -> "Tensor":
        """
        Insert a dimension of size 1 at `dim` (``-1`` appends one).
        """
        shape = self.shape
        TensorCheck("Unsqueeze").unsqueeze(dim, len(shape)).check()
        axis = dim % (len(shape) + 1)
        return self.reshape(shape[:axis] + (1,) + shape[axis:])
