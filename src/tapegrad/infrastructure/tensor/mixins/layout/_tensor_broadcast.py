from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from .....domain._tensor_check import TensorCheck
from ....autodiff._broadcast import sum_to_shape
from ....autodiff._operation import OpKind

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinBroadcast:
    def broadcast_to(self: "Tensor", shape: Sequence[int]) -> "Tensor":
        """
        Expand this tensor to `shape` under NumPy broadcasting rules.

        Backward sums the upstream gradient over the expanded axes.
        """
        src_shape = self.shape
        target = tuple(int(d) for d in shape)
        TensorCheck("Broadcast To").broadcast_to(src_shape, target).check()
        return self._make(
            OpKind.BROADCAST_TO,
            self.value.broadcast_to(target),
            (self,),
            lambda grad: (sum_to_shape(grad, src_shape),),
            broadcast_from=src_shape,
            broadcast_to=target,
        )
