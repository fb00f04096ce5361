from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from .....domain._tensor_check import TensorCheck
from ....autodiff._operation import OpKind

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinCat:
    @classmethod
    def cat(cls, tensors: Sequence["Tensor"], dim: int = 0) -> "Tensor":
        """
        Concatenate tensors along an existing dimension.

        All inputs must share backend, device, rank, and every size except
        the one along `dim`.
        """
        tensors = list(tensors)
        TensorCheck("Cat").cat([t.shape for t in tensors], dim).check()
        first = tensors[0]
        for t in tensors[1:]:
            first._check_placement(t)

        axis = dim % first.ndim
        lead = [(0, d) for d in first.shape[:axis]]
        pieces = []
        offset = 0
        for t in tensors:
            size = t.shape[axis]
            pieces.append(tuple(lead) + ((offset, offset + size),))
            offset += size

        def backward_fn(grad):
            return tuple(grad.slice(r) for r in pieces)

        value = type(first.value).cat([t.value for t in tensors], axis)
        return first._make(
            OpKind.CAT,
            value,
            tensors,
            backward_fn,
            dim=axis,
            sizes=tuple(t.shape[axis] for t in tensors),
        )
