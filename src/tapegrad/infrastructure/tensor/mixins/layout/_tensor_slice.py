from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from .....domain._tensor_check import TensorCheck
from ....autodiff._operation import OpKind
from ._base import _normalize_ranges

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinSlice:
    def slice(self: "Tensor", ranges: Sequence) -> "Tensor":
        """
        Take a contiguous sub-tensor.

        Parameters
        ----------
        ranges : Sequence
            One half-open ``(start, end)`` pair (or step-less `slice`) per
            leading dimension; dimensions past the last range are kept whole.
        """
        r = _normalize_ranges(ranges)
        TensorCheck("Slice").slice(self.shape, r).check()
        x = self.value
        return self._make(
            OpKind.SLICE,
            x.slice(r),
            (self,),
            lambda grad: (x.zeros_like().slice_assign(r, grad),),
            ranges=r,
        )

    def slice_assign(self: "Tensor", ranges: Sequence, values: Any) -> "Tensor":
        """
        Return a copy of ``self`` whose ranged region is replaced by `values`.
        """
        r = _normalize_ranges(ranges)
        other = self._lift(values)
        self._check_placement(other)
        TensorCheck("Slice Assign").slice_assign(self.shape, other.shape, r).check()

        v = other.value
        self_req, other_req = self.requires_grad, other.requires_grad

        def backward_fn(grad):
            return (
                grad.slice_assign(r, v.zeros_like()) if self_req else None,
                grad.slice(r) if other_req else None,
            )

        return self._make(
            OpKind.SLICE_ASSIGN,
            self.value.slice_assign(r, v),
            (self, other),
            backward_fn,
            ranges=r,
        )
