from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .....domain._tensor_check import TensorCheck
from ....autodiff._operation import OpKind
from ._base import TensorMixinIndexingBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinSelect(TensorMixinIndexingBase):
    def select(self: "Tensor", dim: int, indices: Any) -> "Tensor":
        """
        Take whole slices along `dim` at the positions in a 1D `indices`.

        For a 3D tensor and ``dim=1``: ``out[i, j, k] = self[i, indices[j], k]``.
        Positions may repeat.
        """
        idx = self._as_indices(indices, "Select")
        TensorCheck("Select").select(dim, self.shape, idx.shape).check()
        x, i = self.value, idx.value
        return self._make(
            OpKind.SELECT,
            x.select(dim, i),
            (self,),
            lambda grad: (x.zeros_like().select_assign(dim, i, grad),),
            dim=dim,
        )

    def select_assign(self: "Tensor", dim: int, indices: Any, values: Any) -> "Tensor":
        """
        Add the slices of `values` into a copy of ``self`` at `indices` along
        `dim`.

        For a 3D tensor and ``dim=1``:
        ``out[i, indices[j], k] += values[i, j, k]``.
        """
        idx = self._as_indices(indices, "Select Assign")
        other = self._as_values(values)
        TensorCheck("Select Assign").select_assign(
            dim, self.shape, idx.shape, other.shape
        ).check()

        i = idx.value
        self_req, other_req = self.requires_grad, other.requires_grad

        def backward_fn(grad):
            return (
                grad if self_req else None,
                grad.select(dim, i) if other_req else None,
            )

        return self._make(
            OpKind.SELECT_ASSIGN,
            self.value.select_assign(dim, i, other.value),
            (self, other),
            backward_fn,
            dim=dim,
        )
