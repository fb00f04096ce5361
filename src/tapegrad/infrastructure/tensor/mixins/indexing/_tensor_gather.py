from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .....domain._tensor_check import TensorCheck
from ....autodiff._operation import OpKind
from ._base import TensorMixinIndexingBase

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinGather(TensorMixinIndexingBase):
    def gather(self: "Tensor", dim: int, indices: Any) -> "Tensor":
        """
        Pick elements along `dim` by per-element indices.

        For a 3D tensor and ``dim=1``:
        ``out[i, j, k] = self[i, indices[i, j, k], k]``.

        `indices` has the rank of ``self`` and matches its shape everywhere
        except along `dim`; the result has the shape of `indices`.
        """
        idx = self._as_indices(indices, "Gather")
        TensorCheck("Gather").gather(dim, self.shape, idx.shape).check()
        x, i = self.value, idx.value
        return self._make(
            OpKind.GATHER,
            x.gather(dim, i),
            (self,),
            lambda grad: (x.zeros_like().scatter(dim, i, grad),),
            dim=dim,
        )

    def scatter(self: "Tensor", dim: int, indices: Any, values: Any) -> "Tensor":
        """
        Add `values` into a copy of ``self`` along `dim` at `indices`.

        For a 3D tensor and ``dim=1``:
        ``out[i, indices[i, j, k], k] += values[i, j, k]``. Repeated indices
        accumulate. `values` has the shape of `indices`.
        """
        idx = self._as_indices(indices, "Scatter")
        other = self._as_values(values)
        TensorCheck("Scatter").scatter(dim, self.shape, idx.shape, other.shape).check()

        i = idx.value
        self_req, other_req = self.requires_grad, other.requires_grad

        def backward_fn(grad):
            return (
                grad if self_req else None,
                grad.gather(dim, i) if other_req else None,
            )

        return self._make(
            OpKind.SCATTER,
            self.value.scatter(dim, i, other.value),
            (self, other),
            backward_fn,
            dim=dim,
        )
