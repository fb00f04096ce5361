from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .....domain._tensor_check import TensorCheck

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinIndexingBase:
    """
    Base of every indexing mixin.
    """

    def _as_indices(self: "Tensor", indices: Any, op: str) -> "Tensor":
        """
        Return `indices` as an integer Tensor placed like ``self``.
        """
        if not isinstance(indices, TensorMixinIndexingBase):
            indices = type(self).from_data(
                indices, backend=self.backend_name, dtype="int64", device=self.device
            )
        self._check_placement(indices)
        TensorCheck(op).int_indices(indices.dtype).check()
        return indices

    def _as_values(self: "Tensor", values: Any) -> "Tensor":
        other = self._lift(values)
        self._check_placement(other)
        return other
