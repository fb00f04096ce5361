"""
Shared operand handling for arithmetic mixins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union

from .....domain._tensor_check import TensorCheck

if TYPE_CHECKING:
    from ..._tensor import Tensor

Number = Union[int, float]


class TensorMixinArithmeticBase:
    """
    Base of every arithmetic mixin.
    """

    def _binary_operands(self: "Tensor", other: Any, op: str) -> "Tensor":
        """
        Lift `other` to a Tensor placed like ``self`` and validate that both
        shapes broadcast.
        """
        other_t = self._lift(other)
        self._check_placement(other_t)
        TensorCheck(op).binary_ops_ew_shape(self.shape, other_t.shape).check()
        return other_t
