from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from ....autodiff._operation import OpKind
from .....domain._backend_tensor import IBackendTensor

if TYPE_CHECKING:
    from ..._tensor import Tensor


class TensorMixinUnaryBase:
    """
    Base of every unary mixin.
    """

    def _unary(
        self: "Tensor",
        kind: OpKind,
        out: IBackendTensor,
        rule: Callable[[IBackendTensor], IBackendTensor],
        **saved_meta,
    ) -> "Tensor":
        """
        Record a single-input operation whose gradient is ``rule(grad)``.
        """
        return self._make(kind, out, (self,), lambda grad: (rule(grad),), **saved_meta)
