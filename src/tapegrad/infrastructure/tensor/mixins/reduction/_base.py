"""
Shared validation and extremum rules for reduction mixins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence, Union

from .....domain._tensor_check import TensorCheck
from ....autodiff._broadcast import expand_reduced, normalize_axes
from ....autodiff._operation import OpKind

if TYPE_CHECKING:
    from ..._tensor import Tensor

Axis = Union[int, Sequence[int], None]


class TensorMixinReductionBase:
    """
    Base of every reduction mixin.
    """

    def _check_axes(self: "Tensor", op: str, axis: Axis) -> None:
        if axis is not None and self.ndim == 0:
            TensorCheck(op).dim_ops(axis if isinstance(axis, int) else 0, 0).check()
        TensorCheck(op).axes(axis, self.ndim).check()

    def _extremum(
        self: "Tensor", kind: OpKind, op: str, name: str, axis: Axis, keepdims: bool
    ) -> "Tensor":
        """
        Max or min over `axis`; tied extrema share the upstream gradient.

        Parameters
        ----------
        name : str
            Backend reduction to apply, "max" or "min".
        """
        self._check_axes(op, axis)
        x = self.value
        shape = self.shape
        out = getattr(x, name)(axis=axis, keepdims=keepdims)

        def backward_fn(grad):
            axes = normalize_axes(axis, len(shape))
            winners = x.equal(expand_reduced(out, shape, axis, keepdims)).astype(x.dtype)
            ties = winners.sum(axis=axes, keepdims=True).broadcast_to(shape)
            g = expand_reduced(grad, shape, axis, keepdims)
            return (g.mul(winners).div(ties),)

        return self._make(
            kind,
            out,
            (self,),
            backward_fn,
            axis=axis,
            keepdims=keepdims,
            input_shape=shape,
        )

    def _arg_extremum(self: "Tensor", op: str, name: str, dim: int) -> "Tensor":
        TensorCheck(op).dim_ops(dim, self.ndim).check()
        return self._constant(getattr(self.value, name)(dim))

    def _extremum_dim_with_indices(
        self: "Tensor", kind: OpKind, op: str, name: str, dim: int
    ) -> tuple["Tensor", "Tensor"]:
        """
        Extremum along `dim` (kept with size 1) and its int64 positions.

        Backward scatters the upstream gradient to the reported position only.
        """
        TensorCheck(op).dim_ops(dim, self.ndim).check()
        x = self.value
        indices = getattr(x, "arg" + name)(dim)

        def backward_fn(grad):
            return (x.zeros_like().scatter(dim, indices, grad),)

        values = self._make(
            kind, x.gather(dim, indices), (self,), backward_fn, dim=dim
        )
        return values, self._constant(indices)
