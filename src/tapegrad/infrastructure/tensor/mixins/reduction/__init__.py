"""
Reductions for `Tensor`.

`axis=None` reduces every dimension; with `keepdims=False` the result then
has shape ``()``, so a scalar loss can be backpropagated without a seed.
Reducing a tensor that already has shape ``()`` over all axes is the
identity.

Backward rules
--------------
- sum: broadcast the upstream gradient back over the reduced axes
- mean: as sum, divided by the number of reduced elements
- max, min: route the upstream gradient to the positions holding the
  extremum; tied positions share it evenly
- max_dim, min_dim (and their ``*_with_indices`` forms): route the upstream
  gradient to the single position reported by argmax/argmin
- argmax, argmin: not differentiable; results are untracked int64 tensors
"""

from ._tensor_max import TensorMixinMax
from ._tensor_mean import TensorMixinMean
from ._tensor_min import TensorMixinMin
from ._tensor_sum import TensorMixinSum


class TensorMixinReduction(
    TensorMixinSum,
    TensorMixinMean,
    TensorMixinMax,
    TensorMixinMin,
):
    """
    Sum, mean and extremum reductions.
    """


__all__ = [
    TensorMixinReduction.__name__,
]
