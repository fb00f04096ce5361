"""
Comparisons and masked selection for `Tensor`.

Comparisons produce boolean tensors and are never differentiable; their
results are untracked constants. Masked selection is differentiable in the
selected-from tensors and not in the mask.

`__eq__` is left as identity so tensors stay usable as dict keys and in
membership tests; use `equal` for elementwise equality.
"""

from ._tensor_eq import TensorMixinEqual
from ._tensor_gt import TensorMixinGreater
from ._tensor_lt import TensorMixinLower
from ._tensor_mask import TensorMixinMask


class TensorMixinComparison(
    TensorMixinEqual,
    TensorMixinGreater,
    TensorMixinLower,
    TensorMixinMask,
):
    """
    Elementwise comparisons and mask-based selection.
    """


__all__ = [
    TensorMixinComparison.__name__,
]
