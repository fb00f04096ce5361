"""
Index-based selection and accumulation for `Tensor`.

Index tensors are integer constants; they are never differentiated. Indices
may be given as a `Tensor` placed like the source or as host data, which is
lifted to an int64 tensor.

Backward rules
--------------
- gather: scatter-add the upstream gradient into zeros at the same indices
- scatter: the base receives the gradient unchanged; the values receive the
  gradient gathered at the indices
- select: add the upstream gradient into zeros at the selected positions
- select_assign: the base receives the gradient unchanged; the values
  receive the gradient selected at the indices
"""

from ._tensor_gather import TensorMixinGather
from ._tensor_select import TensorMixinSelect


class TensorMixinIndexing(TensorMixinGather, TensorMixinSelect):
    """
    Gather/scatter along a dimension and select/select_assign by position.
    """


__all__ = [
    TensorMixinIndexing.__name__,
]
