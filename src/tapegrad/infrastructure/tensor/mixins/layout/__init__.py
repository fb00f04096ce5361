"""
Matrix product and shape/layout operations for `Tensor`.

Backward rules
--------------
- matmul: ``dA = dC @ B^T`` and ``dB = A^T @ dC``, each reduced over batch
  dimensions that were broadcast in the forward call
- swap_dims: swap the same dimensions back
- reshape, squeeze, unsqueeze: reshape back to the original shape
- broadcast_to: sum over the expanded axes (`sum_to_shape`)
- slice: write the gradient into a zero tensor at the sliced region
- slice_assign: the overwritten region of the base gets no gradient; the
  value receives the gradient of that region
- cat: each input receives the slice of the gradient it was copied to
"""

from ._tensor_broadcast import TensorMixinBroadcast
from ._tensor_cat import TensorMixinCat
from ._tensor_matmul import TensorMixinMatmul
from ._tensor_reshape import TensorMixinReshape
from ._tensor_slice import TensorMixinSlice
from ._tensor_transpose import TensorMixinTranspose


class TensorMixinLayout(
    TensorMixinMatmul,
    TensorMixinTranspose,
    TensorMixinReshape,
    TensorMixinBroadcast,
    TensorMixinSlice,
    TensorMixinCat,
):
    """
    Linear algebra and layout operations.
    """


__all__ = [
    TensorMixinLayout.__name__,
]
