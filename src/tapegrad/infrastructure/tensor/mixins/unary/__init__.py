"""
Elementwise unary operations for `Tensor`.

Rules that can be expressed through the forward output (exp, sqrt, tanh,
sigmoid) capture the output value instead of recomputing it.
"""

from ._tensor_abs import TensorMixinAbs
from ._tensor_activation import TensorMixinActivation
from ._tensor_clamp import TensorMixinClamp
from ._tensor_exp import TensorMixinExp
from ._tensor_log import TensorMixinLog
from ._tensor_sqrt import TensorMixinSqrt


class TensorMixinUnary(
    TensorMixinExp,
    TensorMixinLog,
    TensorMixinSqrt,
    TensorMixinAbs,
    TensorMixinActivation,
    TensorMixinClamp,
):
    """
    Unary math operations and their local derivative rules.
    """


__all__ = [
    TensorMixinUnary.__name__,
]
