"""
Elementwise arithmetic operations for `Tensor`.

Binary operations broadcast under NumPy rules. Shapes are validated eagerly,
before the backend computes anything, so a mismatch never leaves a partially
built node behind.

Backward rules
--------------
- ``d(a + b) = (g, g)``
- ``d(a - b) = (g, -g)``
- ``d(a * b) = (g * b, g * a)``
- ``d(a / b) = (g / b, -g * a / b^2)``
- ``d(-a) = -g``
- ``d(a^p) = g * p * a^(p - 1)``

Each parent gradient is then reduced with `sum_to_shape` to undo the
broadcast of that operand.
"""

from ._tensor_addition import TensorMixinAddition
from ._tensor_division import TensorMixinDivision
from ._tensor_multiplication import TensorMixinMultiplication
from ._tensor_negation import TensorMixinNegation
from ._tensor_power import TensorMixinPower
from ._tensor_subtraction import TensorMixinSubtraction


class TensorMixinArithmetic(
    TensorMixinAddition,
    TensorMixinSubtraction,
    TensorMixinMultiplication,
    TensorMixinDivision,
    TensorMixinNegation,
    TensorMixinPower,
):
    """
    Arithmetic operators and their local derivative rules.
    """


__all__ = [
    TensorMixinArithmetic.__name__,
]
