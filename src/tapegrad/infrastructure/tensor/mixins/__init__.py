"""
Category mixins that make up `Tensor`.

Each subpackage holds one category. ``_base.py`` carries the helpers shared
within the category, each ``_tensor_<op>.py`` implements one operation (or a
closely related group) together with its local derivative rule, and the
subpackage ``__init__`` composes them into the category mixin exported here.
"""

from .arithmetic import TensorMixinArithmetic
from .comparison import TensorMixinComparison
from .indexing import TensorMixinIndexing
from .layout import TensorMixinLayout
from .reduction import TensorMixinReduction
from .unary import TensorMixinUnary

__all__ = [
    "TensorMixinArithmetic",
    "TensorMixinComparison",
    "TensorMixinIndexing",
    "TensorMixinLayout",
    "TensorMixinReduction",
    "TensorMixinUnary",
]
