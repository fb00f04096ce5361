"""
Concrete machinery: backends, the autodiff core, and the `Tensor` handle.
"""

from . import functional
from .tensor import Tensor

__all__ = ["Tensor", "functional"]
