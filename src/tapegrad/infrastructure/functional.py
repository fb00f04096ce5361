"""
Functional operations on `Tensor`.

These are free-function forms of differentiable operations. Most delegate to
the corresponding `Tensor` method; the pooling operations are only available
here.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..domain._tensor_check import TensorCheck
from .autodiff._operation import OpKind
from .tensor._tensor import Tensor


def max_pool1d(
    x: Tensor,
    kernel_size: int,
    stride: Optional[int] = None,
    padding: int = 0,
) -> Tensor:
    """
    1D max pooling over the last axis of a ``(batch, channels, length)`` tensor.

    Parameters
    ----------
    x : Tensor
        Input of shape ``(N, C, L)``.
    kernel_size : int
        Window size.
    stride : Optional[int]
        Window step. Defaults to `kernel_size`.
    padding : int, optional
        Implicit negative-infinity padding on both ends; at most half the
        kernel size.

    Returns
    -------
    Tensor
        Output of shape ``(N, C, (L + 2 * padding - kernel_size) // stride + 1)``.

    Notes
    -----
    Backward routes each output gradient to the input position that won its
    window. Positions that win several overlapping windows receive the sum.
    Padding never wins unless a whole window is padding, which the padding
    bound rules out.
    """
    if stride is None:
        stride = kernel_size
    TensorCheck("MaxPool1d").pool1d(x.shape, kernel_size, stride, padding).check()

    out, indices = x.value.max_pool1d_with_indices(kernel_size, stride, padding)
    length = x.shape[2]

    def backward_fn(grad):
        return (grad.max_pool1d_backward(indices, length),)

    return x._make(
        OpKind.MAX_POOL1D,
        out,
        (x,),
        backward_fn,
        kernel_size=kernel_size,
        stride=stride,
        padding=padding,
    )


def avg_pool1d(
    x: Tensor,
    kernel_size: int,
    stride: Optional[int] = None,
    padding: int = 0,
) -> Tensor:
    """
    1D average pooling over the last axis of a ``(batch, channels, length)``
    tensor.

    Padding is zeros and is counted, so every window is divided by
    `kernel_size`. Arguments and output shape are as for `max_pool1d`.

    Notes
    -----
    Backward gives every input position the sum of ``g / kernel_size`` over
    the windows that cover it.
    """
    if stride is None:
        stride = kernel_size
    TensorCheck("AvgPool1d").pool1d(x.shape, kernel_size, stride, padding).check()
    length = x.shape[2]

    def backward_fn(grad):
        return (grad.avg_pool1d_backward(length, kernel_size, stride, padding),)

    return x._make(
        OpKind.AVG_POOL1D,
        x.value.avg_pool1d(kernel_size, stride, padding),
        (x,),
        backward_fn,
        kernel_size=kernel_size,
        stride=stride,
        padding=padding,
    )


def adaptive_avg_pool1d(x: Tensor, output_size: int) -> Tensor:
    """
    Average pooling to a fixed output length.

    Window ``i`` of an input of length ``L`` covers
    ``[floor(i * L / output_size), ceil((i + 1) * L / output_size))``, so
    windows may overlap by one element when `output_size` does not divide
    ``L``.
    """
    TensorCheck("AdaptiveAvgPool1d").adaptive_pool1d(x.shape, output_size).check()
    length = x.shape[2]
    return x._make(
        OpKind.ADAPTIVE_AVG_POOL1D,
        x.value.adaptive_avg_pool1d(output_size),
        (x,),
        lambda grad: (grad.adaptive_avg_pool1d_backward(length),),
        output_size=output_size,
    )


def relu(x: Tensor) -> Tensor:
    return x.relu()


def sigmoid(x: Tensor) -> Tensor:
    return x.sigmoid()


def tanh(x: Tensor) -> Tensor:
    return x.tanh()


def clamp(x: Tensor, min=None, max=None) -> Tensor:
    return x.clamp(min, max)


def matmul(a: Tensor, b: Tensor) -> Tensor:
    return a.matmul(b)


def cat(tensors: Sequence[Tensor], dim: int = 0) -> Tensor:
    return Tensor.cat(tensors, dim)
