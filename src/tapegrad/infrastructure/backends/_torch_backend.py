"""
External accelerated engine backed by PyTorch.

Only PyTorch's tensor kernels are used; its own autograd is never engaged
(values are created without `requires_grad`), so gradients are produced
exclusively by the tapegrad backward engine.

Importing this module requires PyTorch; the backend registry imports it
lazily and reports `BackendNotAvailableError` when the import fails.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union

import numpy as np
import torch
import torch.nn.functional as F
from typing_extensions import Self

from ..._config import get_default_dtype
from ...domain.device._device import Device

Number = Union[int, float]
Axis = Union[int, Sequence[int], None]

_DTYPES = {
    "float16": torch.float16,
    "float32": torch.float32,
    "float64": torch.float64,
    "int32": torch.int32,
    "int64": torch.int64,
    "bool": torch.bool,
}
_DTYPE_NAMES = {v: k for k, v in _DTYPES.items()}


def _torch_dtype(name: str) -> "torch.dtype":
    key = np.dtype(name).name
    try:
        return _DTYPES[key]
    except KeyError:
        raise ValueError(f"dtype {name!r} is not supported by the torch backend") from None


class TorchTensor:
    """
    Backend tensor holding a `torch.Tensor` on CPU or a CUDA device.

    Parameters
    ----------
    tensor : torch.Tensor
        Native tensor owned by this wrapper. It must not require grad.
    """

    __slots__ = ("_tensor",)

    backend_name = "torch"

    def __init__(self, tensor: "torch.Tensor") -> None:
        self._tensor = tensor

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    @property
    def data(self) -> "torch.Tensor":
        return self._tensor

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(int(d) for d in self._tensor.shape)

    @property
    def dtype(self) -> str:
        return _DTYPE_NAMES.get(self._tensor.dtype, str(self._tensor.dtype))

    @property
    def device(self) -> Device:
        d = self._tensor.device
        if d.type == "cuda":
            return Device(f"cuda:{d.index or 0}")
        return Device("cpu")

    def numel(self) -> int:
        return int(self._tensor.numel())

    def __repr__(self) -> str:
        return f"TorchTensor(shape={self.shape}, dtype={self.dtype}, device={self.device})"

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def _wrap(self, tensor: "torch.Tensor") -> Self:
        return type(self)(tensor)

    @classmethod
    def from_data(
        cls, data: Any, *, dtype: Optional[str] = None, device: Any = None
    ) -> Self:
        if isinstance(data, TorchTensor):
            data = data.to_numpy()
        host = np.asarray(data)
        if dtype is None:
            dtype = "bool" if host.dtype.kind == "b" else get_default_dtype()
        d = Device.from_any(device)
        t = torch.tensor(host, dtype=_torch_dtype(dtype), device=str(d))
        return cls(t)

    @classmethod
    def full(
        cls,
        shape: Sequence[int],
        value: Number,
        *,
        dtype: Optional[str] = None,
        device: Any = None,
    ) -> Self:
        d = Device.from_any(device)
        t = torch.full(
            tuple(shape),
            value,
            dtype=_torch_dtype(dtype or get_default_dtype()),
            device=str(d),
        )
        return cls(t)

    @classmethod
    def zeros(
        cls, shape: Sequence[int], *, dtype: Optional[str] = None, device: Any = None
    ) -> Self:
        return cls.full(shape, 0, dtype=dtype, device=device)

    @classmethod
    def ones(
        cls, shape: Sequence[int], *, dtype: Optional[str] = None, device: Any = None
    ) -> Self:
        return cls.full(shape, 1, dtype=dtype, device=device)

    def full_like(self, value: Number) -> Self:
        return self._wrap(torch.full_like(self._tensor, value))

    def zeros_like(self) -> Self:
        return self._wrap(torch.zeros_like(self._tensor))

    def ones_like(self) -> Self:
        return self._wrap(torch.ones_like(self._tensor))

    # ------------------------------------------------------------------
    # Host interop
    # ------------------------------------------------------------------
    def to_numpy(self) -> np.ndarray:
        return self._tensor.detach().cpu().numpy().copy()

    def item(self) -> float:
        return self._tensor.item()

    def astype(self, dtype: str) -> Self:
        return self._wrap(self._tensor.to(_torch_dtype(dtype)))

    def clone(self) -> Self:
        return self._wrap(self._tensor.clone())

    # ------------------------------------------------------------------
    # Elementwise
    # ------------------------------------------------------------------
    def add(self, other: Self) -> Self:
        return self._wrap(torch.add(self._tensor, other._tensor))

    def sub(self, other: Self) -> Self:
        return self._wrap(torch.sub(self._tensor, other._tensor))

    def mul(self, other: Self) -> Self:
        return self._wrap(torch.mul(self._tensor, other._tensor))

    def div(self, other: Self) -> Self:
        return self._wrap(torch.div(self._tensor, other._tensor))

    def _scalar_operand(self, value: Number) -> "torch.Tensor":
        # float scalars on integer/bool tensors compute in the default float dtype
        t = self._tensor
        if isinstance(value, float) and not (t.is_floating_point() or t.is_complex()):
            return t.to(_torch_dtype(get_default_dtype()))
        return t

    def add_scalar(self, value: Number) -> Self:
        return self._wrap(self._scalar_operand(value) + value)

    def mul_scalar(self, value: Number) -> Self:
        return self._wrap(self._scalar_operand(value) * value)

    def powf_scalar(self, exponent: Number) -> Self:
        return self._wrap(torch.pow(self._scalar_operand(exponent), exponent))

    def neg(self) -> Self:
        return self._wrap(torch.neg(self._tensor))

    def exp(self) -> Self:
        return self._wrap(torch.exp(self._tensor))

    def log(self) -> Self:
        return self._wrap(torch.log(self._tensor))

    def sqrt(self) -> Self:
        return self._wrap(torch.sqrt(self._tensor))

    def abs(self) -> Self:
        return self._wrap(torch.abs(self._tensor))

    def sign(self) -> Self:
        return self._wrap(torch.sign(self._tensor))

    def tanh(self) -> Self:
        return self._wrap(torch.tanh(self._tensor))

    def sigmoid(self) -> Self:
        return self._wrap(torch.sigmoid(self._tensor))

    def clamp(self, min: Optional[Number], max: Optional[Number]) -> Self:
        return self._wrap(torch.clamp(self._tensor, min=min, max=max))

    # ------------------------------------------------------------------
    # Linear algebra and layout
    # ------------------------------------------------------------------
    def matmul(self, other: Self) -> Self:
        return self._wrap(torch.matmul(self._tensor, other._tensor))

    def swap_dims(self, dim1: int, dim2: int) -> Self:
        return self._wrap(torch.transpose(self._tensor, dim1, dim2))

    def transpose(self) -> Self:
        return self.swap_dims(-2, -1)

    def reshape(self, shape: Sequence[int]) -> Self:
        return self._wrap(self._tensor.reshape(tuple(shape)))

    def broadcast_to(self, shape: Sequence[int]) -> Self:
        return self._wrap(self._tensor.broadcast_to(tuple(shape)).contiguous())

    # ------------------------------------------------------------------
    # Reductions
    # ------------------------------------------------------------------
    def _dims(self, axis: Axis) -> tuple[int, ...]:
        # torch treats dim=() as "all dims"; callers return early on empty axes
        if axis is None:
            return tuple(range(self._tensor.dim()))
        if isinstance(axis, int):
            return (axis,)
        return tuple(int(a) for a in axis)

    def sum(self, axis: Axis = None, keepdims: bool = False) -> Self:
        if axis is not None and not self._dims(axis):
            return self
        if axis is None and not keepdims:
            return self._wrap(self._tensor.sum())
        return self._wrap(self._tensor.sum(dim=self._dims(axis), keepdim=keepdims))

    def mean(self, axis: Axis = None, keepdims: bool = False) -> Self:
        if axis is not None and not self._dims(axis):
            return self
        if axis is None and not keepdims:
            return self._wrap(self._tensor.mean())
        return self._wrap(self._tensor.mean(dim=self._dims(axis), keepdim=keepdims))

    def max(self, axis: Axis = None, keepdims: bool = False) -> Self:
        if axis is not None and not self._dims(axis):
            return self
        if axis is None and not keepdims:
            return self._wrap(self._tensor.max())
        return self._wrap(torch.amax(self._tensor, dim=self._dims(axis), keepdim=keepdims))

    def min(self, axis: Axis = None, keepdims: bool = False) -> Self:
        if axis is not None and not self._dims(axis):
            return self
        if axis is None and not keepdims:
            return self._wrap(self._tensor.min())
        return self._wrap(torch.amin(self._tensor, dim=self._dims(axis), keepdim=keepdims))

    def argmax(self, dim: int) -> Self:
        return self._wrap(torch.argmax(self._tensor, dim=dim, keepdim=True))

    def argmin(self, dim: int) -> Self:
        return self._wrap(torch.argmin(self._tensor, dim=dim, keepdim=True))

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------
    def gather(self, dim: int, indices: Self) -> Self:
        return self._wrap(torch.gather(self._tensor, dim, indices._tensor))

    def scatter(self, dim: int, indices: Self, values: Self) -> Self:
        return self._wrap(self._tensor.scatter_add(dim, indices._tensor, values._tensor))

    def select(self, dim: int, indices: Self) -> Self:
        return self._wrap(torch.index_select(self._tensor, dim, indices._tensor))

    def select_assign(self, dim: int, indices: Self, values: Self) -> Self:
        return self._wrap(self._tensor.index_add(dim, indices._tensor, values._tensor))

    def slice(self, ranges: Sequence[tuple[int, int]]) -> Self:
        return self._wrap(self._tensor[tuple(slice(s, e) for s, e in ranges)])

    def slice_assign(self, ranges: Sequence[tuple[int, int]], values: Self) -> Self:
        out = self._tensor.clone()
        out[tuple(slice(s, e) for s, e in ranges)] = values._tensor
        return self._wrap(out)

    @classmethod
    def cat(cls, values: Sequence[Self], dim: int) -> Self:
        return cls(torch.cat([v._tensor for v in values], dim=dim))

    # ------------------------------------------------------------------
    # Comparisons and masking
    # ------------------------------------------------------------------
    def equal(self, other: Self) -> Self:
        return self._wrap(torch.eq(self._tensor, other._tensor))

    def greater(self, other: Self) -> Self:
        return self._wrap(torch.gt(self._tensor, other._tensor))

    def greater_equal(self, other: Self) -> Self:
        return self._wrap(torch.ge(self._tensor, other._tensor))

    def lower(self, other: Self) -> Self:
        return self._wrap(torch.lt(self._tensor, other._tensor))

    def lower_equal(self, other: Self) -> Self:
        return self._wrap(torch.le(self._tensor, other._tensor))

    def mask_where(self, mask: Self, value: Self) -> Self:
        return self._wrap(torch.where(mask._tensor, value._tensor, self._tensor))

    def mask_fill(self, mask: Self, value: Number) -> Self:
        fill = torch.tensor(value, dtype=self._tensor.dtype, device=self._tensor.device)
        return self._wrap(torch.where(mask._tensor, fill, self._tensor))

    # ------------------------------------------------------------------
    # Pooling
    # ------------------------------------------------------------------
    def max_pool1d_with_indices(
        self, kernel_size: int, stride: int, padding: int
    ) -> tuple[Self, Self]:
        values, indices = F.max_pool1d(
            self._tensor,
            kernel_size=kernel_size,
            stride=stride,
            padding=padding,
            return_indices=True,
        )
        return self._wrap(values), self._wrap(indices)

    def max_pool1d_backward(self, indices: Self, length: int) -> Self:
        n, c, _ = self._tensor.shape
        out = torch.zeros(
            (n, c, length), dtype=self._tensor.dtype, device=self._tensor.device
        )
        return self._wrap(out.scatter_add(2, indices._tensor, self._tensor))

    def avg_pool1d(self, kernel_size: int, stride: int, padding: int) -> Self:
        return self._wrap(
            F.avg_pool1d(
                self._tensor,
                kernel_size=kernel_size,
                stride=stride,
                padding=padding,
                count_include_pad=True,
            )
        )

    def avg_pool1d_backward(
        self, length: int, kernel_size: int, stride: int, padding: int
    ) -> Self:
        grad = self._tensor
        n, c, length_out = grad.shape
        dev = grad.device
        padded = torch.zeros((n, c, length + 2 * padding), dtype=grad.dtype, device=dev)

        starts = torch.arange(length_out, device=dev) * stride
        window_idx = starts[:, None] + torch.arange(kernel_size, device=dev)[None, :]
        index = window_idx.reshape(1, 1, -1).expand(n, c, -1)
        share = (grad / kernel_size).unsqueeze(-1).expand(n, c, length_out, kernel_size)

        padded = padded.scatter_add(2, index, share.reshape(n, c, -1))
        return self._wrap(padded[:, :, padding : padding + length].contiguous())

    def adaptive_avg_pool1d(self, output_size: int) -> Self:
        return self._wrap(F.adaptive_avg_pool1d(self._tensor, output_size))

    def adaptive_avg_pool1d_backward(self, length: int) -> Self:
        grad = self._tensor
        n, c, output_size = grad.shape
        dev = grad.device
        i = torch.arange(output_size, device=dev)
        starts = (i * length) // output_size
        ends = -((-(i + 1) * length) // output_size)
        share = grad / (ends - starts).to(grad.dtype)

        # difference array: +share at each start, -share at each end
        diff = torch.zeros((n, c, length + 1), dtype=grad.dtype, device=dev)
        diff = diff.scatter_add(2, starts.expand(n, c, -1), share)
        diff = diff.scatter_add(2, ends.expand(n, c, -1), -share)
        return self._wrap(torch.cumsum(diff, dim=-1)[:, :, :length].contiguous())
