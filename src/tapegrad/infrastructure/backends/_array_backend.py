"""
Shared implementation for NumPy-compatible array modules.

NumPy and CuPy expose the same array API, so one class implements the whole
backend tensor catalog against a module object `xp`. Concrete backends only
bind `xp`, report their placement, adjust construction and host transfer,
and provide unbuffered scatter-add (`_add_at`).

Design notes
------------
- Every operation returns a new wrapper; wrapped arrays are never written
  through. Views returned by the array module (reshape, swapaxes, basic
  slicing) are therefore safe to share across graph nodes. Operations that
  write (scatter, slice_assign, pooling backward) write into a fresh array.
- Full reductions yield 0-d arrays rather than array-module scalars, so the
  result is always a backend tensor with shape `()`.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union

import numpy as np
from typing_extensions import Self

from ..._config import get_default_dtype
from ...domain.device._device import Device

Number = Union[int, float]
Axis = Union[int, Sequence[int], None]


def _normalize_axis(axis: Axis) -> Union[int, tuple[int, ...], None]:
    if axis is None or isinstance(axis, int):
        return axis
    return tuple(int(a) for a in axis)


class ArrayModuleTensor:
    """
    Backend tensor over a NumPy-compatible array module.

    Subclasses must set `backend_name` and `xp` and implement `device`,
    `_from_host`, `to_numpy` and `_add_at`.

    Parameters
    ----------
    array : Any
        Native array owned by this wrapper.
    """

    __slots__ = ("_array",)

    backend_name: str = "array"
    xp: Any = None

    def __init__(self, array: Any) -> None:
        self._array = array

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    @property
    def data(self) -> Any:
        """
        Native array backing this tensor.

        Callers must treat it as read-only; it may be shared by several graph
        nodes.
        """
        return self._array

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(int(d) for d in self._array.shape)

    @property
    def dtype(self) -> str:
        return np.dtype(self._array.dtype).name

    @property
    def device(self) -> Device:
        raise NotImplementedError

    def numel(self) -> int:
        return int(self._array.size)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(shape={self.shape}, dtype={self.dtype}, "
            f"device={self.device})"
        )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def _wrap(self, array: Any) -> Self:
        return type(self)(self.xp.asarray(array))

    @staticmethod
    def _resolve_dtype(data: Any, dtype: Optional[str]) -> str:
        if dtype is not None:
            return np.dtype(dtype).name
        kind = getattr(getattr(data, "dtype", None), "kind", None)
        if kind == "b":
            return "bool"
        return get_default_dtype()

    @classmethod
    def _from_host(cls, array: np.ndarray, device: Any) -> Self:
        raise NotImplementedError

    @classmethod
    def from_data(
        cls, data: Any, *, dtype: Optional[str] = None, device: Any = None
    ) -> Self:
        """
        Build a tensor from host data.

        Parameters
        ----------
        data : Any
            Scalars, nested sequences, NumPy arrays, or another tensor of this
            backend.
        dtype : Optional[str]
            Element type; defaults to the configured default float dtype
            (boolean arrays keep their type).
        device : Any
            Placement understood by `Device.from_any`.
        """
        if isinstance(data, ArrayModuleTensor):
            data = data.to_numpy()
        host = np.asarray(data)
        host = host.astype(cls._resolve_dtype(host, dtype), copy=True)
        return cls._from_host(host, device)

    @classmethod
    def full(
        cls,
        shape: Sequence[int],
        value: Number,
        *,
        dtype: Optional[str] = None,
        device: Any = None,
    ) -> Self:
        dt = np.dtype(dtype or get_default_dtype())
        return cls._from_host(np.full(tuple(shape), value, dtype=dt), device)

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
        return self._wrap(self.xp.full_like(self._array, value))

    def zeros_like(self) -> Self:
        return self._wrap(self.xp.zeros_like(self._array))

    def ones_like(self) -> Self:
        return self._wrap(self.xp.ones_like(self._array))

    # ------------------------------------------------------------------
    # Host interop
    # ------------------------------------------------------------------
    def to_numpy(self) -> np.ndarray:
        raise NotImplementedError

    def item(self) -> float:
        return self._array.item()

    def astype(self, dtype: str) -> Self:
        return self._wrap(self._array.astype(np.dtype(dtype)))

    def clone(self) -> Self:
        return self._wrap(self._array.copy())

    # ------------------------------------------------------------------
    # Scatter-add primitive
    # ------------------------------------------------------------------
    def _add_at(self, out: Any, index: Any, values: Any) -> None:
        """
        ``out[index] += values`` without buffering, so repeated positions in
        `index` accumulate. `out` is always an array this backend just
        allocated.
        """
        raise NotImplementedError

    def _along_axis_index(self, indices: Any, dim: int) -> tuple[Any, ...]:
        # open grid over every axis except `dim`, which takes `indices`
        xp = self.xp
        rank = indices.ndim
        index = []
        for i, n in enumerate(indices.shape):
            if i == dim:
                index.append(indices)
            else:
                shape = [1] * rank
                shape[i] = n
                index.append(xp.arange(n).reshape(shape))
        return tuple(index)

    # ------------------------------------------------------------------
    # Elementwise binary
    # ------------------------------------------------------------------
    def add(self, other: Self) -> Self:
        return self._wrap(self.xp.add(self._array, other._array))

    def sub(self, other: Self) -> Self:
        return self._wrap(self.xp.subtract(self._array, other._array))

    def mul(self, other: Self) -> Self:
        return self._wrap(self.xp.multiply(self._array, other._array))

    def div(self, other: Self) -> Self:
        return self._wrap(self.xp.true_divide(self._array, other._array))

    def _scalar(self, value: Number) -> Any:
        return self.xp.asarray(value, dtype=self._array.dtype)

    def _scalar_operand(self, value: Number) -> Any:
        # float scalars on integer/bool arrays compute in the default float dtype
        if isinstance(value, float) and self._array.dtype.kind in "biu":
            return self._array.astype(np.dtype(get_default_dtype()))
        return self._array

    def add_scalar(self, value: Number) -> Self:
        x = self._scalar_operand(value)
        return self._wrap(x + self.xp.asarray(value, dtype=x.dtype))

    def mul_scalar(self, value: Number) -> Self:
        x = self._scalar_operand(value)
        return self._wrap(x * self.xp.asarray(value, dtype=x.dtype))

    def powf_scalar(self, exponent: Number) -> Self:
        x = self._scalar_operand(exponent)
        return self._wrap(self.xp.power(x, self.xp.asarray(exponent, dtype=x.dtype)))

    # ------------------------------------------------------------------
    # Elementwise unary
    # ------------------------------------------------------------------
    def neg(self) -> Self:
        return self._wrap(self.xp.negative(self._array))

    def exp(self) -> Self:
        return self._wrap(self.xp.exp(self._array))

    def log(self) -> Self:
        return self._wrap(self.xp.log(self._array))

    def sqrt(self) -> Self:
        return self._wrap(self.xp.sqrt(self._array))

    def abs(self) -> Self:
        return self._wrap(self.xp.abs(self._array))

    def sign(self) -> Self:
        return self._wrap(self.xp.sign(self._array))

    def tanh(self) -> Self:
        return self._wrap(self.xp.tanh(self._array))

    def sigmoid(self) -> Self:
        one = self._scalar(1)
        return self._wrap(one / (one + self.xp.exp(-self._array)))

    def clamp(self, min: Optional[Number], max: Optional[Number]) -> Self:
        return self._wrap(self.xp.clip(self._array, min, max))

    # ------------------------------------------------------------------
    # Linear algebra and layout
    # ------------------------------------------------------------------
    def matmul(self, other: Self) -> Self:
        return self._wrap(self.xp.matmul(self._array, other._array))

    def swap_dims(self, dim1: int, dim2: int) -> Self:
        return self._wrap(self.xp.swapaxes(self._array, dim1, dim2))

    def transpose(self) -> Self:
        return self.swap_dims(-2, -1)

    def reshape(self, shape: Sequence[int]) -> Self:
        return self._wrap(self.xp.reshape(self._array, tuple(shape)))

    def broadcast_to(self, shape: Sequence[int]) -> Self:
        # copy keeps rank 0; ascontiguousarray would promote () to (1,)
        expanded = self.xp.broadcast_to(self._array, tuple(shape))
        return self._wrap(expanded.copy())

    # ------------------------------------------------------------------
    # Reductions
    # ------------------------------------------------------------------
    def sum(self, axis: Axis = None, keepdims: bool = False) -> Self:
        return self._wrap(
            self.xp.sum(self._array, axis=_normalize_axis(axis), keepdims=keepdims)
        )

    def mean(self, axis: Axis = None, keepdims: bool = False) -> Self:
        return self._wrap(
            self.xp.mean(self._array, axis=_normalize_axis(axis), keepdims=keepdims)
        )

    def max(self, axis: Axis = None, keepdims: bool = False) -> Self:
        return self._wrap(
            self.xp.max(self._array, axis=_normalize_axis(axis), keepdims=keepdims)
        )

    def min(self, axis: Axis = None, keepdims: bool = False) -> Self:
        return self._wrap(
            self.xp.min(self._array, axis=_normalize_axis(axis), keepdims=keepdims)
        )

    def argmax(self, dim: int) -> Self:
        arg = self.xp.argmax(self._array, axis=dim)
        return self._wrap(self.xp.expand_dims(arg, dim).astype(np.int64))

    def argmin(self, dim: int) -> Self:
        arg = self.xp.argmin(self._array, axis=dim)
        return self._wrap(self.xp.expand_dims(arg, dim).astype(np.int64))

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------
    def gather(self, dim: int, indices: Self) -> Self:
        return self._wrap(self.xp.take_along_axis(self._array, indices._array, axis=dim))

    def scatter(self, dim: int, indices: Self, values: Self) -> Self:
        out = self._array.copy()
        dim = dim % out.ndim
        self._add_at(out, self._along_axis_index(indices._array, dim), values._array)
        return self._wrap(out)

    def select(self, dim: int, indices: Self) -> Self:
        return self._wrap(self.xp.take(self._array, indices._array, axis=dim))

    def select_assign(self, dim: int, indices: Self, values: Self) -> Self:
        out = self._array.copy()
        dim = dim % out.ndim
        index = (slice(None),) * dim + (indices._array,)
        self._add_at(out, index, values._array)
        return self._wrap(out)

    def slice(self, ranges: Sequence[tuple[int, int]]) -> Self:
        return self._wrap(self._array[tuple(slice(s, e) for s, e in ranges)])

    def slice_assign(self, ranges: Sequence[tuple[int, int]], values: Self) -> Self:
        out = self._array.copy()
        out[tuple(slice(s, e) for s, e in ranges)] = values._array
        return self._wrap(out)

    @classmethod
    def cat(cls, values: Sequence[Self], dim: int) -> Self:
        first = values[0]
        return first._wrap(first.xp.concatenate([v._array for v in values], axis=dim))

    # ------------------------------------------------------------------
    # Comparisons and masking
    # ------------------------------------------------------------------
    def equal(self, other: Self) -> Self:
        return self._wrap(self.xp.equal(self._array, other._array))

    def greater(self, other: Self) -> Self:
        return self._wrap(self.xp.greater(self._array, other._array))

    def greater_equal(self, other: Self) -> Self:
        return self._wrap(self.xp.greater_equal(self._array, other._array))

    def lower(self, other: Self) -> Self:
        return self._wrap(self.xp.less(self._array, other._array))

    def lower_equal(self, other: Self) -> Self:
        return self._wrap(self.xp.less_equal(self._array, other._array))

    def mask_where(self, mask: Self, value: Self) -> Self:
        return self._wrap(self.xp.where(mask._array, value._array, self._array))

    def mask_fill(self, mask: Self, value: Number) -> Self:
        return self._wrap(self.xp.where(mask._array, self._scalar(value), self._array))

    # ------------------------------------------------------------------
    # Pooling
    # ------------------------------------------------------------------
    def _windows(self, length: int, kernel_size: int, stride: int) -> tuple[Any, Any]:
        """
        Window start offsets ``(L_out,)`` and positions ``(L_out, K)`` into an
        axis of `length` elements.
        """
        xp = self.xp
        length_out = (length - kernel_size) // stride + 1
        starts = xp.arange(length_out) * stride
        return starts, starts[:, None] + xp.arange(kernel_size)[None, :]

    def _batch_channel_index(self, n: int, c: int, extra: int) -> tuple[Any, Any]:
        xp = self.xp
        tail = (1,) * extra
        return (
            xp.arange(n).reshape((n, 1) + tail),
            xp.arange(c).reshape((1, c) + tail),
        )

    def max_pool1d_with_indices(
        self, kernel_size: int, stride: int, padding: int
    ) -> tuple[Self, Self]:
        xp = self.xp
        x = self._array
        if padding:
            x = xp.pad(
                x,
                ((0, 0), (0, 0), (padding, padding)),
                mode="constant",
                constant_values=-xp.inf,
            )
        starts, window_idx = self._windows(x.shape[2], kernel_size, stride)

        windows = x[:, :, window_idx]
        arg = xp.argmax(windows, axis=-1)
        values = xp.take_along_axis(windows, arg[..., None], axis=-1)[..., 0]
        indices = arg + starts - padding
        return self._wrap(values), self._wrap(indices.astype(np.int64))

    def max_pool1d_backward(self, indices: Self, length: int) -> Self:
        grad = self._array
        n, c, _ = grad.shape
        out = self.xp.zeros((n, c, length), dtype=grad.dtype)
        batch, channel = self._batch_channel_index(n, c, 1)
        self._add_at(out, (batch, channel, indices._array), grad)
        return self._wrap(out)

    def avg_pool1d(self, kernel_size: int, stride: int, padding: int) -> Self:
        xp = self.xp
        x = self._array
        if padding:
            x = xp.pad(x, ((0, 0), (0, 0), (padding, padding)), mode="constant")
        _, window_idx = self._windows(x.shape[2], kernel_size, stride)
        return self._wrap(xp.mean(x[:, :, window_idx], axis=-1))

    def avg_pool1d_backward(
        self, length: int, kernel_size: int, stride: int, padding: int
    ) -> Self:
        xp = self.xp
        grad = self._array
        n, c, length_out = grad.shape
        padded = xp.zeros((n, c, length + 2 * padding), dtype=grad.dtype)
        _, window_idx = self._windows(padded.shape[2], kernel_size, stride)

        share = xp.broadcast_to(
            (grad / kernel_size)[..., None], (n, c, length_out, kernel_size)
        )
        batch, channel = self._batch_channel_index(n, c, 2)
        self._add_at(padded, (batch, channel, window_idx), share)
        return self._wrap(padded[:, :, padding : padding + length].copy())

    def _adaptive_bounds(self, length: int, output_size: int) -> tuple[Any, Any]:
        i = self.xp.arange(output_size)
        return (i * length) // output_size, -((-(i + 1) * length) // output_size)

    def adaptive_avg_pool1d(self, output_size: int) -> Self:
        xp = self.xp
        x = self._array
        starts, ends = self._adaptive_bounds(x.shape[2], output_size)
        # prefix sums with a leading zero: window sum = cs[end] - cs[start]
        cs = xp.concatenate(
            [xp.zeros(x.shape[:2] + (1,), dtype=x.dtype), xp.cumsum(x, axis=-1)],
            axis=-1,
        )
        out = (cs[:, :, ends] - cs[:, :, starts]) / (ends - starts)
        return self._wrap(out.astype(x.dtype))

    def adaptive_avg_pool1d_backward(self, length: int) -> Self:
        xp = self.xp
        grad = self._array
        n, c, output_size = grad.shape
        starts, ends = self._adaptive_bounds(length, output_size)
        share = (grad / (ends - starts)).astype(grad.dtype)

        # difference array: +share at each start, -share at each end
        diff = xp.zeros((n, c, length + 1), dtype=grad.dtype)
        batch, channel = self._batch_channel_index(n, c, 1)
        self._add_at(diff, (batch, channel, starts), share)
        self._add_at(diff, (batch, channel, ends), -share)
        return self._wrap(xp.cumsum(diff, axis=-1)[:, :, :length])
