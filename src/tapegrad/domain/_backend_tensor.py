"""
Backend tensor capability.

This module defines `IBackendTensor`, the structural contract every concrete
numeric engine implements. The autodiff core is written against this
protocol only; it never imports a concrete backend. Swapping NumPy for CuPy
or PyTorch therefore requires no change to graph, tape or backward logic.

Contract
--------
- Every operation is deterministic and functional: it returns a new backend
  tensor and never mutates its operands. A value that feeds several graph
  nodes can be shared without copies.
- Binary elementwise operations follow NumPy broadcasting rules.
- Operands of a binary operation must come from the same backend and live on
  the same device. Callers validate this (and shapes) before invoking the
  operation, so backends may assume well-formed inputs.
- Comparison operations return boolean tensors of the broadcast shape.
- Scalar operations keep the tensor's dtype, except that a float scalar
  applied to an integer or boolean tensor promotes the result to the
  configured default float dtype.
- Shape ``()`` is a valid shape for every operation that accepts a tensor of
  any rank, including `broadcast_to`.
- Read-only access to an already-produced value is safe from any thread.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, Union, runtime_checkable

from typing_extensions import Self

from .device._device_protocol import DeviceLike

Number = Union[int, float]
Axis = Union[int, Sequence[int], None]


@runtime_checkable
class IBackendTensor(Protocol):
    """
    Backend tensor interface.

    An `IBackendTensor` is an opaque numeric array produced by one execution
    engine. It reports its shape, dtype and placement and exposes a fixed
    catalog of operations.
    """

    # ---------------------------------------------------------------------
    # Identity
    # ---------------------------------------------------------------------
    backend_name: str

    @property
    def shape(self) -> tuple[int, ...]:
        """Shape of the value as a tuple of dimension sizes."""
        ...

    @property
    def dtype(self) -> str:
        """Canonical element type name (e.g., "float32", "bool")."""
        ...

    @property
    def device(self) -> DeviceLike:
        """Placement of the value."""
        ...

    def numel(self) -> int:
        """Total number of elements."""
        ...

    # ---------------------------------------------------------------------
    # Construction
    # ---------------------------------------------------------------------
    @classmethod
    def from_data(
        cls, data: Any, *, dtype: Optional[str] = None, device: Any = None
    ) -> Self:
        """
        Build a backend tensor from array-like host data.

        Parameters
        ----------
        data : Any
            Nested sequences, scalars, or a NumPy array.
        dtype : Optional[str]
            Element type name. Defaults to the configured default dtype.
        device : Any
            Placement; backend-specific default when omitted.
        """
        ...

    @classmethod
    def zeros(
        cls, shape: Sequence[int], *, dtype: Optional[str] = None, device: Any = None
    ) -> Self: ...

    @classmethod
    def ones(
        cls, shape: Sequence[int], *, dtype: Optional[str] = None, device: Any = None
    ) -> Self: ...

    @classmethod
    def full(
        cls,
        shape: Sequence[int],
        value: Number,
        *,
        dtype: Optional[str] = None,
        device: Any = None,
    ) -> Self: ...

    def zeros_like(self) -> Self: ...
    def ones_like(self) -> Self: ...
    def full_like(self, value: Number) -> Self: ...

    # ---------------------------------------------------------------------
    # Host interop
    # ---------------------------------------------------------------------
    def to_numpy(self) -> Any:
        """Copy the value into a host NumPy array."""
        ...

    def item(self) -> float:
        """Return the value of a single-element tensor as a Python scalar."""
        ...

    def astype(self, dtype: str) -> Self: ...
    def clone(self) -> Self: ...

    # ---------------------------------------------------------------------
    # Elementwise binary (broadcasting)
    # ---------------------------------------------------------------------
    def add(self, other: Self) -> Self: ...
    def sub(self, other: Self) -> Self: ...
    def mul(self, other: Self) -> Self: ...
    def div(self, other: Self) -> Self: ...

    def add_scalar(self, value: Number) -> Self: ...
    def mul_scalar(self, value: Number) -> Self: ...
    def powf_scalar(self, exponent: Number) -> Self: ...

    # ---------------------------------------------------------------------
    # Elementwise unary
    # ---------------------------------------------------------------------
    def neg(self) -> Self: ...
    def exp(self) -> Self: ...
    def log(self) -> Self: ...
    def sqrt(self) -> Self: ...
    def abs(self) -> Self: ...
    def sign(self) -> Self: ...
    def tanh(self) -> Self: ...
    def sigmoid(self) -> Self: ...
    def clamp(self, min: Optional[Number], max: Optional[Number]) -> Self: ...

    # ---------------------------------------------------------------------
    # Linear algebra and layout
    # ---------------------------------------------------------------------
    def matmul(self, other: Self) -> Self:
        """
        Batched matrix product over the last two dimensions.

        Leading (batch) dimensions broadcast under NumPy rules.
        """
        ...

    def swap_dims(self, dim1: int, dim2: int) -> Self: ...
    def transpose(self) -> Self:
        """Swap the last two dimensions."""
        ...

    def reshape(self, shape: Sequence[int]) -> Self: ...
    def broadcast_to(self, shape: Sequence[int]) -> Self:
        """Materialize this value expanded to `shape`."""
        ...

    # ---------------------------------------------------------------------
    # Reductions
    # ---------------------------------------------------------------------
    def sum(self, axis: Axis = None, keepdims: bool = False) -> Self: ...
    def mean(self, axis: Axis = None, keepdims: bool = False) -> Self: ...
    def max(self, axis: Axis = None, keepdims: bool = False) -> Self: ...
    def min(self, axis: Axis = None, keepdims: bool = False) -> Self: ...

    def argmax(self, dim: int) -> Self:
        """
        int64 positions of the first maximum along `dim`; `dim` is kept with
        size 1.
        """
        ...

    def argmin(self, dim: int) -> Self: ...

    # ---------------------------------------------------------------------
    # Indexing
    # ---------------------------------------------------------------------
    def gather(self, dim: int, indices: Self) -> Self:
        """
        ``out[..., i, ...] = self[..., indices[..., i, ...], ...]`` along `dim`.

        `indices` is int64 with the rank of `self`; the result has its shape.
        """
        ...

    def scatter(self, dim: int, indices: Self, values: Self) -> Self:
        """
        Copy of `self` with `values` added at `indices` along `dim`.

        Repeated indices accumulate.
        """
        ...

    def select(self, dim: int, indices: Self) -> Self:
        """Take the entries of a 1D int64 `indices` along `dim`."""
        ...

    def select_assign(self, dim: int, indices: Self, values: Self) -> Self:
        """
        Copy of `self` with the slices of `values` added at the positions given
        by the 1D `indices` along `dim`. Repeated indices accumulate.
        """
        ...

    def slice(self, ranges: Sequence[tuple[int, int]]) -> Self:
        """
        Sub-tensor over half-open ``(start, end)`` ranges of the leading
        dimensions; trailing dimensions are kept whole.
        """
        ...

    def slice_assign(self, ranges: Sequence[tuple[int, int]], values: Self) -> Self:
        """Copy of `self` with the ranged region replaced by `values`."""
        ...

    @classmethod
    def cat(cls, values: Sequence[Self], dim: int) -> Self:
        """Concatenate same-backend values along `dim`."""
        ...

    # ---------------------------------------------------------------------
    # Comparisons and masking
    # ---------------------------------------------------------------------
    def equal(self, other: Self) -> Self: ...
    def greater(self, other: Self) -> Self: ...
    def greater_equal(self, other: Self) -> Self: ...
    def lower(self, other: Self) -> Self: ...
    def lower_equal(self, other: Self) -> Self: ...

    def mask_where(self, mask: Self, value: Self) -> Self:
        """Take `value` where `mask` is true, else `self` (broadcasting)."""
        ...

    def mask_fill(self, mask: Self, value: Number) -> Self: ...

    # ---------------------------------------------------------------------
    # Pooling
    # ---------------------------------------------------------------------
    def max_pool1d_with_indices(
        self, kernel_size: int, stride: int, padding: int
    ) -> tuple[Self, Self]:
        """
        1D max pooling over the last axis of an (N, C, L) tensor.

        Padding uses negative infinity, so padded positions never win.

        Returns
        -------
        tuple[IBackendTensor, IBackendTensor]
            Pooled values (N, C, L_out) and the int64 positions of each maximum
            in the *unpadded* input.
        """
        ...

    def max_pool1d_backward(self, indices: Self, length: int) -> Self:
        """
        Scatter-add this (N, C, L_out) gradient into an (N, C, length) tensor
        at `indices`.
        """
        ...

    def avg_pool1d(self, kernel_size: int, stride: int, padding: int) -> Self:
        """
        1D average pooling over the last axis of an (N, C, L) tensor.

        Padding is zeros and counts toward the divisor, so every window is
        divided by `kernel_size`.
        """
        ...

    def avg_pool1d_backward(
        self, length: int, kernel_size: int, stride: int, padding: int
    ) -> Self:
        """
        Spread this (N, C, L_out) gradient evenly over each window of an
        (N, C, length) input; contributions to padding are dropped.
        """
        ...

    def adaptive_avg_pool1d(self, output_size: int) -> Self:
        """
        Average over `output_size` windows covering the last axis.

        Window ``i`` spans ``[floor(i * L / O), ceil((i + 1) * L / O))``.
        """
        ...

    def adaptive_avg_pool1d_backward(self, length: int) -> Self: ...
