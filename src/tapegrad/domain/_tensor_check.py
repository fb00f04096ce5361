"""
Eager validation of tensor operations.

`TensorCheck` collects every reason an operation is invalid before any
backend work happens or any graph node is created. Checks are cheap when they
pass; when one fails, building a complete, readable message matters more than
speed, because the failure always points at a programming error.

Typical usage
-------------
    TensorCheck("Add").binary_ops_ew_shape(a.shape, b.shape).check()

A failed check raises `ShapeMismatchError` whose message looks like::

    === Tensor Operation Error ===
      Operation: 'Add'
      Reason:
        1. The provided tensors have incompatible shapes. Incompatible size ...
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

from ._errors import ShapeMismatchError

Shape = tuple[int, ...]


def broadcast_shapes(lhs: Sequence[int], rhs: Sequence[int]) -> Optional[Shape]:
    """
    Compute the NumPy broadcast of two shapes.

    Returns
    -------
    Optional[tuple[int, ...]]
        The broadcast shape, or None if the shapes are incompatible.
    """
    rank = max(len(lhs), len(rhs))
    a = (1,) * (rank - len(lhs)) + tuple(lhs)
    b = (1,) * (rank - len(rhs)) + tuple(rhs)
    out = []
    for da, db in zip(a, b):
        if da == db or db == 1:
            out.append(da)
        elif da == 1:
            out.append(db)
        else:
            return None
    return tuple(out)


def _numel(shape: Sequence[int]) -> int:
    n = 1
    for d in shape:
        n *= int(d)
    return n


class TensorCheck:
    """
    Accumulator of validation failures for one operation.

    Every check method returns `self` so checks can be chained; `check()`
    raises if anything was registered.

    Parameters
    ----------
    op : str
        Human-readable operation name used in the error message.
    """

    def __init__(self, op: str) -> None:
        self._op = op
        self._errors: list[tuple[str, Optional[str]]] = []

    @property
    def failed(self) -> bool:
        return bool(self._errors)

    def _register(self, description: str, details: Optional[str] = None) -> "TensorCheck":
        self._errors.append((description, details))
        return self

    # ------------------------------------------------------------------
    # Individual checks
    # ------------------------------------------------------------------
    def binary_ops_ew_shape(self, lhs: Shape, rhs: Shape) -> "TensorCheck":
        """
        Shapes must be broadcast-compatible (dims equal, or one of them 1).
        """
        rank = max(len(lhs), len(rhs))
        a = (1,) * (rank - len(lhs)) + tuple(lhs)
        b = (1,) * (rank - len(rhs)) + tuple(rhs)
        for i, (da, db) in enumerate(zip(a, b)):
            if da != db and da != 1 and db != 1:
                self._register(
                    "The provided tensors have incompatible shapes.",
                    f"Incompatible size at dimension '{i}' => '{da} != {db}', which "
                    f"can't be broadcasted. Lhs tensor shape {tuple(lhs)}, Rhs tensor "
                    f"shape {tuple(rhs)}.",
                )
        return self

    def matmul(self, lhs: Shape, rhs: Shape) -> "TensorCheck":
        """
        Both operands need rank >= 2, matching inner dimensions, and
        broadcastable batch dimensions.
        """
        if len(lhs) < 2 or len(rhs) < 2:
            return self._register(
                "Matmul requires tensors with at least two dimensions.",
                f"Lhs tensor shape {tuple(lhs)}, Rhs tensor shape {tuple(rhs)}.",
            )
        if lhs[-1] != rhs[-2]:
            self._register(
                "The inner dimension of matmul should be the same.",
                f"Lhs shape {tuple(lhs)}, rhs shape {tuple(rhs)}.",
            )
        if broadcast_shapes(lhs[:-2], rhs[:-2]) is None:
            self._register(
                "The batch dimensions of matmul can't be broadcasted.",
                f"Lhs batch shape {tuple(lhs[:-2])}, rhs batch shape {tuple(rhs[:-2])}.",
            )
        return self

    def reshape(self, original: Shape, target: Shape) -> "TensorCheck":
        if any(int(d) < 0 for d in target):
            return self._register(
                "The given shape contains negative dimensions.",
                f"Target shape: {tuple(target)}.",
            )
        if _numel(original) != _numel(target):
            self._register(
                "The given shape doesn't have the same number of elements as the "
                "current tensor.",
                f"Current shape: {tuple(original)}, target shape: {tuple(target)}.",
            )
        return self

    def broadcast_to(self, original: Shape, target: Shape) -> "TensorCheck":
        if len(target) < len(original):
            return self._register(
                "Can't broadcast to a shape of lower rank.",
                f"Current shape: {tuple(original)}, target shape: {tuple(target)}.",
            )
        if broadcast_shapes(original, target) != tuple(target):
            self._register(
                "The current shape can't be broadcasted to the target shape.",
                f"Current shape: {tuple(original)}, target shape: {tuple(target)}.",
            )
        return self

    def dim_ops(self, dim: int, rank: int) -> "TensorCheck":
        if not -rank <= dim < rank:
            self._register(
                "Given dimension is out of range for the tensor rank.",
                f"Tensor rank: '{rank}', given dimension: '{dim}'.",
            )
        return self

    def axes(self, axis: Union[int, Sequence[int], None], rank: int) -> "TensorCheck":
        if axis is None:
            return self
        axes = (axis,) if isinstance(axis, int) else tuple(axis)
        for a in axes:
            self.dim_ops(int(a), rank)
        normalized = [int(a) % rank for a in axes if -rank <= int(a) < rank]
        if len(set(normalized)) != len(normalized):
            self._register("Reduction axes must be unique.", f"Given axes: {axes}.")
        return self

    def pool1d(
        self, shape: Shape, kernel_size: int, stride: int, padding: int
    ) -> "TensorCheck":
        """
        Window pooling over the last axis of a (batch, channels, length) tensor.
        """
        if len(shape) != 3:
            return self._register(
                "Pooling expects a tensor of shape (batch, channels, length).",
                f"Got shape {tuple(shape)}.",
            )
        if kernel_size < 1 or stride < 1 or padding < 0:
            return self._register(
                "Kernel size and stride must be positive and padding non-negative.",
                f"kernel_size={kernel_size}, stride={stride}, padding={padding}.",
            )
        if padding * 2 > kernel_size:
            self._register(
                "Padding should be at most half of the kernel size.",
                f"kernel_size={kernel_size}, padding={padding}.",
            )
        if shape[2] + 2 * padding < kernel_size:
            self._register(
                "The padded input is shorter than the kernel.",
                f"length={shape[2]}, padding={padding}, kernel_size={kernel_size}.",
            )
        return self

    def adaptive_pool1d(self, shape: Shape, output_size: int) -> "TensorCheck":
        if len(shape) != 3:
            return self._register(
                "Pooling expects a tensor of shape (batch, channels, length).",
                f"Got shape {tuple(shape)}.",
            )
        if output_size < 1:
            self._register(
                "The output size must be positive.", f"output_size={output_size}."
            )
        return self

    def squeeze(self, dim: int, shape: Shape) -> "TensorCheck":
        self.dim_ops(dim, len(shape))
        if self.failed:
            return self
        if shape[dim] != 1:
            self._register(
                f"Can't squeeze dimension {dim} because its size is not 1.",
                f"Tensor shape {tuple(shape)}.",
            )
        return self

    def unsqueeze(self, dim: int, rank: int) -> "TensorCheck":
        # the new axis may also be appended, so the valid range is one wider
        return self.dim_ops(dim, rank + 1)

    def int_indices(self, dtype: str) -> "TensorCheck":
        if not dtype.startswith(("int", "uint")):
            self._register(
                "Indices must be an integer tensor.", f"Got dtype '{dtype}'."
            )
        return self

    def _gather_scatter_indices(
        self, dim: int, shape: Shape, indices_shape: Shape
    ) -> "TensorCheck":
        rank = len(shape)
        self.dim_ops(dim, rank)
        if len(indices_shape) != rank:
            return self._register(
                "The index tensor must have the same number of dimensions as the "
                "tensor.",
                f"Tensor shape {tuple(shape)}, index shape {tuple(indices_shape)}.",
            )
        axis = dim % rank if -rank <= dim < rank else None
        for i, (d_tensor, d_indices) in enumerate(zip(shape, indices_shape)):
            if i == axis:
                continue
            if d_tensor != d_indices:
                self._register(
                    "The tensor shape should be the same as the index tensor shape.",
                    f"The shape differs at dimension {i}: {d_tensor} != {d_indices}",
                )
        return self

    def gather(self, dim: int, shape: Shape, indices_shape: Shape) -> "TensorCheck":
        return self._gather_scatter_indices(dim, shape, indices_shape)

    def scatter(
        self, dim: int, shape: Shape, indices_shape: Shape, values_shape: Shape
    ) -> "TensorCheck":
        self._gather_scatter_indices(dim, shape, indices_shape)
        if tuple(indices_shape) != tuple(values_shape):
            self._register(
                "Indices tensor shape should be the same as the value tensor shape.",
                f"The shape differs: {tuple(indices_shape)} != {tuple(values_shape)}",
            )
        return self

    def select(self, dim: int, shape: Shape, indices_shape: Shape) -> "TensorCheck":
        self.dim_ops(dim, len(shape))
        if len(indices_shape) != 1:
            self._register(
                "Select indices must be a 1D tensor.",
                f"Got index shape {tuple(indices_shape)}.",
            )
        return self

    def select_assign(
        self, dim: int, shape: Shape, indices_shape: Shape, values_shape: Shape
    ) -> "TensorCheck":
        self.select(dim, shape, indices_shape)
        if self.failed:
            return self
        expected = list(shape)
        expected[dim] = indices_shape[0]
        if tuple(values_shape) != tuple(expected):
            self._register(
                "The value tensor must match the tensor shape with the indexed "
                "dimension replaced by the number of indices.",
                f"Expected value shape {tuple(expected)}, got {tuple(values_shape)}.",
            )
        return self

    def slice(
        self, shape: Shape, ranges: Sequence[tuple[int, int]]
    ) -> "TensorCheck":
        if len(ranges) > len(shape):
            self._register(
                "The provided ranges array has a higher number of dimensions than "
                "the current tensor.",
                f"The ranges array must be smaller or equal to the tensor number of "
                f"dimensions. Tensor number of dimensions: {len(shape)}, ranges "
                f"array length {len(ranges)}.",
            )
        for i, (d, (start, end)) in enumerate(zip(shape, ranges)):
            if end > d:
                self._register(
                    "The provided ranges array has a range that exceeds the current "
                    "tensor size.",
                    f"The range ({start}..{end}) exceeds the size of the tensor ({d}) "
                    f"at dimension {i}. Tensor shape {tuple(shape)}, provided ranges "
                    f"{list(ranges)}.",
                )
            if start < 0 or start >= end:
                self._register(
                    "The provided range array has a range where the start index is "
                    "bigger or equal to its end.",
                    f"The range at dimension '{i}' starts at '{start}' and is greater "
                    f"or equal to its end '{end}'. Tensor shape {tuple(shape)}, "
                    f"provided ranges {list(ranges)}.",
                )
        return self

    def slice_assign(
        self, shape: Shape, values_shape: Shape, ranges: Sequence[tuple[int, int]]
    ) -> "TensorCheck":
        self.slice(shape, ranges)
        if self.failed:
            return self
        expected = tuple(e - s for s, e in ranges) + tuple(shape[len(ranges):])
        if tuple(values_shape) != expected:
            self._register(
                "The value tensor must match the amount of elements selected with "
                "the ranges array.",
                f"Expected value shape {expected}, got {tuple(values_shape)}. "
                f"Provided ranges {list(ranges)}.",
            )
        return self

    def cat(self, shapes: Sequence[Shape], dim: int) -> "TensorCheck":
        if not shapes:
            return self._register("Can't concatenate an empty list of tensors.")
        rank = len(shapes[0])
        if not -rank <= dim < rank:
            return self._register(
                "Can't concatenate tensors on a dim that exceeds the tensors "
                "dimension.",
                f"Trying to concatenate tensors with {rank} dimensions on axis {dim}.",
            )
        axis = dim % rank

        def without_dim(s: Shape) -> Shape:
            return tuple(d for i, d in enumerate(s) if i != axis)

        reference = without_dim(shapes[0])
        if any(len(s) != rank or without_dim(s) != reference for s in shapes):
            self._register(
                "Can't concatenate tensors with different shapes, except for the "
                "provided dimension.",
                f"Provided dimension ({dim}), tensors shapes: "
                f"{[tuple(s) for s in shapes]}",
            )
        return self

    def into_scalar(self, shape: Shape) -> "TensorCheck":
        if _numel(shape) != 1:
            self._register(
                "Only tensors with 1 element can be converted into scalar.",
                f"Current tensor has {_numel(shape)} elements",
            )
        return self

    def seed(self, expected: Shape, actual: Shape) -> "TensorCheck":
        if tuple(expected) != tuple(actual):
            self._register(
                "The seed gradient must have the same shape as the tensor.",
                f"Tensor shape {tuple(expected)}, seed shape {tuple(actual)}.",
            )
        return self

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def format(self) -> str:
        """
        Format all registered failures into one message.
        """
        message = f"=== Tensor Operation Error ===\n  Operation: '{self._op}'\n  Reason:"
        for number, (description, details) in enumerate(self._errors, start=1):
            message += f"\n    {number}. {description} "
            if details:
                message += f"{details} "
        return message + "\n"

    def check(self) -> None:
        """
        Raise `ShapeMismatchError` if any check failed.
        """
        if self._errors:
            raise ShapeMismatchError(
                op=self._op,
                reasons=tuple(d for d, _ in self._errors),
                message=self.format(),
            )
