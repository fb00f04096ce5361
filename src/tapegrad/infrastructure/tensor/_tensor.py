"""
Differentiable tensor handle.

This module provides `Tensor`, the user-facing type of tapegrad. A `Tensor`
wraps a `GraphNode`:

- its forward value is the node's backend tensor, computed eagerly,
- applying an operation creates a new node that records the inputs and a
  local derivative rule (if any input requires gradients),
- `backward()` replays the graph from this tensor and returns a fresh
  `Gradients` store, from which gradients are read by handle.

Design notes
------------
- The handle owns no state besides its node. Several handles may share a
  node (`clone()`); they resolve to the same gradient entry.
- Operations are implemented by the category mixins in `mixins/`. They rely
  on the helpers defined here to lift operands, validate placement, and
  record nodes.
- Nothing here depends on a concrete backend. Backends are reached through
  `get_backend` and the `IBackendTensor` protocol.
"""

from __future__ import annotations

from numbers import Real
from typing import Any, Callable, Optional, Sequence, Union

from ...domain._backend_tensor import IBackendTensor
from ...domain._errors import DeviceMismatchError
from ...domain._tensor import ITensor
from ...domain._tensor_check import TensorCheck
from ...domain.device._device import Device
from ..autodiff._gradients import Gradients
from ..autodiff._node import GraphNode, record
from ..autodiff._operation import OperationDescriptor, OpKind
from ..autodiff._engine import run_backward
from ..backends._registry import get_backend
from .mixins import (
    TensorMixinArithmetic,
    TensorMixinComparison,
    TensorMixinIndexing,
    TensorMixinLayout,
    TensorMixinReduction,
    TensorMixinUnary,
)

Number = Union[int, float]


class Tensor(
    TensorMixinArithmetic,
    TensorMixinUnary,
    TensorMixinLayout,
    TensorMixinReduction,
    TensorMixinComparison,
    TensorMixinIndexing,
    ITensor,
):
    """
    Differentiable tensor.

    Parameters
    ----------
    node : GraphNode
        Graph node this handle refers to. Use the class-method constructors
        (`from_data`, `from_backend`, `zeros`, ...) rather than building nodes
        directly.

    Notes
    -----
    NumPy arrays on the left of an operator defer to `Tensor` (see
    `__array_ufunc__`), so ``np.ones(3) * t`` records a graph node.
    """

    __array_ufunc__ = None

    def __init__(self, node: GraphNode) -> None:
        if not isinstance(node, GraphNode):
            raise TypeError(f"Tensor expects a GraphNode, got {type(node)!r}")
        self._node = node

    # ----------------------------
    # Construction
    # ----------------------------
    @classmethod
    def from_backend(cls, value: IBackendTensor, *, requires_grad: bool = False) -> "Tensor":
        """
        Wrap an existing backend tensor as a leaf.

        Parameters
        ----------
        value : IBackendTensor
            Forward value.
        requires_grad : bool, optional
            Whether gradients should be computed for this leaf.

        Raises
        ------
        TypeError
            If `value` does not implement the backend tensor capability.
        """
        if not isinstance(value, IBackendTensor):
            raise TypeError(f"Expected a backend tensor, got {type(value)!r}")
        return cls(GraphNode(value, requires_grad=requires_grad))

    @classmethod
    def from_data(
        cls,
        data: Any,
        *,
        backend: Optional[str] = None,
        dtype: Optional[str] = None,
        device: Any = None,
        requires_grad: bool = False,
    ) -> "Tensor":
        """
        Create a leaf tensor from host data.

        Parameters
        ----------
        data : Any
            Scalar, nested sequence, NumPy array, or another `Tensor` (its
            value is copied; its history is not).
        backend : Optional[str]
            Backend name; defaults to the configured default backend.
        dtype : Optional[str]
            Element type; defaults to the configured default dtype.
        device : Any
            Placement such as "cpu" or "cuda:0".
        requires_grad : bool, optional
            Whether gradients should be computed for this leaf.
        """
        if isinstance(data, Tensor):
            data = data.to_numpy()
        value = get_backend(backend).from_data(data, dtype=dtype, device=device)
        return cls.from_backend(value, requires_grad=requires_grad)

    @classmethod
    def full(
        cls,
        shape: Sequence[int],
        value: Number,
        *,
        backend: Optional[str] = None,
        dtype: Optional[str] = None,
        device: Any = None,
        requires_grad: bool = False,
    ) -> "Tensor":
        bt = get_backend(backend).full(tuple(shape), value, dtype=dtype, device=device)
        return cls.from_backend(bt, requires_grad=requires_grad)

    @classmethod
    def zeros(cls, shape: Sequence[int], **kwargs: Any) -> "Tensor":
        return cls.full(shape, 0, **kwargs)

    @classmethod
    def ones(cls, shape: Sequence[int], **kwargs: Any) -> "Tensor":
        return cls.full(shape, 1, **kwargs)

    # ----------------------------
    # Identity and metadata
    # ----------------------------
    @property
    def node(self) -> GraphNode:
        return self._node

    @property
    def node_id(self) -> int:
        return self._node.id

    @property
    def value(self) -> IBackendTensor:
        return self._node.value

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(self._node.value.shape)

    @property
    def ndim(self) -> int:
        return len(self.shape)

    @property
    def dtype(self) -> str:
        return self._node.value.dtype

    @property
    def device(self) -> Device:
        return self._node.value.device

    @property
    def backend_name(self) -> str:
        return self._node.value.backend_name

    @property
    def requires_grad(self) -> bool:
        return self._node.requires_grad

    @property
    def is_leaf(self) -> bool:
        return self._node.is_leaf

    @property
    def op(self) -> Optional[OpKind]:
        """
        Kind of the operation that produced this tensor, or None for leaves
        and untracked results.
        """
        d = self._node.descriptor
        return None if d is None else d.kind

    @property
    def descriptor(self) -> Optional[OperationDescriptor]:
        return self._node.descriptor

    def numel(self) -> int:
        return self._node.value.numel()

    def __repr__(self) -> str:
        return (
            f"Tensor(shape={self.shape}, dtype={self.dtype}, backend={self.backend_name}, "
            f"device={self.device}, requires_grad={self.requires_grad})"
        )

    # ----------------------------
    # Autograd
    # ----------------------------
    def require_grad(self) -> "Tensor":
        """
        Return a leaf handle over the same value that requires gradients.

        Graph nodes are immutable, so marking a tensor creates a new leaf node.
        Applied to an operation result, this starts a fresh graph at that value.
        """
        return type(self)(GraphNode(self.value, requires_grad=True))

    def detach(self) -> "Tensor":
        """
        Return a leaf handle over the same value with no history and no
        gradient tracking.
        """
        return type(self)(GraphNode(self.value))

    def clone(self) -> "Tensor":
        """
        Return another handle to the same graph node.

        Both handles share the node's identity, value, and gradient entry.
        """
        return type(self)(self._node)

    def backward(self, seed: Optional[Any] = None) -> Gradients:
        """
        Backpropagate from this tensor.

        Parameters
        ----------
        seed : Optional[Any]
            Upstream gradient: a `Tensor`, a backend tensor, or array-like data
            of this tensor's shape. May be omitted only if this tensor holds
            exactly one element, in which case it defaults to ones.

        Returns
        -------
        Gradients
            Fresh gradient store for this call.

        Raises
        ------
        GradientNotTrackedError
            If this tensor does not require gradients.
        MissingSeedGradientError
            If `seed` is omitted for a non-scalar tensor.
        """
        seed_value = None if seed is None else self._as_value(seed)
        return run_backward(self._node, seed_value)

    def grad(self, grads: Gradients) -> IBackendTensor:
        """
        Look up this tensor's gradient.

        Raises
        ------
        NoGradientError
            If the backward pass that produced `grads` never visited this node.
        """
        return grads[self]

    # ----------------------------
    # Host interop
    # ----------------------------
    def to_numpy(self):
        return self.value.to_numpy()

    def item(self) -> float:
        TensorCheck("Into Scalar").into_scalar(self.shape).check()
        return self.value.item()

    # ----------------------------
    # Internal helpers for operation mixins
    # ----------------------------
    @staticmethod
    def _is_scalar(x: Any) -> bool:
        return isinstance(x, Real) and not isinstance(x, Tensor)

    def _as_value(self, x: Any) -> IBackendTensor:
        """
        Convert `x` into a backend tensor of this tensor's backend, dtype, and
        device. Tensors and backend tensors are returned as is.
        """
        if isinstance(x, Tensor):
            return x.value
        if isinstance(x, IBackendTensor):
            return x
        return type(self.value).from_data(x, dtype=self.dtype, device=self.device)

    def _lift(self, x: Any) -> "Tensor":
        """
        Return `x` as a Tensor; non-tensors become untracked constants placed
        like `self`.
        """
        if isinstance(x, Tensor):
            return x
        return type(self)(GraphNode(self._as_value(x)))

    def _check_placement(self, other: "Tensor") -> None:
        a, b = self.value, other.value
        if a.backend_name != b.backend_name or a.device != b.device:
            raise DeviceMismatchError(
                f"{a.backend_name}:{a.device}", f"{b.backend_name}:{b.device}"
            )

    def _make(
        self,
        kind: OpKind,
        value: IBackendTensor,
        parents: Sequence["Tensor"],
        backward_fn: Callable[[IBackendTensor], Sequence[Optional[IBackendTensor]]],
        **saved_meta: Any,
    ) -> "Tensor":
        node = record(kind, value, [p._node for p in parents], backward_fn, **saved_meta)
        return type(self)(node)

    def _constant(self, value: IBackendTensor) -> "Tensor":
        return type(self)(GraphNode(value))
