"""
Operation descriptors.

An `OperationDescriptor` is the record attached to a graph node produced by a
differentiable operation. It stores:
- the operation kind (a member of the closed `OpKind` set),
- the parent nodes (inputs to the operation),
- a backward function mapping the upstream gradient to one gradient per
  parent, and
- any forward metadata the backward function depends on (shapes, axes).

Everything the backward function needs is captured when the descriptor is
created. Backward never re-reads mutable state from elsewhere and never
re-executes the forward computation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Sequence

from ...domain._backend_tensor import IBackendTensor

if TYPE_CHECKING:
    from ._node import GraphNode

BackwardFn = Callable[[IBackendTensor], Sequence[Optional[IBackendTensor]]]


class OpKind(Enum):
    """
    Closed set of differentiable operation kinds.
    """

    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    NEG = "neg"
    ADD_SCALAR = "add_scalar"
    MUL_SCALAR = "mul_scalar"
    POWF_SCALAR = "powf_scalar"
    EXP = "exp"
    LOG = "log"
    SQRT = "sqrt"
    ABS = "abs"
    TANH = "tanh"
    SIGMOID = "sigmoid"
    RELU = "relu"
    CLAMP = "clamp"
    MATMUL = "matmul"
    SWAP_DIMS = "swap_dims"
    RESHAPE = "reshape"
    BROADCAST_TO = "broadcast_to"
    SUM = "sum"
    MEAN = "mean"
    MAX = "max"
    MIN = "min"
    MAX_DIM = "max_dim"
    MIN_DIM = "min_dim"
    MASK_WHERE = "mask_where"
    MASK_FILL = "mask_fill"
    GATHER = "gather"
    SCATTER = "scatter"
    SELECT = "select"
    SELECT_ASSIGN = "select_assign"
    SLICE = "slice"
    SLICE_ASSIGN = "slice_assign"
    CAT = "cat"
    MAX_POOL1D = "max_pool1d"
    AVG_POOL1D = "avg_pool1d"
    ADAPTIVE_AVG_POOL1D = "adaptive_avg_pool1d"


@dataclass(frozen=True)
class OperationDescriptor:
    """
    Provenance of one graph node.

    Attributes
    ----------
    kind : OpKind
        The operation that produced the node.
    parents : tuple[GraphNode, ...]
        Input nodes, in the order `backward_fn` returns their gradients. A node
        may appear more than once (e.g., ``x + x``).
    backward_fn : Callable[[IBackendTensor], Sequence[Optional[IBackendTensor]]]
        Local derivative rule. Receives the accumulated gradient of the node and
        returns one gradient per parent. Entries may be None only for parents
        that do not require gradients.
    saved_meta : Mapping[str, Any]
        Read-only forward metadata (e.g., original shapes), kept for
        inspection and debugging.
    """

    kind: OpKind
    parents: tuple["GraphNode", ...]
    backward_fn: BackwardFn
    saved_meta: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "parents", tuple(self.parents))
        object.__setattr__(self, "saved_meta", MappingProxyType(dict(self.saved_meta)))
