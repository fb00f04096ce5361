"""
Graph nodes.

A `GraphNode` is one recorded value in the dynamic computation graph: the
forward result of an operation (or an input), plus optional provenance in the
form of an `OperationDescriptor`.

Ownership runs one way only. A child holds strong references to its parents
through its descriptor; parents never reference children. Because a node can
only point at nodes that existed before it, the graph is acyclic and plain
reference counting frees it once no tensor handle or child node needs it.
"""

from __future__ import annotations

from itertools import count
from typing import Any, Optional, Sequence

from ...domain._backend_tensor import IBackendTensor
from ._operation import BackwardFn, OperationDescriptor, OpKind

# next() on itertools.count is atomic under the GIL.
_NODE_IDS = count()


def next_node_id() -> int:
    """
    Return a fresh, process-unique node id.
    """
    return next(_NODE_IDS)


class GraphNode:
    """
    Immutable node of the computation graph.

    Parameters
    ----------
    value : IBackendTensor
        Forward value, computed before the node is created.
    requires_grad : bool
        Whether gradients should flow to this node.
    descriptor : Optional[OperationDescriptor]
        Provenance; None for leaves and for results that need no gradient.
    """

    __slots__ = ("_id", "_value", "_requires_grad", "_descriptor", "__weakref__")

    def __init__(
        self,
        value: IBackendTensor,
        *,
        requires_grad: bool = False,
        descriptor: Optional[OperationDescriptor] = None,
    ) -> None:
        object.__setattr__(self, "_id", next_node_id())
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_requires_grad", bool(requires_grad))
        object.__setattr__(self, "_descriptor", descriptor)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"GraphNode is immutable; cannot set {name!r}")

    @property
    def id(self) -> int:
        return self._id

    @property
    def value(self) -> IBackendTensor:
        return self._value

    @property
    def requires_grad(self) -> bool:
        return self._requires_grad

    @property
    def descriptor(self) -> Optional[OperationDescriptor]:
        return self._descriptor

    @property
    def parents(self) -> tuple["GraphNode", ...]:
        d = self._descriptor
        return () if d is None else d.parents

    @property
    def is_leaf(self) -> bool:
        return self._descriptor is None

    def __repr__(self) -> str:
        kind = "leaf" if self._descriptor is None else self._descriptor.kind.value
        return (
            f"GraphNode(id={self._id}, op={kind}, shape={self._value.shape}, "
            f"requires_grad={self._requires_grad})"
        )


def record(
    kind: OpKind,
    value: IBackendTensor,
    parents: Sequence[GraphNode],
    backward_fn: BackwardFn,
    **saved_meta: Any,
) -> GraphNode:
    """
    Create the node for one forward operation call.

    The result requires gradients if any parent does. When none does, the node
    is created without a descriptor: the forward value is kept but the graph
    does not grow.

    Parameters
    ----------
    kind : OpKind
        Operation kind.
    value : IBackendTensor
        Already computed forward result.
    parents : Sequence[GraphNode]
        Input nodes.
    backward_fn : BackwardFn
        Local derivative rule for this call.
    **saved_meta : Any
        Forward metadata stored on the descriptor.

    Returns
    -------
    GraphNode
        The new node.
    """
    requires_grad = any(p.requires_grad for p in parents)
    if not requires_grad:
        return GraphNode(value)
    descriptor = OperationDescriptor(
        kind=kind,
        parents=tuple(parents),
        backward_fn=backward_fn,
        saved_meta=saved_meta,
    )
    return GraphNode(value, requires_grad=True, descriptor=descriptor)
