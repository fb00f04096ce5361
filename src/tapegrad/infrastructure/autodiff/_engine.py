"""
Backward engine.

`run_backward` replays the graph reachable from a root node in reverse
topological order, calling each node's local derivative rule once and
accumulating the results into a fresh `Gradients` store.

Protocol
--------
1. Seed the store with the root's upstream gradient.
2. Walk the tape from the root towards the leaves.
3. For every node with a descriptor, read its accumulated gradient (all of
   its consumers have already contributed), evaluate the local rule, and add
   one contribution per grad-requiring parent.
4. Leaves end their branch; their entry is the final gradient.

Any violation of the ordering or arity invariants raises
`GraphConsistencyError` and aborts the whole call. The partially filled store
is discarded with it.
"""

from __future__ import annotations

from typing import Optional
import logging

from ...domain._backend_tensor import IBackendTensor
from ...domain._errors import (
    DeviceMismatchError,
    GradientNotTrackedError,
    GraphConsistencyError,
    MissingSeedGradientError,
)
from ...domain._tensor_check import TensorCheck
from ._gradients import Gradients
from ._node import GraphNode
from ._tape import build_tape

logger = logging.getLogger(__name__)


def _resolve_seed(root: GraphNode, seed: Optional[IBackendTensor]) -> IBackendTensor:
    value = root.value
    if seed is None:
        if value.numel() != 1:
            raise MissingSeedGradientError(value.shape)
        return value.ones_like()

    if seed.backend_name != value.backend_name or seed.device != value.device:
        raise DeviceMismatchError(
            f"{value.backend_name}:{value.device}", f"{seed.backend_name}:{seed.device}"
        )
    TensorCheck("Backward").seed(value.shape, seed.shape).check()
    return seed


def run_backward(root: GraphNode, seed: Optional[IBackendTensor] = None) -> Gradients:
    """
    Compute gradients of `root` with respect to every reachable node that
    requires gradients.

    Parameters
    ----------
    root : GraphNode
        Terminal node (typically a loss).
    seed : Optional[IBackendTensor]
        Upstream gradient of `root`. When omitted, `root` must hold exactly one
        element and the seed is a tensor of ones shaped like it.

    Returns
    -------
    Gradients
        Store with one entry per visited node, including intermediates.

    Raises
    ------
    GradientNotTrackedError
        If `root` does not require gradients.
    MissingSeedGradientError
        If `seed` is omitted for a non-scalar root.
    ShapeMismatchError
        If `seed` does not match the root's shape.
    DeviceMismatchError
        If `seed` lives on another backend or device than the root.
    GraphConsistencyError
        If the graph violates an internal invariant.
    """
    if not root.requires_grad:
        raise GradientNotTrackedError(root.id)
    seed_value = _resolve_seed(root, seed)

    tape = build_tape(root)
    grads = Gradients()
    grads.accumulate(root.id, seed_value)

    for node in reversed(tape):
        descriptor = node.descriptor
        if descriptor is None:
            continue

        grad = grads.get(node.id)
        if grad is None:
            raise GraphConsistencyError(
                f"Node {node.id} ({descriptor.kind.value}) has no accumulated "
                "gradient when it is replayed; the tape order is invalid."
            )

        parent_grads = tuple(descriptor.backward_fn(grad))
        if len(parent_grads) != len(descriptor.parents):
            raise GraphConsistencyError(
                f"Backward rule of {descriptor.kind.value} returned "
                f"{len(parent_grads)} gradients for {len(descriptor.parents)} parents."
            )

        for parent, g in zip(descriptor.parents, parent_grads):
            if not parent.requires_grad:
                continue
            if g is None:
                raise GraphConsistencyError(
                    f"Backward rule of {descriptor.kind.value} returned no gradient "
                    f"for parent node {parent.id}, which requires one."
                )
            if tuple(g.shape) != tuple(parent.value.shape):
                raise GraphConsistencyError(
                    f"Backward rule of {descriptor.kind.value} returned a gradient of "
                    f"shape {tuple(g.shape)} for parent node {parent.id} of shape "
                    f"{tuple(parent.value.shape)}."
                )
            grads.accumulate(parent.id, g)

    logger.debug(
        "Backward from node %d: %d nodes replayed, %d gradient entries",
        root.id,
        len(tape),
        len(grads),
    )
    return grads
