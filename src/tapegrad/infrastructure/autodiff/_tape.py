"""
Tape assembly.

The tape is the order in which backward replays the graph: every node appears
exactly once and after all of its parents, with the root last. It is derived
from the root on demand, once per backward call, instead of being recorded in
ambient process-wide state. Independent graphs therefore never share a tape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator
import logging

from ._node import GraphNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tape:
    """
    Topologically ordered nodes reachable from a root.

    Attributes
    ----------
    order : tuple[GraphNode, ...]
        Parents precede children; the root is the last element.
    """

    order: tuple[GraphNode, ...]

    @property
    def node_ids(self) -> tuple[int, ...]:
        return tuple(n.id for n in self.order)

    @property
    def root(self) -> GraphNode:
        return self.order[-1]

    def __len__(self) -> int:
        return len(self.order)

    def __iter__(self) -> Iterator[GraphNode]:
        return iter(self.order)

    def __reversed__(self) -> Iterator[GraphNode]:
        return reversed(self.order)


def build_tape(root: GraphNode) -> Tape:
    """
    Order the nodes reachable from `root` for backward replay.

    Performs an iterative depth-first post-order over the parent relation.
    Only parents that require gradients are followed; a node that does not
    require gradients is never entered, so its recorded history is pruned.

    Parameters
    ----------
    root : GraphNode
        Terminal node of the graph.

    Returns
    -------
    Tape
        Nodes ordered so that each appears after all of its parents. Nodes
        reachable through several paths appear once.

    Notes
    -----
    Runs in time linear in the reachable nodes and edges. Iteration instead of
    recursion keeps long chains clear of the interpreter recursion limit.
    """
    order: list[GraphNode] = []
    visited: set[int] = set()
    stack: list[tuple[GraphNode, bool]] = [(root, False)]

    while stack:
        node, expanded = stack.pop()
        if expanded:
            order.append(node)
            continue
        if node.id in visited:
            continue
        visited.add(node.id)

        # Re-push the node so it is emitted after its parents.
        stack.append((node, True))
        for parent in reversed(node.parents):
            if parent.requires_grad and parent.id not in visited:
                stack.append((parent, False))

    logger.debug("Built tape of %d nodes from node %d", len(order), root.id)
    return Tape(order=tuple(order))
