"""
Gradient store.

`Gradients` maps graph node ids to accumulated gradient values. One instance
is created per backward call and is owned by the caller afterwards. Lookups
read stored values and never recompute or mutate them, so repeated lookups for
the same tensor return the same object.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional

from ...domain._backend_tensor import IBackendTensor
from ...domain._errors import NoGradientError


def _node_id(key: Any) -> int:
    if isinstance(key, int):
        return key
    node_id = getattr(key, "node_id", None)
    if node_id is None:
        node_id = getattr(key, "id", None)
    if not isinstance(node_id, int):
        raise TypeError(f"Expected a tensor, graph node, or node id, got {type(key)!r}")
    return node_id


class Gradients:
    """
    Accumulated gradients of one backward pass, keyed by node id.

    Keys may be given as tensor handles, graph nodes, or raw node ids.
    """

    __slots__ = ("_grads",)

    def __init__(self) -> None:
        self._grads: dict[int, IBackendTensor] = {}

    def accumulate(self, node_id: int, grad: IBackendTensor) -> None:
        """
        Add `grad` into the entry for `node_id`.

        The first contribution is stored as is; later ones are summed with the
        existing entry into a new value. Entries are never replaced.
        """
        existing = self._grads.get(node_id)
        self._grads[node_id] = grad if existing is None else existing.add(grad)

    def get(self, key: Any) -> Optional[IBackendTensor]:
        """
        Return the gradient for `key`, or None if none was recorded.
        """
        return self._grads.get(_node_id(key))

    def __getitem__(self, key: Any) -> IBackendTensor:
        node_id = _node_id(key)
        try:
            return self._grads[node_id]
        except KeyError:
            raise NoGradientError(node_id) from None

    def pop(self, key: Any) -> IBackendTensor:
        """
        Remove and return the gradient for `key`.

        Raises
        ------
        NoGradientError
            If no gradient was recorded for `key`.
        """
        node_id = _node_id(key)
        try:
            return self._grads.pop(node_id)
        except KeyError:
            raise NoGradientError(node_id) from None

    def __contains__(self, key: object) -> bool:
        try:
            return _node_id(key) in self._grads
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._grads)

    def __iter__(self) -> Iterator[int]:
        return iter(self._grads)

    def node_ids(self) -> tuple[int, ...]:
        return tuple(self._grads)

    def __repr__(self) -> str:
        return f"Gradients(entries={len(self._grads)})"
