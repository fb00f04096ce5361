"""
Differentiable tensor interface.

This module defines the domain-level contract for the user-facing tensor
handle. A handle wraps a graph node: it exposes the node's forward value and
shape metadata, lets callers grow the graph by applying operations, triggers
backward replay, and looks gradients up by node identity.

Notes
-----
The handle is not the data model. Several handles may share one graph node
(for instance after `clone()`), and all of them resolve to the same gradient
entry.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from ._backend_tensor import IBackendTensor
from .device._device_protocol import DeviceLike


@runtime_checkable
class IGradients(Protocol):
    """
    Read access to the result of one backward pass.
    """

    def get(self, tensor: "ITensor") -> Optional[IBackendTensor]: ...
    def __getitem__(self, tensor: "ITensor") -> IBackendTensor: ...
    def __contains__(self, tensor: object) -> bool: ...
    def __len__(self) -> int: ...


@runtime_checkable
class ITensor(Protocol):
    """
    Differentiable tensor interface.
    """

    # ---------------------------------------------------------------------
    # Identity and metadata
    # ---------------------------------------------------------------------
    @property
    def node_id(self) -> int:
        """
        Process-unique id of the underlying graph node.

        Returns
        -------
        int
            Monotonically assigned node id, used as the gradient lookup key.
        """
        ...

    @property
    def value(self) -> IBackendTensor:
        """
        Forward value stored on the graph node at construction time.

        Reading it never traverses the graph.
        """
        ...

    @property
    def shape(self) -> tuple[int, ...]: ...

    @property
    def dtype(self) -> str: ...

    @property
    def device(self) -> DeviceLike: ...

    @property
    def backend_name(self) -> str: ...

    # ---------------------------------------------------------------------
    # Autograd
    # ---------------------------------------------------------------------
    @property
    def requires_grad(self) -> bool:
        """
        Whether gradients flow to this tensor's node.

        For operation results this is the logical OR of the parents' flags.
        """
        ...

    @property
    def is_leaf(self) -> bool:
        """True when the node has no recorded operation."""
        ...

    def backward(self, seed: Optional[Any] = None) -> IGradients:
        """
        Replay the graph backward from this tensor.

        Parameters
        ----------
        seed : Optional[Any]
            Upstream gradient for this tensor. Required unless the tensor holds
            exactly one element.

        Returns
        -------
        IGradients
            A fresh gradient store for this invocation.
        """
        ...

    def grad(self, grads: IGradients) -> IBackendTensor:
        """
        Look up this tensor's gradient in `grads`.

        Raises
        ------
        NoGradientError
            If the backward pass never visited this tensor's node.
        """
        ...

    def detach(self) -> "ITensor": ...
    def clone(self) -> "ITensor": ...

    # ---------------------------------------------------------------------
    # Host interop
    # ---------------------------------------------------------------------
    def to_numpy(self) -> Any: ...
    def item(self) -> float: ...
