"""
Error taxonomy for tapegrad.

This module defines the exceptions raised by the tensor layer and the
autodiff core. They fall into three groups:

- construction-time errors, raised eagerly while a forward operation is
  being validated (shape mismatch, device mismatch, unavailable backend),
- backward-time user errors (missing seed gradient, backward on an untracked
  tensor, gradient lookup on a node that was never visited),
- internal invariant failures (`GraphConsistencyError`), which signal a defect
  in graph construction or tape ordering rather than a recoverable condition.

Each exception subclasses the builtin type that best describes it so callers
can catch either the precise tapegrad error or the generic builtin.
"""

from typing import Optional


class TapegradError(Exception):
    """
    Marker base class for every exception raised by tapegrad.
    """


class ShapeMismatchError(TapegradError, ValueError):
    """
    Raised when operands are incompatible for the requested operation.

    The message is produced by `TensorCheck` and lists every reason the
    operation was rejected, numbered in registration order.

    Attributes
    ----------
    op : str
        Operation name (e.g., "Add", "Matmul").
    reasons : tuple[str, ...]
        Individual failure descriptions.
    """

    def __init__(self, op: str, reasons: tuple[str, ...], message: str) -> None:
        super().__init__(message)
        self.op = op
        self.reasons = reasons


class DeviceNotSupportedError(TapegradError, RuntimeError):
    """
    Raised when a tensor operation is requested on a device a backend cannot
    serve.

    Attributes
    ----------
    op : str
        The name of the operation that was attempted (e.g., "add", "mul").
    device : str
        String representation of the device on which the operation
        was attempted.
    """

    def __init__(self, op: str, device: str) -> None:
        """
        Initialize the DeviceNotSupportedError.

        Parameters
        ----------
        op : str
            The operation name that is not supported on the given device.
        device : str
            The device identifier (e.g., "cuda:0").
        """
        super().__init__(f"{op} is not implemented for device '{device}'.")
        self.op = op
        self.device = device


class DeviceMismatchError(TapegradError, RuntimeError):
    """
    Raised when an operation combines tensors that live on different
    backends or devices.

    Combining a NumPy tensor with a CuPy tensor, or two CuPy tensors on
    different GPUs, requires an explicit transfer that this layer does not
    perform implicitly.
    """

    def __init__(self, device_a: str, device_b: str) -> None:
        """
        Initialize the DeviceMismatchError.

        Parameters
        ----------
        device_a : str
            Placement descriptor of the first operand.
        device_b : str
            Placement descriptor of the second operand.
        """
        super().__init__(f"Device mismatch: '{device_a}' vs '{device_b}'.")
        self.device_a = device_a
        self.device_b = device_b


class BackendNotAvailableError(TapegradError, RuntimeError):
    """
    Raised when a backend is unknown or its third-party library cannot be
    imported.
    """

    def __init__(self, name: str, reason: Optional[str] = None) -> None:
        msg = f"Backend '{name}' is not available."
        if reason:
            msg += f" {reason}"
        super().__init__(msg)
        self.name = name
        self.reason = reason


class MissingSeedGradientError(TapegradError, ValueError):
    """
    Raised when backward is triggered on a non-scalar tensor without an
    explicit seed gradient.

    A seed of ones is only implied for tensors holding exactly one element.
    """

    def __init__(self, shape: tuple[int, ...]) -> None:
        super().__init__(
            "A seed gradient must be provided for non-scalar tensors. "
            f"Got shape={shape}."
        )
        self.shape = shape


class GradientNotTrackedError(TapegradError, RuntimeError):
    """
    Raised when backward is triggered on a tensor that does not require
    gradients, i.e. one with no differentiable history.
    """

    def __init__(self, node_id: int) -> None:
        super().__init__(
            f"Tensor (node {node_id}) does not require gradients; "
            "call require_grad() on an input before building the graph."
        )
        self.node_id = node_id


class NoGradientError(TapegradError, LookupError):
    """
    Raised when a gradient is looked up for a node that the backward pass
    never visited.

    This is distinct from a gradient that is present and equal to zero.
    """

    def __init__(self, node_id: int) -> None:
        super().__init__(f"No gradient recorded for node {node_id}.")
        self.node_id = node_id


class GraphConsistencyError(TapegradError, RuntimeError):
    """
    Raised when the backward engine observes a state that correct graph
    construction and tape ordering can never produce.

    Seeing this error means there is a bug in tapegrad or in a custom local
    derivative rule, not in the caller's forward code.
    """
