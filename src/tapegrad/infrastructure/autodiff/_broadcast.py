"""
Shape helpers shared by local derivative rules.

The reverse of expanding a shape is summing over the expanded axes, and the
reverse of a reduction is broadcasting back over the reduced axes. Both
directions are implemented once here against the backend capability so every
rule handles them the same way.
"""

from __future__ import annotations

from typing import Sequence, Union

from ...domain._backend_tensor import IBackendTensor
from ...domain._errors import GraphConsistencyError

Axis = Union[int, Sequence[int], None]


def sum_to_shape(grad: IBackendTensor, shape: Sequence[int]) -> IBackendTensor:
    """
    Reduce a gradient of a broadcast result back to an operand's shape.

    Leading axes the operand did not have are summed away, as are axes where
    the operand had size 1 and the gradient does not.

    Parameters
    ----------
    grad : IBackendTensor
        Gradient with the broadcast (result) shape.
    shape : Sequence[int]
        Original operand shape.

    Raises
    ------
    GraphConsistencyError
        If `shape` could not have been broadcast to `grad.shape`.
    """
    target = tuple(int(d) for d in shape)
    src = tuple(grad.shape)
    if src == target:
        return grad

    lead = len(src) - len(target)
    if lead < 0:
        raise GraphConsistencyError(
            f"Cannot reduce gradient of shape {src} to higher-rank shape {target}."
        )

    axes = list(range(lead))
    for i, d in enumerate(target):
        sd = src[lead + i]
        if d == sd:
            continue
        if d != 1:
            raise GraphConsistencyError(
                f"Gradient shape {src} is not a broadcast of shape {target}."
            )
        axes.append(lead + i)

    if axes:
        grad = grad.sum(axis=tuple(axes), keepdims=True)
    return grad.reshape(target)


def normalize_axes(axis: Axis, rank: int) -> tuple[int, ...]:
    """
    Return sorted non-negative reduction axes (all axes when `axis` is None).
    """
    if axis is None:
        return tuple(range(rank))
    axes = (axis,) if isinstance(axis, int) else tuple(axis)
    return tuple(sorted(int(a) % rank for a in axes))


def expand_reduced(
    grad: IBackendTensor, shape: Sequence[int], axis: Axis, keepdims: bool
) -> IBackendTensor:
    """
    Broadcast the gradient of a reduction back to the input shape.

    Parameters
    ----------
    grad : IBackendTensor
        Gradient with the reduction's output shape.
    shape : Sequence[int]
        Input shape of the reduction.
    axis : int | Sequence[int] | None
        Reduced axes as given to the forward call.
    keepdims : bool
        Whether the forward call kept reduced axes with size 1.
    """
    shape = tuple(int(d) for d in shape)
    if not keepdims:
        axes = set(normalize_axes(axis, len(shape)))
        kept = tuple(1 if i in axes else d for i, d in enumerate(shape))
        grad = grad.reshape(kept)
    return grad.broadcast_to(shape)
