from __future__ import annotations

from typing import Sequence

Ranges = tuple[tuple[int, int], ...]


def _resolve_shape(shape: Sequence[int], numel: int) -> tuple[int, ...]:
    """
    Replace a single -1 entry with the size implied by `numel`.
    """
    shape = tuple(int(d) for d in shape)
    if shape.count(-1) != 1:
        return shape
    known = 1
    for d in shape:
        if d != -1:
            known *= d
    if known == 0 or numel % known:
        return shape
    return tuple(numel // known if d == -1 else d for d in shape)


def _normalize_ranges(ranges: Sequence) -> Ranges:
    """
    Accept ``(start, end)`` pairs or step-less `slice` objects.
    """
    out = []
    for r in ranges:
        if isinstance(r, slice):
            if r.step not in (None, 1):
                raise ValueError(f"slice steps are not supported, got {r!r}")
            out.append((int(r.start or 0), int(r.stop)))
        else:
            start, end = r
            out.append((int(start), int(end)))
    return tuple(out)
