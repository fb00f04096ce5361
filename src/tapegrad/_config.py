"""
Process defaults for backend selection and element type.

Two settings are exposed:

- the default backend name used by tensor factories when none is given
  (environment variable ``TAPEGRAD_BACKEND``, else ``"numpy"``),
- the default floating dtype used when data carries no explicit dtype
  (environment variable ``TAPEGRAD_DTYPE``, else ``"float32"``).

Values live in `contextvars.ContextVar` objects, so an override made inside
`default_dtype(...)` or `default_backend(...)` is visible only to the current
thread or task and is restored on exit, including when the block raises.

These settings never hold graph state; each computation graph is isolated by
construction.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator
import os

import numpy as np

_SUPPORTED_DTYPES = ("float16", "float32", "float64")


def _normalize_dtype(dtype: str) -> str:
    try:
        name = np.dtype(dtype).name
    except TypeError as e:
        raise ValueError(f"Unknown dtype {dtype!r}") from e
    if name not in _SUPPORTED_DTYPES:
        raise ValueError(
            f"Default dtype must be one of {_SUPPORTED_DTYPES}, got {dtype!r}"
        )
    return name


_default_dtype: ContextVar[str] = ContextVar(
    "tapegrad_default_dtype",
    default=_normalize_dtype(os.environ.get("TAPEGRAD_DTYPE", "float32")),
)
_default_backend: ContextVar[str] = ContextVar(
    "tapegrad_default_backend",
    default=os.environ.get("TAPEGRAD_BACKEND", "numpy"),
)


def get_default_dtype() -> str:
    return _default_dtype.get()


def set_default_dtype(dtype: str) -> None:
    """
    Set the default floating dtype for the current context.

    Raises
    ------
    ValueError
        If `dtype` is not a supported floating type.
    """
    _default_dtype.set(_normalize_dtype(dtype))


@contextmanager
def default_dtype(dtype: str) -> Iterator[str]:
    """
    Temporarily override the default dtype.

    The dtype is validated before the block runs; an invalid name leaves the
    current default untouched.
    """
    token = _default_dtype.set(_normalize_dtype(dtype))
    try:
        yield _default_dtype.get()
    finally:
        _default_dtype.reset(token)


def get_default_backend() -> str:
    return _default_backend.get()


def _resolve_backend_name(name: str) -> str:
    # Imported lazily: the registry imports this module for dtype defaults.
    from .infrastructure.backends._registry import canonical_backend_name

    return canonical_backend_name(name)


def set_default_backend(name: str) -> None:
    """
    Set the default backend for the current context.

    Raises
    ------
    BackendNotAvailableError
        If `name` is not a registered backend.
    """
    _default_backend.set(_resolve_backend_name(name))


@contextmanager
def default_backend(name: str) -> Iterator[str]:
    """
    Temporarily override the default backend.
    """
    token = _default_backend.set(_resolve_backend_name(name))
    try:
        yield _default_backend.get()
    finally:
        _default_backend.reset(token)
