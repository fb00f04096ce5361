"""
Lazy registry of backend tensor implementations.

Backends are registered by name with a ``"module:attribute"`` target and
imported only on first use, so NumPy-only installs never import CuPy or
PyTorch.

Registry keys
-------------
``numpy`` (``np``) | ``cupy`` (``cp``) | ``torch`` (``pt``)

Example
-------
>>> from tapegrad.infrastructure.backends import get_backend
>>> NumpyTensor = get_backend("numpy")
>>> x = NumpyTensor.from_data([1.0, 2.0])
"""

from __future__ import annotations

from importlib import import_module
from typing import Optional, Sequence
import logging
import threading

from ..._config import get_default_backend
from ...domain._errors import BackendNotAvailableError

logger = logging.getLogger(__name__)

_TARGETS: dict[str, str] = {}
_ALIASES: dict[str, str] = {}
_LOADED: dict[str, type] = {}
_LOCK = threading.Lock()


def register_backend(name: str, target: str, *, aliases: Sequence[str] = ()) -> None:
    """
    Register a backend under `name`.

    Parameters
    ----------
    name : str
        Canonical backend name.
    target : str
        Import path of the backend tensor class, as ``"package.module:Class"``.
    aliases : Sequence[str]
        Alternative names resolving to `name`.

    Raises
    ------
    ValueError
        If `target` is not of the form ``"module:attribute"``.
    """
    if target.count(":") != 1:
        raise ValueError(f"Backend target must be 'module:attribute', got {target!r}")
    with _LOCK:
        _TARGETS[name] = target
        _LOADED.pop(name, None)
        for alias in aliases:
            _ALIASES[alias] = name


def canonical_backend_name(name: str) -> str:
    """
    Resolve aliases to a registered backend name.

    Raises
    ------
    BackendNotAvailableError
        If no backend is registered under `name`.
    """
    key = _ALIASES.get(name, name)
    if key not in _TARGETS:
        raise BackendNotAvailableError(
            name, f"Registered backends: {sorted(_TARGETS)}."
        )
    return key


def get_backend(name: Optional[str] = None) -> type:
    """
    Return the backend tensor class registered under `name`.

    Parameters
    ----------
    name : Optional[str]
        Backend name or alias. Defaults to the configured default backend.

    Raises
    ------
    BackendNotAvailableError
        If the backend is unknown or its library cannot be imported.
    """
    key = canonical_backend_name(name or get_default_backend())
    cls = _LOADED.get(key)
    if cls is not None:
        return cls

    module_name, attr = _TARGETS[key].split(":")
    with _LOCK:
        cls = _LOADED.get(key)
        if cls is None:
            try:
                module = import_module(module_name)
            except ImportError as e:
                logger.debug("Backend %r failed to import: %s", key, e)
                raise BackendNotAvailableError(key, str(e)) from e
            cls = getattr(module, attr)
            _LOADED[key] = cls
            logger.debug("Loaded backend %r from %s", key, _TARGETS[key])
    return cls


def available_backends() -> list[str]:
    """
    Return the names of registered backends whose libraries import cleanly.
    """
    names = []
    for key in sorted(_TARGETS):
        try:
            get_backend(key)
        except BackendNotAvailableError:
            continue
        names.append(key)
    return names


register_backend(
    "numpy", f"{__package__}._numpy_backend:NumpyTensor", aliases=("np",)
)
register_backend(
    "cupy", f"{__package__}._cupy_backend:CupyTensor", aliases=("cp",)
)
register_backend(
    "torch", f"{__package__}._torch_backend:TorchTensor", aliases=("pt",)
)
