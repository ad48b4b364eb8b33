# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Scoped access to the host environment object during command execution.

The environment is opaque to the engine: a `Requisition` passes it through to
command actions unchanged. While an action is being called synchronously by
`Requisition.exec`, the same object is also available through
`get_environment()`, so helpers deep inside an action can reach it without
threading it through every call. Outside that window `get_environment()`
raises `MisuseError`.

Example:
    def action(env, args):
        assert get_environment() is env
"""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

from quill.exceptions import MisuseError

_UNSET = object()
_current: ContextVar[Any] = ContextVar("quill_environment", default=_UNSET)


def get_environment() -> Any:
    """Return the environment of the `exec` call currently running."""
    environment = _current.get()
    if environment is _UNSET:
        raise MisuseError("The environment is only available while a command executes")
    return environment


def has_environment() -> bool:
    return _current.get() is not _UNSET


@contextmanager
def environment_scope(environment: Any) -> Iterator[Any]:
    """Expose `environment` through `get_environment()` inside the block."""
    token = _current.set(environment)
    try:
        yield environment
    finally:
        _current.reset(token)
