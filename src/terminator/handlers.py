"""Adapters that turn plain callables into shutdown handlers."""

from collections.abc import Callable
from typing import Any


class CallableHandler:
    """
    Handler wrapping a function and the arguments to call it with.

    Example:
        terminator.register(CallableHandler(conn.close), priority=1)
        terminator.register(CallableHandler(dump_state, path, compress=True))
    """

    def __init__(self, func: Callable[..., Any], *args: Any, **kwargs: Any):
        if not callable(func):
            raise TypeError(f"func must be callable, got {type(func).__name__}")
        self.func = func
        self.args = args
        self.kwargs = kwargs

    @property
    def name(self) -> str:
        return getattr(self.func, "__qualname__", None) or repr(self.func)

    def run(self) -> None:
        self.func(*self.args, **self.kwargs)

    def __repr__(self) -> str:
        return f"CallableHandler({self.name})"
