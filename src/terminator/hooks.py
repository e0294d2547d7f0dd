"""
Exit hook implementations.

AtexitHook binds to the interpreter's ``atexit`` facility. ManualExitHook
stores the callback so tests, or hosts with their own teardown sequence,
can trigger the shutdown pass themselves.
"""

import atexit
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class AtexitHook:
    """Runs the callback at normal interpreter exit via ``atexit``."""

    def __init__(self) -> None:
        self._callbacks: list[Callable[[], object]] = []

    def install(self, callback: Callable[[], object]) -> None:
        atexit.register(callback)
        self._callbacks.append(callback)
        logger.debug("Installed atexit callback %r", callback)

    def uninstall(self) -> None:
        """Remove callbacks installed through this hook from ``atexit``."""
        while self._callbacks:
            atexit.unregister(self._callbacks.pop())


class ManualExitHook:
    """
    Holds the installed callback until ``fire()`` is called.

    Usage:
        hook = ManualExitHook()
        terminator = Terminator(exit_hook=hook)
        terminator.register(handler)
        hook.fire()
    """

    def __init__(self) -> None:
        self.callbacks: list[Callable[[], object]] = []

    @property
    def installed(self) -> bool:
        return bool(self.callbacks)

    @property
    def install_count(self) -> int:
        return len(self.callbacks)

    def install(self, callback: Callable[[], object]) -> None:
        self.callbacks.append(callback)

    def fire(self) -> None:
        """Invoke installed callbacks in installation order."""
        for callback in list(self.callbacks):
            callback()
