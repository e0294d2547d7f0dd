"""
Core types and protocols used across modules.

This module provides the enums and protocol definitions shared by the
registry, the orchestrator and the reporting layer so that every part of
the package agrees on what a handler, an exit hook and a reporter look like.
"""

from enum import Enum
from typing import TYPE_CHECKING, Callable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from terminator.reporting import ShutdownFailure


class Lifecycle(Enum):
    """
    Phase of a Terminator instance.

    States:
        UNINITIALIZED: Nothing registered yet, no exit hook installed
        READY: At least one handler registered, exit hook installed
        COMPLETED: Shutdown pass has started; terminal for the process
    """

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    COMPLETED = "completed"


class LateRegistrationPolicy(Enum):
    """
    What to do with a handler registered after shutdown has started.

    Policies:
        ERROR: Raise LifecycleError back to the caller
        RUN: Run the handler immediately with normal failure isolation
        DROP: Log a warning and discard the handler
    """

    ERROR = "error"
    RUN = "run"
    DROP = "drop"


@runtime_checkable
class Handler(Protocol):
    """
    Protocol for shutdown handlers.

    Any object with a ``run()`` method qualifies. The handler is invoked at
    most once, and must not assume any other handler has or has not run.
    """

    def run(self) -> None:
        """
        Execute cleanup logic.

        Raises:
            Exception: Any failure; the orchestrator isolates and reports it
        """
        ...


class ExitHook(Protocol):
    """
    Protocol for the host runtime's "run this at process exit" facility.

    The production implementation binds to ``atexit``; tests use an
    implementation that stores the callback and fires it on demand.
    """

    def install(self, callback: Callable[[], object]) -> None:
        """
        Arrange for callback to be invoked when the process is ending.

        Args:
            callback: Zero-argument callable to invoke at exit
        """
        ...


class ErrorReporter(Protocol):
    """
    Protocol for the optional collaborator notified of handler failures.
    """

    def report(self, failure: "ShutdownFailure") -> None:
        """
        Receive a structured report of a failed shutdown handler.

        Args:
            failure: Failure details (message, severity, location, error)
        """
        ...


__all__ = [
    "ErrorReporter",
    "ExitHook",
    "Handler",
    "LateRegistrationPolicy",
    "Lifecycle",
]
