"""
Terminator: process-shutdown hook registry.

Components register cleanup handlers with a priority; the handlers run
exactly once, lowest priority first, when the process exits or when
run_now() is called. A memory reservation is held until shutdown and freed
before the first handler runs.

Modules:
    orchestrator - Terminator state machine and process-wide helpers
    registry     - RegisteredHandler records and the handler registry
    reservation  - Memory reservation buffer
    hooks        - atexit and manual exit hooks
    reporting    - Handler outcomes and failure reporting
    handlers     - Adapter for plain callables
    errors       - Exception hierarchy
    config       - YAML configuration
    logging      - Structured JSON/console logging
"""

from terminator.errors import (
    HandlerError,
    LifecycleError,
    RegistrationError,
    TerminatorError,
)
from terminator.handlers import CallableHandler
from terminator.hooks import AtexitHook, ManualExitHook
from terminator.orchestrator import (
    Terminator,
    get_terminator,
    is_ready,
    on_shutdown,
    register,
    reset_terminator,
    run_now,
    set_terminator,
)
from terminator.registry import RegisteredHandler
from terminator.reporting import (
    HandlerOutcome,
    LoggingErrorReporter,
    ShutdownFailure,
    ShutdownReport,
)
from terminator.types import (
    ErrorReporter,
    ExitHook,
    Handler,
    LateRegistrationPolicy,
    Lifecycle,
)

__version__ = "0.1.0"

__all__ = [
    # Orchestrator
    "Terminator",
    "get_terminator",
    "set_terminator",
    "reset_terminator",
    "register",
    "is_ready",
    "run_now",
    "on_shutdown",
    # Types
    "Handler",
    "ExitHook",
    "ErrorReporter",
    "Lifecycle",
    "LateRegistrationPolicy",
    "RegisteredHandler",
    # Hooks and handlers
    "AtexitHook",
    "ManualExitHook",
    "CallableHandler",
    # Reporting
    "HandlerOutcome",
    "ShutdownFailure",
    "ShutdownReport",
    "LoggingErrorReporter",
    # Errors
    "TerminatorError",
    "RegistrationError",
    "LifecycleError",
    "HandlerError",
]
