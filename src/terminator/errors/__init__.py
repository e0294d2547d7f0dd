"""
Exception hierarchy.

Provides:
- TerminatorError base class with cause/context
- RegistrationError and LifecycleError for caller mistakes
- HandlerError for failures raised inside shutdown handlers
"""

from terminator.errors.exceptions import (
    HandlerError,
    LifecycleError,
    RegistrationError,
    TerminatorError,
    wrap_exception,
)

__all__ = [
    # Base classes
    "TerminatorError",
    # Caller errors
    "RegistrationError",
    "LifecycleError",
    # Handler failures
    "HandlerError",
    "wrap_exception",
]
