"""
Exception hierarchy for the shutdown registry.

Provides typed exceptions carrying a cause and a context dict so that
registration problems, lifecycle misuse and handler failures can be told
apart by callers and by the error-reporting layer.
"""


class TerminatorError(Exception):
    """
    Base exception for all terminator errors.

    Attributes:
        message: Human-readable error description
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Registration Errors
# =============================================================================


class RegistrationError(TerminatorError):
    """Invalid handler, priority or reservation size passed to register()."""

    pass


class LifecycleError(TerminatorError):
    """Operation not allowed in the terminator's current lifecycle phase."""

    def __init__(
        self,
        message: str,
        lifecycle: str,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        context = dict(context or {})
        context.setdefault("lifecycle", lifecycle)
        super().__init__(message, cause, context)
        self.lifecycle = lifecycle


# =============================================================================
# Handler Errors
# =============================================================================


class HandlerError(TerminatorError):
    """A shutdown handler's run() raised."""

    @property
    def handler_name(self) -> str | None:
        return self.context.get("handler")

    @property
    def priority(self) -> int | None:
        return self.context.get("priority")


def wrap_exception(
    exc: BaseException,
    handler_name: str | None = None,
    priority: int | None = None,
) -> HandlerError:
    """Wrap an exception raised by a handler in HandlerError."""
    context = {}
    if handler_name is not None:
        context["handler"] = handler_name
    if priority is not None:
        context["priority"] = priority

    if isinstance(exc, HandlerError):
        exc.context.update(context)
        return exc

    context["error_type"] = type(exc).__name__
    wrapped = HandlerError(str(exc) or type(exc).__name__, cause=exc, context=context)
    wrapped.__cause__ = exc
    return wrapped.with_traceback(exc.__traceback__)
