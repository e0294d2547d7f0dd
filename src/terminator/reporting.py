"""
Handler outcomes and failure reporting.

Each handler run produces a HandlerOutcome. Failed outcomes become a
ShutdownFailure that is handed to the configured ErrorReporter, or written
as a plain-text diagnostic to stdout when no reporter is configured.
"""

import logging
import sys
import traceback
from dataclasses import dataclass, field
from typing import TextIO

from terminator.errors import HandlerError
from terminator.logging.utilities import log_exception
from terminator.registry import RegisteredHandler

FAILURE_MESSAGE_PREFIX = "An error occurred while processing the shutdown function"


def failure_location(error: BaseException) -> str | None:
    """
    Source location ("file:line") of the frame that raised error.

    Follows HandlerError.cause to the original exception. Returns None when
    no traceback is attached.
    """
    origin = error
    if isinstance(error, HandlerError) and error.cause is not None:
        origin = error.cause

    tb = origin.__traceback__
    if tb is None:
        return None
    frames = traceback.extract_tb(tb)
    if not frames:
        return None
    last = frames[-1]
    return f"{last.filename}:{last.lineno}"


@dataclass(frozen=True)
class HandlerOutcome:
    """Result of running one registered handler."""

    entry: RegisteredHandler
    error: HandlerError | None = None
    duration_ms: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @classmethod
    def success(cls, entry: RegisteredHandler, duration_ms: float = 0.0) -> "HandlerOutcome":
        return cls(entry=entry, duration_ms=duration_ms)

    @classmethod
    def failure(
        cls,
        entry: RegisteredHandler,
        error: HandlerError,
        duration_ms: float = 0.0,
    ) -> "HandlerOutcome":
        return cls(entry=entry, error=error, duration_ms=duration_ms)


@dataclass(frozen=True)
class ShutdownFailure:
    """Structured failure report passed to an ErrorReporter."""

    message: str
    error: HandlerError
    handler: str
    priority: int
    severity: str = "error"
    location: str | None = None

    @classmethod
    def from_outcome(cls, outcome: HandlerOutcome) -> "ShutdownFailure":
        if outcome.error is None:
            raise ValueError("Cannot build a failure from a successful outcome")
        original = outcome.error.cause or outcome.error
        return cls(
            message=f"{FAILURE_MESSAGE_PREFIX}: {original}",
            error=outcome.error,
            handler=outcome.entry.name,
            priority=outcome.entry.priority,
            location=failure_location(outcome.error),
        )


@dataclass
class ShutdownReport:
    """Outcomes of a shutdown pass, in execution order."""

    outcomes: list[HandlerOutcome] = field(default_factory=list)
    released_bytes: int = 0
    duration_ms: float = 0.0

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.failed)

    @property
    def failures(self) -> list[HandlerOutcome]:
        return [outcome for outcome in self.outcomes if outcome.failed]

    @property
    def handler_names(self) -> list[str]:
        return [outcome.entry.name for outcome in self.outcomes]


def format_plain_diagnostic(failure: ShutdownFailure) -> str:
    if failure.location:
        return f"{failure.message}\n  in {failure.location}\n"
    return f"{failure.message}\n"


def write_plain_diagnostic(failure: ShutdownFailure, stream: TextIO | None = None) -> None:
    """Write failure as plain text to stream (default: sys.stdout)."""
    stream = stream or sys.stdout
    stream.write(format_plain_diagnostic(failure))
    stream.flush()


class LoggingErrorReporter:
    """
    ErrorReporter that forwards failures to a logger.

    Usage:
        reporter = LoggingErrorReporter(logging.getLogger("app.shutdown"))
        terminator = Terminator(reporter=reporter)
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        level: int = logging.ERROR,
        include_traceback: bool = True,
    ):
        self.logger = logger or logging.getLogger("terminator.shutdown")
        self.level = level
        self.include_traceback = include_traceback

    def report(self, failure: ShutdownFailure) -> None:
        log_exception(
            self.logger,
            failure.error,
            failure.message,
            level=self.level,
            include_traceback=self.include_traceback,
            handler=failure.handler,
            priority=failure.priority,
            error_location=failure.location,
            severity=failure.severity,
        )
