"""
Shutdown orchestrator.

The Terminator owns the handler registry, the memory reservation and the
lifecycle flag. It installs itself on the exit hook when the first handler
registers and, when the hook fires (or run_now() is called), runs every
registered handler exactly once in ascending priority order.

Usage:
    from terminator import on_shutdown, register

    register(CallableHandler(pool.close), priority=1)

    @on_shutdown(priority=10, extra_memory_bytes=64 * 1024)
    def flush_metrics():
        exporter.flush()
"""

import logging
import signal
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TextIO

from terminator.config import TerminatorConfig, get_config
from terminator.errors import LifecycleError, RegistrationError, wrap_exception
from terminator.handlers import CallableHandler
from terminator.hooks import AtexitHook
from terminator.logging.context_managers import LogContext
from terminator.logging.setup import generate_shutdown_id
from terminator.logging.utilities import format_shutdown_summary, log_with_context
from terminator.registry import HandlerRegistry, RegisteredHandler, handler_name
from terminator.reporting import (
    HandlerOutcome,
    ShutdownFailure,
    ShutdownReport,
    write_plain_diagnostic,
)
from terminator.reservation import MemoryReservation
from terminator.types import (
    ErrorReporter,
    ExitHook,
    Handler,
    LateRegistrationPolicy,
    Lifecycle,
)

logger = logging.getLogger(__name__)


class Terminator:
    """
    Priority-ordered, run-once registry of shutdown handlers.

    Lifecycle: UNINITIALIZED -> READY on first register(), READY -> COMPLETED
    when shutdown() starts. COMPLETED is terminal; later shutdown() calls
    are silent no-ops.

    Args:
        exit_hook: Where to install the shutdown callback (default: atexit)
        reporter: Optional collaborator receiving handler failures
        config: Settings (default: the process-wide config)
        diagnostic_stream: Stream for plain-text failure diagnostics
            when no reporter is set (default: sys.stdout)
    """

    def __init__(
        self,
        exit_hook: ExitHook | None = None,
        reporter: ErrorReporter | None = None,
        config: TerminatorConfig | None = None,
        diagnostic_stream: TextIO | None = None,
    ):
        self.config = config or get_config()
        self.config.validate()
        self.exit_hook = exit_hook if exit_hook is not None else AtexitHook()
        self.reporter = reporter
        self.diagnostic_stream = diagnostic_stream
        self.last_report: ShutdownReport | None = None

        self._lifecycle = Lifecycle.UNINITIALIZED
        self._registry: HandlerRegistry | None = None
        self._reservation: MemoryReservation | None = None
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def lifecycle(self) -> Lifecycle:
        return self._lifecycle

    def is_ready(self) -> bool:
        """True only between the first registration and the start of shutdown."""
        return self._lifecycle is Lifecycle.READY

    @property
    def reserved_bytes(self) -> int:
        if self._reservation is None:
            return 0
        return self._reservation.size

    @property
    def reservation(self) -> MemoryReservation | None:
        return self._reservation

    @property
    def registered_handlers(self) -> list[RegisteredHandler]:
        """Registered handlers in the order they will run."""
        if self._registry is None:
            return []
        return self._registry.ordered()

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(
        self,
        handler: Handler,
        extra_memory_bytes: int = 0,
        priority: int | None = None,
    ) -> RegisteredHandler | None:
        """
        Register a handler to run at shutdown.

        Args:
            handler: Object with a run() method
            extra_memory_bytes: Bytes to add to the memory reservation
            priority: Execution order, lower runs first (default: 5)

        Returns:
            The stored record, or None if a late registration was dropped

        Raises:
            RegistrationError: If handler, priority or extra_memory_bytes is invalid
            LifecycleError: If shutdown already started and the
                late registration policy is "error"
        """
        if priority is None:
            priority = self.config.default_priority
        self._validate_registration(handler, extra_memory_bytes, priority)

        with self._lock:
            if self._lifecycle is Lifecycle.COMPLETED:
                return self._register_late(handler, extra_memory_bytes, priority)

            if self._lifecycle is Lifecycle.UNINITIALIZED:
                self._initialize()

            entry = self._registry.add(handler, priority, extra_memory_bytes)
            self._reservation.grow(extra_memory_bytes)

        log_with_context(
            logger,
            logging.DEBUG,
            "Registered shutdown handler",
            handler=entry.name,
            priority=entry.priority,
            sequence=entry.sequence,
            extra_memory_bytes=extra_memory_bytes,
            reserved_bytes=self.reserved_bytes,
        )
        return entry

    def on_shutdown(
        self,
        func: Callable[[], Any] | None = None,
        *,
        priority: int | None = None,
        extra_memory_bytes: int = 0,
    ):
        """
        Decorator registering a plain function as a shutdown handler.

        Works bare (``@terminator.on_shutdown``) or with arguments
        (``@terminator.on_shutdown(priority=1)``). Returns the function unchanged.
        """

        def decorator(f: Callable[[], Any]) -> Callable[[], Any]:
            self.register(
                CallableHandler(f),
                extra_memory_bytes=extra_memory_bytes,
                priority=priority,
            )
            return f

        if func is not None:
            return decorator(func)
        return decorator

    @staticmethod
    def _validate_registration(handler: Any, extra_memory_bytes: Any, priority: Any) -> None:
        if not callable(getattr(handler, "run", None)):
            raise RegistrationError(
                "Shutdown handler must provide a callable run() method",
                context={"handler": handler_name(handler)},
            )
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise RegistrationError(
                f"priority must be an integer, got {type(priority).__name__}",
                context={"priority": priority},
            )
        if priority < 0:
            raise RegistrationError(
                f"priority must be >= 0, got {priority}",
                context={"priority": priority},
            )
        if isinstance(extra_memory_bytes, bool) or not isinstance(extra_memory_bytes, int):
            raise RegistrationError(
                f"extra_memory_bytes must be an integer, got {type(extra_memory_bytes).__name__}",
                context={"extra_memory_bytes": extra_memory_bytes},
            )
        if extra_memory_bytes < 0:
            raise RegistrationError(
                f"extra_memory_bytes must be >= 0, got {extra_memory_bytes}",
                context={"extra_memory_bytes": extra_memory_bytes},
            )

    def _initialize(self) -> None:
        registry = HandlerRegistry()
        reservation = MemoryReservation(self.config.base_reservation_bytes)
        reservation.allocate()
        self.exit_hook.install(self.shutdown)

        self._registry = registry
        self._reservation = reservation
        self._lifecycle = Lifecycle.READY
        logger.debug(
            "Shutdown handling initialized",
            extra={"reserved_bytes": reservation.size, "lifecycle": self._lifecycle.value},
        )

    def _register_late(
        self,
        handler: Handler,
        extra_memory_bytes: int,
        priority: int,
    ) -> RegisteredHandler | None:
        policy = self.config.late_registration_policy
        name = handler_name(handler)

        if policy is LateRegistrationPolicy.ERROR:
            raise LifecycleError(
                "Cannot register shutdown handler: shutdown has already started",
                lifecycle=self._lifecycle.value,
                context={"handler": name, "priority": priority},
            )

        if policy is LateRegistrationPolicy.DROP:
            log_with_context(
                logger,
                logging.WARNING,
                "Dropped shutdown handler registered after shutdown started",
                handler=name,
                priority=priority,
                policy=policy.value,
            )
            return None

        entry = RegisteredHandler(
            handler=handler,
            priority=priority,
            extra_memory_bytes=extra_memory_bytes,
            sequence=len(self._registry) if self._registry is not None else 0,
        )
        log_with_context(
            logger,
            logging.INFO,
            "Running late shutdown handler immediately",
            handler=name,
            priority=priority,
            policy=policy.value,
        )
        outcome = self._run_entry(entry)
        if self.last_report is not None:
            self.last_report.outcomes.append(outcome)
        if outcome.failed:
            self._report_failure(outcome)
        return entry

    # -------------------------------------------------------------------------
    # Shutdown
    # -------------------------------------------------------------------------

    def shutdown(self) -> ShutdownReport | None:
        """
        Run all registered handlers once.

        Installed as the exit hook callback; safe to call directly. Returns
        None without doing anything unless the terminator is READY.
        """
        with self._lock:
            if self._lifecycle is not Lifecycle.READY:
                return None
            self._lifecycle = Lifecycle.COMPLETED
            # Free the reservation before anything else can allocate
            released = self._reservation.release()

            with self._interrupts_suspended():
                started = time.perf_counter()
                report = ShutdownReport(released_bytes=released)
                self.last_report = report

                with LogContext(shutdown_id=generate_shutdown_id(), phase="shutdown"):
                    entries = self._registry.sort()
                    log_with_context(
                        logger,
                        logging.INFO,
                        "Running shutdown handlers",
                        handler_count=len(entries),
                        extra_memory_bytes=self._registry.total_extra_bytes,
                        released_bytes=released,
                    )

                    for entry in entries:
                        outcome = self._run_entry(entry)
                        report.outcomes.append(outcome)
                        if outcome.failed:
                            self._report_failure(outcome)

                    report.duration_ms = (time.perf_counter() - started) * 1000
                    log_with_context(
                        logger,
                        logging.INFO,
                        format_shutdown_summary(
                            len(report.outcomes),
                            report.failed,
                            released_bytes=released,
                            duration_ms=report.duration_ms,
                        ),
                        handlers_run=len(report.outcomes),
                        handlers_succeeded=report.succeeded,
                        handlers_failed=report.failed,
                        released_bytes=released,
                        duration_ms=report.duration_ms,
                    )
        return report

    def _run_entry(self, entry: RegisteredHandler) -> HandlerOutcome:
        started = time.perf_counter()
        try:
            entry.handler.run()
        except (Exception, SystemExit) as e:
            duration_ms = (time.perf_counter() - started) * 1000
            error = wrap_exception(e, handler_name=entry.name, priority=entry.priority)
            return HandlerOutcome.failure(entry, error, duration_ms)

        duration_ms = (time.perf_counter() - started) * 1000
        log_with_context(
            logger,
            logging.DEBUG,
            "Shutdown handler completed",
            handler=entry.name,
            priority=entry.priority,
            duration_ms=duration_ms,
        )
        return HandlerOutcome.success(entry, duration_ms)

    def _report_failure(self, outcome: HandlerOutcome) -> None:
        failure = ShutdownFailure.from_outcome(outcome)

        if self.reporter is not None:
            try:
                self.reporter.report(failure)
                return
            except Exception as e:
                logger.warning(
                    "Error reporter failed, falling back to plain diagnostic: %s",
                    e,
                    extra={"handler": failure.handler, "error_type": type(e).__name__},
                )

        if not self.config.report_to_stdout:
            return
        try:
            write_plain_diagnostic(failure, self.diagnostic_stream)
        except (OSError, ValueError, AttributeError) as e:
            # Stream may be closed, detached or a broken pipe at interpreter exit
            logger.warning(
                "Could not write shutdown diagnostic: %s",
                e,
                extra={"handler": failure.handler, "error_type": type(e).__name__},
            )

    @contextmanager
    def _interrupts_suspended(self) -> Iterator[None]:
        """Ignore SIGINT for the duration of the block when on the main thread."""
        if (
            not self.config.ignore_interrupts
            or threading.current_thread() is not threading.main_thread()
        ):
            yield
            return

        previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
        if previous is None:
            # Installed outside Python; restore the default disposition
            previous = signal.SIG_DFL
        try:
            yield
        finally:
            signal.signal(signal.SIGINT, previous)


# =============================================================================
# Process-wide instance
# =============================================================================

_terminator: Terminator | None = None
_terminator_lock = threading.Lock()


def get_terminator() -> Terminator:
    """Get or create the process-wide Terminator."""
    global _terminator
    with _terminator_lock:
        if _terminator is None:
            _terminator = Terminator()
        return _terminator


def set_terminator(terminator: Terminator) -> None:
    """Replace the process-wide Terminator (useful for embedding and tests)."""
    global _terminator
    with _terminator_lock:
        _terminator = terminator


def reset_terminator() -> None:
    """Drop the process-wide Terminator, removing its atexit callback if any."""
    global _terminator
    with _terminator_lock:
        if _terminator is not None and isinstance(_terminator.exit_hook, AtexitHook):
            _terminator.exit_hook.uninstall()
        _terminator = None


def register(
    handler: Handler,
    extra_memory_bytes: int = 0,
    priority: int | None = None,
) -> RegisteredHandler | None:
    """Register a handler on the process-wide Terminator."""
    return get_terminator().register(
        handler, extra_memory_bytes=extra_memory_bytes, priority=priority
    )


def is_ready() -> bool:
    """True once a handler is registered and until shutdown starts."""
    return get_terminator().is_ready()


def run_now() -> ShutdownReport | None:
    """Run the process-wide shutdown pass immediately."""
    return get_terminator().shutdown()


def on_shutdown(
    func: Callable[[], Any] | None = None,
    *,
    priority: int | None = None,
    extra_memory_bytes: int = 0,
):
    """Decorator registering a function on the process-wide Terminator."""
    return get_terminator().on_shutdown(
        func, priority=priority, extra_memory_bytes=extra_memory_bytes
    )
