"""Logging utility functions."""

import logging
from typing import Any

# Reserved LogRecord attribute names that cannot be used in extra dict
_RESERVED_LOG_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "asctime",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


def log_with_context(
    logger: logging.Logger,
    level: int,
    msg: str,
    **kwargs: Any,
) -> None:
    """
    Log with structured context fields.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        msg: Log message
        **kwargs: Additional context fields (handler, priority, duration_ms, etc.)
                  Note: exc_info=True is supported and handled specially.

    Example:
        log_with_context(
            logger, logging.DEBUG, "Registered shutdown handler",
            handler=entry.name,
            priority=entry.priority,
        )
    """
    # exc_info is a direct parameter to log(), not extra
    exc_info = kwargs.pop("exc_info", None)

    extra = {k: v for k, v in kwargs.items() if k not in _RESERVED_LOG_KEYS}

    logger.log(level, msg, exc_info=exc_info, extra=extra)


def log_exception(
    logger: logging.Logger,
    exc: BaseException,
    msg: str,
    level: int = logging.ERROR,
    include_traceback: bool = True,
    **kwargs: Any,
) -> None:
    """
    Log exception with context and optional traceback.

    Adds error_type and a truncated error_message to the record.

    Args:
        logger: Logger instance
        exc: Exception to log
        msg: Context message
        level: Log level (default: ERROR)
        include_traceback: Include full traceback (default: True)
        **kwargs: Additional context fields

    Example:
        try:
            handler.run()
        except Exception as e:
            log_exception(logger, e, "Shutdown handler failed", handler=name)
    """
    context = getattr(exc, "context", None)
    if "error_type" not in kwargs:
        if isinstance(context, dict) and context.get("error_type"):
            kwargs["error_type"] = context["error_type"]
        else:
            kwargs["error_type"] = type(exc).__name__

    error_msg = str(exc)
    if len(error_msg) > 500:
        error_msg = error_msg[:500] + "..."
    kwargs["error_message"] = error_msg

    extra = {k: v for k, v in kwargs.items() if k not in _RESERVED_LOG_KEYS}

    if include_traceback:
        logger.log(level, msg, exc_info=exc, extra=extra)
    else:
        logger.log(level, msg, extra=extra)


def format_shutdown_summary(
    handlers_run: int,
    failed: int,
    released_bytes: int = 0,
    duration_ms: float | None = None,
) -> str:
    """
    Format a one-line summary of a shutdown pass.

    Example:
        >>> format_shutdown_summary(4, 1, 102400, 12.5)
        'Shutdown complete: handlers=4 (succeeded=3, failed=1), released=102400 bytes in 12.5ms'
        >>> format_shutdown_summary(2, 0)
        'Shutdown complete: handlers=2 (succeeded=2, failed=0)'
    """
    parts = [
        f"handlers={handlers_run} (succeeded={handlers_run - failed}, failed={failed})"
    ]
    if released_bytes:
        parts.append(f"released={released_bytes} bytes")

    summary = f"Shutdown complete: {', '.join(parts)}"
    if duration_ms is not None:
        summary += f" in {duration_ms:.1f}ms"
    return summary
