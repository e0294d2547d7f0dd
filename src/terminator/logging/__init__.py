"""
Structured logging module.

Provides JSON and console logging with shutdown context propagation.
"""

from terminator.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from terminator.logging.context_managers import LogContext
from terminator.logging.formatters import ConsoleFormatter, JSONFormatter
from terminator.logging.setup import (
    generate_shutdown_id,
    get_log_file_path,
    setup_logging,
)
from terminator.logging.utilities import (
    format_shutdown_summary,
    log_exception,
    log_with_context,
)

__all__ = [
    # Setup
    "setup_logging",
    "generate_shutdown_id",
    "get_log_file_path",
    # Formatters
    "JSONFormatter",
    "ConsoleFormatter",
    # Context
    "set_log_context",
    "get_log_context",
    "clear_log_context",
    "LogContext",
    # Utilities
    "log_with_context",
    "log_exception",
    "format_shutdown_summary",
]
