#!/usr/bin/env python3
"""
Example demonstrating shutdown handler registration.

Registers a few handlers with different priorities, one of which fails,
and lets the interpreter exit normally so the atexit hook runs them.

Usage:
    python examples/shutdown_example.py
"""

import logging

from terminator import (
    CallableHandler,
    LoggingErrorReporter,
    Terminator,
    set_terminator,
)
from terminator.logging import setup_logging


class ConnectionPool:
    """Stand-in for a resource that must be closed at exit."""

    name = "connection-pool"

    def __init__(self):
        self.open = True

    def run(self):
        print("Closing connection pool")
        self.open = False


def flush_metrics(destination):
    print(f"Flushing metrics to {destination}")


def write_state_dump():
    raise OSError("state directory is read-only")


def main():
    logger = setup_logging(name="shutdown_example", log_to_stdout=True)

    terminator = Terminator(
        reporter=LoggingErrorReporter(logging.getLogger("shutdown_example.errors")),
    )
    set_terminator(terminator)

    terminator.register(ConnectionPool(), priority=10)
    terminator.register(CallableHandler(flush_metrics, "stdout"), priority=1)
    terminator.register(CallableHandler(write_state_dump), extra_memory_bytes=64 * 1024)

    @terminator.on_shutdown(priority=0)
    def announce():
        print("Shutting down")

    logger.info(
        "Registered %d handlers, holding %d bytes",
        len(terminator.registered_handlers),
        terminator.reserved_bytes,
    )
    print("Work finished; exiting")


if __name__ == "__main__":
    main()
