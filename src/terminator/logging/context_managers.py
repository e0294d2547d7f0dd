"""Context managers for structured logging."""

from typing import Dict, Optional

from terminator.logging.context import get_log_context, set_log_context


class LogContext:
    """
    Context manager for temporary log context.

    Usage:
        with LogContext(shutdown_id=shutdown_id, phase="handlers"):
            # All logs in this block carry shutdown_id and phase
            run_handlers()
    """

    def __init__(
        self,
        shutdown_id: Optional[str] = None,
        phase: Optional[str] = None,
        component: Optional[str] = None,
    ):
        self.new_context = {
            "shutdown_id": shutdown_id,
            "phase": phase,
            "component": component,
        }
        self.old_context: Dict[str, str] = {}

    def __enter__(self) -> "LogContext":
        self.old_context = get_log_context()
        for key, value in self.new_context.items():
            if value is not None:
                set_log_context(**{key: value})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Restore old context
        set_log_context(
            shutdown_id=self.old_context.get("shutdown_id", ""),
            phase=self.old_context.get("phase", ""),
            component=self.old_context.get("component", ""),
        )
        return False
