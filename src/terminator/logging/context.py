"""Context variables for structured logging."""

from contextvars import ContextVar
from typing import Dict, Optional

_shutdown_id: ContextVar[str] = ContextVar("shutdown_id", default="")
_phase: ContextVar[str] = ContextVar("phase", default="")
_component: ContextVar[str] = ContextVar("component", default="")


def set_log_context(
    shutdown_id: Optional[str] = None,
    phase: Optional[str] = None,
    component: Optional[str] = None,
) -> None:
    if shutdown_id is not None:
        _shutdown_id.set(shutdown_id)
    if phase is not None:
        _phase.set(phase)
    if component is not None:
        _component.set(component)


def get_log_context() -> Dict[str, str]:
    return {
        "shutdown_id": _shutdown_id.get(),
        "phase": _phase.get(),
        "component": _component.get(),
    }


def clear_log_context() -> None:
    _shutdown_id.set("")
    _phase.set("")
    _component.set("")
