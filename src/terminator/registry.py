"""Registered handler records and the insertion-ordered handler registry."""

from dataclasses import dataclass, field

from terminator.types import Handler

DEFAULT_PRIORITY = 5


def handler_name(handler: object) -> str:
    """Readable name for a handler, used in logs and failure reports."""
    name = getattr(handler, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(handler).__qualname__


@dataclass(frozen=True)
class RegisteredHandler:
    """
    A handler paired with its priority.

    Lower priority runs earlier. ``sequence`` is the registration index and
    breaks ties so that equal priorities run in registration order.
    """

    handler: Handler = field(compare=False)
    priority: int = DEFAULT_PRIORITY
    extra_memory_bytes: int = 0
    sequence: int = 0

    @property
    def name(self) -> str:
        return handler_name(self.handler)

    def sort_key(self) -> tuple[int, int]:
        return (self.priority, self.sequence)


class HandlerRegistry:
    """
    Ordered collection of RegisteredHandler records.

    Only grows: there is no removal. ``sort()`` reorders in place by
    ascending priority, keeping registration order among equal priorities.
    """

    def __init__(self) -> None:
        self._entries: list[RegisteredHandler] = []

    def add(
        self,
        handler: Handler,
        priority: int = DEFAULT_PRIORITY,
        extra_memory_bytes: int = 0,
    ) -> RegisteredHandler:
        entry = RegisteredHandler(
            handler=handler,
            priority=priority,
            extra_memory_bytes=extra_memory_bytes,
            sequence=len(self._entries),
        )
        self._entries.append(entry)
        return entry

    def ordered(self) -> list[RegisteredHandler]:
        """Return entries in execution order without touching the registry."""
        return sorted(self._entries, key=RegisteredHandler.sort_key)

    def sort(self) -> list[RegisteredHandler]:
        """Sort the registry in place into execution order and return a snapshot."""
        # list.sort is stable; priority alone would be enough, sequence documents intent
        self._entries.sort(key=RegisteredHandler.sort_key)
        return list(self._entries)

    @property
    def total_extra_bytes(self) -> int:
        return sum(entry.extra_memory_bytes for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)
