"""
Memory reservation held until shutdown.

A bytearray is allocated when the first handler registers and grown by each
registration's extra request. Releasing it at the start of shutdown hands
that memory back so cleanup handlers still have room to run when the
process is close to exhausting memory.
"""

DEFAULT_BASE_RESERVATION_BYTES = 100 * 1024  # 100 KB


class MemoryReservation:
    """
    Process-wide byte buffer sized by accumulated reservation requests.

    Allocation is eager: ``allocate()`` and ``grow()`` touch real memory
    immediately. ``release()`` collapses the buffer to zero bytes and can
    only happen once.
    """

    def __init__(self, base_bytes: int = DEFAULT_BASE_RESERVATION_BYTES):
        if base_bytes < 0:
            raise ValueError(f"base_bytes must be >= 0, got {base_bytes}")
        self.base_bytes = base_bytes
        self._buffer: bytearray | None = None
        self._requested = 0
        self._released = False

    @property
    def allocated(self) -> bool:
        return self._buffer is not None

    @property
    def released(self) -> bool:
        return self._released

    @property
    def size(self) -> int:
        """Bytes currently held."""
        if self._buffer is None:
            return 0
        return len(self._buffer)

    @property
    def requested_bytes(self) -> int:
        """Total bytes requested (base + extras), unaffected by release."""
        return self._requested

    def allocate(self) -> None:
        """Allocate the base reservation. No-op if already allocated or released."""
        if self._buffer is not None or self._released:
            return
        self._buffer = bytearray(self.base_bytes)
        self._requested = self.base_bytes

    def grow(self, extra_bytes: int) -> None:
        """
        Grow the reservation by extra_bytes.

        Args:
            extra_bytes: Additional bytes to hold; must be >= 0

        Raises:
            ValueError: If extra_bytes is negative
        """
        if extra_bytes < 0:
            raise ValueError(f"extra_bytes must be >= 0, got {extra_bytes}")
        if self._released:
            return
        self.allocate()
        if extra_bytes:
            self._buffer.extend(bytearray(extra_bytes))
            self._requested += extra_bytes

    def release(self) -> int:
        """
        Free the reservation.

        Returns:
            Number of bytes released (0 on repeated calls)
        """
        if self._released:
            return 0
        freed = self.size
        self._buffer = None
        self._released = True
        return freed
