"""src/idleconn/transport/base.py

Capability interfaces for stream connections.

A stream connection is a bidirectional, ordered byte stream whose reads and
writes can each be bounded by an absolute deadline. Deadlines are points on
the ``time.monotonic()`` clock; ``None`` clears a deadline.

Both the socket adapters and the idle-timeout decorators implement these
protocols, so a decorator can wrap anything that satisfies them, including
another decorator.
"""

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class StreamConnection(Protocol):
    """Blocking stream connection with per-direction deadlines."""

    def read(self, size: int) -> bytes:
        """
        Read at most ``size`` bytes.

        Returns:
            The bytes received. Empty bytes means end of stream.

        Raises:
            DeadlineExceeded: The read deadline passed first.
            NetworkError: The connection failed or was closed.
        """
        ...

    def read_into(self, buffer: Any) -> int:
        """Read into a writable buffer and return the number of bytes stored."""
        ...

    def write(self, data: bytes) -> int:
        """Write all of ``data`` and return its length."""
        ...

    def set_deadline(self, deadline: Optional[float]) -> None:
        """Set the read and write deadlines together."""
        ...

    def set_read_deadline(self, deadline: Optional[float]) -> None:
        """Set the deadline for pending and future reads."""
        ...

    def set_write_deadline(self, deadline: Optional[float]) -> None:
        """Set the deadline for pending and future writes."""
        ...

    def close(self) -> None:
        """Close the connection."""
        ...

    @property
    def local_address(self) -> Any:
        """Local endpoint address."""
        ...

    @property
    def remote_address(self) -> Any:
        """Remote endpoint address."""
        ...


@runtime_checkable
class AsyncStreamConnection(Protocol):
    """Asyncio stream connection with per-direction deadlines."""

    async def read(self, size: int) -> bytes:
        """Read at most ``size`` bytes; empty bytes means end of stream."""
        ...

    async def write(self, data: bytes) -> int:
        """Write and flush all of ``data`` and return its length."""
        ...

    def set_deadline(self, deadline: Optional[float]) -> None:
        """Set the read and write deadlines together."""
        ...

    def set_read_deadline(self, deadline: Optional[float]) -> None:
        """Set the deadline for future reads."""
        ...

    def set_write_deadline(self, deadline: Optional[float]) -> None:
        """Set the deadline for future writes."""
        ...

    async def close(self) -> None:
        """Close the connection."""
        ...

    @property
    def local_address(self) -> Any:
        """Local endpoint address."""
        ...

    @property
    def remote_address(self) -> Any:
        """Remote endpoint address."""
        ...
