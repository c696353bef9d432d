"""src/idleconn/transport/timeout_conn.py

Idle-timeout connection decorators.

A timeout connection wraps a stream connection and bounds each read and
each write by an idle timeout: before the operation it moves the
direction's deadline to ``now + timeout``. A caller can still take control
of a direction by setting its deadline directly; from then on the wrapper
stops refreshing that direction until the deadline is cleared with
``None``.

Each direction is a two-state switch:

    automatic --set_*_deadline(t)----> explicit
    explicit  --set_*_deadline(None)-> automatic

Refreshes made inside read()/write() never change the state. Errors from
the wrapped connection, including the ones raised by a refresh, are
propagated unchanged.

Example::

    from idleconn.transport import TimeoutConnection, dial

    conn = TimeoutConnection(dial("example.com", 80), read_timeout=5.0)
    conn.write(b"ping")
    reply = conn.read(1024)
"""

import threading
from typing import Any, Optional

from idleconn.transport.base import AsyncStreamConnection, StreamConnection
from idleconn.utils.timing import deadline_after
from idleconn.utils.validators import validate_timeout

__all__ = ["TimeoutConnection", "AsyncTimeoutConnection"]


class TimeoutConnection:
    """
    Stream connection that applies read and write idle timeouts.

    The wrapper owns none of the wrapped connection's resources; close()
    is forwarded, like every other capability it does not override.

    A single lock makes "check state, refresh deadline" and "record state,
    set deadline" atomic, so set_deadline() called from one thread cannot
    interleave with the other direction's refresh. The lock is never held
    while blocking on I/O.

    Attributes:
        conn: The wrapped connection.
    """

    __slots__ = (
        "conn",
        "_read_timeout",
        "_write_timeout",
        "_read_explicit",
        "_write_explicit",
        "_lock",
    )

    def __init__(
        self,
        conn: StreamConnection,
        read_timeout: Optional[float] = 0.0,
        write_timeout: Optional[float] = 0.0,
    ) -> None:
        """
        Wrap ``conn``.

        Args:
            conn: Established connection to wrap.
            read_timeout: Idle seconds allowed per read; 0 or None disables.
            write_timeout: Idle seconds allowed per write; 0 or None disables.

        Raises:
            ValueError: A timeout is negative.
        """
        self.conn = conn
        self._read_timeout = validate_timeout(read_timeout, "read_timeout")
        self._write_timeout = validate_timeout(write_timeout, "write_timeout")
        self._read_explicit = False
        self._write_explicit = False
        self._lock = threading.Lock()

    @property
    def read_timeout(self) -> float:
        """Idle timeout applied before each read (0.0 when disabled)."""
        return self._read_timeout

    @property
    def write_timeout(self) -> float:
        """Idle timeout applied before each write (0.0 when disabled)."""
        return self._write_timeout

    @property
    def read_deadline_explicit(self) -> bool:
        """True while a caller-set read deadline suspends automatic refresh."""
        return self._read_explicit

    @property
    def write_deadline_explicit(self) -> bool:
        """True while a caller-set write deadline suspends automatic refresh."""
        return self._write_explicit

    def read(self, size: int) -> bytes:
        """Read at most ``size`` bytes after refreshing the read deadline."""
        self._refresh_read_deadline()
        return self.conn.read(size)

    def read_into(self, buffer: Any) -> int:
        """Read into ``buffer`` after refreshing the read deadline."""
        self._refresh_read_deadline()
        return self.conn.read_into(buffer)

    def write(self, data: bytes) -> int:
        """Write ``data`` after refreshing the write deadline."""
        self._refresh_write_deadline()
        return self.conn.write(data)

    def set_deadline(self, deadline: Optional[float]) -> None:
        """
        Set both deadlines explicitly.

        The read side is set first. If it raises, the write side is left
        alone; if the write side raises, the read side keeps its new state.
        """
        self.set_read_deadline(deadline)
        self.set_write_deadline(deadline)

    def set_read_deadline(self, deadline: Optional[float]) -> None:
        """
        Set the read deadline explicitly.

        A deadline suspends automatic refresh for reads; None resumes it.
        The state is recorded even when the wrapped connection rejects the
        deadline.
        """
        with self._lock:
            self._read_explicit = deadline is not None
            self.conn.set_read_deadline(deadline)

    def set_write_deadline(self, deadline: Optional[float]) -> None:
        """Write-side counterpart of set_read_deadline()."""
        with self._lock:
            self._write_explicit = deadline is not None
            self.conn.set_write_deadline(deadline)

    def close(self) -> None:
        """Close the wrapped connection."""
        self.conn.close()

    @property
    def local_address(self) -> Any:
        """Local address of the wrapped connection."""
        return self.conn.local_address

    @property
    def remote_address(self) -> Any:
        """Remote address of the wrapped connection."""
        return self.conn.remote_address

    def __getattr__(self, name: str) -> Any:
        # Only reached for attributes the wrapper does not define.
        if name == "conn":
            raise AttributeError(name)
        return getattr(self.conn, name)

    def _refresh_read_deadline(self) -> None:
        with self._lock:
            if self._read_timeout and not self._read_explicit:
                self.conn.set_read_deadline(deadline_after(self._read_timeout))

    def _refresh_write_deadline(self) -> None:
        with self._lock:
            if self._write_timeout and not self._write_explicit:
                self.conn.set_write_deadline(deadline_after(self._write_timeout))


class AsyncTimeoutConnection:
    """
    Asyncio counterpart of TimeoutConnection.

    Same policy, without a lock: the state is only touched from the event
    loop thread.
    """

    __slots__ = (
        "conn",
        "_read_timeout",
        "_write_timeout",
        "_read_explicit",
        "_write_explicit",
    )

    def __init__(
        self,
        conn: AsyncStreamConnection,
        read_timeout: Optional[float] = 0.0,
        write_timeout: Optional[float] = 0.0,
    ) -> None:
        self.conn = conn
        self._read_timeout = validate_timeout(read_timeout, "read_timeout")
        self._write_timeout = validate_timeout(write_timeout, "write_timeout")
        self._read_explicit = False
        self._write_explicit = False

    @property
    def read_timeout(self) -> float:
        """Idle timeout applied before each read."""
        return self._read_timeout

    @property
    def write_timeout(self) -> float:
        """Idle timeout applied before each write."""
        return self._write_timeout

    @property
    def read_deadline_explicit(self) -> bool:
        """True while a caller-set read deadline suspends automatic refresh."""
        return self._read_explicit

    @property
    def write_deadline_explicit(self) -> bool:
        """True while a caller-set write deadline suspends automatic refresh."""
        return self._write_explicit

    async def read(self, size: int) -> bytes:
        """Read at most ``size`` bytes after refreshing the read deadline."""
        if self._read_timeout and not self._read_explicit:
            self.conn.set_read_deadline(deadline_after(self._read_timeout))
        return await self.conn.read(size)

    async def write(self, data: bytes) -> int:
        """Write ``data`` after refreshing the write deadline."""
        if self._write_timeout and not self._write_explicit:
            self.conn.set_write_deadline(deadline_after(self._write_timeout))
        return await self.conn.write(data)

    def set_deadline(self, deadline: Optional[float]) -> None:
        """Set both deadlines explicitly, read side first."""
        self.set_read_deadline(deadline)
        self.set_write_deadline(deadline)

    def set_read_deadline(self, deadline: Optional[float]) -> None:
        """Set the read deadline explicitly; None resumes automatic refresh."""
        self._read_explicit = deadline is not None
        self.conn.set_read_deadline(deadline)

    def set_write_deadline(self, deadline: Optional[float]) -> None:
        """Set the write deadline explicitly; None resumes automatic refresh."""
        self._write_explicit = deadline is not None
        self.conn.set_write_deadline(deadline)

    async def close(self) -> None:
        """Close the wrapped connection."""
        await self.conn.close()

    @property
    def local_address(self) -> Any:
        """Local address of the wrapped connection."""
        return self.conn.local_address

    @property
    def remote_address(self) -> Any:
        """Remote address of the wrapped connection."""
        return self.conn.remote_address

    def __getattr__(self, name: str) -> Any:
        if name == "conn":
            raise AttributeError(name)
        return getattr(self.conn, name)
