"""src/idleconn/transport/connection.py

TCP and TLS connection management module.

This module adapts sockets and asyncio streams to the deadline-based stream
connection capability: each direction honours its own absolute deadline and
socket failures surface as Idleconn exceptions.
"""

import asyncio
import contextlib
import select
import socket
import ssl
import threading
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from idleconn.exceptions import (
    ConnectionClosedError,
    ConnectTimeout,
    DeadlineExceeded,
    NetworkError,
    TlsError,
)
from idleconn.transport.tls import create_ssl_context
from idleconn.utils.timing import IdleTimeout, time_until
from idleconn.utils.validators import validate_timeout

__all__ = ["SocketConnection", "AsyncSocketConnection", "dial", "open_connection"]

T = TypeVar("T")


def _expired(deadline: Optional[float]) -> bool:
    return deadline is not None and time_until(deadline) <= 0


def _connect_timeout(timeout: Union[float, IdleTimeout, None]) -> Optional[float]:
    """Connect timeout in seconds, or None to wait as long as the OS allows."""
    value = timeout.connect if isinstance(timeout, IdleTimeout) else timeout
    return validate_timeout(value, "connect timeout") or None


class SocketConnection:
    """
    Socket with independent read and write deadlines.

    The socket is switched to non-blocking mode and blocking behaviour is
    rebuilt with ``select.select`` bounded by the deadline of the direction
    being served, so a reader thread and a writer thread never share a
    timeout. A deadline changed while an operation is blocked is picked up
    when that operation next wakes.

    Attributes:
        sock: The underlying socket object.
    """

    __slots__ = ("sock", "_read_deadline", "_write_deadline", "_closed", "_lock")

    def __init__(self, sock: socket.socket) -> None:
        sock.setblocking(False)
        self.sock = sock
        self._read_deadline: Optional[float] = None
        self._write_deadline: Optional[float] = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        return self._closed

    @property
    def read_deadline(self) -> Optional[float]:
        """Current read deadline, None when reads wait forever."""
        return self._read_deadline

    @property
    def write_deadline(self) -> Optional[float]:
        """Current write deadline, None when writes wait forever."""
        return self._write_deadline

    @property
    def local_address(self) -> Any:
        """Local socket address."""
        return self.sock.getsockname()

    @property
    def remote_address(self) -> Any:
        """Peer socket address."""
        return self.sock.getpeername()

    def fileno(self) -> int:
        """File descriptor of the underlying socket."""
        return self.sock.fileno()

    def set_deadline(self, deadline: Optional[float]) -> None:
        """Set both deadlines."""
        self._check_open()
        self._read_deadline = deadline
        self._write_deadline = deadline

    def set_read_deadline(self, deadline: Optional[float]) -> None:
        """Set the read deadline; None clears it."""
        self._check_open()
        self._read_deadline = deadline

    def set_write_deadline(self, deadline: Optional[float]) -> None:
        """Set the write deadline; None clears it."""
        self._check_open()
        self._write_deadline = deadline

    def read(self, size: int) -> bytes:
        """
        Receive at most ``size`` bytes.

        Returns:
            The received bytes, empty at end of stream.

        Raises:
            DeadlineExceeded: The read deadline passed before data arrived.
            ConnectionClosedError: The connection was closed locally.
            NetworkError: Any other socket failure.
        """
        return self._receive(lambda: self.sock.recv(size))

    def read_into(self, buffer: Any) -> int:
        """Receive into ``buffer``; returns the byte count, 0 at end of stream."""
        return self._receive(lambda: self.sock.recv_into(buffer))

    def write(self, data: Any) -> int:
        """
        Send every byte of ``data``.

        Raises:
            DeadlineExceeded: The write deadline passed first. Its
                ``bytes_transferred`` tells how much was already sent.
            ConnectionClosedError: The connection was closed locally.
            NetworkError: Any other socket failure.
        """
        view = memoryview(data).cast("B")
        total = 0
        while total < len(view):
            self._check_open()
            deadline = self._write_deadline
            if _expired(deadline):
                raise DeadlineExceeded(bytes_transferred=total)
            try:
                total += self.sock.send(view[total:])
            except ssl.SSLWantReadError:
                self._wait(True, deadline)
            except (BlockingIOError, ssl.SSLWantWriteError):
                self._wait(False, deadline)
            except OSError as e:
                self._fail("Write", e)
        return total

    def close(self) -> None:
        """
        Close the connection. Safe to call more than once.

        The socket is shut down first so a thread blocked on it wakes up.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True

        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except (OSError, socket.error):
            pass
        try:
            self.sock.close()
        except (OSError, socket.error):
            pass

    def __enter__(self) -> "SocketConnection":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        self.close()

    def _receive(self, op: Callable[[], T]) -> T:
        while True:
            self._check_open()
            deadline = self._read_deadline
            if _expired(deadline):
                raise DeadlineExceeded()
            try:
                return op()
            except ssl.SSLWantWriteError:
                self._wait(False, deadline)
            except (BlockingIOError, ssl.SSLWantReadError):
                self._wait(True, deadline)
            except OSError as e:
                self._fail("Read", e)

    def _wait(self, want_read: bool, deadline: Optional[float]) -> None:
        """Block until the socket is ready or ``deadline`` passes."""
        timeout = None if deadline is None else max(time_until(deadline), 0.0)
        try:
            if want_read:
                select.select([self.sock], [], [], timeout)
            else:
                select.select([], [self.sock], [], timeout)
        except (OSError, ValueError) as e:
            self._fail("Wait", e)

    def _check_open(self) -> None:
        if self._closed:
            raise ConnectionClosedError()

    def _fail(self, action: str, error: BaseException) -> None:
        if self._closed:
            raise ConnectionClosedError() from error
        raise NetworkError(f"{action} failed: {error}") from error


class AsyncSocketConnection:
    """
    Asyncio stream pair with independent read and write deadlines.

    Deadlines bound each call through ``asyncio.wait_for``; a deadline set
    while a call is pending applies from the next call.
    """

    __slots__ = ("reader", "writer", "_read_deadline", "_write_deadline", "_closed")

    def __init__(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self.reader = reader
        self.writer = writer
        self._read_deadline: Optional[float] = None
        self._write_deadline: Optional[float] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        return self._closed

    @property
    def read_deadline(self) -> Optional[float]:
        """Current read deadline."""
        return self._read_deadline

    @property
    def write_deadline(self) -> Optional[float]:
        """Current write deadline."""
        return self._write_deadline

    @property
    def local_address(self) -> Any:
        """Local socket address."""
        return self.writer.get_extra_info("sockname")

    @property
    def remote_address(self) -> Any:
        """Peer socket address."""
        return self.writer.get_extra_info("peername")

    def set_deadline(self, deadline: Optional[float]) -> None:
        """Set both deadlines."""
        self._check_open()
        self._read_deadline = deadline
        self._write_deadline = deadline

    def set_read_deadline(self, deadline: Optional[float]) -> None:
        """Set the read deadline; None clears it."""
        self._check_open()
        self._read_deadline = deadline

    def set_write_deadline(self, deadline: Optional[float]) -> None:
        """Set the write deadline; None clears it."""
        self._check_open()
        self._write_deadline = deadline

    async def read(self, size: int) -> bytes:
        """Read at most ``size`` bytes; empty bytes at end of stream."""
        self._check_open()
        deadline = self._read_deadline
        if _expired(deadline):
            raise DeadlineExceeded()
        try:
            return await self._wait_for(self.reader.read(size), deadline)
        except OSError as e:
            raise NetworkError(f"Read failed: {e}") from e

    async def write(self, data: bytes) -> int:
        """Write and drain ``data``; returns its length."""
        self._check_open()
        if self.writer.is_closing():
            raise ConnectionClosedError()
        deadline = self._write_deadline
        if _expired(deadline):
            raise DeadlineExceeded()
        try:
            self.writer.write(data)
            await self._wait_for(self.writer.drain(), deadline)
        except DeadlineExceeded as e:
            # data sits in the transport buffer once write() returns
            e.bytes_transferred = len(data)
            raise
        except OSError as e:
            raise NetworkError(f"Write failed: {e}") from e
        return len(data)

    async def close(self) -> None:
        """Async close."""
        if self._closed:
            return
        self._closed = True
        self.writer.close()
        with contextlib.suppress(Exception):
            await self.writer.wait_closed()

    async def __aenter__(self) -> "AsyncSocketConnection":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        await self.close()

    @staticmethod
    async def _wait_for(aw: Awaitable[T], deadline: Optional[float]) -> T:
        if deadline is None:
            return await aw
        try:
            return await asyncio.wait_for(aw, max(time_until(deadline), 0.0))
        except asyncio.TimeoutError as e:
            raise DeadlineExceeded() from e

    def _check_open(self) -> None:
        if self._closed:
            raise ConnectionClosedError()


def dial(
    host: str,
    port: Union[int, str],
    timeout: Union[float, IdleTimeout, None] = None,
    use_ssl: bool = False,
) -> SocketConnection:
    """
    Open a TCP connection with optional TLS encryption.

    Only the connect phase of ``timeout`` is used here; a zero or missing
    connect timeout waits as long as the operating system allows.
    """
    connect_to = _connect_timeout(timeout)

    try:
        raw_sock = socket.create_connection((host, port), timeout=connect_to)

    except socket.timeout as e:
        raise ConnectTimeout(f"Timeout connecting to {host}:{port}") from e

    except OSError as e:
        raise NetworkError(f"Connection error to {host}:{port} - {e}") from e

    if not use_ssl:
        return SocketConnection(raw_sock)

    context = create_ssl_context()
    try:
        sock = context.wrap_socket(raw_sock, server_hostname=host)

    except socket.timeout as e:
        raw_sock.close()
        raise ConnectTimeout(f"Timeout during TLS handshake: {e}") from e

    except ssl.SSLError as e:
        raw_sock.close()
        raise TlsError(f"TLS Verification Error: {e}") from e

    except OSError as e:
        raw_sock.close()
        raise NetworkError(f"Connection error to {host}:{port} - {e}") from e

    return SocketConnection(sock)


async def open_connection(
    host: str,
    port: Union[int, str],
    timeout: Union[float, IdleTimeout, None] = None,
    use_ssl: bool = False,
) -> AsyncSocketConnection:
    """Async version of dial()."""
    ssl_context = create_ssl_context() if use_ssl else None
    connect_to = _connect_timeout(timeout)

    try:
        coro = asyncio.open_connection(host, port, ssl=ssl_context)
        if connect_to:
            reader, writer = await asyncio.wait_for(coro, timeout=connect_to)

        else:
            reader, writer = await coro

    except asyncio.TimeoutError as e:
        raise ConnectTimeout(f"Connection to {host}:{port} timed out") from e

    except ssl.SSLError as e:
        raise TlsError(f"TLS connection failed: {e}") from e

    except OSError as e:
        raise NetworkError(f"Failed to connect to {host}:{port}: {e}") from e

    return AsyncSocketConnection(reader, writer)
