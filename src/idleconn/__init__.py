"""src/idleconn/__init__.py

Idleconn - idle-timeout stream connections for Python.

Idleconn wraps an established TCP (or TLS) connection so that every read and
every write is bounded by an idle timeout, while a caller can still take over
a direction by setting its deadline explicitly. Automatic refreshes never
overwrite a deadline that was set on purpose.

Key Features:
    - Zero external dependencies
    - Independent read and write deadlines on plain sockets
    - Per-operation idle timeouts that respect explicit deadlines
    - Sync and asyncio variants
    - netcat-style command line client

Example:
    Sync usage::

        from idleconn import connect
        from idleconn.utils.timing import IdleTimeout

        conn = connect("example.com", 80, timeout=IdleTimeout(connect=3, read=10))
        try:
            conn.write(b"HEAD / HTTP/1.0\\r\\n\\r\\n")
            print(conn.read(4096))
        finally:
            conn.close()

    Async usage::

        import asyncio
        from idleconn import open_timeout_connection

        async def main():
            conn = await open_timeout_connection("example.com", 80, timeout=10)
            await conn.write(b"HEAD / HTTP/1.0\\r\\n\\r\\n")
            print(await conn.read(4096))
            await conn.close()

        asyncio.run(main())

    Taking over the read deadline::

        from idleconn.utils.timing import deadline_after

        conn.set_read_deadline(deadline_after(60))  # no idle refresh on reads
        conn.set_read_deadline(None)                # back to idle timeouts
"""

from idleconn.client import connect, open_timeout_connection
from idleconn.exceptions import (
    ConnectionClosedError,
    DeadlineExceeded,
    IdleconnError,
    NetworkError,
)
from idleconn.transport.timeout_conn import AsyncTimeoutConnection, TimeoutConnection
from idleconn.utils.timing import IdleTimeout
from idleconn.version import __version__

__all__ = [
    "TimeoutConnection",
    "AsyncTimeoutConnection",
    "IdleTimeout",
    "connect",
    "open_timeout_connection",
    "IdleconnError",
    "NetworkError",
    "ConnectionClosedError",
    "DeadlineExceeded",
    "__version__",
]
