"""src/idleconn/client.py

Dial-and-wrap helpers.
"""

from typing import Union

from idleconn.transport.connection import dial, open_connection
from idleconn.transport.timeout_conn import AsyncTimeoutConnection, TimeoutConnection
from idleconn.utils.timing import IdleTimeout

__all__ = ["connect", "open_timeout_connection"]


def _as_idle_timeout(timeout: Union[float, IdleTimeout, None]) -> IdleTimeout:
    if isinstance(timeout, IdleTimeout):
        return timeout
    return IdleTimeout.from_float(timeout)


def connect(
    host: str,
    port: Union[int, str],
    timeout: Union[float, IdleTimeout, None] = None,
    use_ssl: bool = False,
) -> TimeoutConnection:
    """
    Connect to ``host:port`` and apply idle timeouts to the connection.

    Args:
        host: The target hostname or IP address.
        port: The target port number or service name.
        timeout: A single value for every phase, or an IdleTimeout with
            separate connect, read and write values.
        use_ssl: Whether to use TLS encryption.
    """
    idle = _as_idle_timeout(timeout)
    conn = dial(host, port, timeout=idle, use_ssl=use_ssl)
    return TimeoutConnection(conn, read_timeout=idle.read, write_timeout=idle.write)


async def open_timeout_connection(
    host: str,
    port: Union[int, str],
    timeout: Union[float, IdleTimeout, None] = None,
    use_ssl: bool = False,
) -> AsyncTimeoutConnection:
    """Async version of connect()."""
    idle = _as_idle_timeout(timeout)
    conn = await open_connection(host, port, timeout=idle, use_ssl=use_ssl)
    return AsyncTimeoutConnection(
        conn, read_timeout=idle.read, write_timeout=idle.write
    )
