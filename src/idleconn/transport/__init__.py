"""src/idleconn/transport/__init__.py

Transport layer module for Idleconn.

This module provides deadline-capable TCP/TLS connections and the idle-timeout
decorators that wrap them, for both synchronous and asynchronous operations.
"""

from .base import AsyncStreamConnection, StreamConnection
from .connection import AsyncSocketConnection, SocketConnection, dial, open_connection
from .timeout_conn import AsyncTimeoutConnection, TimeoutConnection

__all__ = [
    "StreamConnection",
    "AsyncStreamConnection",
    "SocketConnection",
    "AsyncSocketConnection",
    "TimeoutConnection",
    "AsyncTimeoutConnection",
    "dial",
    "open_connection",
]
