"""src/idleconn/exceptions.py

Idleconn Exceptions hierarchy.
"""

# pylint: disable=redefined-builtin


class IdleconnError(Exception):
    """Base exception for all Idleconn errors."""


class NetworkError(IdleconnError):
    """
    Base exception for network-related errors.
    Wraps socket errors and other connection issues.
    """


class ConnectionClosedError(NetworkError):
    """Operation attempted on a connection that has been closed."""

    def __init__(self, message: str = "use of closed connection"):
        super().__init__(message)


class TlsError(NetworkError):
    """TLS/SSL handshake or verification errors."""


class TimeoutError(IdleconnError):
    """
    Base exception for timeouts.
    """

    def __init__(self, message: str = "Operation timed out"):
        super().__init__(message)


class ConnectTimeout(TimeoutError):
    """Timeout during connection establishment."""


class DeadlineExceeded(TimeoutError):
    """
    A read or write deadline passed before the operation completed.

    Attributes:
        bytes_transferred: Bytes already moved by the failed operation
            (non-zero only for writes cut short part way through).
    """

    def __init__(
        self, message: str = "i/o deadline exceeded", bytes_transferred: int = 0
    ):
        super().__init__(message)
        self.bytes_transferred = bytes_transferred
