"""src/idleconn/pump.py

Relay bytes between local streams and a connection.

Two directions run at once: local input is copied to the connection on a
background thread while the connection is copied to local output on the
calling thread. The first error from either side closes the connection,
which unblocks the other side, and is then raised to the caller.
"""

import logging
import threading
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 32 * 1024


def copy(dst: Any, src: Any, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """
    Copy from ``src`` to ``dst`` until ``src`` reports end of stream.

    ``src.read1`` is preferred over ``src.read`` so buffered local streams
    hand over whatever is available instead of waiting for a full chunk.
    ``dst`` is flushed after every chunk when it can be.

    Returns:
        The number of bytes copied.
    """
    read = getattr(src, "read1", None) or src.read
    flush = getattr(dst, "flush", None)
    total = 0
    while True:
        data = read(chunk_size)
        if not data:
            return total
        dst.write(data)
        if flush is not None:
            flush()
        total += len(data)


class Relay:
    """
    Bidirectional pump between a connection and a pair of local streams.

    Attributes:
        conn: Connection to relay through; closed when either direction fails.
        stdin: Binary stream whose bytes are sent to the connection.
        stdout: Binary stream receiving the connection's bytes.
        chunk_size: Maximum bytes moved per read.
    """

    __slots__ = ("conn", "stdin", "stdout", "chunk_size", "_error", "_lock")

    def __init__(
        self,
        conn: Any,
        stdin: Any,
        stdout: Any,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.conn = conn
        self.stdin = stdin
        self.stdout = stdout
        self.chunk_size = chunk_size
        self._error: Optional[BaseException] = None
        self._lock = threading.Lock()

    @property
    def error(self) -> Optional[BaseException]:
        """First error raised by either direction, if any."""
        return self._error

    def run(self) -> int:
        """
        Relay until the peer ends the stream or either direction fails.

        End of local input only stops the outgoing direction; the session
        goes on until the peer closes or the idle timeout fires.

        Returns:
            Bytes received from the connection.

        Raises:
            Exception: The first error raised by either direction.
        """
        upstream = threading.Thread(
            target=self._send_loop, name="idleconn-upstream", daemon=True
        )
        upstream.start()

        received = 0
        try:
            received = copy(self.stdout, self.conn, self.chunk_size)
            logger.debug("Connection closed by peer after %d bytes", received)
        except Exception as e:  # pylint: disable=broad-exception-caught
            self._fail(e)

        if self._error is not None:
            raise self._error
        return received

    def _send_loop(self) -> None:
        try:
            sent = copy(self.conn, self.stdin, self.chunk_size)
            logger.debug("Local input exhausted after %d bytes", sent)
        except Exception as e:  # pylint: disable=broad-exception-caught
            self._fail(e)

    def _fail(self, error: BaseException) -> None:
        with self._lock:
            first = self._error is None
            if first:
                self._error = error

        if first:
            logger.debug("Relay stopped: %s", error)
            self.conn.close()
