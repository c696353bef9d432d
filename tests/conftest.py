import _thread
import socket
import threading
from contextlib import contextmanager
from unittest import mock

import pytest

from idleconn.transport.connection import AsyncSocketConnection, SocketConnection


@pytest.fixture
def timeout_context():
    """Fixture providing a timeout context manager."""

    @contextmanager
    def _timeout_context(seconds):
        def timeout_handler():
            _thread.interrupt_main()

        timer = threading.Timer(seconds, timeout_handler)
        timer.start()
        try:
            yield
        except KeyboardInterrupt:
            pytest.fail(f"Test timed out after {seconds} seconds")
        finally:
            timer.cancel()

    return _timeout_context


@pytest.fixture
def mock_conn() -> mock.Mock:
    """Stream connection double with the SocketConnection interface."""
    return mock.Mock(spec=SocketConnection)


@pytest.fixture
def async_mock_conn() -> mock.Mock:
    """Async stream connection double; read/write/close are AsyncMocks."""
    return mock.Mock(spec=AsyncSocketConnection)


@pytest.fixture
def socket_pair():
    """A SocketConnection and the raw peer socket on the other end."""
    left, right = socket.socketpair()
    conn = SocketConnection(left)
    right.settimeout(5.0)
    yield conn, right
    conn.close()
    right.close()


@pytest.fixture
def tcp_server():
    """
    Start one-shot TCP servers on localhost.

    Call the fixture with a handler taking the accepted socket; it returns
    the port to connect to. The handler runs on a background thread and the
    accepted socket is closed when it returns.
    """
    listeners = []

    def _start(handler):
        listener = socket.create_server(("127.0.0.1", 0))
        listeners.append(listener)

        def serve():
            try:
                sock, _ = listener.accept()
            except OSError:
                return
            with sock:
                try:
                    handler(sock)
                except OSError:
                    pass

        threading.Thread(target=serve, daemon=True).start()
        return listener.getsockname()[1]

    yield _start

    for listener in listeners:
        listener.close()
