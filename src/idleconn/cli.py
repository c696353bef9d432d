"""src/idleconn/cli.py

Command-line client.

Connects to a TCP service and relays standard input and standard output
through an idle-timeout connection, netcat style::

    idleconn [-w SECONDS] [-G SECONDS] [-v] [--ssl] host port

Diagnostics go to stderr and only with ``-v``; stdout carries data only.
Exit status is 0 when the peer ends the session, 1 on any connection or
relay failure and 2 on bad arguments.
"""

import argparse
import logging
import sys
from typing import Any, List, Optional

from idleconn.client import connect
from idleconn.exceptions import IdleconnError
from idleconn.pump import Relay
from idleconn.utils.timing import IdleTimeout
from idleconn.version import __version__

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 0.0


def _seconds(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid number of seconds: {value!r}") from e
    if seconds < 0:
        raise argparse.ArgumentTypeError(f"seconds must be non-negative: {value!r}")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the idleconn command."""
    parser = argparse.ArgumentParser(
        prog="idleconn",
        description="Relay stdin/stdout over TCP with idle timeouts.",
    )
    parser.add_argument("host", help="Host name or address to connect to")
    parser.add_argument("port", help="Port number or service name")
    parser.add_argument(
        "-w",
        dest="idle_timeout",
        type=_seconds,
        default=DEFAULT_TIMEOUT,
        metavar="SECONDS",
        help=(
            "If a connection and stdin are idle for more than SECONDS "
            "then the connection is closed (default: 0, never)"
        ),
    )
    parser.add_argument(
        "-G",
        dest="connect_timeout",
        type=_seconds,
        default=DEFAULT_TIMEOUT,
        metavar="SECONDS",
        help="TCP connection timeout (default: 0, system default)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Produce more verbose output (repeat for debug output)",
    )
    parser.add_argument("--ssl", action="store_true", help="Connect using TLS")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def configure_logging(verbosity: int) -> None:
    """Send diagnostics to stderr; silent unless ``verbosity`` is positive."""
    if verbosity <= 0:
        level = logging.CRITICAL
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(stream=sys.stderr, format="%(message)s", level=level)
    logging.getLogger("idleconn").setLevel(level)


def _local_input() -> Any:
    """
    Unbuffered standard input for the upstream thread.

    The thread may still be blocked reading when main() returns. A read
    parked inside the buffered stream holds its lock and makes interpreter
    shutdown abort, so the read goes to the raw file instead.
    """
    stdin = sys.stdin.buffer
    return getattr(stdin, "raw", stdin)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command and return its exit status."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    timeout = IdleTimeout(
        connect=args.connect_timeout,
        read=args.idle_timeout,
        write=args.idle_timeout,
    )

    try:
        conn = connect(args.host, args.port, timeout=timeout, use_ssl=args.ssl)
    except IdleconnError as e:
        logger.error("%s", e)
        return 1

    logger.info("Succeeded to connect to %s %s port!", args.host, args.port)

    try:
        Relay(conn, _local_input(), sys.stdout.buffer).run()
    except (IdleconnError, OSError) as e:
        logger.error("%s", e)
        return 1
    finally:
        conn.close()

    return 0
