"""utils/timing.py

Timeouts configuration and deadline arithmetic.

Deadlines are absolute points on the ``time.monotonic()`` clock. ``None``
means "no deadline".
"""

import time
from dataclasses import dataclass
from typing import Optional


@dataclass
class IdleTimeout:
    """
    Timeout configuration.

    Attributes:
        connect: Maximum time to wait for connection establishment (socket connect).
        read: Idle time allowed on each read before it fails.
        write: Idle time allowed on each write before it fails.

    ``None`` or ``0`` disables the corresponding timeout.
    """

    connect: Optional[float] = None
    read: Optional[float] = None
    write: Optional[float] = None

    @classmethod
    def from_float(cls, timeout: Optional[float]) -> "IdleTimeout":
        """Create an IdleTimeout instance applying one value to every phase."""
        if timeout is None:
            return cls()
        return cls(connect=timeout, read=timeout, write=timeout)


def now() -> float:
    """Current time on the deadline clock."""
    return time.monotonic()


def deadline_after(seconds: float) -> float:
    """Deadline ``seconds`` from now."""
    return now() + seconds


def time_until(deadline: float) -> float:
    """Seconds left before ``deadline``; zero or negative once it has passed."""
    return deadline - now()
