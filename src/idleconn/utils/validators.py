"""utils/validators.py

Validation utilities for Idleconn.
"""

from typing import Optional


def validate_timeout(value: Optional[float], name: str = "timeout") -> float:
    """Normalise an idle timeout: ``None`` becomes 0.0, negatives are rejected."""
    if value is None:
        return 0.0
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value!r}")
    return float(value)
