"""Date/time helpers.

Always operate on timezone-aware UTC datetimes for wall-clock values and on
``time.monotonic`` for expiry arithmetic.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return a timezone-aware datetime in UTC."""
    return datetime.now(UTC)


def monotonic() -> float:
    """Clock used for TTL bookkeeping; patchable in tests."""
    return time.monotonic()
