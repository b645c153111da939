from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Callable, Optional


class MonotonicClock:
    """UTC wall clock that never hands out the same instant twice.

    Transactions are ordered by timestamp, so two readings inside the same
    microsecond are nudged apart instead of tying.
    """

    def __init__(self, source: Optional[Callable[[], datetime]] = None) -> None:
        self._source = source or (lambda: datetime.now(UTC))
        self._last: Optional[datetime] = None

    def now(self) -> datetime:
        current = self._source()
        if self._last is not None and current <= self._last:
            current = self._last + timedelta(microseconds=1)
        self._last = current
        return current
