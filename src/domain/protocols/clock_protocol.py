"""Clock port.

Keeps wall-clock reads and timezone arithmetic out of handlers so time can
be pinned in tests.
"""

from datetime import datetime
from typing import Protocol

from src.domain.value_objects import TimeWindow


class ClockProtocol(Protocol):
    """Current time and calendar windows."""

    def now(self) -> datetime:
        """Current instant, timezone-aware UTC."""
        ...

    def current_day(self) -> TimeWindow:
        """Today's calendar day in the configured timezone, as UTC bounds."""
        ...

    def current_hour(self) -> TimeWindow:
        """The current clock hour, as UTC bounds."""
        ...
