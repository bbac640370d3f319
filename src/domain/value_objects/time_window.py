"""Half-open UTC time interval used for rate-limit windows."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """Interval ``[start, end)`` in UTC."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        """Reject empty or inverted windows."""
        if self.end <= self.start:
            raise ValueError("Window end must be after its start")

    def contains(self, instant: datetime) -> bool:
        """True if the instant falls inside the window."""
        return self.start <= instant < self.end
