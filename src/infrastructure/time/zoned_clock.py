"""Clock bound to a business timezone.

Rate-limit windows follow the calendar day of one configured timezone
(America/Los_Angeles by default), not UTC midnight. Windows are returned
as UTC bounds so they compare directly against stored ``created_at``
values. DST transitions are handled by zoneinfo: a local day may be 23 or
25 hours long.
"""

from datetime import UTC, datetime, time, timedelta
from zoneinfo import ZoneInfo

from src.domain.value_objects import TimeWindow


class ZonedClock:
    """ClockProtocol implementation backed by zoneinfo.

    Example:
        >>> clock = ZonedClock("America/Los_Angeles")
        >>> window = clock.current_day()
        >>> window.contains(clock.now())
        True
    """

    def __init__(self, timezone: str = "America/Los_Angeles") -> None:
        """Initialize clock.

        Raises:
            zoneinfo.ZoneInfoNotFoundError: If the timezone name is unknown.
        """
        self._tz = ZoneInfo(timezone)

    @property
    def timezone(self) -> ZoneInfo:
        """Business timezone."""
        return self._tz

    def now(self) -> datetime:
        """Current instant in UTC."""
        return datetime.now(UTC)

    def current_day(self) -> TimeWindow:
        """Local calendar day containing now, as UTC bounds."""
        local_date = self.now().astimezone(self._tz).date()
        start = datetime.combine(local_date, time.min, tzinfo=self._tz)
        end = datetime.combine(local_date + timedelta(days=1), time.min, tzinfo=self._tz)
        return TimeWindow(start.astimezone(UTC), end.astimezone(UTC))

    def current_hour(self) -> TimeWindow:
        """Clock hour containing now, as UTC bounds."""
        start = self.now().replace(minute=0, second=0, microsecond=0)
        return TimeWindow(start, start + timedelta(hours=1))
