from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from app.config import config


# datetime.weekday(): Monday == 0
WEEKDAY_NAMES_PT = {
    0: "segunda",
    1: "terca",
    2: "quarta",
    3: "quinta",
    4: "sexta",
    5: "sabado",
    6: "domingo",
}


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Clock:
    """
    Current time and calendar arithmetic in the business timezone.

    ``now()`` is always an aware UTC datetime. Weekday names are computed
    after converting to the configured zone, so an instant late on Sunday
    evening in São Paulo is still "domingo" even though it is Monday in UTC.
    """

    def __init__(self, timezone_name: Optional[str] = None):
        self.timezone_name = timezone_name or config.BUSINESS_TIMEZONE
        self.tz = ZoneInfo(self.timezone_name)

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def local(self, at: Optional[datetime] = None) -> datetime:
        return as_utc(at or self.now()).astimezone(self.tz)

    def today_weekday_name(self, at: Optional[datetime] = None) -> str:
        return WEEKDAY_NAMES_PT[self.local(at).weekday()]

    def add_days(self, days: int, start: Optional[datetime] = None) -> datetime:
        return (start or self.now()) + timedelta(days=days)

    def hours_since(self, instant: Optional[datetime], now: Optional[datetime] = None) -> int:
        """Whole hours elapsed since ``instant`` (floored). Missing instant counts as 0."""
        if instant is None:
            return 0
        elapsed = as_utc(now or self.now()) - as_utc(instant)
        return int(elapsed.total_seconds() // 3600)

    def days_since(self, instant: Optional[datetime], now: Optional[datetime] = None) -> int:
        if instant is None:
            return 0
        elapsed = as_utc(now or self.now()) - as_utc(instant)
        return int(elapsed.total_seconds() // 86400)


class FrozenClock(Clock):
    """Clock pinned to a fixed instant; used by tests and replayed scans."""

    def __init__(self, frozen_at: datetime, timezone_name: Optional[str] = None):
        super().__init__(timezone_name)
        self.frozen_at = as_utc(frozen_at)

    def now(self) -> datetime:
        return self.frozen_at

    def advance(self, **kwargs) -> None:
        self.frozen_at = self.frozen_at + timedelta(**kwargs)
