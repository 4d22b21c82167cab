"""
timezone_resolver.py
--------------------
Single place where local wall-clock times become absolute instants.

Policy for daylight-saving transitions:
- Repeated hour (fall back): the earlier of the two instants (fold=0).
- Skipped hour (spring forward): rolled forward by the size of the gap,
  e.g. 02:30 on a 02:00 -> 03:00 day resolves to 03:30 local.

Everything returned is a timezone-aware UTC datetime; interval math in the
engine never happens on local wall-clock values.
"""

from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.core.exceptions import ImproperlyConfigured


class TimeZoneResolver:
    def __init__(self, zone_name: str):
        try:
            self.zone = ZoneInfo(zone_name)
        except (ZoneInfoNotFoundError, ValueError, TypeError) as e:
            raise ImproperlyConfigured(f"Unknown time zone {zone_name!r}: {e}")
        self.zone_name = zone_name

    def to_instant(self, local_date: date, hour: int, minute: int = 0) -> datetime:
        """
        Resolve (local date, hour, minute) to a UTC instant.

        hour=24 means midnight at the start of the following day, which keeps
        range ends expressible as "close hour 24".
        """
        if hour == 24 and minute == 0:
            local_date = local_date + timedelta(days=1)
            hour = 0
        wall = datetime.combine(local_date, time(hour, minute), tzinfo=self.zone)

        # fold=0 picks the first occurrence of a repeated time, and for a
        # skipped time applies the pre-transition offset, which lands past
        # the gap.
        return wall.replace(fold=0).astimezone(dt_timezone.utc)

    def localize(self, instant: datetime) -> datetime:
        if instant.tzinfo is None:
            raise ValueError("Expected a timezone-aware datetime.")
        return instant.astimezone(self.zone)

    def local_date_of(self, instant: datetime) -> date:
        return self.localize(instant).date()

    def day_bounds(self, local_date: date) -> tuple:
        """Local midnight to the next local midnight, as UTC instants (23h/25h on DST days)."""
        return self.to_instant(local_date, 0), self.to_instant(local_date, 24)
