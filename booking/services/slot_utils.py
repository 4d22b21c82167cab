"""
slot_utils.py
-------------
Helpers to normalise an incoming date string and to generate candidate
start instants within business hours.

Returned datetimes are timezone-aware UTC instants, resolved through the
TimeZoneResolver so DST days behave.
"""

from datetime import date, datetime

from .timezone_resolver import TimeZoneResolver

MINUTES_PER_DAY = 24 * 60


def parse_local_date(value) -> date:
    """
    Convert 'YYYY-MM-DD' into a date.
    Also accepts inputs that carry a time part ('2025-11-01T10:00' or
    '2025-11-01 10:00'); only the date part is kept.

    Raises:
        ValueError: if the value is not a calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    date_str = str(value or "").strip()
    if "T" in date_str:
        date_str = date_str.split("T", 1)[0].strip()
    elif " " in date_str:
        date_str = date_str.split(" ", 1)[0].strip()

    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise ValueError("Invalid date format. Use YYYY-MM-DD.")


def generate_candidates(
    resolver: TimeZoneResolver,
    local_date: date,
    step_minutes: int,
    open_hour: int,
    close_hour: int,
    include_close_hour: bool = False,
) -> list:
    """
    Generate candidate start instants for one local day.

    - One candidate per step from open_hour (inclusive).
    - The last candidate is < close_hour, or <= close_hour when
      include_close_hour is set.
    - Candidates never spill into the next calendar day, whatever the step.
    - close_hour <= open_hour yields an empty list.
    - Wall times that collapse onto one instant across a DST gap appear once.
    """
    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive")
    if close_hour <= open_hour:
        return []

    first = open_hour * 60
    last = close_hour * 60
    if not include_close_hour:
        last -= 1
    last = min(last, MINUTES_PER_DAY - 1)

    slots = []
    seen = set()
    minute_of_day = first
    while minute_of_day <= last:
        hour, minute = divmod(minute_of_day, 60)
        instant = resolver.to_instant(local_date, hour, minute)
        if instant not in seen:
            seen.add(instant)
            slots.append(instant)
        minute_of_day += step_minutes

    slots.sort()
    return slots
