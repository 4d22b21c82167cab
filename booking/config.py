"""
config.py
---------
Immutable scheduling configuration.

settings.SCHEDULING (built from the environment in event_booking/settings.py)
is validated once and frozen into a SchedulingConfig. Components receive the
config at construction time; nothing reads business hours, buffers or caps
from globals while serving a request.

Invalid configuration raises ImproperlyConfigured. BookingConfig.ready()
loads it at startup so a bad zone or a partial duration table stops the
process instead of failing per request.
"""

import enum
from dataclasses import dataclass, field
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .domain import DEFAULT_DURATION_MINUTES, CapacityLimits, DurationClass
from .errors import InvalidDurationClass


class StoreErrorPolicy(enum.Enum):
    """What an availability caller wants when the store cannot be read."""
    RAISE = "raise"
    NO_SLOTS = "no_slots"
    UNFILTERED = "unfiltered"


DEFAULTS = {
    "TIME_ZONE": "America/Los_Angeles",
    "OPEN_HOUR": 9,
    "CLOSE_HOUR": 22,
    "INCLUDE_CLOSE_HOUR": False,
    "SLOT_STEP_MINUTES": 60,
    "PREP_BUFFER_HOURS": 1,
    "CLEANUP_BUFFER_HOURS": 1,
    "MAX_PER_DAY": 3,
    "MAX_CONCURRENT": 2,
    "DURATION_MINUTES": {dc.value: minutes for dc, minutes in DEFAULT_DURATION_MINUTES.items()},
    "STORE_TIMEOUT_SECONDS": 10,
    "AVAILABILITY_ON_STORE_ERROR": "raise",
}


@dataclass(frozen=True)
class SchedulingConfig:
    time_zone: str
    open_hour: int
    close_hour: int
    step_minutes: int
    prep_buffer: timedelta
    cleanup_buffer: timedelta
    limits: CapacityLimits
    durations: dict = field(hash=False)
    include_close_hour: bool = False
    store_timeout: float | None = 10
    availability_on_store_error: StoreErrorPolicy = StoreErrorPolicy.RAISE


def _as_int(raw, name: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ImproperlyConfigured(f"SCHEDULING[{name!r}] must be an integer, got {raw!r}")


def _as_hours(raw, name: str) -> timedelta:
    try:
        hours = float(raw)
    except (TypeError, ValueError):
        raise ImproperlyConfigured(f"SCHEDULING[{name!r}] must be a number of hours, got {raw!r}")
    if hours <= 0:
        raise ImproperlyConfigured(f"SCHEDULING[{name!r}] must be positive.")
    return timedelta(hours=hours)


def _as_bool(raw) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    return bool(raw)


def _durations(raw) -> dict:
    durations = {}
    for code, minutes in (raw or {}).items():
        try:
            dc = DurationClass.parse(code)
        except InvalidDurationClass as e:
            raise ImproperlyConfigured(f"SCHEDULING['DURATION_MINUTES']: {e}")
        minutes = _as_int(minutes, f"DURATION_MINUTES.{code}")
        if minutes <= 0:
            raise ImproperlyConfigured(f"Service duration for {dc.value!r} must be positive.")
        durations[dc] = minutes

    missing = [dc.value for dc in DurationClass if dc not in durations]
    if missing:
        raise ImproperlyConfigured(f"SCHEDULING['DURATION_MINUTES'] is missing: {', '.join(missing)}")
    return durations


def load_scheduling_config(overrides: dict | None = None) -> SchedulingConfig:
    """
    Build and validate a SchedulingConfig.

    Args:
        overrides: optional dict merged over settings.SCHEDULING (tests use
            this to inject configurations without touching settings).

    Raises:
        ImproperlyConfigured: on any invalid value, including an unknown
            IANA zone.
    """
    raw = dict(DEFAULTS)
    raw.update(getattr(settings, "SCHEDULING", None) or {})
    raw.update(overrides or {})

    open_hour = _as_int(raw["OPEN_HOUR"], "OPEN_HOUR")
    close_hour = _as_int(raw["CLOSE_HOUR"], "CLOSE_HOUR")
    for name, hour in (("OPEN_HOUR", open_hour), ("CLOSE_HOUR", close_hour)):
        if not 0 <= hour <= 24:
            raise ImproperlyConfigured(f"SCHEDULING[{name!r}] must be between 0 and 24.")

    step = _as_int(raw["SLOT_STEP_MINUTES"], "SLOT_STEP_MINUTES")
    if step <= 0:
        raise ImproperlyConfigured("SCHEDULING['SLOT_STEP_MINUTES'] must be positive.")

    limits = CapacityLimits(
        max_per_day=_as_int(raw["MAX_PER_DAY"], "MAX_PER_DAY"),
        max_concurrent=_as_int(raw["MAX_CONCURRENT"], "MAX_CONCURRENT"),
    )
    if limits.max_per_day < 1 or limits.max_concurrent < 1:
        raise ImproperlyConfigured("SCHEDULING caps must be at least 1.")

    timeout = raw.get("STORE_TIMEOUT_SECONDS")
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            raise ImproperlyConfigured("SCHEDULING['STORE_TIMEOUT_SECONDS'] must be a number.")

    try:
        policy = StoreErrorPolicy(str(raw["AVAILABILITY_ON_STORE_ERROR"]).strip().lower())
    except ValueError:
        raise ImproperlyConfigured(
            "SCHEDULING['AVAILABILITY_ON_STORE_ERROR'] must be one of: "
            + ", ".join(p.value for p in StoreErrorPolicy)
        )

    config = SchedulingConfig(
        time_zone=str(raw["TIME_ZONE"]).strip(),
        open_hour=open_hour,
        close_hour=close_hour,
        step_minutes=step,
        prep_buffer=_as_hours(raw["PREP_BUFFER_HOURS"], "PREP_BUFFER_HOURS"),
        cleanup_buffer=_as_hours(raw["CLEANUP_BUFFER_HOURS"], "CLEANUP_BUFFER_HOURS"),
        limits=limits,
        durations=_durations(raw["DURATION_MINUTES"]),
        include_close_hour=_as_bool(raw["INCLUDE_CLOSE_HOUR"]),
        store_timeout=timeout,
        availability_on_store_error=policy,
    )

    # Fails fast on an unknown zone.
    from .services.timezone_resolver import TimeZoneResolver
    TimeZoneResolver(config.time_zone)

    return config
