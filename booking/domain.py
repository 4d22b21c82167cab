# booking/domain.py
#
# Purpose:
# - Plain value types shared by the scheduling engine and the calendar stores.
#
# Design highlights:
# - DurationClass: closed set of service packages. parse() is total: known
#   codes (including the legacy "50-150-5h" style package codes) map to a
#   class, anything else raises InvalidDurationClass. No silent default.
# - OperationalWindow / Commitment: half-open [start, end) intervals on
#   timezone-aware UTC datetimes.
# - CandidateSlot / AvailabilityResult: ephemeral, rebuilt on every call.
#
# Notes for developers:
# - Nothing in here touches the database. The external calendar is the only
#   source of truth for commitments.
#

import enum
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from .errors import InvalidDurationClass


class DurationClass(enum.Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"

    @classmethod
    def parse(cls, code) -> "DurationClass":
        """
        Resolve a package code to a DurationClass.

        Accepts an existing DurationClass, the enum values (case-insensitive)
        or the package codes used by the original booking site.

        Raises:
            InvalidDurationClass: for anything unrecognised.
        """
        if isinstance(code, cls):
            return code
        key = str(code or "").strip().lower()
        try:
            return cls(key)
        except ValueError:
            pass
        if key in LEGACY_PACKAGE_CODES:
            return LEGACY_PACKAGE_CODES[key]
        raise InvalidDurationClass(f"Unknown package / duration class: {code!r}")


# Package codes posted by the existing checkout pages (guest-count ranges).
LEGACY_PACKAGE_CODES = {
    "50-150-5h": DurationClass.SHORT,
    "150-250-5h": DurationClass.MEDIUM,
    "250-350-6h": DurationClass.LONG,
}

DEFAULT_DURATION_MINUTES = {
    DurationClass.SHORT: 120,
    DurationClass.MEDIUM: 150,
    DurationClass.LONG: 180,
}


class CommitmentStatus(enum.Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"


class SlotRejection(enum.Enum):
    PAST = "past"
    DAY_CAP_EXCEEDED = "day_cap_exceeded"
    CONCURRENCY_CAP_EXCEEDED = "concurrency_cap_exceeded"
    STORE_UNAVAILABLE = "store_unavailable"


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """Half-open overlap: touching endpoints do not overlap."""
    return a_start < b_end and b_start < a_end


@dataclass(frozen=True)
class OperationalWindow:
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end <= self.start:
            raise ValueError("OperationalWindow end must be after start.")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return overlaps(self.start, self.end, start, end)


@dataclass(frozen=True)
class Commitment:
    id: str
    start: datetime
    end: datetime
    status: CommitmentStatus = CommitmentStatus.ACTIVE
    idempotency_key: str | None = None
    metadata: dict = field(default_factory=dict, compare=False)

    @property
    def is_active(self) -> bool:
        return self.status is CommitmentStatus.ACTIVE

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return overlaps(self.start, self.end, start, end)


@dataclass(frozen=True)
class CapacityLimits:
    max_per_day: int
    max_concurrent: int


@dataclass(frozen=True)
class CandidateSlot:
    start: datetime
    admissible: bool
    reason: SlotRejection | None = None


@dataclass(frozen=True)
class AvailabilityResult:
    """
    Outcome of AvailabilityEngine.get_availability.

    capacity_checked=False means the store could not be consulted and a
    degraded-mode policy chosen by the caller produced the candidates. It is
    never the same thing as "the calendar is empty".
    """
    date: date
    duration_class: DurationClass
    candidates: tuple = ()
    capacity_checked: bool = True
    store_error: str | None = None

    @property
    def slots(self) -> list:
        return [c.start for c in self.candidates if c.admissible]


@dataclass(frozen=True)
class CommitResult:
    commitment: Commitment
    created: bool
