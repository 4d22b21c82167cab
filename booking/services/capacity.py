"""
capacity.py
-----------
Decides whether one candidate may be admitted given the commitments already
on record.

Rules, in order:
1) Day cap: active commitments intersecting the candidate's local calendar
   day. count >= max_per_day -> DAY_CAP_EXCEEDED (ignores the window).
2) Concurrency cap: active commitments overlapping the candidate's
   operational window. count >= max_concurrent -> CONCURRENCY_CAP_EXCEEDED.

Overlap is half-open: existing_start < new_end AND new_start < existing_end,
so back-to-back windows do not conflict.

Availability evaluates every candidate against the same snapshot; offering a
slot never consumes capacity.
"""

from datetime import datetime

from ..domain import CapacityLimits, OperationalWindow, SlotRejection, overlaps
from ..errors import ConcurrencyCapExceeded, DayCapExceeded
from .timezone_resolver import TimeZoneResolver


class CapacityEvaluator:
    def __init__(self, limits: CapacityLimits, resolver: TimeZoneResolver):
        self.limits = limits
        self.resolver = resolver

    def count_on_day(self, service_start: datetime, commitments) -> int:
        day_start, day_end = self.resolver.day_bounds(self.resolver.local_date_of(service_start))
        return sum(
            1 for c in commitments
            if c.is_active and overlaps(c.start, c.end, day_start, day_end)
        )

    def count_overlapping(self, window: OperationalWindow, commitments) -> int:
        return sum(1 for c in commitments if c.is_active and window.overlaps(c.start, c.end))

    def evaluate(self, service_start: datetime, window: OperationalWindow, commitments):
        """
        Returns:
            (admissible, reason) where reason is a SlotRejection or None.
        """
        if self.count_on_day(service_start, commitments) >= self.limits.max_per_day:
            return False, SlotRejection.DAY_CAP_EXCEEDED
        if self.count_overlapping(window, commitments) >= self.limits.max_concurrent:
            return False, SlotRejection.CONCURRENCY_CAP_EXCEEDED
        return True, None

    def check(self, service_start: datetime, window: OperationalWindow, commitments) -> None:
        """
        Same rules as evaluate(), raising the typed capacity error instead.

        Raises:
            DayCapExceeded, ConcurrencyCapExceeded
        """
        ok, reason = self.evaluate(service_start, window, commitments)
        if ok:
            return
        if reason is SlotRejection.DAY_CAP_EXCEEDED:
            raise DayCapExceeded(
                f"The maximum of {self.limits.max_per_day} bookings for that day has been reached."
            )
        raise ConcurrencyCapExceeded(
            f"That time overlaps {self.limits.max_concurrent} or more existing bookings."
        )
