"""
availability_engine.py
----------------------
Computes the bookable start times for one local date and package by:
1) generating candidates inside business hours (slot_utils),
2) dropping candidates at or before "now" (never offered, never queried),
3) reading existing commitments ONCE for the whole day, range-expanded so
   every remaining candidate's operational window is covered,
4) evaluating each candidate against that same snapshot (CapacityEvaluator).

Store failures:
- The caller picks a StoreErrorPolicy. RAISE (default) propagates
  StoreUnavailable. NO_SLOTS / UNFILTERED return candidates with
  capacity_checked=False so the response can say "we could not check"
  instead of "nothing is booked".
"""

import logging

from django.utils import timezone

from ..config import SchedulingConfig, StoreErrorPolicy
from ..domain import AvailabilityResult, CandidateSlot, DurationClass, SlotRejection
from ..errors import StoreUnavailable
from .capacity import CapacityEvaluator
from .operational_window import OperationalWindowCalculator
from .slot_utils import generate_candidates, parse_local_date
from .timezone_resolver import TimeZoneResolver

logger = logging.getLogger(__name__)


class AvailabilityEngine:
    def __init__(self, config: SchedulingConfig, store, clock=None):
        self.config = config
        self.store = store
        self.clock = clock or timezone.now
        self.resolver = TimeZoneResolver(config.time_zone)
        self.windows = OperationalWindowCalculator.from_config(config)
        self.capacity = CapacityEvaluator(config.limits, self.resolver)

    def candidates_for_day(self, local_date) -> list:
        return generate_candidates(
            self.resolver,
            local_date,
            step_minutes=self.config.step_minutes,
            open_hour=self.config.open_hour,
            close_hour=self.config.close_hour,
            include_close_hour=self.config.include_close_hour,
        )

    def get_availability(self, local_date, duration_class, *, timeout=None,
                         on_store_error: StoreErrorPolicy = StoreErrorPolicy.RAISE) -> AvailabilityResult:
        """
        Args:
            local_date: date (or 'YYYY-MM-DD') in the configured zone
            duration_class: DurationClass or package code
            timeout: store timeout in seconds (defaults to config.store_timeout)
            on_store_error: degraded-mode policy chosen by the caller

        Returns:
            AvailabilityResult; .slots is the ascending list of offerable starts.

        Raises:
            InvalidDurationClass, StoreUnavailable (policy RAISE only)
        """
        local_date = parse_local_date(local_date)
        dc = DurationClass.parse(duration_class)
        timeout = self.config.store_timeout if timeout is None else timeout
        now = self.clock()

        past, upcoming = [], []
        for start in self.candidates_for_day(local_date):
            if start <= now:
                past.append(CandidateSlot(start, False, SlotRejection.PAST))
            else:
                upcoming.append((start, self.windows.window(start, dc)))

        if not upcoming:
            return AvailabilityResult(local_date, dc, tuple(past))

        day_start, day_end = self.resolver.day_bounds(local_date)
        range_min = min(day_start, upcoming[0][1].start)
        range_max = max(day_end, max(w.end for _, w in upcoming))

        try:
            commitments = self.store.query(range_min, range_max, timeout=timeout)
        except StoreUnavailable as e:
            if on_store_error is StoreErrorPolicy.RAISE:
                raise
            logger.warning(
                "Availability for %s served in degraded mode %r: %s",
                local_date, on_store_error.value, e,
            )
            admissible = on_store_error is StoreErrorPolicy.UNFILTERED
            reason = None if admissible else SlotRejection.STORE_UNAVAILABLE
            degraded = [CandidateSlot(start, admissible, reason) for start, _ in upcoming]
            return AvailabilityResult(
                local_date, dc, tuple(past + degraded),
                capacity_checked=False, store_error=str(e),
            )

        evaluated = []
        for start, window in upcoming:
            ok, reason = self.capacity.evaluate(start, window, commitments)
            evaluated.append(CandidateSlot(start, ok, reason))

        return AvailabilityResult(local_date, dc, tuple(past + evaluated))
