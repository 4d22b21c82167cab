"""
booking_manager.py
------------------
Commits a chosen slot to the calendar.

Protocol (sequential, one write at most):
1) Business-hours check for the start's local day (the commit path can be
   reached straight from a payment webhook that never saw availability).
2) Operational window for the package.
3) One fresh read of the day, range-expanded to the window.
4) Idempotency: an ACTIVE commitment already tagged with the key in that
   read is returned as-is (created=False). Replayed webhooks stay harmless,
   even once the start has passed. Otherwise a start at or before "now" is
   rejected.
5) Capacity re-check against that fresh read -> DayCapExceeded /
   ConcurrencyCapExceeded. No automatic retry.
6) Insert the new commitment tagged with the key.

Known limitation:
- Two commits for overlapping windows can both pass step 5 before either
  reaches step 6. The store offers no transactions or conditional insert, so
  re-reading right before the write narrows the gap but cannot close it.
"""

import logging
from datetime import datetime

from django.utils import timezone

from ..config import SchedulingConfig
from ..domain import CommitResult, DurationClass
from ..errors import CapacityError, OutsideBusinessHours
from .capacity import CapacityEvaluator
from .operational_window import OperationalWindowCalculator
from .timezone_resolver import TimeZoneResolver

logger = logging.getLogger(__name__)


class BookingManager:
    def __init__(self, config: SchedulingConfig, store, clock=None):
        self.config = config
        self.store = store
        self.clock = clock or timezone.now
        self.resolver = TimeZoneResolver(config.time_zone)
        self.windows = OperationalWindowCalculator.from_config(config)
        self.capacity = CapacityEvaluator(config.limits, self.resolver)

    def is_within_business_hours(self, service_start: datetime) -> bool:
        local = self.resolver.localize(service_start)
        minute_of_day = local.hour * 60 + local.minute
        open_at = self.config.open_hour * 60
        close_at = self.config.close_hour * 60
        if minute_of_day < open_at:
            return False
        if self.config.include_close_hour:
            return minute_of_day <= close_at
        return minute_of_day < close_at

    def commit_booking(self, service_start: datetime, duration_class, idempotency_key: str,
                       metadata: dict | None = None, *, timeout=None) -> CommitResult:
        """
        Commit a booking.

        Args:
            service_start: aware datetime of the advertised (live) start
            duration_class: DurationClass or package code
            idempotency_key: stable id of the logical booking (e.g. payment session)
            metadata: free-form client details stored with the commitment
            timeout: store timeout in seconds (defaults to config.store_timeout)

        Returns:
            CommitResult(commitment, created). created=False is an idempotent replay.

        Raises:
            OutsideBusinessHours, InvalidDurationClass, DayCapExceeded,
            ConcurrencyCapExceeded, StoreUnavailable
        """
        if timezone.is_naive(service_start):
            raise ValueError("service_start must be timezone-aware.")
        key = (idempotency_key or "").strip()
        if not key:
            raise ValueError("idempotency_key is required.")
        timeout = self.config.store_timeout if timeout is None else timeout

        # 1) Hours
        if not self.is_within_business_hours(service_start):
            local = self.resolver.localize(service_start)
            raise OutsideBusinessHours(
                f"{local:%Y-%m-%d %H:%M} is outside business hours "
                f"({self.config.open_hour:02d}:00-{self.config.close_hour:02d}:00 {self.config.time_zone})."
            )

        # 2) Window
        dc = DurationClass.parse(duration_class)
        window = self.windows.window(service_start, dc)

        # 3) + 4) One fresh read covering the whole local day and the window
        day_start, day_end = self.resolver.day_bounds(self.resolver.local_date_of(service_start))
        commitments = self.store.query(
            min(day_start, window.start), max(day_end, window.end), timeout=timeout
        )

        for existing in commitments:
            if existing.is_active and existing.idempotency_key == key:
                logger.info("Idempotent replay for key %s -> commitment %s", key, existing.id)
                return CommitResult(existing, created=False)

        if service_start <= self.clock():
            raise OutsideBusinessHours("Start time must be in the future.")

        # 5) Capacity re-check
        try:
            self.capacity.check(service_start, window, commitments)
        except CapacityError as e:
            logger.info("Booking rejected for key %s at %s: %s", key, service_start.isoformat(), e)
            raise

        # 6) Insert
        payload = dict(metadata or {})
        payload["duration_class"] = dc.value
        payload["service_start"] = service_start.isoformat()
        commitment = self.store.insert(window, key, payload, timeout=timeout)
        logger.info(
            "Booking committed: key=%s id=%s window=%s..%s",
            key, commitment.id, window.start.isoformat(), window.end.isoformat(),
        )
        return CommitResult(commitment, created=True)
