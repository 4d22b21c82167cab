"""
errors.py
---------
Typed failures raised by the scheduling engine.

Every error carries:
- code: stable machine-readable string (also used in API responses)
- retryable: True only for transient infrastructure failures

Replaying a commit with a known idempotency key is NOT an error; the
BookingManager returns the earlier commitment with created=False.
"""


class SchedulingError(Exception):
    code = "scheduling_error"
    retryable = False

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code


class OutsideBusinessHours(SchedulingError):
    """Requested start is outside the configured local hours (or already past)."""
    code = "outside_business_hours"


class CapacityError(SchedulingError):
    code = "capacity_exceeded"


class DayCapExceeded(CapacityError):
    code = "day_cap_exceeded"


class ConcurrencyCapExceeded(CapacityError):
    code = "concurrency_cap_exceeded"


class InvalidDurationClass(SchedulingError, ValueError):
    """Unknown package / duration code. A client or config bug, never retried."""
    code = "invalid_duration_class"


class StoreUnavailable(SchedulingError):
    """
    The commitment store could not be read or written (timeout, auth, 5xx...).
    Must never be read as "no commitments".
    """
    code = "store_unavailable"
    retryable = True
