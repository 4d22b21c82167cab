"""
operational_window.py
---------------------
The interval a booking really occupies: setup before the advertised start,
the live service itself, and cleanup afterwards.

    start = service_start - prep_buffer
    end   = service_start + service_duration(class) + cleanup_buffer
"""

from datetime import datetime, timedelta

from django.core.exceptions import ImproperlyConfigured

from ..domain import DurationClass, OperationalWindow


class OperationalWindowCalculator:
    def __init__(self, durations: dict, prep_buffer: timedelta, cleanup_buffer: timedelta):
        if prep_buffer <= timedelta(0) or cleanup_buffer <= timedelta(0):
            raise ImproperlyConfigured("Prep and cleanup buffers must be strictly positive.")
        self.durations = {DurationClass.parse(k): int(v) for k, v in durations.items()}
        self.prep_buffer = prep_buffer
        self.cleanup_buffer = cleanup_buffer

    @classmethod
    def from_config(cls, config) -> "OperationalWindowCalculator":
        return cls(config.durations, config.prep_buffer, config.cleanup_buffer)

    def service_duration(self, duration_class) -> timedelta:
        """Raises InvalidDurationClass for unknown codes."""
        dc = DurationClass.parse(duration_class)
        return timedelta(minutes=self.durations[dc])

    def window(self, service_start: datetime, duration_class) -> OperationalWindow:
        live = self.service_duration(duration_class)
        return OperationalWindow(
            start=service_start - self.prep_buffer,
            end=service_start + live + self.cleanup_buffer,
        )
