"""
stores.py
---------
The commitment store: the one external collaborator the scheduling engine
talks to.

Contract:
- query(time_min, time_max, timeout=None) -> list[Commitment]
    every commitment (any status) whose window intersects [time_min, time_max)
- insert(window, idempotency_key, metadata, timeout=None) -> Commitment
    creates a new active commitment spanning the operational window

Any failure (timeout, auth, database error...) is raised as StoreUnavailable.
A failed read is never reported as an empty calendar.

Backends:
- "google":   calendars.google_store.GoogleCalendarStore
- "database": DatabaseCommitmentStore (CalendarEvent rows)
"""

import logging

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError

from booking.domain import Commitment, CommitmentStatus
from booking.errors import StoreUnavailable

logger = logging.getLogger(__name__)


class CommitmentStore:
    backend = "abstract"

    def query(self, time_min, time_max, timeout=None) -> list:
        raise NotImplementedError

    def insert(self, window, idempotency_key: str, metadata: dict, timeout=None) -> Commitment:
        raise NotImplementedError


def describe_commitment(metadata: dict) -> dict:
    """
    Build human-readable calendar fields (summary/description/location) from
    booking metadata. Only used for display; capacity logic never reads them.
    """
    md = metadata or {}
    package = md.get("duration_class") or md.get("package") or "booking"
    name = md.get("full_name") or ""
    summary = f"Booking - {package}" + (f" - {name}" if name else "")

    lines = [
        f"Client: {name}" if name else "",
        f"Email: {md['email']}" if md.get("email") else "",
        f"Phone: {md['phone']}" if md.get("phone") else "",
        f"Venue: {md['venue']}" if md.get("venue") else "",
        f"Package: {package}",
        f"Service start: {md['service_start']}" if md.get("service_start") else "",
        f"Notes: {md['notes']}" if md.get("notes") else "",
    ]
    return {
        "summary": summary[:255],
        "description": "\n".join(line for line in lines if line),
        "location": str(md.get("venue") or "")[:255],
    }


class DatabaseCommitmentStore(CommitmentStore):
    """
    CalendarEvent-backed store for development and single-host deployments.

    The timeout argument is accepted for interface parity; query time is
    bounded by the database connection's own settings.
    """
    backend = "database"

    def _to_commitment(self, event) -> Commitment:
        return Commitment(
            id=str(event.pk),
            start=event.start_time,
            end=event.end_time,
            status=CommitmentStatus.CANCELLED if event.status == "CANCELLED" else CommitmentStatus.ACTIVE,
            idempotency_key=event.idempotency_key or None,
            metadata=dict(event.metadata or {}),
        )

    def query(self, time_min, time_max, timeout=None) -> list:
        from .models import CalendarEvent

        try:
            events = list(
                CalendarEvent.objects.filter(start_time__lt=time_max, end_time__gt=time_min)
                .order_by("start_time", "id")
            )
        except DatabaseError as e:
            logger.error("Calendar query failed for %s..%s: %s", time_min, time_max, e)
            raise StoreUnavailable(f"Calendar database unavailable: {e}") from e
        return [self._to_commitment(ev) for ev in events]

    def insert(self, window, idempotency_key: str, metadata: dict, timeout=None) -> Commitment:
        from .models import CalendarEvent

        fields = describe_commitment(metadata)
        try:
            event = CalendarEvent.objects.create(
                start_time=window.start,
                end_time=window.end,
                status="CONFIRMED",
                idempotency_key=idempotency_key,
                metadata=dict(metadata or {}),
                **fields,
            )
        except DatabaseError as e:
            logger.error("Calendar insert failed for key %s: %s", idempotency_key, e)
            raise StoreUnavailable(f"Calendar database unavailable: {e}") from e
        return self._to_commitment(event)


def get_commitment_store() -> CommitmentStore:
    """Build the store selected by settings.COMMITMENT_STORE."""
    backend = str(getattr(settings, "COMMITMENT_STORE", "database") or "database").strip().lower()
    if backend == "database":
        return DatabaseCommitmentStore()
    if backend == "google":
        from .google_store import GoogleCalendarStore
        return GoogleCalendarStore.from_settings()
    raise ImproperlyConfigured(f"Unknown COMMITMENT_STORE {backend!r} (expected 'google' or 'database').")
