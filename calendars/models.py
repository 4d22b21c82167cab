# calendars/models.py
#
# Purpose:
# - Local calendar of commitments, used when COMMITMENT_STORE = "database".
#
# Design highlights:
# - CalendarEvent stores the full operational window (setup + service +
#   cleanup), not just the advertised service time.
# - status is uppercase "CONFIRMED" or "CANCELLED"; only CONFIRMED events
#   count toward capacity.
# - Staff cancel events from the Django admin. The scheduling engine only
#   reads and appends.
#
from django.db import models


class CalendarEvent(models.Model):
    STATUS_CHOICES = [
        ("CONFIRMED", "Confirmed"),
        ("CANCELLED", "Cancelled"),
    ]

    summary = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=255, blank=True)
    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField(db_index=True)
    status = models.CharField(
        max_length=10,
        choices=STATUS_CHOICES,
        default="CONFIRMED",
        help_text="Event lifecycle status",
    )
    idempotency_key = models.CharField(max_length=255, blank=True, db_index=True)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    cancellation_time = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the event was cancelled (if applicable).",
    )

    class Meta:
        ordering = ["start_time"]

    def __str__(self):
        return f"{self.summary or 'Booking'}: {self.start_time} - {self.end_time}"
