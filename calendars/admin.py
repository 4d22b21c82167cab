# calendars/admin.py
from django.contrib import admin
from django.utils import timezone

from .models import CalendarEvent


@admin.action(description="Cancel selected events")
def cancel_events(modeladmin, request, queryset):
    queryset.exclude(status="CANCELLED").update(status="CANCELLED", cancellation_time=timezone.now())


@admin.register(CalendarEvent)
class CalendarEventAdmin(admin.ModelAdmin):
    list_display = ("id", "summary", "start_time", "end_time", "status", "idempotency_key")
    list_filter = ("status",)
    search_fields = ("summary", "idempotency_key")
    readonly_fields = ("idempotency_key", "created_at")
    actions = [cancel_events]
