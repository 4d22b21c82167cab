# booking/apps.py
from django.apps import AppConfig


class BookingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "booking"

    def ready(self):
        # Validate SCHEDULING (zone, hours, durations...) at startup.
        from .config import load_scheduling_config
        load_scheduling_config()
