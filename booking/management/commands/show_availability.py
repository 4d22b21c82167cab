"""
show_availability.py
--------------------
Django management command to print the bookable start times for a date.

Usage:
    python manage.py show_availability --date 2025-11-01 --package medium
    python manage.py show_availability --date 2025-11-01 --package long --all

Behavior:
- Reads the configured commitment store once (same path as the API).
- Prints admissible starts in the configured time zone.
- --all also prints rejected candidates and the reason.
"""

from django.core.management.base import BaseCommand, CommandError

from booking.config import StoreErrorPolicy
from booking.domain import DurationClass
from booking.errors import SchedulingError
from booking.services import build_availability_engine
from booking.services.slot_utils import parse_local_date


class Command(BaseCommand):
    help = "Show bookable start times for one date and package."

    def add_arguments(self, parser):
        parser.add_argument("--date", required=True, help="Local date (YYYY-MM-DD).")
        parser.add_argument(
            "--package",
            default=DurationClass.MEDIUM.value,
            help="short, medium, long or a legacy package code.",
        )
        parser.add_argument(
            "--all",
            action="store_true",
            help="Also list rejected candidates with their reason.",
        )

    def handle(self, *args, **options):
        try:
            local_date = parse_local_date(options["date"])
            package = DurationClass.parse(options["package"])
        except ValueError as e:
            raise CommandError(str(e))

        engine = build_availability_engine()
        try:
            result = engine.get_availability(local_date, package, on_store_error=StoreErrorPolicy.RAISE)
        except SchedulingError as e:
            raise CommandError(f"{e.code}: {e.message}")

        resolver = engine.resolver
        self.stdout.write(f"{result.date.isoformat()} {package.value} ({engine.config.time_zone})")

        for candidate in result.candidates:
            if not candidate.admissible and not options["all"]:
                continue
            local = resolver.localize(candidate.start)
            if candidate.admissible:
                self.stdout.write(f"  {local:%H:%M}  available")
            else:
                self.stdout.write(f"  {local:%H:%M}  {candidate.reason.value}")

        if result.slots:
            self.stdout.write(self.style.SUCCESS(f"{len(result.slots)} slot(s) available."))
        else:
            self.stdout.write(self.style.WARNING("No slots available."))
