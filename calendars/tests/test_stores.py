from datetime import datetime, timezone as dt_timezone
from unittest import mock

from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings

from booking.domain import CommitmentStatus, OperationalWindow
from booking.errors import StoreUnavailable
from calendars.models import CalendarEvent
from calendars.stores import DatabaseCommitmentStore, describe_commitment, get_commitment_store

UTC = dt_timezone.utc


def at(hour, minute=0, day=1):
    return datetime(2025, 11, day, hour, minute, tzinfo=UTC)


class DatabaseCommitmentStoreTests(TestCase):
    def setUp(self):
        self.store = DatabaseCommitmentStore()

    def test_insert_then_query(self):
        created = self.store.insert(
            OperationalWindow(at(16), at(20, 30)),
            "stripe:cs_1",
            {"full_name": "Ana Diaz", "venue": "Hall B", "duration_class": "medium"},
        )
        self.assertEqual(created.status, CommitmentStatus.ACTIVE)
        self.assertEqual(created.idempotency_key, "stripe:cs_1")

        event = CalendarEvent.objects.get(pk=created.id)
        self.assertEqual(event.status, "CONFIRMED")
        self.assertEqual(event.summary, "Booking - medium - Ana Diaz")
        self.assertEqual(event.location, "Hall B")

        found = self.store.query(at(0), at(0, day=2))
        self.assertEqual([c.id for c in found], [created.id])

    def test_query_is_half_open(self):
        CalendarEvent.objects.create(start_time=at(10), end_time=at(12))
        self.assertEqual(self.store.query(at(12), at(14)), [])
        self.assertEqual(self.store.query(at(8), at(10)), [])
        self.assertEqual(len(self.store.query(at(11, 59), at(14))), 1)

    def test_cancelled_events_are_returned_as_cancelled(self):
        CalendarEvent.objects.create(start_time=at(10), end_time=at(12), status="CANCELLED", idempotency_key="k")
        [found] = self.store.query(at(0), at(23))
        self.assertEqual(found.status, CommitmentStatus.CANCELLED)
        self.assertFalse(found.is_active)

    def test_database_errors_become_store_unavailable(self):
        with mock.patch.object(CalendarEvent.objects, "filter", side_effect=DatabaseError("disk I/O error")):
            with self.assertRaises(StoreUnavailable):
                self.store.query(at(0), at(23))
        with mock.patch.object(CalendarEvent.objects, "create", side_effect=DatabaseError("disk I/O error")):
            with self.assertRaises(StoreUnavailable):
                self.store.insert(OperationalWindow(at(10), at(12)), "k", {})


class StoreSelectionTests(SimpleTestCase):
    @override_settings(COMMITMENT_STORE="database")
    def test_database(self):
        self.assertIsInstance(get_commitment_store(), DatabaseCommitmentStore)

    @override_settings(COMMITMENT_STORE="Google")
    def test_google(self):
        with mock.patch("calendars.google_store.GoogleCalendarStore.from_settings") as from_settings:
            store = get_commitment_store()
        self.assertIs(store, from_settings.return_value)

    @override_settings(COMMITMENT_STORE="outlook")
    def test_unknown(self):
        with self.assertRaises(ImproperlyConfigured):
            get_commitment_store()


class DescribeCommitmentTests(SimpleTestCase):
    def test_only_present_fields_are_listed(self):
        fields = describe_commitment({"duration_class": "short", "email": "a@example.com"})
        self.assertEqual(fields["summary"], "Booking - short")
        self.assertEqual(fields["description"], "Email: a@example.com\nPackage: short")
        self.assertEqual(fields["location"], "")
