from datetime import timedelta

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase

from booking.config import StoreErrorPolicy
from booking.domain import DurationClass

from .helpers import make_config


class SchedulingConfigTests(SimpleTestCase):
    def test_defaults(self):
        config = make_config()
        self.assertEqual(config.time_zone, "America/Los_Angeles")
        self.assertEqual((config.open_hour, config.close_hour), (9, 22))
        self.assertEqual(config.step_minutes, 60)
        self.assertEqual(config.prep_buffer, timedelta(hours=1))
        self.assertEqual(config.limits.max_per_day, 3)
        self.assertEqual(config.limits.max_concurrent, 2)
        self.assertIs(config.availability_on_store_error, StoreErrorPolicy.RAISE)

    def test_env_strings_are_coerced(self):
        config = make_config(OPEN_HOUR="8", MAX_PER_DAY="5", INCLUDE_CLOSE_HOUR="true",
                             AVAILABILITY_ON_STORE_ERROR="No_Slots")
        self.assertEqual(config.open_hour, 8)
        self.assertEqual(config.limits.max_per_day, 5)
        self.assertTrue(config.include_close_hour)
        self.assertIs(config.availability_on_store_error, StoreErrorPolicy.NO_SLOTS)

    def test_config_is_frozen(self):
        config = make_config()
        with self.assertRaises(AttributeError):
            config.open_hour = 7

    def test_durations_must_cover_every_class(self):
        with self.assertRaises(ImproperlyConfigured):
            make_config(DURATION_MINUTES={"short": 120, "medium": 150})

    def test_legacy_codes_accepted_in_duration_table(self):
        config = make_config(DURATION_MINUTES={"50-150-5h": 90, "medium": 150, "long": 180})
        self.assertEqual(config.durations[DurationClass.SHORT], 90)

    def test_invalid_values(self):
        bad = [
            {"TIME_ZONE": "Nowhere/Special"},
            {"CLOSE_HOUR": 25},
            {"OPEN_HOUR": "nine"},
            {"SLOT_STEP_MINUTES": 0},
            {"PREP_BUFFER_HOURS": 0},
            {"MAX_CONCURRENT": 0},
            {"DURATION_MINUTES": {"short": 0, "medium": 150, "long": 180}},
            {"DURATION_MINUTES": {"short": 120, "medium": 150, "long": 180, "xl": 240}},
            {"AVAILABILITY_ON_STORE_ERROR": "guess"},
        ]
        for overrides in bad:
            with self.subTest(overrides=overrides), self.assertRaises(ImproperlyConfigured):
                make_config(**overrides)
