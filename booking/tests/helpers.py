# booking/tests/helpers.py
#
# Shared fixtures for the scheduling tests: an in-memory commitment store
# and a config builder that ignores whatever SCHEDULING the environment set.
#
from datetime import datetime, timezone as dt_timezone
from zoneinfo import ZoneInfo

from booking.config import DEFAULTS, load_scheduling_config
from booking.domain import Commitment, CommitmentStatus
from booking.errors import StoreUnavailable

LA = ZoneInfo("America/Los_Angeles")
UTC = dt_timezone.utc


def make_config(**overrides):
    raw = dict(DEFAULTS)
    raw.update(overrides)
    return load_scheduling_config(raw)


def la(year, month, day, hour=0, minute=0):
    """Local Los Angeles wall time as an aware UTC instant (fold=0)."""
    return datetime(year, month, day, hour, minute, tzinfo=LA).astimezone(UTC)


def fixed_clock(instant):
    return lambda: instant


class FakeStore:
    """
    In-memory CommitmentStore. Set fail_query / fail_insert to simulate an
    unreachable calendar.
    """
    backend = "fake"

    def __init__(self, commitments=(), fail_query=False, fail_insert=False):
        self.commitments = list(commitments)
        self.fail_query = fail_query
        self.fail_insert = fail_insert
        self.queries = []
        self.inserts = []

    def query(self, time_min, time_max, timeout=None):
        self.queries.append((time_min, time_max, timeout))
        if self.fail_query:
            raise StoreUnavailable("calendar timed out")
        return [c for c in self.commitments if c.start < time_max and c.end > time_min]

    def insert(self, window, idempotency_key, metadata, timeout=None):
        if self.fail_insert:
            raise StoreUnavailable("calendar timed out")
        commitment = Commitment(
            id=f"evt-{len(self.commitments) + 1}",
            start=window.start,
            end=window.end,
            idempotency_key=idempotency_key,
            metadata=dict(metadata),
        )
        self.commitments.append(commitment)
        self.inserts.append(commitment)
        return commitment


class StaleStore(FakeStore):
    """Serves the snapshot taken at construction, as two racing readers would see it."""

    def __init__(self, commitments=()):
        super().__init__(commitments)
        self.snapshot = list(self.commitments)

    def query(self, time_min, time_max, timeout=None):
        self.queries.append((time_min, time_max, timeout))
        return [c for c in self.snapshot if c.start < time_max and c.end > time_min]


def commitment(start, end, key=None, cancelled=False, id="c1"):
    return Commitment(
        id=id,
        start=start,
        end=end,
        status=CommitmentStatus.CANCELLED if cancelled else CommitmentStatus.ACTIVE,
        idempotency_key=key,
    )
