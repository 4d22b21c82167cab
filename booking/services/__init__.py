"""
Scheduling engine entry points.

Views, the payment webhook and management commands build their engine
through these helpers so configuration and store selection live in one place.
"""


def build_availability_engine(store=None, config=None, clock=None):
    from calendars.stores import get_commitment_store

    from ..config import load_scheduling_config
    from .availability_engine import AvailabilityEngine

    return AvailabilityEngine(
        config or load_scheduling_config(),
        store if store is not None else get_commitment_store(),
        clock=clock,
    )


def build_booking_manager(store=None, config=None, clock=None):
    from calendars.stores import get_commitment_store

    from ..config import load_scheduling_config
    from .booking_manager import BookingManager

    return BookingManager(
        config or load_scheduling_config(),
        store if store is not None else get_commitment_store(),
        clock=clock,
    )
