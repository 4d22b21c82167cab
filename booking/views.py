# booking/views.py
#
# Purpose:
# - Public JSON API over the scheduling engine.
#     GET  /api/bookings/availability/?date=YYYY-MM-DD&package=medium
#     POST /api/bookings/   {start, package, idempotency_key, metadata}
#     GET  /api/health/
#
# Error mapping (engine error -> HTTP):
# - InvalidDurationClass / bad payload  -> 400
# - OutsideBusinessHours                -> 422
# - DayCapExceeded / ConcurrencyCap...  -> 409
# - StoreUnavailable                    -> 503 (retryable; the engine never retries)
#
# Notes for developers:
# - Availability on store failure follows SCHEDULING["AVAILABILITY_ON_STORE_ERROR"].
#   The response always says whether capacity was actually checked.
#
import logging

from django.conf import settings
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from .config import StoreErrorPolicy, load_scheduling_config
from .errors import (
    CapacityError,
    InvalidDurationClass,
    OutsideBusinessHours,
    SchedulingError,
    StoreUnavailable,
)
from .serializers import (
    AvailabilityQuerySerializer,
    CommitBookingSerializer,
    CommitmentSerializer,
    candidate_to_dict,
)
from .services import build_availability_engine, build_booking_manager

logger = logging.getLogger(__name__)

ERROR_STATUS = [
    (InvalidDurationClass, status.HTTP_400_BAD_REQUEST),
    (OutsideBusinessHours, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (CapacityError, status.HTTP_409_CONFLICT),
    (StoreUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def error_response(exc: SchedulingError) -> Response:
    http_status = status.HTTP_400_BAD_REQUEST
    for exc_type, code in ERROR_STATUS:
        if isinstance(exc, exc_type):
            http_status = code
            break
    return Response(
        {"ok": False, "code": exc.code, "error": exc.message, "retryable": exc.retryable},
        status=http_status,
    )


class BookingViewSet(viewsets.ViewSet):
    """
    Endpoints:
    - POST /api/bookings/                commit a booking (idempotent per key)
    - GET  /api/bookings/availability/   bookable start times for a date
    """

    def create(self, request):
        serializer = CommitBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        manager = build_booking_manager()
        try:
            result = manager.commit_booking(
                service_start=data["start"],
                duration_class=data["package"],
                idempotency_key=data["idempotency_key"],
                metadata=data.get("metadata") or {},
            )
        except SchedulingError as e:
            return error_response(e)

        body = {
            "ok": True,
            "replayed": not result.created,
            "commitment": CommitmentSerializer(result.commitment).data,
        }
        return Response(body, status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK)

    @action(detail=False, methods=["get"], url_path="availability")
    def availability(self, request):
        """
        GET /api/bookings/availability/?date=YYYY-MM-DD&package=medium
        Also accepts dates that include a time part; only the date is used.
        Past slots are never returned.
        """
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        config = load_scheduling_config()
        engine = build_availability_engine(config=config)
        try:
            result = engine.get_availability(
                query.validated_data["date"],
                query.validated_data["package"],
                on_store_error=config.availability_on_store_error,
            )
        except SchedulingError as e:
            return error_response(e)

        if not result.capacity_checked:
            logger.warning("Availability for %s returned without a capacity check", result.date)

        return Response({
            "ok": True,
            "date": result.date.isoformat(),
            "package": result.duration_class.value,
            "tz": config.time_zone,
            "slots": [s.isoformat() for s in result.slots],
            "capacity_checked": result.capacity_checked,
            "store_error": result.store_error,
            "candidates": [candidate_to_dict(c) for c in result.candidates],
        })


class HealthView(APIView):
    """
    GET /api/health/
    Reports configuration presence only; never calls the calendar.
    """

    def get(self, request):
        def has(name):
            return bool(str(getattr(settings, name, "") or "").strip())

        config = load_scheduling_config()
        return Response({
            "ok": True,
            "service": "event-booking",
            "tz": config.time_zone,
            "business_hours": {"open": config.open_hour, "close": config.close_hour},
            "degraded_availability": config.availability_on_store_error is not StoreErrorPolicy.RAISE,
            "calendar": {
                "backend": getattr(settings, "COMMITMENT_STORE", "database"),
                "calendarId": getattr(settings, "CALENDAR_ID", "") or "primary",
                "hasServiceAccount": has("GOOGLE_SERVICE_ACCOUNT_JSON") or (
                    has("GCP_CLIENT_EMAIL") and has("GCP_PRIVATE_KEY")
                ),
            },
            "stripe": {
                "hasSecret": has("STRIPE_SECRET_KEY"),
                "hasWebhookSecret": has("STRIPE_WEBHOOK_SECRET"),
            },
        })
