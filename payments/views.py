# payments/views.py
#
# Purpose:
# - Turn a paid Stripe Checkout session into a calendar commitment.
#
# Flow:
# - Verify the Stripe-Signature header against STRIPE_WEBHOOK_SECRET.
# - checkout.session.completed -> BookingManager.commit_booking with
#   idempotency_key = "stripe:<session id>". Stripe delivers at least once,
#   so a redelivery returns the existing commitment instead of a second event.
# - Any other event type is acknowledged and ignored.
#
# Responses:
# - 400 bad signature / payload
# - 503 calendar unavailable (Stripe retries later; safe thanks to the key)
# - 200 everything else, including capacity and hours rejections: the slot
#   is gone and redelivery would not change that, so those are logged for
#   staff follow-up instead.
#
import json
import logging
from datetime import timezone as dt_timezone

import stripe
from django.conf import settings
from django.http import JsonResponse
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from booking.errors import SchedulingError, StoreUnavailable
from booking.services import build_booking_manager

logger = logging.getLogger(__name__)

# Checkout metadata keys -> commitment metadata keys
METADATA_FIELDS = {
    "fullName": "full_name",
    "email": "email",
    "phone": "phone",
    "venue": "venue",
    "notes": "notes",
    "mainBar": "main_bar",
}


def booking_from_session(session: dict) -> dict | None:
    """
    Extract (start, package, key, metadata) from a checkout session.
    Returns None when the session carries no booking (e.g. a plain payment).
    """
    md = session.get("metadata") or {}
    start_raw = (md.get("startISO") or "").strip()
    package = (md.get("pkg") or "").strip()
    if not start_raw or not package:
        return None

    start = parse_datetime(start_raw.replace("Z", "+00:00"))
    if start is None:
        raise ValueError(f"Invalid startISO in session metadata: {start_raw!r}")
    if timezone.is_naive(start):
        start = start.replace(tzinfo=dt_timezone.utc)

    metadata = {dst: str(md[src]) for src, dst in METADATA_FIELDS.items() if md.get(src)}
    metadata["payment_session"] = str(session.get("id") or "")
    return {
        "start": start,
        "package": package,
        "idempotency_key": f"stripe:{session.get('id')}",
        "metadata": metadata,
    }


@csrf_exempt
@require_http_methods(["POST"])
def stripe_webhook(request):
    secret = getattr(settings, "STRIPE_WEBHOOK_SECRET", "") or ""
    if not secret:
        logger.error("STRIPE_WEBHOOK_SECRET is not configured; rejecting webhook")
        return JsonResponse({"received": False, "error": "webhook not configured"}, status=500)

    payload = request.body
    signature = request.META.get("HTTP_STRIPE_SIGNATURE", "")
    try:
        stripe.Webhook.construct_event(payload, signature, secret)
    except stripe.SignatureVerificationError as e:
        logger.warning("Stripe webhook signature error: %s", e)
        return JsonResponse({"received": False, "error": "invalid signature"}, status=400)
    except ValueError as e:
        logger.warning("Stripe webhook payload error: %s", e)
        return JsonResponse({"received": False, "error": "invalid payload"}, status=400)

    # Signature verified; work from the raw JSON.
    event = json.loads(payload)
    event_type = event.get("type")
    if event_type != "checkout.session.completed":
        return JsonResponse({"received": True, "ignored": event_type})

    session = (event.get("data") or {}).get("object") or {}
    try:
        booking = booking_from_session(session)
    except ValueError as e:
        logger.warning("Stripe session %s: %s", session.get("id"), e)
        return JsonResponse({"received": True, "skipped": True, "error": str(e)})
    if booking is None:
        return JsonResponse({"received": True, "skipped": True})

    manager = build_booking_manager()
    try:
        result = manager.commit_booking(
            service_start=booking["start"],
            duration_class=booking["package"],
            idempotency_key=booking["idempotency_key"],
            metadata=booking["metadata"],
        )
    except StoreUnavailable as e:
        logger.error("Calendar unavailable for session %s: %s", session.get("id"), e)
        return JsonResponse({"received": False, "error": e.code}, status=503)
    except SchedulingError as e:
        logger.warning(
            "Paid session %s could not be booked (%s): %s", session.get("id"), e.code, e.message
        )
        return JsonResponse({"received": True, "created": False, "error": e.code})

    return JsonResponse({
        "received": True,
        "created": result.created,
        "commitment_id": result.commitment.id,
    })
