"""
google_store.py
---------------
Google Calendar v3 as the commitment store.

Authentication:
- Service account, from GOOGLE_SERVICE_ACCOUNT_JSON (whole key file as JSON)
  or GCP_CLIENT_EMAIL + GCP_PRIVATE_KEY. Hosting dashboards often store the
  key with literal "\\n" sequences; those are turned back into newlines.

Mapping:
- event.status == "cancelled"       -> CommitmentStatus.CANCELLED
- start/end.dateTime                -> absolute instants
- start/end.date (all-day events)   -> local midnight .. local midnight
- transparency == "transparent"     -> skipped (a "Free" event holds no capacity)
- extendedProperties.private.idempotencyKey -> Commitment.idempotency_key

Every request runs with a per-call timeout on its own httplib2 connection.
HttpError, auth and socket failures are raised as StoreUnavailable.
"""

import json
import logging
from datetime import date, datetime, timezone as dt_timezone

import httplib2
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from booking.domain import Commitment, CommitmentStatus
from booking.errors import StoreUnavailable
from booking.services.timezone_resolver import TimeZoneResolver

from .stores import CommitmentStore, describe_commitment

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar"]
TOKEN_URI = "https://oauth2.googleapis.com/token"
PAGE_SIZE = 250


def load_service_account_credentials():
    """
    Returns service-account Credentials built from settings.

    Raises:
        ImproperlyConfigured: if no usable credentials are configured.
    """
    raw_json = getattr(settings, "GOOGLE_SERVICE_ACCOUNT_JSON", "") or ""
    if raw_json.strip():
        try:
            info = json.loads(raw_json)
        except ValueError as e:
            raise ImproperlyConfigured(f"GOOGLE_SERVICE_ACCOUNT_JSON is not valid JSON: {e}")
    else:
        info = {
            "type": "service_account",
            "client_email": getattr(settings, "GCP_CLIENT_EMAIL", "") or "",
            "private_key": getattr(settings, "GCP_PRIVATE_KEY", "") or "",
            "token_uri": TOKEN_URI,
        }

    info["private_key"] = (info.get("private_key") or "").replace("\\n", "\n")
    info.setdefault("token_uri", TOKEN_URI)
    if not info.get("client_email") or not info.get("private_key"):
        raise ImproperlyConfigured("Missing Google service account credentials.")

    try:
        return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
    except (ValueError, GoogleAuthError) as e:
        raise ImproperlyConfigured(f"Invalid Google service account credentials: {e}")


def _parse_datetime(raw: str) -> datetime:
    dt = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=dt_timezone.utc)
    return dt.astimezone(dt_timezone.utc)


class GoogleCalendarStore(CommitmentStore):
    backend = "google"

    def __init__(self, calendar_id: str, time_zone: str, credentials=None, service=None,
                 default_timeout: float | None = None):
        self.calendar_id = calendar_id or "primary"
        self.resolver = TimeZoneResolver(time_zone)
        self.credentials = credentials
        self.default_timeout = default_timeout
        if service is None:
            service = build("calendar", "v3", credentials=credentials, cache_discovery=False)
        self.service = service

    @classmethod
    def from_settings(cls) -> "GoogleCalendarStore":
        from booking.config import load_scheduling_config

        config = load_scheduling_config()
        return cls(
            calendar_id=getattr(settings, "CALENDAR_ID", "") or "primary",
            time_zone=config.time_zone,
            credentials=load_service_account_credentials(),
            default_timeout=config.store_timeout,
        )

    # ---------- transport ----------
    def _execute(self, request, timeout):
        timeout = self.default_timeout if timeout is None else timeout
        try:
            if self.credentials is None:
                return request.execute()
            http = AuthorizedHttp(self.credentials, http=httplib2.Http(timeout=timeout))
            return request.execute(http=http)
        except HttpError as e:
            status = getattr(getattr(e, "resp", None), "status", "?")
            logger.error("Google Calendar HTTP %s on %s: %s", status, self.calendar_id, e)
            raise StoreUnavailable(f"Google Calendar returned HTTP {status}") from e
        except (GoogleAuthError, httplib2.HttpLib2Error, OSError) as e:
            # OSError covers socket timeouts and connection resets.
            logger.error("Google Calendar unreachable (%s): %s", type(e).__name__, e)
            raise StoreUnavailable(f"Google Calendar unreachable: {e}") from e

    # ---------- mapping ----------
    def _boundary(self, node: dict) -> datetime | None:
        node = node or {}
        if node.get("dateTime"):
            return _parse_datetime(node["dateTime"])
        if node.get("date"):
            return self.resolver.to_instant(date.fromisoformat(node["date"]), 0)
        return None

    def _to_commitment(self, event: dict) -> Commitment | None:
        start = self._boundary(event.get("start"))
        end = self._boundary(event.get("end"))
        cancelled = event.get("status") == "cancelled"
        if event.get("transparency") == "transparent" and not cancelled:
            # Shown as "Free": does not block time, like freebusy.query.
            return None
        if start is None or end is None:
            # Deleted events can come back stripped down to id + status.
            if not cancelled:
                logger.warning("Skipping calendar event %s without start/end", event.get("id"))
            return None

        private = ((event.get("extendedProperties") or {}).get("private")) or {}
        return Commitment(
            id=str(event.get("id") or ""),
            start=start,
            end=end,
            status=CommitmentStatus.CANCELLED if cancelled else CommitmentStatus.ACTIVE,
            idempotency_key=private.get("idempotencyKey") or None,
            metadata=dict(private),
        )

    # ---------- CommitmentStore ----------
    def query(self, time_min, time_max, timeout=None) -> list:
        commitments = []
        page_token = None
        while True:
            request = self.service.events().list(
                calendarId=self.calendar_id,
                timeMin=time_min.astimezone(dt_timezone.utc).isoformat(),
                timeMax=time_max.astimezone(dt_timezone.utc).isoformat(),
                singleEvents=True,
                showDeleted=True,
                orderBy="startTime",
                maxResults=PAGE_SIZE,
                pageToken=page_token,
            )
            response = self._execute(request, timeout) or {}
            for event in response.get("items") or []:
                commitment = self._to_commitment(event)
                if commitment is not None:
                    commitments.append(commitment)
            page_token = response.get("nextPageToken")
            if not page_token:
                break
        return commitments

    def insert(self, window, idempotency_key: str, metadata: dict, timeout=None) -> Commitment:
        fields = describe_commitment(metadata)
        private = {str(k): str(v) for k, v in (metadata or {}).items() if v is not None}
        private["idempotencyKey"] = idempotency_key

        body = {
            "summary": fields["summary"],
            "description": fields["description"],
            "location": fields["location"],
            "start": {"dateTime": window.start.isoformat(), "timeZone": self.resolver.zone_name},
            "end": {"dateTime": window.end.isoformat(), "timeZone": self.resolver.zone_name},
            "guestsCanInviteOthers": False,
            "guestsCanModify": False,
            "guestsCanSeeOtherGuests": False,
            "extendedProperties": {"private": private},
        }
        request = self.service.events().insert(
            calendarId=self.calendar_id,
            body=body,
            sendUpdates="none",
        )
        created = self._execute(request, timeout) or {}

        commitment = self._to_commitment(created)
        if commitment is None:
            # Insert succeeded but the echo lacked times; trust what we sent.
            commitment = Commitment(
                id=str(created.get("id") or ""),
                start=window.start,
                end=window.end,
                idempotency_key=idempotency_key,
                metadata=private,
            )
        logger.info("Google Calendar event %s created for key %s", commitment.id, idempotency_key)
        return commitment
