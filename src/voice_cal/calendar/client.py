"""Google Calendar event store.

Provides :class:`GoogleCalendarClient`, the event store the session mirrors
reminders into.  It speaks the same four-operation contract as the
reminder store:

- **list** -- upcoming events in a fixed window, in Google's ``startTime``
  order, across all result pages.
- **create** -- insert a one-hour event for a draft entry.
- **update** -- patch summary and/or date+time of an event by id.
- **delete** -- delete an event by id.

Every API method is wrapped with
:func:`~voice_cal.calendar.exceptions.translate_errors`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from pydantic import ValidationError

from voice_cal.calendar.event_mapper import (
    map_draft_to_google_event,
    map_partial_to_google_patch,
)
from voice_cal.calendar.exceptions import CalendarAPIError, translate_errors
from voice_cal.models.draft import DraftEntry
from voice_cal.models.items import Event

logger = logging.getLogger(__name__)

# Google Calendar API calendar identifier for the primary calendar.
_PRIMARY_CALENDAR = "primary"


class GoogleCalendarClient:
    """Event store backed by the owner's primary Google Calendar.

    Args:
        credentials: Valid Google OAuth 2.0 credentials.
        timezone: IANA timezone string (e.g. ``"America/Vancouver"``).
        window_days: How many days ahead of today :meth:`list` covers.
        today: Clock returning the current local date.
        service: Optional pre-built ``googleapiclient`` service resource.
            If ``None``, one is built from *credentials*.  Pass a mock here
            in tests.
    """

    def __init__(
        self,
        credentials: Credentials,
        timezone: str,
        window_days: int = 30,
        today: Callable[[], date] = date.today,
        service: Any | None = None,
    ) -> None:
        self._credentials = credentials
        self._timezone = timezone
        self._zone = ZoneInfo(timezone)
        self._window = timedelta(days=window_days)
        self._today = today
        self._service = service or build("calendar", "v3", credentials=credentials)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @translate_errors
    def list(self) -> list[Event]:
        """List events from the start of today through the configured window.

        Handles pagination automatically, fetching all pages of results.

        Returns:
            Events in server order (``startTime``).
        """
        time_min = datetime.combine(self._today(), time.min, tzinfo=self._zone)
        time_max = time_min + self._window

        all_items: list[dict] = []
        page_token: str | None = None

        while True:
            response = (
                self._service.events()
                .list(
                    calendarId=_PRIMARY_CALENDAR,
                    timeMin=time_min.isoformat(),
                    timeMax=time_max.isoformat(),
                    singleEvents=True,
                    orderBy="startTime",
                    pageToken=page_token,
                )
                .execute()
            )

            all_items.extend(response.get("items", []))

            page_token = response.get("nextPageToken")
            if page_token is None:
                break

        events = [_to_event(item) for item in all_items]
        logger.info(
            "Listed %d event(s) between %s and %s",
            len(events),
            time_min.isoformat(),
            time_max.isoformat(),
        )
        return events

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @translate_errors
    def create(self, draft: DraftEntry) -> Event:
        """Create a one-hour event for *draft* on the primary calendar.

        Raises:
            EventMappingError: If the draft's date or time is not usable.
        """
        body = map_draft_to_google_event(draft, self._timezone)
        result = (
            self._service.events()
            .insert(calendarId=_PRIMARY_CALENDAR, body=body)
            .execute()
        )
        logger.info("Created event '%s' (id=%s)", draft.text, result.get("id", "?"))
        return _to_event(result)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    @translate_errors
    def update(self, event_id: str, partial: dict) -> None:
        """Patch an existing event by its ID.

        Args:
            event_id: The Google Calendar event ID.
            partial: Fields to change; see
                :func:`~voice_cal.calendar.event_mapper.map_partial_to_google_patch`.

        Raises:
            CalendarNotFoundError: If the event ID does not exist.
        """
        body = map_partial_to_google_patch(partial, self._timezone)
        if not body:
            logger.info("Nothing to update for event id=%s", event_id)
            return
        self._service.events().patch(
            calendarId=_PRIMARY_CALENDAR, eventId=event_id, body=body
        ).execute()
        logger.info("Updated event (id=%s) fields=%s", event_id, sorted(body))

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    @translate_errors
    def delete(self, event_id: str) -> None:
        """Delete an event by its ID.

        Raises:
            CalendarNotFoundError: If the event ID does not exist.
        """
        self._service.events().delete(
            calendarId=_PRIMARY_CALENDAR, eventId=event_id
        ).execute()
        logger.info("Deleted event (id=%s)", event_id)


def _to_event(resource: Any) -> Event:
    if not isinstance(resource, dict):
        raise CalendarAPIError(f"Malformed event resource: {resource!r}")
    try:
        return Event.from_google(resource)
    except ValidationError as exc:
        raise CalendarAPIError(f"Malformed event resource: {exc}") from exc
