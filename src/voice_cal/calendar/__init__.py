"""Google Calendar event store for voice-cal."""

from __future__ import annotations

from voice_cal.calendar.auth import get_calendar_credentials
from voice_cal.calendar.client import GoogleCalendarClient
from voice_cal.calendar.event_mapper import (
    map_draft_to_google_event,
    map_partial_to_google_patch,
)

__all__ = [
    "GoogleCalendarClient",
    "get_calendar_credentials",
    "map_draft_to_google_event",
    "map_partial_to_google_patch",
]
