"""voice-cal: Voice Calendar Assistant.

Turns dictated sentences into reminders (and optionally Google Calendar
events), replies through Google Gemini, and keeps an editable list of both.
"""

from __future__ import annotations

from voice_cal.exceptions import (
    AIResponderError,
    CaptureError,
    ExtractionError,
    ReminderStoreError,
    StoreError,
)
from voice_cal.extractor import extract
from voice_cal.models import DraftEntry, Event, ListItem, Reminder
from voice_cal.session import FAILURE_MESSAGE, SessionController, SessionState

__version__ = "0.1.0"

__all__ = [
    "AIResponderError",
    "CaptureError",
    "DraftEntry",
    "Event",
    "ExtractionError",
    "FAILURE_MESSAGE",
    "ListItem",
    "Reminder",
    "ReminderStoreError",
    "SessionController",
    "SessionState",
    "StoreError",
    "extract",
]
