"""Data models for voice-cal."""

from __future__ import annotations

from voice_cal.models.draft import DraftEntry
from voice_cal.models.items import Event, ListItem, Reminder

__all__ = [
    "DraftEntry",
    "Event",
    "ListItem",
    "Reminder",
]
