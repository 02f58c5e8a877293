"""Map drafts and edits to the Google Calendar API body format.

- :func:`map_draft_to_google_event` turns a
  :class:`~voice_cal.models.draft.DraftEntry` into an ``events().insert()``
  body: a one-hour event starting at the draft's date and time.
- :func:`map_partial_to_google_patch` turns an edit dict (``summary`` /
  ``text``, ``date``, ``time``) into an ``events().patch()`` body.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta

from voice_cal.calendar.exceptions import EventMappingError
from voice_cal.models.draft import DraftEntry

logger = logging.getLogger(__name__)

_DEFAULT_DURATION = timedelta(hours=1)


def map_draft_to_google_event(draft: DraftEntry, timezone: str) -> dict:
    """Convert a draft entry into a Google Calendar API event body.

    The summary is the full transcript text, matching how the reminder is
    stored, so both lists show the same label.

    Args:
        draft: The extracted draft.
        timezone: IANA timezone string applied to start and end.

    Returns:
        A ``dict`` conforming to the Google Calendar Event resource schema.

    Raises:
        EventMappingError: If the draft's date is not ``YYYY-MM-DD`` or its
            time is not ``HH:MM``.
    """
    start = _combine(draft.date, draft.time)
    end = start + _DEFAULT_DURATION

    body = {
        "summary": draft.text,
        "start": _format_datetime(start, timezone),
        "end": _format_datetime(end, timezone),
        "description": "Created by voice-cal from a dictated reminder.",
    }
    logger.info(
        "Mapped draft '%s' (%s -> %s) to Google Calendar body",
        draft.text,
        start.isoformat(),
        end.isoformat(),
    )
    return body


def map_partial_to_google_patch(partial: dict, timezone: str) -> dict:
    """Convert an edit dict into a Google Calendar ``patch`` body.

    Recognised keys: ``summary`` (or ``text``, its reminder-side name),
    ``date`` and ``time``.  ``date`` and ``time`` must be given together
    because the event is moved as a whole; unknown keys are ignored.

    Args:
        partial: The fields to change.
        timezone: IANA timezone string applied to start and end.

    Returns:
        A (possibly empty) patch body.

    Raises:
        EventMappingError: If only one of ``date``/``time`` is given, or
            either cannot be parsed.
    """
    body: dict = {}

    summary = partial.get("summary", partial.get("text"))
    if summary is not None:
        body["summary"] = summary

    has_date = partial.get("date") is not None
    has_time = partial.get("time") is not None
    if has_date != has_time:
        raise EventMappingError("Moving an event needs both 'date' and 'time'")
    if has_date:
        start = _combine(partial["date"], partial["time"])
        body["start"] = _format_datetime(start, timezone)
        body["end"] = _format_datetime(start + _DEFAULT_DURATION, timezone)

    return body


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _combine(date_str: str, time_str: str) -> datetime:
    try:
        day = date.fromisoformat(date_str)
    except (TypeError, ValueError) as exc:
        raise EventMappingError(f"Not a calendar date (YYYY-MM-DD): {date_str!r}") from exc
    try:
        clock = time.fromisoformat(time_str)
    except (TypeError, ValueError) as exc:
        raise EventMappingError(f"Not a clock time (HH:MM): {time_str!r}") from exc
    return datetime.combine(day, clock)


def _format_datetime(dt: datetime, timezone: str) -> dict:
    """Format a naive local datetime for the Google Calendar API."""
    return {
        "dateTime": dt.isoformat(),
        "timeZone": timezone,
    }
