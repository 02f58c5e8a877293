"""Pydantic models for the items shown in the reminder and event lists.

Reminders and events come from different stores with different shapes, so
they are two explicit record types tagged by ``kind``.  Both expose the
same minimal display capability (:class:`ListItem`): an opaque ``id`` and a
``label``.

- :class:`Reminder` -- parsed from the reminder store's JSON.
- :class:`Event` -- parsed from a Google Calendar event resource.
"""

from __future__ import annotations

from typing import Any, Literal, Protocol

from pydantic import BaseModel, ConfigDict, field_validator


class ListItem(Protocol):
    """Anything that can be rendered as a row with edit/delete actions."""

    @property
    def id(self) -> str: ...

    @property
    def label(self) -> str: ...


def _coerce_id(value: Any) -> str:
    if value is None:
        raise ValueError("id is required")
    return str(value)


class Reminder(BaseModel):
    """A reminder as stored by the reminder REST service.

    Attributes:
        kind: Always ``"reminder"``.
        id: Opaque store identifier (numeric ids are coerced to strings).
        text: Reminder text, usually the full transcript it was created from.
        date: Date string as stored, if any.
        time: Time string as stored, if any.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: Literal["reminder"] = "reminder"
    id: str
    text: str = ""
    date: str | None = None
    time: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> str:
        return _coerce_id(value)

    @property
    def label(self) -> str:
        return self.text


class Event(BaseModel):
    """A Google Calendar event mirrored into the session.

    Attributes:
        kind: Always ``"event"``.
        id: Google Calendar event id.
        summary: Event title.
        start: Start as an ISO 8601 ``dateTime`` or all-day ``date`` string.
        end: End in the same format as *start*.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: Literal["event"] = "event"
    id: str
    summary: str = ""
    start: str | None = None
    end: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> str:
        return _coerce_id(value)

    @property
    def label(self) -> str:
        return self.summary

    @classmethod
    def from_google(cls, resource: dict) -> Event:
        """Build an :class:`Event` from a Google Calendar event resource dict.

        Handles both timed (``dateTime``) and all-day (``date``) events.
        """
        start = resource.get("start", {})
        end = resource.get("end", {})
        return cls(
            id=resource.get("id"),
            summary=resource.get("summary", ""),
            start=start.get("dateTime") or start.get("date"),
            end=end.get("dateTime") or end.get("date"),
        )
