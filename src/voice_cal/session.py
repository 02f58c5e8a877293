"""Session controller for the voice calendar assistant.

Owns the live transcript, the listening/submitting state, the AI reply
text and the cached reminder and event lists, and orchestrates the
external collaborators:

- speech capture (:class:`~voice_cal.speech.SpeechCapture`),
- the reminder store and, optionally, the Google Calendar event store,
- the AI responder.

State machine::

    IDLE --start--> LISTENING --stop--> IDLE
    IDLE/LISTENING --submit--> SUBMITTING --success/failure--> IDLE

The cached lists are only ever replaced by a full reload from the store;
they are never patched locally.  :func:`create_session` wires a controller
from :class:`~voice_cal.config.Settings`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date
from enum import Enum
from typing import Protocol

from voice_cal.assistant import GeminiResponder
from voice_cal.calendar.auth import get_calendar_credentials
from voice_cal.calendar.client import GoogleCalendarClient
from voice_cal.config import Settings
from voice_cal.exceptions import (
    AIResponderError,
    CaptureError,
    ExtractionError,
    StoreError,
)
from voice_cal.extractor import extract
from voice_cal.models.draft import DraftEntry
from voice_cal.models.items import Event, Reminder
from voice_cal.reminders import ReminderStoreClient
from voice_cal.speech import MicrophoneCapture, SpeechCapture, TranscriptFeed

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Sorry, there was an error processing your request."

TOGGLE_KEYS = frozenset({"Space", " "})


class SessionState(str, Enum):
    """Where the session is in the listen/submit cycle."""

    IDLE = "idle"
    LISTENING = "listening"
    SUBMITTING = "submitting"


# ---------------------------------------------------------------------------
# Collaborator contracts
# ---------------------------------------------------------------------------


class ReminderStore(Protocol):
    def list(self) -> list[Reminder]: ...

    def create(self, draft: DraftEntry) -> Reminder: ...

    def update(self, reminder_id: str, partial: dict) -> None: ...

    def delete(self, reminder_id: str) -> None: ...


class EventStore(Protocol):
    def list(self) -> list[Event]: ...

    def create(self, draft: DraftEntry) -> Event: ...

    def update(self, event_id: str, partial: dict) -> None: ...

    def delete(self, event_id: str) -> None: ...


class AIResponder(Protocol):
    def query(self, text: str) -> str: ...


Extractor = Callable[[str, Callable[[], date]], DraftEntry]


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------


class SessionController:
    """Holds session state and runs the capture -> submit -> refresh cycle.

    Use as a context manager: entering subscribes to the capture feed and
    loads both lists, leaving stops capture.

    Args:
        capture: Speech capture collaborator.
        reminders: Reminder store.
        responder: AI responder.
        events: Optional Google Calendar event store.  When given, every
            submission is mirrored there and the events list is maintained.
        extractor: Transcript-to-draft function.
        today: Clock returning the current local date.
    """

    def __init__(
        self,
        capture: SpeechCapture,
        reminders: ReminderStore,
        responder: AIResponder,
        events: EventStore | None = None,
        extractor: Extractor = extract,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._capture = capture
        self._reminder_store = reminders
        self._event_store = events
        self._responder = responder
        self._extractor = extractor
        self._today = today

        self._feed = TranscriptFeed()
        self._state = SessionState.IDLE
        self._transcript = ""
        self._ai_response = ""
        self._reminders: list[Reminder] = []
        self._events: list[Event] = []
        self._selected_date = today()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Subscribe to the capture feed and load both lists."""
        self._capture.subscribe(self._feed.publish)
        self.reload_reminders()
        self.reload_events()
        logger.info("Session opened")

    def close(self) -> None:
        """Stop capture and release the microphone."""
        self.stop()
        logger.info("Session closed")

    def __enter__(self) -> SessionController:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_listening(self) -> bool:
        return self._state is SessionState.LISTENING

    @property
    def is_submitting(self) -> bool:
        return self._state is SessionState.SUBMITTING

    @property
    def transcript(self) -> str:
        """The current transcript, including the latest recognised phrase."""
        pending = self._feed.take()
        if pending is not None and self._state is SessionState.LISTENING:
            self._transcript = pending
        return self._transcript

    @property
    def ai_response(self) -> str:
        return self._ai_response

    @property
    def reminders(self) -> list[Reminder]:
        return list(self._reminders)

    @property
    def events(self) -> list[Event]:
        return list(self._events)

    @property
    def has_event_store(self) -> bool:
        return self._event_store is not None

    @property
    def selected_date(self) -> date:
        return self._selected_date

    # ------------------------------------------------------------------
    # Transcript and calendar selection
    # ------------------------------------------------------------------

    def set_transcript(self, text: str) -> None:
        """Overwrite the transcript by hand (the free-text field)."""
        self._feed.clear()
        self._transcript = text

    def select_date(self, day: date) -> None:
        """Select a day in the calendar view.  Not wired to any data."""
        self._selected_date = day

    # ------------------------------------------------------------------
    # Capture control
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Start speech capture.

        Returns:
            ``True`` if the session is now listening.
        """
        if self._state is SessionState.LISTENING:
            return True
        if self._state is SessionState.SUBMITTING:
            logger.warning("Cannot start listening while a submission is in flight")
            return False
        try:
            self._capture.start()
        except CaptureError as exc:
            logger.error("Speech capture unavailable: %s", exc)
            return False
        self._feed.clear()
        self._state = SessionState.LISTENING
        logger.info("Listening")
        return True

    def stop(self) -> None:
        """Stop speech capture, keeping the transcript.

        Always releases the capture handle, even when not listening.
        """
        if self._state is SessionState.LISTENING:
            # Absorb a phrase recognised just before the stop.
            _ = self.transcript
            self._state = SessionState.IDLE
            logger.info("Stopped listening")
        self._capture.stop()
        self._feed.clear()

    def toggle(self) -> bool:
        """Start capture when idle, stop it when listening.

        Returns:
            ``True`` if the session is listening afterwards.
        """
        if self._state is SessionState.LISTENING:
            self.stop()
            return False
        return self.start()

    def handle_key(self, key: str, input_focused: bool) -> bool:
        """Global key binding: the space key toggles capture.

        The key is ignored while any text input has focus, so a space can
        still be typed into a reminder.

        Args:
            key: Key name (``"Space"`` or ``" "``).
            input_focused: Whether a text input currently has focus.

        Returns:
            ``True`` if the key was consumed as a toggle.
        """
        if key not in TOGGLE_KEYS or input_focused:
            return False
        if self._state is SessionState.SUBMITTING:
            return False
        self.toggle()
        return True

    # ------------------------------------------------------------------
    # Submit
    # ------------------------------------------------------------------

    def submit(self) -> bool:
        """Turn the transcript into a reminder and ask the AI for a reply.

        Steps, in order: extract a draft, create the reminder, mirror it to
        the event store (if configured), query the AI responder with the
        raw transcript, reload both lists.  A submit while another is in
        flight is ignored.  Submitting while listening stops capture first.

        On success the transcript is cleared and the AI reply and both
        lists are replaced.  On any failure the AI reply becomes
        :data:`FAILURE_MESSAGE`, the transcript is kept for retry and the
        lists are left as they were.  Errors outside the known taxonomy are
        logged with a traceback but never escape.

        Returns:
            ``True`` on success, ``False`` on failure or when ignored.
        """
        if self._state is SessionState.SUBMITTING:
            logger.warning("Submit ignored: a submission is already in flight")
            return False
        if self._state is SessionState.LISTENING:
            self.stop()

        transcript = self.transcript
        self._state = SessionState.SUBMITTING
        logger.info("Submitting transcript: %r", transcript)

        try:
            draft = self._extractor(transcript, self._today)
            self._reminder_store.create(draft)
            if self._event_store is not None:
                self._event_store.create(draft)
            reply = self._responder.query(transcript)
            reminders = self._reminder_store.list()
            events = self._event_store.list() if self._event_store is not None else []
        except (ExtractionError, StoreError, AIResponderError) as exc:
            logger.error("Error processing request: %s", exc)
            self._ai_response = FAILURE_MESSAGE
            return False
        except Exception:
            logger.exception("Unexpected error processing request")
            self._ai_response = FAILURE_MESSAGE
            return False
        finally:
            self._state = SessionState.IDLE

        self._reminders = reminders
        self._events = events
        self._ai_response = reply
        self._transcript = ""
        logger.info(
            "Submit complete: %d reminder(s), %d event(s)",
            len(reminders),
            len(events),
        )
        return True

    # ------------------------------------------------------------------
    # Reload
    # ------------------------------------------------------------------

    def reload_reminders(self) -> bool:
        """Replace the cached reminders with the store's current list.

        On failure the previous snapshot is kept.
        """
        try:
            self._reminders = self._reminder_store.list()
        except StoreError as exc:
            logger.error("Failed to load reminders: %s", exc)
            return False
        except Exception:
            logger.exception("Unexpected error loading reminders")
            return False
        return True

    def reload_events(self) -> bool:
        """Replace the cached events with the event store's current list.

        On failure, or with no event store configured, the previous
        snapshot is kept.
        """
        if self._event_store is None:
            return False
        try:
            self._events = self._event_store.list()
        except StoreError as exc:
            logger.error("Failed to load events: %s", exc)
            return False
        except Exception:
            logger.exception("Unexpected error loading events")
            return False
        return True

    # ------------------------------------------------------------------
    # Edit / delete
    # ------------------------------------------------------------------

    def update_reminder(self, reminder_id: str, partial: dict) -> bool:
        """Update a reminder, then reload the reminders list."""
        return self._write_then_reload(
            f"update reminder {reminder_id}",
            lambda: self._reminder_store.update(reminder_id, partial),
            self.reload_reminders,
        )

    def delete_reminder(self, reminder_id: str) -> bool:
        """Delete a reminder, then reload the reminders list."""
        return self._write_then_reload(
            f"delete reminder {reminder_id}",
            lambda: self._reminder_store.delete(reminder_id),
            self.reload_reminders,
        )

    def update_event(self, event_id: str, partial: dict) -> bool:
        """Update a calendar event, then reload the events list."""
        store = self._event_store
        if store is None:
            logger.warning("No event store configured; cannot update event %s", event_id)
            return False
        return self._write_then_reload(
            f"update event {event_id}",
            lambda: store.update(event_id, partial),
            self.reload_events,
        )

    def delete_event(self, event_id: str) -> bool:
        """Delete a calendar event, then reload the events list."""
        store = self._event_store
        if store is None:
            logger.warning("No event store configured; cannot delete event %s", event_id)
            return False
        return self._write_then_reload(
            f"delete event {event_id}",
            lambda: store.delete(event_id),
            self.reload_events,
        )

    @staticmethod
    def _write_then_reload(
        action: str,
        write: Callable[[], None],
        reload: Callable[[], bool],
    ) -> bool:
        """Run *write*; reload only if it succeeded.

        A failed write leaves the cached list untouched.
        """
        try:
            write()
        except StoreError as exc:
            logger.error("Failed to %s: %s", action, exc)
            return False
        except Exception:
            logger.exception("Unexpected error during %s", action)
            return False
        reload()
        return True


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def create_session(
    settings: Settings,
    capture: SpeechCapture | None = None,
) -> SessionController:
    """Build a :class:`SessionController` wired to the real services.

    Google Calendar is only contacted (and OAuth only run) when
    ``settings.google_calendar_enabled`` is set.

    Args:
        settings: Loaded application settings.
        capture: Optional speech capture; defaults to the microphone.

    Raises:
        CalendarAuthError: If Google Calendar is enabled but no OAuth
            credentials can be obtained.
    """
    reminders = ReminderStoreClient(
        base_url=settings.reminder_api_url,
        timeout=settings.request_timeout,
    )
    responder = GeminiResponder(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        timezone=settings.timezone,
    )

    events: GoogleCalendarClient | None = None
    if settings.google_calendar_enabled:
        creds = get_calendar_credentials(
            credentials_path=settings.google_credentials_path,
            token_path=settings.google_token_path,
        )
        events = GoogleCalendarClient(
            credentials=creds,
            timezone=settings.timezone,
            window_days=settings.event_window_days,
        )

    return SessionController(
        capture=capture or MicrophoneCapture(),
        reminders=reminders,
        responder=responder,
        events=events,
    )
