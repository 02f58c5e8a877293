"""Custom exceptions for the voice-cal assistant.

Every failure the session controller can see while submitting a transcript
belongs to one of three families:

- :class:`ExtractionError` -- the transcript could not be turned into a draft.
- :class:`StoreError` -- a reminder or calendar CRUD call failed.
- :class:`AIResponderError` -- the AI responder could not produce a reply.

The controller collapses all three into a single user-facing message.
"""

from __future__ import annotations


class ExtractionError(Exception):
    """Raised when a transcript cannot be converted into a draft entry.

    The keyword extractor is total over all strings and never raises this;
    it exists so alternative extractors have a failure type the session
    controller already understands.
    """


class StoreError(Exception):
    """Base exception for reminder and calendar store failures.

    Attributes:
        status_code: HTTP status code from the store, or ``None`` if the
            error did not originate from an HTTP response.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ReminderStoreError(StoreError):
    """Raised when the reminder REST store rejects a request or is unreachable."""


class CaptureError(Exception):
    """Raised when speech capture cannot be started (no microphone, no PyAudio)."""


class AIResponderError(Exception):
    """Raised when the AI responder is unreachable or returns an API error.

    Unlike store errors there is no partial state to worry about: the
    responder is read-only.
    """
