"""Speech capture for the voice session.

- :class:`SpeechCapture` -- the contract the session controller relies on:
  ``start()``, ``stop()`` and ``subscribe(callback)``, where the callback
  receives full-replacement transcript strings.
- :class:`TranscriptFeed` -- single-slot channel between the capture thread
  and the controller.  The latest published value wins; values that were
  never taken are discarded.
- :class:`MicrophoneCapture` -- ``SpeechRecognition`` implementation that
  listens on the default microphone in the background and transcribes each
  phrase with the Google Web Speech API.
"""

from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Callable
from typing import Any, Protocol

import speech_recognition as sr

from voice_cal.exceptions import CaptureError

logger = logging.getLogger(__name__)

TranscriptCallback = Callable[[str], None]


class SpeechCapture(Protocol):
    """A controllable source of transcript updates."""

    def subscribe(self, callback: TranscriptCallback) -> None: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...


class TranscriptFeed:
    """Latest-value channel from a capture thread to a single consumer."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: str | None = None

    def publish(self, text: str) -> None:
        """Replace any undelivered value with *text*."""
        with self._lock:
            self._pending = text

    def take(self) -> str | None:
        """Return the latest undelivered value and empty the slot."""
        with self._lock:
            value, self._pending = self._pending, None
        return value

    def clear(self) -> None:
        """Drop any undelivered value."""
        with self._lock:
            self._pending = None


class MicrophoneCapture:
    """Background microphone listener built on ``speech_recognition``.

    Each recognised phrase is delivered to the subscriber as a complete
    transcript, replacing whatever was delivered before.  The engine has
    no interim results, so delivery happens once per phrase.

    Every listener is tagged with the generation it was started in.
    :meth:`stop` does not wait for the listener thread, so a phrase still
    being transcribed can finish after a stop, or after the next
    :meth:`start`; such a phrase carries an old generation and is dropped.

    Args:
        recognizer: Optional :class:`speech_recognition.Recognizer`.
        microphone_factory: Callable returning an audio source; defaults to
            :class:`speech_recognition.Microphone`.  Opening the microphone
            needs PyAudio, so it is deferred until :meth:`start`.
        language: BCP-47 language tag passed to the recogniser.
        phrase_time_limit: Maximum seconds per phrase, or ``None``.
    """

    def __init__(
        self,
        recognizer: sr.Recognizer | None = None,
        microphone_factory: Callable[[], Any] | None = None,
        language: str = "en-US",
        phrase_time_limit: float | None = None,
    ) -> None:
        self._recognizer = recognizer or sr.Recognizer()
        self._microphone_factory = microphone_factory or sr.Microphone
        self._language = language
        self._phrase_time_limit = phrase_time_limit
        self._callback: TranscriptCallback | None = None
        self._stopper: Callable[..., None] | None = None
        self._generation = 0

    @property
    def active(self) -> bool:
        """Whether a background listener is currently running."""
        return self._stopper is not None

    def subscribe(self, callback: TranscriptCallback) -> None:
        """Set the single consumer of transcript updates."""
        self._callback = callback

    def start(self) -> None:
        """Open the microphone and start listening in the background.

        Calling this while already listening does nothing.

        Raises:
            CaptureError: If no microphone can be opened (including a
                missing PyAudio installation).
        """
        if self._stopper is not None:
            return
        try:
            source = self._microphone_factory()
            with source:
                self._recognizer.adjust_for_ambient_noise(source)
        except (OSError, AttributeError) as exc:
            # speech_recognition reports a missing PyAudio as AttributeError.
            logger.error("Cannot open microphone: %s", exc)
            raise CaptureError(f"Cannot open microphone: {exc}") from exc
        self._generation += 1
        self._stopper = self._recognizer.listen_in_background(
            source,
            functools.partial(self._on_audio, generation=self._generation),
            phrase_time_limit=self._phrase_time_limit,
        )
        logger.info("Microphone capture started")

    def stop(self) -> None:
        """Stop the background listener and release the microphone.

        Safe to call any number of times.
        """
        stopper, self._stopper = self._stopper, None
        if stopper is None:
            return
        self._generation += 1
        stopper(wait_for_stop=False)
        logger.info("Microphone capture stopped")

    def _on_audio(self, recognizer: sr.Recognizer, audio: sr.AudioData, generation: int) -> None:
        """Transcribe one phrase; runs on the listener thread."""
        try:
            text = recognizer.recognize_google(audio, language=self._language)
        except sr.UnknownValueError:
            logger.debug("Speech was unintelligible, ignoring phrase")
            return
        except sr.RequestError as exc:
            logger.error("Speech recognition service failed: %s", exc)
            return

        if generation != self._generation:
            logger.debug("Dropping phrase from a stopped listener: %r", text)
            return
        logger.debug("Recognised phrase: %r", text)
        if self._callback is not None:
            self._callback(text)
