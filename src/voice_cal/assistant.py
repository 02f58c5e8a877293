"""Gemini-backed AI responder.

Wraps the Google ``google-genai`` SDK to produce a short conversational
reply to a transcript.  Single request/response, no streaming, no retry.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from voice_cal.exceptions import AIResponderError
from voice_cal.prompts import build_system_prompt, build_user_prompt

logger = logging.getLogger(__name__)


class GeminiResponder:
    """AI responder that asks Google Gemini for a reply to a transcript.

    Args:
        api_key: Google Gemini API key.
        model: Model identifier to use for generation.  Defaults to
            ``"gemini-2.0-flash"``.
        timezone: IANA timezone passed to the prompt.
        today: Clock returning the current local date.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        timezone: str = "America/Vancouver",
        today: Callable[[], date] = date.today,
    ) -> None:
        self._client = genai.Client(api_key=api_key)
        self._model = model
        self._timezone = timezone
        self._today = today

    def query(self, text: str) -> str:
        """Return Gemini's conversational reply to *text*.

        Args:
            text: The raw transcript (not the extracted draft).

        Returns:
            The reply text, stripped.  An empty string when Gemini returns
            no text candidate.

        Raises:
            AIResponderError: If the Gemini API is unreachable or returns
                an error.
        """
        config = genai_types.GenerateContentConfig(
            system_instruction=build_system_prompt(
                current_date=self._today().isoformat(),
                timezone=self._timezone,
            ),
        )
        user_prompt = build_user_prompt(text)
        logger.debug("User prompt sent to Gemini:\n%s", user_prompt)

        try:
            response = self._client.models.generate_content(
                model=self._model,
                contents=user_prompt,
                config=config,
            )
        except genai_errors.APIError as exc:
            logger.error("Gemini API error: %s", exc)
            raise AIResponderError(f"Gemini API call failed: {exc}") from exc
        except (httpx.HTTPError, OSError) as exc:
            # google-genai surfaces transport failures as httpx errors.
            logger.error("Network error calling Gemini: %s", exc)
            raise AIResponderError(f"Gemini unreachable: {exc}") from exc

        reply = (response.text or "").strip()
        if not reply:
            logger.warning("Gemini returned an empty reply")
        logger.info("AI reply received (%d chars)", len(reply))
        return reply
