"""Unit tests for GeminiResponder.

All tests use mocks -- no real Gemini API calls are made.
"""

from __future__ import annotations

import logging
from datetime import date
from unittest.mock import MagicMock, patch

import httpx
import pytest
from google.genai import errors as genai_errors

from voice_cal.assistant import GeminiResponder
from voice_cal.exceptions import AIResponderError

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _mock_responder(response_text: str | None = "Got it!") -> GeminiResponder:
    """Create a ``GeminiResponder`` with a mocked ``genai.Client``."""
    with patch("voice_cal.assistant.genai.Client"):
        responder = GeminiResponder(
            api_key="fake-key",
            today=lambda: date(2026, 2, 18),
        )

    mock_response = MagicMock()
    mock_response.text = response_text
    responder._client.models.generate_content = MagicMock(return_value=mock_response)
    return responder


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


class TestQuery:
    def test_returns_reply_text(self) -> None:
        responder = _mock_responder("I'll remind you to call mom.")

        assert responder.query("remind me to call mom") == "I'll remind you to call mom."

    def test_reply_is_stripped(self) -> None:
        responder = _mock_responder("  Sure thing.\n")

        assert responder.query("x") == "Sure thing."

    def test_none_text_becomes_empty(self) -> None:
        responder = _mock_responder(None)

        assert responder.query("x") == ""

    def test_empty_reply_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        responder = _mock_responder("")

        with caplog.at_level(logging.WARNING, logger="voice_cal.assistant"):
            responder.query("x")

        assert "empty reply" in caplog.text

    def test_raw_transcript_in_user_prompt(self) -> None:
        responder = _mock_responder()

        responder.query("dentist on 2026-03-02 at 09:15")

        kwargs = responder._client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.0-flash"
        assert "dentist on 2026-03-02 at 09:15" in kwargs["contents"]

    def test_system_prompt_has_date_and_timezone(self) -> None:
        responder = _mock_responder()

        responder.query("x")

        config = responder._client.models.generate_content.call_args.kwargs["config"]
        assert "2026-02-18" in config.system_instruction
        assert "America/Vancouver" in config.system_instruction

    def test_client_built_with_api_key(self) -> None:
        with patch("voice_cal.assistant.genai.Client") as mock_client_cls:
            GeminiResponder(api_key="secret", model="gemini-2.5-pro")

        mock_client_cls.assert_called_once_with(api_key="secret")


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestQueryFailures:
    def test_api_error_wrapped(self) -> None:
        responder = _mock_responder()
        responder._client.models.generate_content.side_effect = genai_errors.APIError(
            code=503, response_json={"error": "Service unavailable"}
        )

        with pytest.raises(AIResponderError, match="Gemini API call failed"):
            responder.query("x")

    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError("[Errno 111] Connection refused"),
            httpx.ReadTimeout("The read operation timed out"),
            ConnectionError("down"),
        ],
    )
    def test_network_error_wrapped(self, error: Exception) -> None:
        responder = _mock_responder()
        responder._client.models.generate_content.side_effect = error

        with pytest.raises(AIResponderError, match="unreachable") as exc_info:
            responder.query("x")

        assert exc_info.value.__cause__ is error

    def test_only_one_attempt(self) -> None:
        responder = _mock_responder()
        responder._client.models.generate_content.side_effect = TimeoutError("slow")

        with pytest.raises(AIResponderError):
            responder.query("x")

        assert responder._client.models.generate_content.call_count == 1
