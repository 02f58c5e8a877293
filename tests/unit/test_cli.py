"""Unit tests for the CLI entrypoint.

Tests cover: the ``extract`` subcommand, ``run`` as the default command,
configuration and authentication failures, and --verbose / -v.
"""

from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock, patch

import pytest

from voice_cal.__main__ import main
from voice_cal.calendar.exceptions import CalendarAuthError


class TestExtractCommand:
    def test_prints_draft_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = main(["extract", "call mom on 2024-06-01 at 15:30"])

        assert exit_code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload == {
            "date": "2024-06-01",
            "time": "15:30",
            "text": "call mom on 2024-06-01 at 15:30",
        }

    def test_today_override(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["extract", "buy milk", "--today", "2026-02-18"])

        payload = json.loads(capsys.readouterr().out)
        assert payload["date"] == "2026-02-18"
        assert payload["time"] == "12:00"

    def test_bad_today_is_usage_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["extract", "x", "--today", "tomorrow"])

        assert exc_info.value.code == 2
        assert "usage" in capsys.readouterr().err.lower()

    def test_missing_text_is_usage_error(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["extract"])

        assert exc_info.value.code == 2

    def test_does_not_need_configuration(self, clean_env: None) -> None:
        assert main(["extract", "hello"]) == 0


class TestRunCommand:
    def test_runs_console_inside_session(self, monkeypatch_env: dict[str, str]) -> None:
        session = MagicMock()

        with (
            patch("voice_cal.__main__.create_session", return_value=session) as mock_create,
            patch("voice_cal.__main__.Console") as mock_console,
        ):
            exit_code = main(["run"])

        assert exit_code == 0
        mock_create.assert_called_once()
        mock_console.assert_called_once_with(session)
        mock_console.return_value.run.assert_called_once_with()
        session.__enter__.assert_called_once()
        session.__exit__.assert_called_once()

    def test_run_is_the_default(self, monkeypatch_env: dict[str, str]) -> None:
        with (
            patch("voice_cal.__main__.create_session") as mock_create,
            patch("voice_cal.__main__.Console"),
        ):
            assert main([]) == 0

        mock_create.assert_called_once()

    def test_bare_verbose_flag_means_run(self, monkeypatch_env: dict[str, str]) -> None:
        with (
            patch("voice_cal.__main__.create_session"),
            patch("voice_cal.__main__.Console"),
        ):
            assert main(["-v"]) == 0

        assert logging.getLogger().level == logging.DEBUG

    def test_log_level_from_settings(
        self, monkeypatch_env: dict[str, str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        with (
            patch("voice_cal.__main__.create_session"),
            patch("voice_cal.__main__.Console"),
        ):
            main(["run"])

        assert logging.getLogger().level == logging.WARNING

    def test_missing_config(self, clean_env: None, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("voice_cal.__main__.create_session") as mock_create:
            exit_code = main(["run"])

        assert exit_code == 1
        assert "Missing required environment variables" in capsys.readouterr().err
        mock_create.assert_not_called()

    def test_invalid_log_level(
        self,
        monkeypatch_env: dict[str, str],
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("LOG_LEVEL", "CHATTY")

        with patch("voice_cal.__main__.create_session") as mock_create:
            exit_code = main(["run"])

        assert exit_code == 1
        assert "Invalid log level" in capsys.readouterr().err
        mock_create.assert_not_called()

    def test_calendar_auth_failure(
        self, monkeypatch_env: dict[str, str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        with patch(
            "voice_cal.__main__.create_session",
            side_effect=CalendarAuthError("OAuth client secrets file not found"),
        ):
            exit_code = main(["run"])

        assert exit_code == 1
        assert "authentication failed" in capsys.readouterr().err
