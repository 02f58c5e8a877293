"""Shared fixtures for Google Calendar unit tests."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from unittest.mock import MagicMock, create_autospec

import pytest
from google.oauth2.credentials import Credentials

from voice_cal.calendar.client import GoogleCalendarClient


@pytest.fixture()
def valid_credentials() -> MagicMock:
    """Credentials that report as valid."""
    creds = create_autospec(Credentials, instance=True)
    creds.valid = True
    creds.expired = False
    creds.refresh_token = "fake-refresh-token"
    creds.to_json.return_value = '{"token": "fake"}'
    return creds


@pytest.fixture()
def expired_credentials() -> MagicMock:
    """Credentials that are expired but carry a refresh token."""
    creds = create_autospec(Credentials, instance=True)
    creds.valid = False
    creds.expired = True
    creds.refresh_token = "fake-refresh-token"
    creds.to_json.return_value = '{"token": "refreshed"}'
    return creds


@pytest.fixture()
def secrets_file(tmp_path: Path) -> Path:
    """A minimal OAuth client secrets file."""
    path = tmp_path / "credentials.json"
    path.write_text('{"installed": {"client_id": "fake", "client_secret": "fake"}}')
    return path


@pytest.fixture()
def mock_service() -> MagicMock:
    """A stand-in for ``build("calendar", "v3", ...)``."""
    return MagicMock()


@pytest.fixture()
def calendar_client(mock_service: MagicMock, valid_credentials: MagicMock) -> GoogleCalendarClient:
    """A client over *mock_service* with a fixed clock of 2026-02-18."""
    return GoogleCalendarClient(
        credentials=valid_credentials,
        timezone="America/Vancouver",
        window_days=30,
        today=lambda: date(2026, 2, 18),
        service=mock_service,
    )
