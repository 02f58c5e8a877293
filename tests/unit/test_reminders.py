"""Unit tests for ReminderStoreClient.

All tests use a mocked ``requests.Session`` -- no network calls are made.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from voice_cal.exceptions import ReminderStoreError, StoreError
from voice_cal.models.draft import DraftEntry
from voice_cal.models.items import Reminder
from voice_cal.reminders import ReminderStoreClient

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_BASE = "https://reminders.example.com/api"


def _response(status: int = 200, payload: object = None, content: bytes | None = None) -> MagicMock:
    """Build a fake ``requests.Response``."""
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 400
    if content is None:
        content = b"" if payload is None else b"{...}"
    response.content = content
    response.json.return_value = payload
    return response


def _client(*responses: MagicMock) -> tuple[ReminderStoreClient, MagicMock]:
    session = MagicMock()
    session.request.side_effect = list(responses)
    return ReminderStoreClient(_BASE + "/", timeout=3.0, session=session), session


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


class TestList:
    def test_returns_reminders_in_server_order(self) -> None:
        client, session = _client(
            _response(
                payload=[
                    {"id": 2, "text": "b", "date": "2026-01-02", "time": "10:00"},
                    {"id": "1", "text": "a"},
                ]
            )
        )

        reminders = client.list()

        assert [r.id for r in reminders] == ["2", "1"]
        assert reminders[0] == Reminder(id="2", text="b", date="2026-01-02", time="10:00")
        session.request.assert_called_once_with(
            "GET", f"{_BASE}/reminders", timeout=3.0
        )

    def test_empty_list(self) -> None:
        client, _ = _client(_response(payload=[]))

        assert client.list() == []

    def test_extra_fields_ignored(self) -> None:
        client, _ = _client(_response(payload=[{"id": "x", "text": "t", "owner": "me"}]))

        assert client.list()[0].label == "t"

    def test_non_list_payload_raises(self) -> None:
        client, _ = _client(_response(payload={"items": []}))

        with pytest.raises(ReminderStoreError, match="Expected a JSON list"):
            client.list()

    def test_record_without_id_raises(self) -> None:
        client, _ = _client(_response(payload=[{"text": "no id"}]))

        with pytest.raises(ReminderStoreError, match="Malformed reminder record"):
            client.list()

    def test_non_dict_record_raises(self) -> None:
        client, _ = _client(_response(payload=["just a string"]))

        with pytest.raises(ReminderStoreError, match="Malformed reminder record"):
            client.list()


# ---------------------------------------------------------------------------
# create / update / delete
# ---------------------------------------------------------------------------


class TestWrites:
    def test_create_posts_draft(self) -> None:
        client, session = _client(
            _response(201, payload={"id": 7, "text": "buy milk", "date": "2026-02-18", "time": "12:00"})
        )
        draft = DraftEntry(date="2026-02-18", time="12:00", text="buy milk")

        reminder = client.create(draft)

        assert reminder.id == "7"
        session.request.assert_called_once_with(
            "POST",
            f"{_BASE}/reminders",
            timeout=3.0,
            json={"date": "2026-02-18", "time": "12:00", "text": "buy milk"},
        )

    def test_update_patches_item(self) -> None:
        client, session = _client(_response(200, payload={"ok": True}))

        client.update("42", {"text": "new text"})

        session.request.assert_called_once_with(
            "PATCH", f"{_BASE}/reminders/42", timeout=3.0, json={"text": "new text"}
        )

    def test_delete_accepts_no_content(self) -> None:
        client, session = _client(_response(204))

        assert client.delete("42") is None

        session.request.assert_called_once_with(
            "DELETE", f"{_BASE}/reminders/42", timeout=3.0
        )

    def test_item_id_is_url_quoted(self) -> None:
        client, session = _client(_response(204))

        client.delete("a/b c")

        assert session.request.call_args.args[1] == f"{_BASE}/reminders/a%2Fb%20c"


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    @pytest.mark.parametrize("status", [400, 404, 500, 503])
    def test_http_error_status(self, status: int) -> None:
        client, _ = _client(_response(status, payload={"error": "x"}))

        with pytest.raises(ReminderStoreError) as exc_info:
            client.delete("1")

        assert exc_info.value.status_code == status
        assert f"HTTP {status}" in str(exc_info.value)

    def test_connection_error(self) -> None:
        session = MagicMock()
        session.request.side_effect = requests.ConnectionError("refused")
        client = ReminderStoreClient(_BASE, session=session)

        with pytest.raises(ReminderStoreError, match="unreachable") as exc_info:
            client.list()

        assert exc_info.value.status_code is None

    def test_timeout(self) -> None:
        session = MagicMock()
        session.request.side_effect = requests.Timeout("slow")
        client = ReminderStoreClient(_BASE, session=session)

        with pytest.raises(ReminderStoreError):
            client.create(DraftEntry(date="d", time="t", text="x"))

    def test_invalid_json(self) -> None:
        response = _response(200, content=b"<html>")
        response.json.side_effect = ValueError("Expecting value")
        client, _ = _client(response)

        with pytest.raises(ReminderStoreError, match="invalid JSON"):
            client.list()

    def test_errors_are_store_errors(self) -> None:
        client, _ = _client(_response(500))

        with pytest.raises(StoreError):
            client.update("1", {})

    def test_default_timeout(self) -> None:
        session = MagicMock()
        session.request.return_value = _response(payload=[])

        ReminderStoreClient(_BASE, session=session).list()

        assert session.request.call_args.kwargs["timeout"] == 10.0
