"""REST client for the reminder store.

The reminder store is an external JSON service with one collection::

    GET    {base}/reminders          -> [Reminder, ...]
    POST   {base}/reminders          -> Reminder      (body: DraftEntry)
    PATCH  {base}/reminders/{id}     -> ignored       (body: partial)
    DELETE {base}/reminders/{id}     -> ignored

Every failure (connection, timeout, non-2xx status, unexpected payload) is
raised as :class:`~voice_cal.exceptions.ReminderStoreError`.  Nothing is
retried.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests
from pydantic import ValidationError

from voice_cal.exceptions import ReminderStoreError
from voice_cal.models.draft import DraftEntry
from voice_cal.models.items import Reminder

logger = logging.getLogger(__name__)


class ReminderStoreClient:
    """Client for the reminder REST store.

    Args:
        base_url: Store base URL, without the ``/reminders`` suffix.
        timeout: Per-request timeout in seconds.
        session: Optional pre-built :class:`requests.Session`.  Pass a mock
            here in tests.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self._collection_url = f"{base_url.rstrip('/')}/reminders"
        self._timeout = timeout
        self._session = session or requests.Session()

    def list(self) -> list[Reminder]:
        """Return all reminders in the order the store sends them."""
        payload = self._request("GET", self._collection_url)
        if not isinstance(payload, list):
            raise ReminderStoreError(
                f"Expected a JSON list of reminders, got {type(payload).__name__}"
            )
        reminders = [self._to_reminder(item) for item in payload]
        logger.info("Listed %d reminder(s)", len(reminders))
        return reminders

    def create(self, draft: DraftEntry) -> Reminder:
        """Create a reminder from *draft* and return the stored record."""
        payload = self._request("POST", self._collection_url, json=draft.to_payload())
        reminder = self._to_reminder(payload)
        logger.info("Created reminder '%s' (id=%s)", reminder.text, reminder.id)
        return reminder

    def update(self, reminder_id: str, partial: dict) -> None:
        """Apply *partial* to the reminder with *reminder_id*."""
        self._request("PATCH", self._item_url(reminder_id), json=partial)
        logger.info("Updated reminder (id=%s) fields=%s", reminder_id, sorted(partial))

    def delete(self, reminder_id: str) -> None:
        """Delete the reminder with *reminder_id*."""
        self._request("DELETE", self._item_url(reminder_id))
        logger.info("Deleted reminder (id=%s)", reminder_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _item_url(self, reminder_id: str) -> str:
        return f"{self._collection_url}/{quote(str(reminder_id), safe='')}"

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send one request and return the decoded JSON body (or ``None``).

        Raises:
            ReminderStoreError: On transport failure, non-2xx status, or a
                body that is not valid JSON.
        """
        logger.debug("%s %s %s", method, url, kwargs.get("json", ""))
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("Reminder store unreachable (%s %s): %s", method, url, exc)
            raise ReminderStoreError(f"Reminder store unreachable: {exc}") from exc

        if not response.ok:
            logger.error(
                "Reminder store returned HTTP %s for %s %s",
                response.status_code,
                method,
                url,
            )
            raise ReminderStoreError(
                f"Reminder store returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ReminderStoreError(
                f"Reminder store returned invalid JSON: {exc}",
                status_code=response.status_code,
            ) from exc

    @staticmethod
    def _to_reminder(item: Any) -> Reminder:
        if not isinstance(item, dict):
            raise ReminderStoreError(f"Malformed reminder record: {item!r}")
        try:
            return Reminder.model_validate(item)
        except ValidationError as exc:
            raise ReminderStoreError(f"Malformed reminder record: {exc}") from exc
