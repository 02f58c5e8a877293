"""OAuth 2.0 credentials for the Google Calendar event store.

Uses the Desktop application flow from ``google-auth-oauthlib``.  A cached
user token is reused while valid, refreshed when expired, and replaced by a
fresh browser consent otherwise.

Usage::

    from voice_cal.calendar.auth import get_calendar_credentials

    creds = get_calendar_credentials(
        credentials_path=settings.google_credentials_path,
        token_path=settings.google_token_path,
    )
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from voice_cal.calendar.exceptions import CalendarAuthError

logger = logging.getLogger(__name__)

SCOPES: list[str] = ["https://www.googleapis.com/auth/calendar.events"]
"""Event read/write access is all the event store needs."""


def get_calendar_credentials(
    credentials_path: Path | str,
    token_path: Path | str,
) -> Credentials:
    """Return valid Google Calendar credentials, prompting only when needed.

    Order of attempts: cached token, refresh of an expired cached token,
    browser consent.  Whatever succeeds after the first step is written
    back to *token_path*.

    Args:
        credentials_path: OAuth client secrets file from Google Cloud Console.
        token_path: Cached user token file.  Created/updated automatically.

    Returns:
        Credentials carrying the ``calendar.events`` scope.

    Raises:
        CalendarAuthError: If a browser consent is needed but
            *credentials_path* does not exist.
    """
    credentials_path = Path(credentials_path)
    token_path = Path(token_path)

    creds = _load_cached_token(token_path)
    if creds is not None and creds.valid:
        logger.info("Using cached Google token from %s", token_path)
        return creds

    if creds is not None and creds.expired and creds.refresh_token:
        refreshed = _refresh_token(creds)
        if refreshed is not None:
            _save_token(refreshed, token_path)
            return refreshed
        logger.warning("Token refresh failed, asking for browser consent")

    creds = _run_browser_flow(credentials_path)
    _save_token(creds, token_path)
    return creds


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_cached_token(token_path: Path) -> Credentials | None:
    """Load a cached token, or ``None`` if absent or unreadable."""
    if not token_path.exists():
        logger.info("No cached Google token at %s", token_path)
        return None

    try:
        return Credentials.from_authorized_user_file(str(token_path), SCOPES)
    except (json.JSONDecodeError, ValueError, KeyError) as exc:
        logger.warning("Ignoring unreadable token file %s: %s", token_path, exc)
        return None


def _refresh_token(creds: Credentials) -> Credentials | None:
    """Refresh expired credentials in place; ``None`` if Google refuses."""
    try:
        creds.refresh(Request())
    except (RefreshError, OSError) as exc:
        logger.warning("Google token refresh rejected: %s", exc)
        return None
    logger.info("Google token refreshed")
    return creds


def _run_browser_flow(credentials_path: Path) -> Credentials:
    """Run the local-server consent flow.

    Raises:
        CalendarAuthError: If the client secrets file is missing.
    """
    if not credentials_path.exists():
        msg = f"OAuth client secrets file not found: {credentials_path}"
        logger.error(msg)
        raise CalendarAuthError(msg)

    logger.info("Opening browser for Google Calendar consent")
    flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), scopes=SCOPES)
    return flow.run_local_server(port=0)


def _save_token(creds: Credentials, token_path: Path) -> None:
    """Write *creds* to *token_path*, creating parent directories."""
    token_path.parent.mkdir(parents=True, exist_ok=True)
    token_path.write_text(creds.to_json())
    logger.info("Google token saved to %s", token_path)
