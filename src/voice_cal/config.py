"""Configuration loading for voice-cal.

Reads settings from environment variables (with .env support via python-dotenv)
and validates that all required values are present and well formed.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    Attributes:
        gemini_api_key: API key for Google Gemini (AI responder).
        reminder_api_url: Base URL of the reminder REST store.
        gemini_model: Gemini model identifier.
        google_calendar_enabled: Whether submissions are mirrored to
            Google Calendar and the events list is shown.
        google_credentials_path: OAuth client secrets file.
        google_token_path: Cached OAuth user token file.
        event_window_days: How many days ahead the events list covers.
        request_timeout: Timeout in seconds for reminder store requests.
        timezone: IANA timezone string (default ``"America/Vancouver"``).
        log_level: Logging level (default ``"INFO"``).
    """

    gemini_api_key: str
    reminder_api_url: str
    gemini_model: str = "gemini-2.0-flash"
    google_calendar_enabled: bool = False
    google_credentials_path: Path = Path("credentials.json")
    google_token_path: Path = Path("token.json")
    event_window_days: int = 30
    request_timeout: float = 10.0
    timezone: str = "America/Vancouver"
    log_level: str = "INFO"

    def __repr__(self) -> str:
        return (
            f"Settings(gemini_api_key='***', "
            f"reminder_api_url={self.reminder_api_url!r}, "
            f"gemini_model={self.gemini_model!r}, "
            f"google_calendar_enabled={self.google_calendar_enabled!r}, "
            f"event_window_days={self.event_window_days!r}, "
            f"timezone={self.timezone!r}, "
            f"log_level={self.log_level!r})"
        )


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Calls :func:`dotenv.load_dotenv` so a ``.env`` file in the working
    directory is picked up automatically.

    Returns:
        A validated :class:`Settings` instance.

    Raises:
        ConfigError: If any required environment variable is missing,
            empty, or whitespace-only (the message names **all** of them),
            if an optional value cannot be parsed, or if ``TIMEZONE`` is
            not a time zone known to this host.
    """
    load_dotenv()

    required = {
        "GEMINI_API_KEY": "gemini_api_key",
        "REMINDER_API_URL": "reminder_api_url",
    }

    values: dict = {}
    missing: list[str] = []

    for env_var, field_name in required.items():
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            missing.append(env_var)
        else:
            values[field_name] = raw.strip()

    if missing:
        names = ", ".join(missing)
        raise ConfigError(f"Missing required environment variables: {names}")

    values["reminder_api_url"] = values["reminder_api_url"].rstrip("/")

    # Optional settings; unset or blank falls back to the dataclass default.
    optional_str = {
        "GEMINI_MODEL": "gemini_model",
        "TIMEZONE": "timezone",
        "LOG_LEVEL": "log_level",
    }
    for env_var, field_name in optional_str.items():
        raw = os.environ.get(env_var, "").strip()
        if raw:
            values[field_name] = raw

    for env_var, field_name in (
        ("GOOGLE_CREDENTIALS_PATH", "google_credentials_path"),
        ("GOOGLE_TOKEN_PATH", "google_token_path"),
    ):
        raw = os.environ.get(env_var, "").strip()
        if raw:
            values[field_name] = Path(raw)

    enabled = os.environ.get("GOOGLE_CALENDAR_ENABLED", "").strip()
    if enabled:
        values["google_calendar_enabled"] = _parse_bool("GOOGLE_CALENDAR_ENABLED", enabled)

    window = os.environ.get("EVENT_WINDOW_DAYS", "").strip()
    if window:
        values["event_window_days"] = _parse_positive("EVENT_WINDOW_DAYS", window, int)

    timeout = os.environ.get("REQUEST_TIMEOUT", "").strip()
    if timeout:
        values["request_timeout"] = _parse_positive("REQUEST_TIMEOUT", timeout, float)

    settings = Settings(**values)
    _check_timezone(settings.timezone)
    return settings


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean (true/false), got {raw!r}")


def _parse_positive(name: str, raw: str, kind: type) -> int | float:
    try:
        value = kind(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a positive number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be a positive number, got {raw!r}")
    return value


def _check_timezone(name: str) -> None:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"TIMEZONE must be an IANA time zone name, got {name!r}") from exc
