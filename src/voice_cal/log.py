"""Logging setup for voice-cal.

One pipe-separated line per record on *stderr*::

    2026-02-18T09:15:02 | INFO     | voice_cal.session | Listening

The console session owns *stdout*, so log lines never land between a
prompt and the user's input.  Chatty third-party loggers (the Google API
discovery cache, urllib3 connection pools, the speech recogniser's
HTTP calls) are held at WARNING unless the session itself runs at DEBUG.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

_NOISY_LOGGERS = (
    "googleapiclient.discovery_cache",
    "google_auth_oauthlib.flow",
    "urllib3.connectionpool",
    "httpx",
)

# Marks our own handler so a second call reconfigures it instead of
# stacking another one next to handlers installed by pytest or a host app.
_HANDLER_ATTR = "_voice_cal_log_handler"


def _parse_level(level: str) -> int:
    numeric = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Invalid log level: {level!r}")
    return numeric


def setup_logging(level: str = "INFO", stream: IO[str] | None = None) -> None:
    """Route voice-cal log records to *stream* at *level*.

    Safe to call again (``main`` does, once settings are loaded): the
    existing handler is re-levelled rather than duplicated.

    Args:
        level: Level name such as ``"DEBUG"`` or ``"warning"``.
        stream: Destination; defaults to ``sys.stderr`` at call time.

    Raises:
        ValueError: If *level* is not a logging level name.
    """
    numeric_level = _parse_level(level)

    root = logging.getLogger()
    root.setLevel(numeric_level)

    third_party_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    ours = next((h for h in root.handlers if getattr(h, _HANDLER_ATTR, False)), None)
    if ours is None:
        ours = logging.StreamHandler(stream or sys.stderr)
        ours.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
        setattr(ours, _HANDLER_ATTR, True)
        root.addHandler(ours)
    ours.setLevel(numeric_level)
