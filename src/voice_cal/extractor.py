"""Keyword-anchored transcript extractor.

Turns a free-form utterance such as ``"call mom on 2024-06-01 at 15:30"``
into a :class:`~voice_cal.models.draft.DraftEntry`.  The token after the
first ``on`` is taken as the date and the token after the first ``at`` as
the time, both verbatim.  Nothing is parsed or validated here; a store
that cannot place the result on a calendar reports that itself.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from voice_cal.models.draft import DraftEntry

logger = logging.getLogger(__name__)

DATE_KEYWORD = "on"
TIME_KEYWORD = "at"
DEFAULT_TIME = "12:00"


def extract(
    text: str,
    today: Callable[[], date] = date.today,
) -> DraftEntry:
    """Extract a draft entry from a transcript.

    Total over all strings: empty, whitespace-only, or keyword-free input
    yields the defaults.  A keyword that is the last token has nothing to
    anchor and is treated as absent.

    Args:
        text: The raw transcript.  Stored unmodified in the draft.
        today: Clock returning the current local date, used for the
            default date.  Inject a fixed clock in tests.

    Returns:
        A :class:`DraftEntry` with all three fields populated.
    """
    tokens = text.split()

    found_date = _token_after(tokens, DATE_KEYWORD)
    found_time = _token_after(tokens, TIME_KEYWORD)

    draft = DraftEntry(
        date=found_date if found_date is not None else today().isoformat(),
        time=found_time if found_time is not None else DEFAULT_TIME,
        text=text,
    )
    logger.debug(
        "Extracted draft date=%r time=%r (keywords found: date=%s, time=%s)",
        draft.date,
        draft.time,
        found_date is not None,
        found_time is not None,
    )
    return draft


def _token_after(tokens: list[str], keyword: str) -> str | None:
    """Return the token following the first *keyword*, or ``None``."""
    try:
        index = tokens.index(keyword)
    except ValueError:
        return None
    if index + 1 >= len(tokens):
        return None
    return tokens[index + 1]
