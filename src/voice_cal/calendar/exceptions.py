"""Custom exceptions and error translation for Google Calendar API operations.

Defines a hierarchy of calendar-specific exceptions and a
``@translate_errors`` decorator that converts ``googleapiclient`` and
network failures into that hierarchy.  Calls are never retried: the
session reloads from the store after every write, and a failed write is
reported to the user instead.

Exception hierarchy::

    StoreError                 (voice_cal.exceptions)
    +-- CalendarAPIError       (base for all Calendar API errors)
        +-- CalendarAuthError      (authentication / 401 failures)
        +-- CalendarRateLimitError (HTTP 429 rate-limit responses)
        +-- CalendarNotFoundError  (HTTP 404 on update/delete)
        +-- EventMappingError      (draft cannot be placed on a calendar)
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from google.auth.exceptions import RefreshError, TransportError
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error

from voice_cal.exceptions import StoreError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------


class CalendarAPIError(StoreError):
    """Base exception for Google Calendar API errors."""


class CalendarAuthError(CalendarAPIError):
    """Raised when Calendar API authentication fails.

    Covers HTTP 401 responses and a missing OAuth client secrets file.
    """

    def __init__(self, message: str = "Calendar authentication failed") -> None:
        super().__init__(message, status_code=401)


class CalendarRateLimitError(CalendarAPIError):
    """Raised when the Calendar API returns HTTP 429 (rate limit exceeded)."""

    def __init__(self, message: str = "Calendar API rate limit exceeded") -> None:
        super().__init__(message, status_code=429)


class CalendarNotFoundError(CalendarAPIError):
    """Raised when a Calendar resource is not found (HTTP 404).

    Typically occurs when updating or deleting an event that no longer exists.
    """

    def __init__(self, message: str = "Calendar resource not found") -> None:
        super().__init__(message, status_code=404)


class EventMappingError(CalendarAPIError):
    """Raised when a draft's date or time cannot be turned into a calendar slot.

    The extractor passes the words after ``on`` and ``at`` through
    verbatim, so ``"on tuesday"`` reaches the mapper as ``"tuesday"``.
    """


# ---------------------------------------------------------------------------
# Error translation decorator
# ---------------------------------------------------------------------------


def _classify_http_error(error: HttpError) -> CalendarAPIError:
    """Map an ``HttpError`` to the appropriate calendar exception.

    Args:
        error: The ``googleapiclient.errors.HttpError`` to classify.

    Returns:
        A :class:`CalendarAPIError` subclass matching the HTTP status code.
    """
    status = error.resp.status

    if status == 404:
        return CalendarNotFoundError(str(error))
    if status == 429:
        return CalendarRateLimitError(str(error))
    if status == 401:
        return CalendarAuthError(str(error))
    return CalendarAPIError(str(error), status_code=status)


def translate_errors(func: F) -> F:
    """Decorator that converts Calendar API failures into :class:`CalendarAPIError`.

    - ``HttpError`` is classified by status code (404, 429, 401, other).
    - A rejected token refresh (``RefreshError``) becomes
      :class:`CalendarAuthError`.
    - Transport failures become a plain :class:`CalendarAPIError` with no
      status code: ``httplib2`` errors (DNS, refused connections),
      ``google.auth`` transport errors, ``OSError`` and ``TimeoutError``.
    - :class:`CalendarAPIError` raised inside the call passes through.

    Every translated failure is logged at ERROR before it is raised.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except HttpError as exc:
            cal_error = _classify_http_error(exc)
            logger.error(
                "Calendar API error in %s (HTTP %s): %s",
                func.__name__,
                cal_error.status_code,
                exc,
            )
            raise cal_error from exc
        except RefreshError as exc:
            logger.error("Calendar credentials rejected in %s: %s", func.__name__, exc)
            raise CalendarAuthError(f"Token refresh failed: {exc}") from exc
        except (HttpLib2Error, TransportError, OSError, TimeoutError) as exc:
            logger.error("Network error in %s: %s", func.__name__, exc)
            raise CalendarAPIError(f"Network error: {exc}") from exc

    return wrapper  # type: ignore[return-value]
