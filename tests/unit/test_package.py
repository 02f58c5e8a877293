"""Tests for voice-cal package structure and imports."""

from __future__ import annotations

import re
import subprocess
import sys


def test_package_has_version() -> None:
    import voice_cal

    assert voice_cal.__version__ == "0.1.0"
    assert re.match(r"^\d+\.\d+\.\d+$", voice_cal.__version__)


def test_public_exports() -> None:
    import voice_cal

    for name in voice_cal.__all__:
        assert hasattr(voice_cal, name), name


def test_store_errors_share_a_base() -> None:
    from voice_cal import ReminderStoreError, StoreError
    from voice_cal.calendar import exceptions as calendar_exceptions

    assert issubclass(ReminderStoreError, StoreError)
    assert issubclass(calendar_exceptions.CalendarAPIError, StoreError)


def test_main_module_extract_runs() -> None:
    """``python -m voice_cal extract`` must run and exit cleanly."""
    result = subprocess.run(
        [sys.executable, "-m", "voice_cal", "extract", "buy milk"],
        capture_output=True,
        text=True,
        timeout=30,
    )
    assert result.returncode == 0
    assert "Traceback" not in result.stderr
    assert '"text": "buy milk"' in result.stdout
