"""Interactive console front end for a voice session.

Renders a :class:`~voice_cal.session.SessionController` as plain text and
maps typed commands onto its operations.  The console is line oriented, so
the "space key" is a line holding a single space: nothing else is being
typed, which is the only situation in which the toggle may fire.  Any other
line counts as typing into a text field.

Rendering lives in the ``format_*`` functions so it can be checked without
running the input loop.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from datetime import date, datetime
from typing import IO

from voice_cal.models.items import Event, ListItem, Reminder
from voice_cal.session import SessionController, SessionState

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_BANNER_WIDTH = 60
_SEPARATOR = "=" * _BANNER_WIDTH
_PROMPT = "voice-cal> "

_STATE_LABELS = {
    SessionState.IDLE: "Idle",
    SessionState.LISTENING: "Listening...",
    SessionState.SUBMITTING: "Processing...",
}

HELP_TEXT = """\
Commands:
  (space)                          start/stop listening (a line with one space)
  listen                           start/stop listening
  say <text>                       type the transcript instead of speaking it
  submit                           save the transcript as a reminder
  reminders | events               show a list
  edit reminder|event <id> <text>  change the text of an item
  delete reminder|event <id>       delete an item
  date <YYYY-MM-DD>                select a day in the calendar view
  status                           show transcript, state and AI reply
  help                             show this help
  quit                             leave the session"""


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def format_banner() -> str:
    """Return the application banner."""
    return "\n".join([_SEPARATOR, "  VOICE CALENDAR ASSISTANT", _SEPARATOR])


def format_status(session: SessionController) -> str:
    """Render the voice input panel, calendar selection and AI reply."""
    lines: list[str] = []
    lines.append("--- Voice Input ---")
    lines.append(f"  State: {_STATE_LABELS[session.state]}")
    transcript = session.transcript
    lines.append(f"  Transcript: {transcript!r}" if transcript else "  Transcript: (empty)")
    lines.append("")
    lines.append("--- Calendar ---")
    lines.append(f"  Selected: {session.selected_date.strftime('%A %Y-%m-%d')}")
    lines.append("")
    lines.append("--- AI Assistant ---")
    lines.append(f"  {session.ai_response}" if session.ai_response else "  (no reply yet)")
    return "\n".join(lines)


def format_items(title: str, items: Sequence[ListItem]) -> str:
    """Render a reminder or event list, one ``[id] label`` row per item."""
    lines = [f"--- {title} ---"]
    if not items:
        lines.append("  (none)")
        return "\n".join(lines)
    for item in items:
        when = _format_when(item)
        suffix = f"  ({when})" if when else ""
        lines.append(f"  [{item.id}] {item.label}{suffix}")
    return "\n".join(lines)


def _format_when(item: ListItem) -> str:
    """Return a short date/time hint for a list row, or ``""``."""
    if isinstance(item, Reminder):
        parts = [p for p in (item.date, item.time) if p]
        return " ".join(parts)
    if isinstance(item, Event) and item.start:
        try:
            return datetime.fromisoformat(item.start).strftime("%a %Y-%m-%d %H:%M")
        except ValueError:
            return item.start
    return ""


# ---------------------------------------------------------------------------
# Input loop
# ---------------------------------------------------------------------------


class Console:
    """Line-oriented driver for a :class:`SessionController`.

    Args:
        session: An opened session controller.
        input_stream: Where commands are read from (default stdin).
        output: Where rendered text is written (default stdout).
    """

    def __init__(
        self,
        session: SessionController,
        input_stream: IO[str] | None = None,
        output: IO[str] | None = None,
    ) -> None:
        self._session = session
        self._input = input_stream or sys.stdin
        self._output = output or sys.stdout
        self._commands: dict[str, Callable[[str], bool]] = {
            "listen": self._cmd_listen,
            "say": self._cmd_say,
            "submit": self._cmd_submit,
            "reminders": self._cmd_reminders,
            "events": self._cmd_events,
            "edit": self._cmd_edit,
            "delete": self._cmd_delete,
            "date": self._cmd_date,
            "status": self._cmd_status,
            "help": self._cmd_help,
            "quit": self._cmd_quit,
            "exit": self._cmd_quit,
        }

    def run(self) -> None:
        """Read and execute commands until ``quit`` or end of input."""
        self._write(format_banner())
        self._write(format_items("Reminders", self._session.reminders))
        if self._session.has_event_store:
            self._write(format_items("Events", self._session.events))
        self._write("Type 'help' for commands.")

        while True:
            self._output.write(_PROMPT)
            self._output.flush()
            line = self._input.readline()
            if not line:
                self._write("")
                break
            if not self.handle_line(line):
                break

    def handle_line(self, line: str) -> bool:
        """Execute one input line.

        Returns:
            ``False`` when the session should end, ``True`` otherwise.
        """
        line = line.rstrip("\r\n")

        if line == " ":
            self._session.handle_key("Space", input_focused=False)
            self._write(f"  State: {_STATE_LABELS[self._session.state]}")
            return True

        stripped = line.lstrip()
        if not stripped:
            return True

        command, _, argument = stripped.partition(" ")
        handler = self._commands.get(command.lower())
        if handler is None:
            self._write(f"Unknown command: {command!r}. Type 'help' for commands.")
            return True
        return handler(argument)

    # ------------------------------------------------------------------
    # Command handlers
    # ------------------------------------------------------------------

    def _cmd_listen(self, _argument: str) -> bool:
        if self._session.is_listening:
            self._session.toggle()
        elif not self._session.toggle():
            self._write("Could not start listening (no microphone?). Use 'say' instead.")
        self._write(f"  State: {_STATE_LABELS[self._session.state]}")
        return True

    def _cmd_say(self, argument: str) -> bool:
        self._session.set_transcript(argument)
        return True

    def _cmd_submit(self, _argument: str) -> bool:
        self._write("Processing...")
        self._session.submit()
        self._write(format_status(self._session))
        self._write(format_items("Reminders", self._session.reminders))
        if self._session.has_event_store:
            self._write(format_items("Events", self._session.events))
        return True

    def _cmd_reminders(self, _argument: str) -> bool:
        self._session.reload_reminders()
        self._write(format_items("Reminders", self._session.reminders))
        return True

    def _cmd_events(self, _argument: str) -> bool:
        if not self._session.has_event_store:
            self._write("Google Calendar is not enabled.")
            return True
        self._session.reload_events()
        self._write(format_items("Events", self._session.events))
        return True

    def _cmd_edit(self, argument: str) -> bool:
        parts = argument.split(" ", 2)
        if len(parts) < 3 or parts[0] not in ("reminder", "event") or not parts[2].strip():
            self._write("Usage: edit reminder|event <id> <text>")
            return True
        kind, item_id, text = parts
        if kind == "reminder":
            ok = self._session.update_reminder(item_id, {"text": text})
            self._report(ok, "Reminder updated.", format_items("Reminders", self._session.reminders))
        else:
            ok = self._session.update_event(item_id, {"summary": text})
            self._report(ok, "Event updated.", format_items("Events", self._session.events))
        return True

    def _cmd_delete(self, argument: str) -> bool:
        parts = argument.split()
        if len(parts) != 2 or parts[0] not in ("reminder", "event"):
            self._write("Usage: delete reminder|event <id>")
            return True
        kind, item_id = parts
        if kind == "reminder":
            ok = self._session.delete_reminder(item_id)
            self._report(ok, "Reminder deleted.", format_items("Reminders", self._session.reminders))
        else:
            ok = self._session.delete_event(item_id)
            self._report(ok, "Event deleted.", format_items("Events", self._session.events))
        return True

    def _cmd_date(self, argument: str) -> bool:
        try:
            day = date.fromisoformat(argument.strip())
        except ValueError:
            self._write("Usage: date <YYYY-MM-DD>")
            return True
        self._session.select_date(day)
        self._write(f"  Selected: {day.strftime('%A %Y-%m-%d')}")
        return True

    def _cmd_status(self, _argument: str) -> bool:
        self._write(format_status(self._session))
        return True

    def _cmd_help(self, _argument: str) -> bool:
        self._write(HELP_TEXT)
        return True

    def _cmd_quit(self, _argument: str) -> bool:
        return False

    # ------------------------------------------------------------------
    # Output helpers
    # ------------------------------------------------------------------

    def _report(self, ok: bool, success: str, listing: str) -> None:
        if ok:
            self._write(success)
            self._write(listing)
        else:
            self._write("That change could not be saved; see the log for details.")

    def _write(self, text: str) -> None:
        self._output.write(text + "\n")
