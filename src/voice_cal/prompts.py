"""Prompt builders for the Gemini assistant reply.

The assistant does not extract anything: the keyword extractor already did
that.  Gemini only acknowledges the user's request conversationally, so
the system prompt is short and the user prompt is the raw transcript.
"""

from __future__ import annotations


def build_system_prompt(current_date: str, timezone: str) -> str:
    """Build the system instruction for the assistant reply.

    Args:
        current_date: ISO 8601 date for "today", so the reply can talk
            about "tomorrow" or "next week" sensibly.
        timezone: IANA timezone of the user.

    Returns:
        The complete system instruction string.
    """
    return f"""\
You are a friendly voice calendar assistant. The user has just dictated a
reminder or calendar request, and it has already been saved for them.

Today's date is {current_date} (timezone: {timezone}).

## How to Reply

- Reply in one or two short sentences, suitable for being read aloud.
- Confirm what the user asked to be reminded about and when, in plain words.
- If the request does not mention a date or a time, say that it was saved for
  today at noon and that they can edit it.
- Do not invent details (people, places, durations) the user did not say.
- Do not use Markdown, lists, or emoji.
"""


def build_user_prompt(transcript: str) -> str:
    """Wrap the raw transcript for the user turn.

    Args:
        transcript: The utterance exactly as captured or typed.

    Returns:
        The user prompt string.
    """
    return f"The user said:\n---\n{transcript}\n---"
