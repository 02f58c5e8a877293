"""Draft entry produced by the transcript extractor.

A plain stdlib dataclass: it is built in-process from a transcript and
handed straight to a store-create call, so it needs no validation layer.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class DraftEntry:
    """Structured result of parsing one transcript.

    Attributes:
        date: Date string.  Either the literal token that followed ``on``
            in the transcript (not validated) or today's ISO date.
        time: Clock time string.  Either the literal token that followed
            ``at`` or ``"12:00"``.
        text: The verbatim, untrimmed transcript.
    """

    date: str
    time: str
    text: str

    def to_payload(self) -> dict[str, str]:
        """Return the JSON body used for store-create calls."""
        return asdict(self)
