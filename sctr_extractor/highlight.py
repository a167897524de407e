from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Segment:
    text: str
    is_match: bool = False

    def to_dict(self) -> dict[str, object]:
        return {"text": self.text, "match": self.is_match}


def _pattern(term: str) -> re.Pattern[str]:
    return re.compile(f"({re.escape(term)})", re.IGNORECASE)


def highlight(text: str, term: str | None) -> list[Segment]:
    """Split ``text`` into plain and matching segments for ``term``.

    Matching is case-insensitive, each match keeps the casing found in
    ``text`` and joining every segment gives back ``text`` unchanged. A blank
    term returns the whole text as one plain segment.
    """
    if not term or not term.strip():
        return [Segment(text)]

    # With a capturing group, re.split puts matches at the odd indexes.
    parts = _pattern(term).split(text)
    segments = [
        Segment(part, is_match=index % 2 == 1)
        for index, part in enumerate(parts)
        if part
    ]
    return segments or [Segment(text)]


def match_count(text: str, term: str | None) -> int:
    if not term or not term.strip():
        return 0
    return sum(1 for _ in _pattern(term).finditer(text))
