"""Parse pasted attendance notices into a session date and attendee names."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

from futsal_club.models import PlayerProfile


logger = logging.getLogger(__name__)

_DATE_PATTERN = re.compile(r"(\d{1,2})[./](\d{1,2})")
_HEADCOUNT_PATTERN = re.compile(r"\d+명\s*$")
_BALL_PATTERN = re.compile(r"[\u26bd\ufe0f]+")
# Keep ASCII, Hangul syllables and compatibility jamo.
_DISALLOWED_PATTERN = re.compile(r"[^\x00-\x7f\uac00-\ud7a3\u3130-\u318f\s]")
_BRACKET_PATTERN = re.compile(r"[()\[\]]")
_DIGITS_PATTERN = re.compile(r"^\d+$")


@dataclass(frozen=True)
class ParsedSession:
    date: str
    names: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RosterMatch:
    matched: List[PlayerProfile]
    unknown: List[str]

    @property
    def count(self) -> int:
        return len(self.matched) + len(self.unknown)


def _is_header(line: str) -> bool:
    return "(" in line or "⚽" in line


def _clean_line(line: str) -> str:
    text = _HEADCOUNT_PATTERN.sub("", line)
    text = _BALL_PATTERN.sub("", text)
    text = _DISALLOWED_PATTERN.sub("", text)
    text = _BRACKET_PATTERN.sub(" ", text)
    return text.strip()


def parse_session_text(text: str, *, year: Optional[int] = None) -> ParsedSession:
    """Extract ``YYYY-MM-DD`` and the list of names from a notice such as::

        12.17(수)⚽️⚽️
        홍길동 김철수
        이영희 18명
    """

    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return ParsedSession(date="", names=[])

    session_date = ""
    names: List[str] = []
    resolved_year = year if year is not None else date.today().year

    for line in lines:
        if not session_date:
            match = _DATE_PATTERN.search(line)
            if match:
                month = match.group(1).zfill(2)
                day = match.group(2).zfill(2)
                session_date = f"{resolved_year}-{month}-{day}"
                if _is_header(line):
                    continue

        for token in _clean_line(line).split():
            if _DATE_PATTERN.search(token):
                continue
            if _DIGITS_PATTERN.match(token):
                continue
            names.append(token)

    logger.debug("Parsed attendance notice: date=%s names=%d", session_date or "-", len(names))
    return ParsedSession(date=session_date, names=names)


def match_attendees(names: Sequence[str], players: Sequence[PlayerProfile]) -> RosterMatch:
    """Resolve parsed names against known profiles by exact name.

    A name listed twice in a notice yields one attendee, first occurrence first.
    """

    by_name: dict[str, PlayerProfile] = {}
    for player in players:
        by_name.setdefault(player.name, player)

    matched: dict[object, PlayerProfile] = {}
    unknown: dict[str, None] = {}
    for name in names:
        found = by_name.get(name)
        if found is not None:
            matched.setdefault(found.player_id, found)
        else:
            unknown.setdefault(name)
    if unknown:
        logger.info("Attendance names without a profile: %s", ", ".join(unknown))
    return RosterMatch(matched=list(matched.values()), unknown=list(unknown))

