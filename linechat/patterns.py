from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
import logging
import re
from typing import Sequence

from linechat.models import MessageStart

logger = logging.getLogger(__name__)

# Example: 2017.09.02 Saturday / 2018/04/16(Mon) / 2018/04/16(月)
DATE_HEADER_RE = re.compile(
    r"^(?P<year>[0-9]{4})[./](?P<month>[0-9]{2})[./](?P<day>[0-9]{2})"
    r"(?: [A-Z][a-z]+|\(.+\))"
)

# Example: 12:00\tfoo bar\thello world
DELIMITED_START_RE = re.compile(
    r"^(?P<hour>[0-9]{1,2}):(?P<minute>[0-9]{2})[ \t]"
    r"(?P<author>[^\t\n]+)\t?(?P<text>.*)"
)

# Example: 12:00 foo bar hello world
KNOWN_AUTHOR_START_RE = re.compile(
    r"^(?P<hour>[0-9]{1,2}):(?P<minute>[0-9]{2})[ \t](?P<rest>\S.+)"
)

LINE_BREAK_RE = re.compile(r"\r?\n")


def split_lines(text: str) -> list[str]:
    return LINE_BREAK_RE.split(text)


def calendar_date(year: int, month: int, day: int) -> datetime | None:
    """Midnight of the given 1-based month and day.

    Overflowing fields roll over instead of failing: month 13 is January of
    the following year and day 0 is the last day of the previous month.
    Returns None when the result is outside the datetime range.
    """
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        return datetime(year, month, 1) + timedelta(days=day - 1)
    except (ValueError, OverflowError):
        return None


def at_time(base: datetime, hour: int, minute: int) -> datetime:
    midnight = base.replace(hour=0, minute=0, second=0, microsecond=0)
    try:
        return midnight + timedelta(hours=hour, minutes=minute)
    except OverflowError:
        return datetime.max.replace(second=0, microsecond=0)


def match_date_header(line: str) -> re.Match[str] | None:
    return DATE_HEADER_RE.match(line)


def parse_date_header(match: re.Match[str]) -> datetime | None:
    year = int(match.group("year"))
    month = int(match.group("month"))
    day = int(match.group("day"))
    parsed = calendar_date(year, month, day)
    if parsed is None:
        logger.warning("Date header out of range, keeping previous date: %s", match.group(0))
    return parsed


def deduce_author(remainder: str, users: Sequence[str]) -> str:
    author = ""
    for user in users:
        if len(user) > len(author) and remainder.startswith(user):
            author = user
    return author


@dataclass(frozen=True, slots=True)
class AuthorFromDelimiter:
    """Author is the field between the time and the next tab."""

    def match(self, line: str) -> MessageStart | None:
        found = DELIMITED_START_RE.match(line)
        if not found:
            return None
        return MessageStart(
            hour=int(found.group("hour")) % 24,
            minute=int(found.group("minute")),
            author=found.group("author"),
            text=found.group("text"),
        )


@dataclass(frozen=True, slots=True)
class WithKnownAuthors:
    """Author is the longest configured name prefixing the rest of the line.

    The text starts one separator character after the author. When no name
    matches, the author is empty and the first character is still dropped.
    """

    users: tuple[str, ...]

    def match(self, line: str) -> MessageStart | None:
        found = KNOWN_AUTHOR_START_RE.match(line)
        if not found:
            return None
        rest = found.group("rest")
        author = deduce_author(rest, self.users)
        return MessageStart(
            hour=int(found.group("hour")) % 24,
            minute=int(found.group("minute")),
            author=author,
            text=rest[len(author) + 1 :],
        )


MessageStartStrategy = AuthorFromDelimiter | WithKnownAuthors


def strategy_for(users: Sequence[str] | None) -> MessageStartStrategy:
    if users is None:
        return AuthorFromDelimiter()
    return WithKnownAuthors(tuple(users))
