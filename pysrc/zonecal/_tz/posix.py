"""POSIX TZ strings, as found in the footer of TZif files.

A TZ string describes a standard offset and, optionally, a yearly recurring
DST period. Since the resolution engine only works with explicit transition
tables, the yearly rules are expanded into transitions up to a horizon year.
"""

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Iterator, NamedTuple, Optional, Union

from .._math import days_in_month, days_in_year
from .._timeline import EpochSecs
from .table import TransitionTable

DEFAULT_DST = 3600
DEFAULT_RULE_TIME = 2 * 3600
MAX_OFFSET = 24 * 3600
# Yearly rules are expanded into explicit transitions up to (and including)
# this year. Beyond it, the last offset is assumed to continue.
RULES_UNTIL_YEAR = 2100
_UNIX_EPOCH_ORDINAL = date(1970, 1, 1).toordinal()

Weekday = int  # Different than usual! Sunday=0, Saturday=6


def epoch_for_date(d: date) -> EpochSecs:
    return (d.toordinal() - _UNIX_EPOCH_ORDINAL) * 86_400


def year_for_epoch(secs: EpochSecs) -> int:
    # Through the ordinal, since fromtimestamp() fails on extreme values
    # on some platforms.
    return date.fromordinal(secs // 86_400 + _UNIX_EPOCH_ORDINAL).year


class MonthWeekDay(NamedTuple):
    """``Mm.w.d``: the d'th weekday of week w (5 meaning: the last one)"""

    month: int
    week: int
    weekday: Weekday

    def for_year(self, year: int) -> date:
        first = date(year, self.month, 1)
        day = (
            1 + (self.weekday - first.isoweekday()) % 7 + 7 * (self.week - 1)
        )
        # week 5 may not exist in this month; then it's the last one
        while day > days_in_month(year, self.month):
            day -= 7
        return first.replace(day=day)


class JulianDay(NamedTuple):
    """``Jn``: day 1-365, where February 29th is never counted"""

    nth: int

    def for_year(self, year: int) -> date:
        nth = self.nth + (self.nth >= 60 and days_in_year(year) == 366)
        return date(year, 1, 1) + timedelta(nth - 1)


class ZeroBasedDay(NamedTuple):
    """``n``: day 0-365, where February 29th is counted"""

    nth: int

    def for_year(self, year: int) -> date:
        nth = min(self.nth, days_in_year(year) - 1)
        return date(year, 1, 1) + timedelta(nth)


DateRule = Union[MonthWeekDay, JulianDay, ZeroBasedDay]


class Dst(NamedTuple):
    offset: int
    start: tuple[DateRule, int]
    end: tuple[DateRule, int]


_NAME = r"(?:[A-Za-z]{3,}|<[A-Za-z0-9+-]{3,}>)"
_HMS = r"[+-]?\d{1,3}(?::\d{2}(?::\d{2})?)?"
_RULE = rf"(?:M\d{{1,2}}\.\d\.\d|J\d{{1,3}}|\d{{1,3}})(?:/{_HMS})?"
_match_tzstr = re.compile(
    rf"{_NAME}({_HMS})(?:{_NAME}({_HMS})?,({_RULE}),({_RULE}))?", re.ASCII
).fullmatch
_match_hms = re.compile(
    r"([+-]?)(\d{1,3})(?::(\d{2})(?::(\d{2}))?)?", re.ASCII
).fullmatch


class TzStr:
    """A parsed POSIX TZ string. Offsets are in seconds east of UTC."""

    std: int
    dst: Optional[Dst]

    __slots__ = ("std", "dst")

    def __init__(self, std: int, dst: Optional[Dst] = None):
        self.std = std
        self.dst = dst

    @classmethod
    def parse(cls, s: str) -> TzStr:
        match = _match_tzstr(s)
        if match is None:
            raise ValueError(f"Invalid POSIX TZ string: {s!r}")
        std_raw, dst_raw, start_raw, end_raw = match.groups()
        std = _parse_offset(std_raw)
        if start_raw is None:
            return cls(std)

        if dst_raw is None:
            dst = std + DEFAULT_DST
            if dst >= MAX_OFFSET:
                raise ValueError(f"DST offset out of range in {s!r}")
        else:
            dst = _parse_offset(dst_raw)
        start, end = _parse_rule(start_raw), _parse_rule(end_raw)
        return cls(std, Dst(dst, start, end))

    def transitions_in(self, year: int) -> list[tuple[EpochSecs, int]]:
        """The (epoch seconds, new offset) transitions during a year"""
        if self.dst is None:
            return []
        start_rule, start_time = self.dst.start
        end_rule, end_time = self.dst.end
        # Rule times are expressed in the local time in effect before them
        start = epoch_for_date(start_rule.for_year(year)) + start_time
        end = epoch_for_date(end_rule.for_year(year)) + end_time
        start -= self.std
        end -= self.dst.offset
        return sorted([(start, self.dst.offset), (end, self.std)])

    def expand(
        self, from_year: int, until_year: int = RULES_UNTIL_YEAR
    ) -> Iterator[tuple[EpochSecs, int]]:
        for year in range(from_year, until_year + 1):
            yield from self.transitions_in(year)

    def to_table(
        self, from_year: int = 1970, until_year: int = RULES_UNTIL_YEAR
    ) -> TransitionTable:
        if self.dst is None:
            return TransitionTable.from_transitions(self.std, ())
        transitions = list(self.expand(from_year, until_year))
        if not transitions:
            return TransitionTable.from_transitions(self.std, ())
        # Before the first transition, the *other* offset is in effect
        _, first_offset = transitions[0]
        base = self.std if first_offset == self.dst.offset else self.dst.offset
        return TransitionTable.from_transitions(base, transitions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TzStr):
            return NotImplemented  # pragma: no cover
        return self.std == other.std and self.dst == other.dst

    def __repr__(self) -> str:
        if not self.dst:
            return f"TzStr(std={self.std})"
        else:
            return f"TzStr(std={self.std}, dst={self.dst})"


def _parse_hms(s: str) -> int:
    match = _match_hms(s)
    if match is None:
        raise ValueError(f"Invalid time in POSIX TZ string: {s!r}")
    sign, hh, mm, ss = match.groups()
    minutes, seconds = int(mm or 0), int(ss or 0)
    if minutes > 59 or seconds > 59:
        raise ValueError(f"Invalid time in POSIX TZ string: {s!r}")
    total = int(hh) * 3600 + minutes * 60 + seconds
    return -total if sign == "-" else total


def _parse_offset(s: str) -> int:
    secs = _parse_hms(s)
    if abs(secs) >= MAX_OFFSET:
        raise ValueError(f"Offset out of range in POSIX TZ string: {s!r}")
    # POSIX offsets are positive WEST of Greenwich
    return -secs


def _parse_rule(s: str) -> tuple[DateRule, int]:
    day, _, time = s.partition("/")
    rule_time = _parse_hms(time) if time else DEFAULT_RULE_TIME

    rule: DateRule
    if day[0] == "M":
        month, week, weekday = map(int, day[1:].split("."))
        if not (1 <= month <= 12 and 1 <= week <= 5 and weekday <= 6):
            raise ValueError(f"Invalid DST rule: {s!r}")
        rule = MonthWeekDay(month, week, weekday)
    elif day[0] == "J":
        nth = int(day[1:])
        if not 1 <= nth <= 365:
            raise ValueError(f"Invalid Julian day of year: {s!r}")
        rule = JulianDay(nth)
    else:
        nth = int(day)
        if nth > 365:
            raise ValueError(f"Invalid day of year: {s!r}")
        rule = ZeroBasedDay(nth)
    return rule, rule_time
