from __future__ import annotations

import re
from functools import lru_cache
from typing import ClassVar

from ._common import InvalidOffset, _ImmutableBase, _object_new, final

MAX_OFFSET_SECS = 18 * 3600

_match_offset = re.compile(
    r"([+-])(\d{2})(?::?(\d{2})(?::?(\d{2}))?)?", re.ASCII
).fullmatch


@final
class Offset(_ImmutableBase):
    """A fixed deviation from UTC, in whole seconds.

    Positive offsets are east of Greenwich and compare greater.

    Example
    -------
    >>> Offset.of_hms(5, 30)
    Offset(+05:30)
    >>> Offset.parse("-03:00").total_seconds
    -10800
    >>> str(Offset.UTC)
    'Z'
    """

    __slots__ = ("_secs",)

    _secs: int

    UTC: ClassVar[Offset]
    """The zero offset"""
    MIN: ClassVar[Offset]
    """The most negative offset, -18:00"""
    MAX: ClassVar[Offset]
    """The most positive offset, +18:00"""

    def __init__(self) -> None:
        raise TypeError(
            "Offset instances cannot be created through the constructor. "
            "Use `Offset.of_total_seconds` or `Offset.of_hms` instead."
        )

    @classmethod
    def of_total_seconds(cls, secs: int, /) -> Offset:
        if type(secs) is not int:
            raise TypeError(f"offset seconds must be an int, got {secs!r}")
        if abs(secs) > MAX_OFFSET_SECS:
            raise InvalidOffset(f"offset out of range: {secs} seconds")
        return _interned(secs)

    @classmethod
    def of_hms(cls, hours: int, minutes: int = 0, seconds: int = 0) -> Offset:
        """Create an offset from its components, which must share a sign"""
        signs = {(c > 0) - (c < 0) for c in (hours, minutes, seconds)}
        if {1, -1} <= signs:
            raise InvalidOffset("offset components must have the same sign")
        if abs(minutes) > 59 or abs(seconds) > 59:
            raise InvalidOffset(
                f"offset minutes/seconds out of range: {minutes}, {seconds}"
            )
        return cls.of_total_seconds(hours * 3600 + minutes * 60 + seconds)

    @classmethod
    def parse(cls, s: str, /) -> Offset:
        """Parse ``Z``, ``±HH``, ``±HH:MM`` or ``±HH:MM:SS``.
        The colons may be omitted, but then consistently.
        """
        if s == "Z":
            return cls.UTC
        match = _match_offset(s)
        # colons are all-or-nothing
        if match is None or (
            ":" in s and (len(s) not in (6, 9) or s[3] != ":")
        ):
            raise InvalidOffset(f"Invalid offset format: {s!r}")
        sign, hh, mm, ss = match.groups()
        hours, minutes, seconds = int(hh), int(mm or 0), int(ss or 0)
        if minutes > 59 or seconds > 59:
            raise InvalidOffset(f"Invalid offset format: {s!r}")
        total = hours * 3600 + minutes * 60 + seconds
        return cls.of_total_seconds(-total if sign == "-" else total)

    @property
    def total_seconds(self) -> int:
        return self._secs

    def __str__(self) -> str:
        if not self._secs:
            return "Z"
        sign = "-" if self._secs < 0 else "+"
        hrs, rest = divmod(abs(self._secs), 3600)
        mins, secs = divmod(rest, 60)
        return f"{sign}{hrs:02d}:{mins:02d}" + (f":{secs:02d}" if secs else "")

    def __repr__(self) -> str:
        return f"Offset({self})"

    def __eq__(self, other: object) -> bool:
        if type(other) is Offset:
            return self._secs == other._secs
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._secs)

    def __lt__(self, other: Offset) -> bool:
        if type(other) is Offset:
            return self._secs < other._secs
        return NotImplemented

    def __le__(self, other: Offset) -> bool:
        if type(other) is Offset:
            return self._secs <= other._secs
        return NotImplemented

    def __gt__(self, other: Offset) -> bool:
        if type(other) is Offset:
            return self._secs > other._secs
        return NotImplemented

    def __ge__(self, other: Offset) -> bool:
        if type(other) is Offset:
            return self._secs >= other._secs
        return NotImplemented

    def __reduce__(self):
        return (_unpkl_offset, (self._secs,))


# There are only a few dozen offsets in use worldwide, so interning them
# keeps equal offsets identical.
@lru_cache(maxsize=None)
def _interned(secs: int, /) -> Offset:
    self = _object_new(Offset)
    self._secs = secs
    return self


def _unpkl_offset(secs: int) -> Offset:
    return Offset.of_total_seconds(secs)


Offset.UTC = _interned(0)
Offset.MIN = _interned(-MAX_OFFSET_SECS)
Offset.MAX = _interned(MAX_OFFSET_SECS)
