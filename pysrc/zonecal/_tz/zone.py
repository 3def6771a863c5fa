from __future__ import annotations

from typing import ClassVar, Optional

from .._common import _ImmutableBase, final
from .._offset import Offset
from .._timeline import Instant, LocalDateTime
from .common import OffsetInfo
from .posix import TzStr
from .resolver import get_offset, get_offset_info
from .table import TransitionTable
from .tzif import parse_tzif


@final
class TimeZone(_ImmutableBase):
    """A timezone: an identifier plus its table of offset transitions.

    Zones are obtained with :func:`~zonecal.get_tz`, which caches them.
    A zone without an identifier is called anonymous.

    Example
    -------
    >>> tz = get_tz("Europe/London")
    >>> tz.get_offset(Instant.from_utc(2008, 7, 1))
    Offset(+01:00)
    >>> tz.get_offset_info(LocalDateTime(2008, 10, 26, 1, 30))
    Discontinuity(Overlap at 2008-10-26T01:00:00Z, +01:00 -> Z)
    """

    __slots__ = ("__weakref__", "key", "table")

    # The zone ID (e.g. "Europe/London" or "UTC+01:30").
    # Not part of the rule data itself.
    key: Optional[str]
    table: TransitionTable

    UTC: ClassVar[TimeZone]

    def __init__(self, key: Optional[str], table: TransitionTable):
        if type(table) is not TransitionTable:
            raise TypeError(f"Expected TransitionTable, got {type(table)!r}")
        self.key = key
        self.table = table

    @classmethod
    def of(cls, key: str, /) -> TimeZone:
        """Look up a zone by ID. Same as :func:`~zonecal.get_tz`."""
        from .store import get_tz

        return get_tz(key)

    @classmethod
    def fixed(cls, offset: Offset, /) -> TimeZone:
        """A zone with a constant offset, keyed ``UTC`` plus the offset"""
        if offset == Offset.UTC:
            return cls.UTC
        return cls(f"UTC{offset}", TransitionTable.fixed(offset))

    @classmethod
    def parse_tzif(cls, data: bytes, key: Optional[str] = None) -> TimeZone:
        """Create a TimeZone from TZif file data"""
        return cls(key, parse_tzif(data))

    @classmethod
    def parse_posix(cls, s: str, key: Optional[str] = None) -> TimeZone:
        """Create a TimeZone from a POSIX TZ string,
        e.g. ``CET-1CEST,M3.5.0,M10.5.0/3``
        """
        return cls(key, TzStr.parse(s).to_table())

    def is_fixed(self) -> bool:
        return self.table.is_fixed()

    def get_offset(self, instant: Instant, /) -> Offset:
        """The offset in effect at the given instant"""
        return get_offset(self.table, instant)

    def get_offset_info(self, local: LocalDateTime, /) -> OffsetInfo:
        """The offset for a local time, or the gap/overlap it falls in"""
        return get_offset_info(self.table, local)

    # NOTE: this equality check needs to be fast, since zones are compared
    # often and are usually identical objects.
    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        elif type(other) is TimeZone:
            return self.key == other.key and self.table == other.table
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return "<anonymous>" if self.key is None else self.key

    def __repr__(self) -> str:
        return f"TimeZone({self})"

    def __reduce__(self):
        if self.key is None:
            return (TimeZone, (None, self.table))
        from .store import get_tz

        return (get_tz, (self.key,))


TimeZone.UTC = TimeZone("UTC", TransitionTable.fixed(Offset.UTC))
