"""Points on the physical timeline and wall-clock readings.

Both types only carry what offset resolution needs: a total order and
conversion between the two via an :class:`Offset`.
"""

from __future__ import annotations

from datetime import datetime as _datetime, timedelta as _timedelta
from typing import ClassVar

from ._common import _ImmutableBase, _object_new, final
from ._date import Date
from ._math import safe_add, safe_subtract
from ._offset import Offset

EpochSecs = int
Nanos = int  # 0-999_999_999

EPOCH_SECS_MIN = -62135596800  # 0001-01-01T00:00:00
EPOCH_SECS_MAX = 253402300799  # 9999-12-31T23:59:59

_EPOCH = _datetime(1970, 1, 1)
_SECOND = _timedelta(seconds=1)


def _check_nanos(nanosecond: int) -> None:
    if not 0 <= nanosecond < 1_000_000_000:
        raise ValueError(f"nanosecond out of range: {nanosecond}")


def _check_epoch_secs(secs: EpochSecs) -> EpochSecs:
    if not EPOCH_SECS_MIN <= secs <= EPOCH_SECS_MAX:
        raise ValueError("Instant out of range")
    return secs


def _fmt_nanos(nanos: Nanos) -> str:
    return bool(nanos) * f".{nanos:09d}".rstrip("0")


@final
class Instant(_ImmutableBase):
    """A moment in time with nanosecond precision, independent of location.

    Example
    -------
    >>> Instant.from_utc(2008, 3, 30, hour=1)
    Instant(2008-03-30 01:00:00Z)
    """

    __slots__ = ("_secs", "_nanos")

    _secs: EpochSecs
    _nanos: Nanos

    MIN: ClassVar[Instant]
    """The minimum representable instant."""
    MAX: ClassVar[Instant]
    """The maximum representable instant."""

    def __init__(self) -> None:
        raise TypeError(
            "Instant instances cannot be created through the constructor. "
            "Use `Instant.from_utc` or `Instant.from_timestamp` instead."
        )

    @classmethod
    def _from_secs_unchecked(cls, secs: EpochSecs, nanos: Nanos) -> Instant:
        self = _object_new(cls)
        self._secs = secs
        self._nanos = nanos
        return self

    @classmethod
    def from_utc(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        nanosecond: int = 0,
    ) -> Instant:
        """Create an Instant defined by a UTC date and time."""
        _check_nanos(nanosecond)
        dt = _datetime(year, month, day, hour, minute, second)
        return cls._from_secs_unchecked((dt - _EPOCH) // _SECOND, nanosecond)

    @classmethod
    def from_timestamp(cls, i: int, /) -> Instant:
        """Create an Instant from a UNIX timestamp (in whole seconds)."""
        if type(i) is not int:
            raise TypeError("method requires an integer")
        return cls._from_secs_unchecked(_check_epoch_secs(i), 0)

    @classmethod
    def from_timestamp_nanos(cls, i: int, /) -> Instant:
        """Create an Instant from a UNIX timestamp (in nanoseconds)."""
        if type(i) is not int:
            raise TypeError("method requires an integer")
        secs, nanos = divmod(i, 1_000_000_000)
        return cls._from_secs_unchecked(_check_epoch_secs(secs), nanos)

    def timestamp(self) -> int:
        """The UNIX timestamp in whole seconds, rounded towards the past"""
        return self._secs

    def timestamp_nanos(self) -> int:
        return self._secs * 1_000_000_000 + self._nanos

    def to_local(self, offset: Offset, /) -> LocalDateTime:
        """The wall-clock reading at this instant under the given offset

        Example
        -------
        >>> Instant.from_utc(2008, 3, 30, 1).to_local(Offset.of_hms(1))
        LocalDateTime(2008-03-30 02:00:00)
        """
        if type(offset) is not Offset:
            raise TypeError(f"Expected Offset, got {type(offset)!r}")
        local = safe_add(self._secs, offset.total_seconds)
        return LocalDateTime._from_local_secs(
            _check_epoch_secs(local), self._nanos
        )

    def format_common_iso(self) -> str:
        """Format as ``YYYY-MM-DDTHH:MM:SS[.fff]Z``"""
        dt = _EPOCH + _timedelta(seconds=self._secs)
        return dt.isoformat() + _fmt_nanos(self._nanos) + "Z"

    def _key(self) -> tuple[EpochSecs, Nanos]:
        return (self._secs, self._nanos)

    def __eq__(self, other: object) -> bool:
        if type(other) is Instant:
            return self._key() == other._key()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: Instant) -> bool:
        if type(other) is Instant:
            return self._key() < other._key()
        return NotImplemented

    def __le__(self, other: Instant) -> bool:
        if type(other) is Instant:
            return self._key() <= other._key()
        return NotImplemented

    def __gt__(self, other: Instant) -> bool:
        if type(other) is Instant:
            return self._key() > other._key()
        return NotImplemented

    def __ge__(self, other: Instant) -> bool:
        if type(other) is Instant:
            return self._key() >= other._key()
        return NotImplemented

    def __str__(self) -> str:
        return self.format_common_iso()

    def __repr__(self) -> str:
        return f"Instant({self.format_common_iso().replace('T', ' ')})"

    def __reduce__(self):
        return (_unpkl_inst, self._key())


@final
class LocalDateTime(_ImmutableBase):
    """A date and time of day without an offset or timezone: what a wall
    clock reads. It may map to zero, one or two instants in a given zone.

    Example
    -------
    >>> LocalDateTime(2008, 3, 30, 1, 30)
    LocalDateTime(2008-03-30 01:30:00)
    """

    __slots__ = ("_py_dt", "_nanos")

    _py_dt: _datetime
    _nanos: Nanos

    MIN: ClassVar[LocalDateTime]
    MAX: ClassVar[LocalDateTime]

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        nanosecond: int = 0,
    ) -> None:
        _check_nanos(nanosecond)
        self._py_dt = _datetime(year, month, day, hour, minute, second)
        self._nanos = nanosecond

    @classmethod
    def _from_local_secs(cls, secs: EpochSecs, nanos: Nanos) -> LocalDateTime:
        self = _object_new(cls)
        self._py_dt = _EPOCH + _timedelta(seconds=secs)
        self._nanos = nanos
        return self

    @property
    def year(self) -> int:
        return self._py_dt.year

    @property
    def month(self) -> int:
        return self._py_dt.month

    @property
    def day(self) -> int:
        return self._py_dt.day

    @property
    def hour(self) -> int:
        return self._py_dt.hour

    @property
    def minute(self) -> int:
        return self._py_dt.minute

    @property
    def second(self) -> int:
        return self._py_dt.second

    @property
    def nanosecond(self) -> int:
        return self._nanos

    def date(self) -> Date:
        return Date(self._py_dt.year, self._py_dt.month, self._py_dt.day)

    # Seconds since 1970-01-01T00:00:00 on the wall clock (not UTC!)
    def _local_secs(self) -> EpochSecs:
        return (self._py_dt - _EPOCH) // _SECOND

    def assume_offset(self, offset: Offset, /) -> Instant:
        """The instant at which this wall-clock reading occurs under the
        given offset. The offset isn't checked against any timezone.

        Example
        -------
        >>> LocalDateTime(2008, 3, 30, 2).assume_offset(Offset.of_hms(1))
        Instant(2008-03-30 01:00:00Z)
        """
        if type(offset) is not Offset:
            raise TypeError(f"Expected Offset, got {type(offset)!r}")
        secs = safe_subtract(self._local_secs(), offset.total_seconds)
        return Instant._from_secs_unchecked(
            _check_epoch_secs(secs), self._nanos
        )

    def format_common_iso(self) -> str:
        """Format as ``YYYY-MM-DDTHH:MM:SS[.fff]``"""
        return self._py_dt.isoformat() + _fmt_nanos(self._nanos)

    def _key(self) -> tuple[_datetime, Nanos]:
        return (self._py_dt, self._nanos)

    def __eq__(self, other: object) -> bool:
        if type(other) is LocalDateTime:
            return self._key() == other._key()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: LocalDateTime) -> bool:
        if type(other) is LocalDateTime:
            return self._key() < other._key()
        return NotImplemented

    def __le__(self, other: LocalDateTime) -> bool:
        if type(other) is LocalDateTime:
            return self._key() <= other._key()
        return NotImplemented

    def __gt__(self, other: LocalDateTime) -> bool:
        if type(other) is LocalDateTime:
            return self._key() > other._key()
        return NotImplemented

    def __ge__(self, other: LocalDateTime) -> bool:
        if type(other) is LocalDateTime:
            return self._key() >= other._key()
        return NotImplemented

    def __str__(self) -> str:
        return self.format_common_iso()

    def __repr__(self) -> str:
        return f"LocalDateTime({self.format_common_iso().replace('T', ' ')})"

    def __reduce__(self):
        return (_unpkl_local, (self._local_secs(), self._nanos))


def _unpkl_inst(secs: EpochSecs, nanos: Nanos) -> Instant:
    return Instant._from_secs_unchecked(secs, nanos)


def _unpkl_local(secs: EpochSecs, nanos: Nanos) -> LocalDateTime:
    return LocalDateTime._from_local_secs(secs, nanos)


Instant.MIN = Instant._from_secs_unchecked(EPOCH_SECS_MIN, 0)
Instant.MAX = Instant._from_secs_unchecked(EPOCH_SECS_MAX, 999_999_999)
LocalDateTime.MIN = LocalDateTime._from_local_secs(EPOCH_SECS_MIN, 0)
LocalDateTime.MAX = LocalDateTime._from_local_secs(
    EPOCH_SECS_MAX, 999_999_999
)
