from __future__ import annotations

from typing import Any, Union

from ._common import _ImmutableBase, _object_new, final
from ._date import Date
from ._resolve import DateResolver
from ._tz.store import get_tz
from ._tz.zone import TimeZone

_UNSET: Any = object()


def _to_tz(tz: Union[TimeZone, str]) -> TimeZone:
    if type(tz) is TimeZone:
        return tz
    elif isinstance(tz, str):
        return get_tz(tz)
    raise TypeError(f"Expected TimeZone or zone ID, got {tz!r}")


@final
class ZonedDate(_ImmutableBase):
    """A date in a particular timezone.

    The field operations are those of :class:`Date`. The zone is carried
    along unchanged.

    Example
    -------
    >>> d = ZonedDate(2008, 3, 31, "Europe/London")
    >>> d.with_month(2)
    ZonedDate(2008-02-29[Europe/London])
    >>> d.add_years(-1).date()
    Date(2007-03-31)
    """

    __slots__ = ("_date", "_tz")

    _date: Date
    _tz: TimeZone

    def __init__(
        self, year: int, month: int, day: int, tz: Union[TimeZone, str]
    ) -> None:
        self._tz = _to_tz(tz)
        self._date = Date(year, month, day)

    @classmethod
    def from_date(
        cls, date: Date, tz: Union[TimeZone, str], /
    ) -> ZonedDate:
        if type(date) is not Date:
            raise TypeError(f"Expected Date, got {date!r}")
        return cls._from_unchecked(date, _to_tz(tz))

    @classmethod
    def _from_unchecked(cls, date: Date, tz: TimeZone) -> ZonedDate:
        self = _object_new(cls)
        self._date = date
        self._tz = tz
        return self

    def _with_date(self, date: Date) -> ZonedDate:
        if date is self._date:
            return self
        return self._from_unchecked(date, self._tz)

    @property
    def year(self) -> int:
        return self._date.year

    @property
    def month(self) -> int:
        return self._date.month

    @property
    def day(self) -> int:
        return self._date.day

    @property
    def tz(self) -> TimeZone:
        return self._tz

    def date(self) -> Date:
        return self._date

    def day_of_year(self) -> int:
        return self._date.day_of_year()

    def length_of_month(self) -> int:
        return self._date.length_of_month()

    def is_leap_year(self) -> bool:
        return self._date.is_leap_year()

    def with_year(self, year: int, /) -> ZonedDate:
        return self._with_date(self._date.with_year(year))

    def with_month(self, month: int, /) -> ZonedDate:
        return self._with_date(self._date.with_month(month))

    def with_day(self, day: int, /) -> ZonedDate:
        return self._with_date(self._date.with_day(day))

    def with_last_day_of_month(self) -> ZonedDate:
        return self._with_date(self._date.with_last_day_of_month())

    def with_last_day_of_year(self) -> ZonedDate:
        return self._with_date(self._date.with_last_day_of_year())

    def with_tz(self, tz: Union[TimeZone, str], /) -> ZonedDate:
        """Same fields, different zone"""
        tz = _to_tz(tz)
        if tz is self._tz:
            return self
        return self._from_unchecked(self._date, tz)

    def replace(
        self,
        *,
        year: int = _UNSET,
        month: int = _UNSET,
        day: int = _UNSET,
        resolver: DateResolver = DateResolver.STRICT,
    ) -> ZonedDate:
        fields = {
            name: value
            for name, value in (("year", year), ("month", month), ("day", day))
            if value is not _UNSET
        }
        return self._with_date(
            self._date.replace(resolver=resolver, **fields)
        )

    def add_years(self, years: int, /) -> ZonedDate:
        return self._with_date(self._date.add_years(years))

    def add_months(self, months: int, /) -> ZonedDate:
        return self._with_date(self._date.add_months(months))

    def _key(self) -> tuple[tuple[int, int, int], str]:
        return (self._date._key(), str(self._tz))

    def __eq__(self, other: object) -> bool:
        if type(other) is ZonedDate:
            # zones without a key all print the same, so compare the zones
            return self._date == other._date and self._tz == other._tz
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: ZonedDate) -> bool:
        if type(other) is ZonedDate:
            return self._key() < other._key()
        return NotImplemented

    def __le__(self, other: ZonedDate) -> bool:
        if type(other) is ZonedDate:
            return self._key() <= other._key()
        return NotImplemented

    def __gt__(self, other: ZonedDate) -> bool:
        if type(other) is ZonedDate:
            return self._key() > other._key()
        return NotImplemented

    def __ge__(self, other: ZonedDate) -> bool:
        if type(other) is ZonedDate:
            return self._key() >= other._key()
        return NotImplemented

    def __str__(self) -> str:
        return f"{self._date}[{self._tz}]"

    def __repr__(self) -> str:
        return f"ZonedDate({self})"

    def __reduce__(self):
        return (_unpkl_zoned, (self._date, self._tz))


def _unpkl_zoned(date: Date, tz: TimeZone) -> ZonedDate:
    return ZonedDate._from_unchecked(date, tz)
