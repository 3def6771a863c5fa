from __future__ import annotations

from typing import Any, ClassVar

from ._common import Overflow, _ImmutableBase, _object_new, final
from ._math import (
    INT32_MAX,
    INT32_MIN,
    day_of_year,
    days_in_month,
    fits,
    is_leap,
    safe_add,
    safe_multiply,
)
from ._resolve import DateResolver

_UNSET: Any = object()


@final
class Date(_ImmutableBase):
    """A date in the proleptic ISO calendar, without a time or timezone.

    Years span the full signed 32-bit range. Setting or shifting a field
    never silently rolls over into another month: the day is clamped
    to the end of the month instead.

    Example
    -------
    >>> d = Date(2024, 1, 31)
    >>> d.add_months(1)
    Date(2024-02-29)
    >>> d.with_day(30)
    Date(2024-01-30)
    """

    __slots__ = ("_year", "_month", "_day")

    _year: int
    _month: int
    _day: int

    MIN: ClassVar[Date]
    """The minimum possible date"""
    MAX: ClassVar[Date]
    """The maximum possible date"""

    def __init__(self, year: int, month: int, day: int) -> None:
        self._year, self._month, self._day = DateResolver.STRICT.resolve(
            year, month, day
        ).unwrap()

    @classmethod
    def _from_fields_unchecked(cls, year: int, month: int, day: int) -> Date:
        self = _object_new(cls)
        self._year = year
        self._month = month
        self._day = day
        return self

    @classmethod
    def _resolved(
        cls, resolver: DateResolver, year: int, month: int, day: int
    ) -> Date:
        return cls._from_fields_unchecked(
            *resolver.resolve(year, month, day).unwrap()
        )

    @property
    def year(self) -> int:
        return self._year

    @property
    def month(self) -> int:
        return self._month

    @property
    def day(self) -> int:
        return self._day

    def day_of_year(self) -> int:
        """The day of the year, starting at 1"""
        return day_of_year(self._year, self._month, self._day)

    def length_of_month(self) -> int:
        return days_in_month(self._year, self._month)

    def is_leap_year(self) -> bool:
        return is_leap(self._year)

    def with_year(self, year: int, /) -> Date:
        """Change the year, clamping February 29th to the 28th if needed

        Example
        -------
        >>> Date(2024, 2, 29).with_year(2023)
        Date(2023-02-28)
        """
        if year == self._year:
            return self
        return self._resolved(
            DateResolver.PREVIOUS_VALID, year, self._month, self._day
        )

    def with_month(self, month: int, /) -> Date:
        """Change the month, clamping the day to the end of the month

        Example
        -------
        >>> Date(2023, 3, 31).with_month(4)
        Date(2023-04-30)
        """
        if month == self._month:
            return self
        return self._resolved(
            DateResolver.PREVIOUS_VALID, self._year, month, self._day
        )

    def with_day(self, day: int, /) -> Date:
        """Change the day of the month. Raises if the day doesn't exist."""
        if day == self._day:
            return self
        return self._resolved(
            DateResolver.STRICT, self._year, self._month, day
        )

    def with_last_day_of_month(self) -> Date:
        return self._from_fields_unchecked(
            self._year, self._month, self.length_of_month()
        )

    def with_last_day_of_year(self) -> Date:
        return self._from_fields_unchecked(self._year, 12, 31)

    def replace(
        self,
        *,
        year: int = _UNSET,
        month: int = _UNSET,
        day: int = _UNSET,
        resolver: DateResolver = DateResolver.STRICT,
    ) -> Date:
        """Create a new date with the given fields replaced.
        The resolver determines what happens if the day doesn't exist.

        Example
        -------
        >>> d = Date(2023, 1, 31)
        >>> d.replace(month=2, resolver=DateResolver.NEXT_VALID)
        Date(2023-03-01)
        """
        if not isinstance(resolver, DateResolver):
            raise TypeError(
                f"resolver must be a DateResolver, got {resolver!r}"
            )
        return self._resolved(
            resolver,
            self._year if year is _UNSET else year,
            self._month if month is _UNSET else month,
            self._day if day is _UNSET else day,
        )

    def add_years(self, years: int, /) -> Date:
        """Add a number of years, clamping February 29th if needed.

        Raises :class:`Overflow` if the year leaves the representable range.
        """
        if years == 0:
            return self
        return self.with_year(safe_add(self._year, years, bits=32))

    def add_months(self, months: int, /) -> Date:
        """Add a number of months, clamping the day to the end of the month.

        Raises :class:`Overflow` if the year leaves the representable range.
        """
        if months == 0:
            return self
        month0 = safe_add(
            safe_multiply(self._year, 12), self._month - 1 + months
        )
        year, month0 = divmod(month0, 12)
        if not fits(year, bits=32):
            raise Overflow(
                f"adding {months} months to year {self._year} overflows"
            )
        return self._resolved(
            DateResolver.PREVIOUS_VALID, year, month0 + 1, self._day
        )

    def _key(self) -> tuple[int, int, int]:
        return (self._year, self._month, self._day)

    def __eq__(self, other: object) -> bool:
        if type(other) is Date:
            return self._key() == other._key()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: Date) -> bool:
        if type(other) is Date:
            return self._key() < other._key()
        return NotImplemented

    def __le__(self, other: Date) -> bool:
        if type(other) is Date:
            return self._key() <= other._key()
        return NotImplemented

    def __gt__(self, other: Date) -> bool:
        if type(other) is Date:
            return self._key() > other._key()
        return NotImplemented

    def __ge__(self, other: Date) -> bool:
        if type(other) is Date:
            return self._key() >= other._key()
        return NotImplemented

    def format_common_iso(self) -> str:
        """Format as ``YYYY-MM-DD``. Years outside 0-9999 get an explicit sign.

        Example
        -------
        >>> Date(2021, 1, 2).format_common_iso()
        '2021-01-02'
        >>> Date(-44, 3, 15).format_common_iso()
        '-0044-03-15'
        """
        if 0 <= self._year <= 9999:
            year = f"{self._year:04d}"
        else:
            year = f"{self._year:+05d}"
        return f"{year}-{self._month:02d}-{self._day:02d}"

    __str__ = format_common_iso

    def __repr__(self) -> str:
        return f"Date({self})"

    def __reduce__(self):
        return (_unpkl_date, self._key())


def _unpkl_date(year: int, month: int, day: int) -> Date:
    return Date(year, month, day)


Date.MIN = Date._from_fields_unchecked(INT32_MIN, 1, 1)
Date.MAX = Date._from_fields_unchecked(INT32_MAX, 12, 31)