"""Resolution of out-of-range day-of-month values.

Calendar arithmetic (e.g. adding a month to January 31st) routinely produces
a day that doesn't exist in the target month. A :class:`DateResolver` decides
what such a candidate date means.
"""

from __future__ import annotations

import enum
from typing import Callable, Union

from ._common import InvalidFieldValue, final
from ._math import INT32_MAX, INT32_MIN, days_in_month, safe_add

MonthLength = Callable[[int, int], int]


@final
class Resolved:
    """A date that is valid under the calendar's month lengths"""

    __slots__ = ("year", "month", "day")

    year: int
    month: int
    day: int

    def __init__(self, year: int, month: int, day: int):
        self.year = year
        self.month = month
        self.day = day

    def unwrap(self) -> tuple[int, int, int]:
        return (self.year, self.month, self.day)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Resolved):
            return self.unwrap() == other.unwrap()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.unwrap())

    def __repr__(self) -> str:
        return f"Resolved({self.year}, {self.month}, {self.day})"


@final
class Rejected:
    """The candidate date is invalid and the policy refuses to adjust it"""

    __slots__ = ("reason",)

    reason: str

    def __init__(self, reason: str):
        self.reason = reason

    def unwrap(self) -> tuple[int, int, int]:
        raise InvalidFieldValue(self.reason)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Rejected):
            return self.reason == other.reason
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.reason)

    def __repr__(self) -> str:
        return f"Rejected({self.reason!r})"


Resolution = Union[Resolved, Rejected]


class DateResolver(enum.Enum):
    """Policies for resolving a day-of-month beyond the end of the month.

    All policies return valid dates unchanged.

    Example
    -------
    >>> DateResolver.PREVIOUS_VALID.resolve(2023, 2, 31)
    Resolved(2023, 2, 28)
    >>> DateResolver.NEXT_VALID.resolve(2023, 2, 31)
    Resolved(2023, 3, 1)
    >>> DateResolver.STRICT.resolve(2023, 2, 31)
    Rejected('day out of range for month: 2023-02-31')
    """

    STRICT = "strict"
    """Reject the date"""
    PREVIOUS_VALID = "previous_valid"
    """Clamp to the last day of the month. Year and month never change."""
    NEXT_VALID = "next_valid"
    """Move to the first day of the following month. Unlike
    ``PART_LENIENT``, the excess days are dropped: the result is always
    day 1.
    """
    PART_LENIENT = "part_lenient"
    """Roll the excess days over into the following month"""

    def resolve(
        self,
        year: int,
        month: int,
        day: int,
        month_length: MonthLength = days_in_month,
    ) -> Resolution:
        return resolve_date(self, year, month, day, month_length)


def check_fields(year: int, month: int, day: int) -> None:
    """Raise if any field is outside its syntactic domain"""
    for name, value in (("year", year), ("month", month), ("day", day)):
        if type(value) is not int:
            raise TypeError(f"{name} must be an int, got {type(value)!r}")
    if not INT32_MIN <= year <= INT32_MAX:
        raise InvalidFieldValue(f"year out of range: {year}")
    if not 1 <= month <= 12:
        raise InvalidFieldValue(f"month out of range: {month}")
    if not 1 <= day <= 31:
        raise InvalidFieldValue(f"day out of range: {day}")


def resolve_date(
    policy: DateResolver,
    year: int,
    month: int,
    day: int,
    month_length: MonthLength = days_in_month,
) -> Resolution:
    check_fields(year, month, day)
    length = month_length(year, month)
    if day <= length:
        return Resolved(year, month, day)

    if policy is DateResolver.STRICT:
        return Rejected(
            f"day out of range for month: {year:04d}-{month:02d}-{day:02d}"
        )
    elif policy is DateResolver.PREVIOUS_VALID:
        return Resolved(year, month, length)
    elif policy is DateResolver.NEXT_VALID:
        return Resolved(*_next_month(year, month), 1)
    elif policy is DateResolver.PART_LENIENT:
        # Keep carrying until the excess fits. With ISO month lengths
        # this is at most one step.
        while day > length:
            day -= length
            year, month = _next_month(year, month)
            length = month_length(year, month)
        return Resolved(year, month, day)
    else:  # pragma: no cover
        raise TypeError(f"Unknown resolver: {policy!r}")


def _next_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return safe_add(year, 1, bits=32), 1
    return year, month + 1
