"""Overflow-checked integer arithmetic and ISO calendar helpers.

Python integers never overflow, so the fixed-width limits are enforced
explicitly. Year counts are 32-bit, day counts and epoch seconds 64-bit.
"""

from __future__ import annotations

from ._common import Overflow

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_BOUNDS = {
    32: (INT32_MIN, INT32_MAX),
    64: (INT64_MIN, INT64_MAX),
}


def _bounds(bits: int) -> tuple[int, int]:
    try:
        return _BOUNDS[bits]
    except KeyError:
        raise ValueError(f"Unsupported integer width: {bits}") from None


def _check(op: str, a: int, b: int, result: int, bits: int) -> int:
    lo, hi = _bounds(bits)
    if not (lo <= a <= hi and lo <= b <= hi and lo <= result <= hi):
        raise Overflow._for_op(op, a, b, bits)
    return result


def safe_add(a: int, b: int, /, bits: int = 64) -> int:
    return _check("+", a, b, a + b, bits)


def safe_subtract(a: int, b: int, /, bits: int = 64) -> int:
    return _check("-", a, b, a - b, bits)


def safe_multiply(a: int, b: int, /, bits: int = 64) -> int:
    return _check("*", a, b, a * b, bits)


def fits(value: int, bits: int = 64) -> bool:
    lo, hi = _bounds(bits)
    return lo <= value <= hi


def is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


# 1-indexed days per month
_MONTHDAYS = [0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]
# days before the first of each month (non-leap)
_DAYS_BEFORE_MONTH = [0, 0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334]


def days_in_month(year: int, month: int) -> int:
    return _MONTHDAYS[month] + (month == 2 and is_leap(year))


def days_in_year(year: int) -> int:
    return 365 + is_leap(year)


def day_of_year(year: int, month: int, day: int) -> int:
    return _DAYS_BEFORE_MONTH[month] + (month > 2 and is_leap(year)) + day
