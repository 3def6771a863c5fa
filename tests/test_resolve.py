import pytest
from hypothesis import given
from hypothesis.strategies import integers, sampled_from

from zonecal import (
    DateResolver,
    InvalidFieldValue,
    Overflow,
    Rejected,
    Resolved,
    resolve_date,
)
from zonecal._math import INT32_MAX, INT32_MIN, days_in_month

years = integers(INT32_MIN, INT32_MAX)
months = integers(1, 12)
resolvers = sampled_from(list(DateResolver))

STRICT = DateResolver.STRICT
PREVIOUS_VALID = DateResolver.PREVIOUS_VALID
NEXT_VALID = DateResolver.NEXT_VALID
PART_LENIENT = DateResolver.PART_LENIENT


@given(resolvers, years, months, integers(1, 28))
def test_valid_dates_pass_through(resolver, year, month, day):
    assert resolver.resolve(year, month, day) == Resolved(year, month, day)


@given(resolvers, years, months)
def test_last_day_of_month_passes_through(resolver, year, month):
    last = days_in_month(year, month)
    assert resolver.resolve(year, month, last) == Resolved(year, month, last)


class TestStrict:

    def test_rejects(self):
        result = STRICT.resolve(2023, 2, 29)
        assert result == Rejected("day out of range for month: 2023-02-29")

    def test_unwrap_raises(self):
        with pytest.raises(InvalidFieldValue, match="2023-04-31"):
            STRICT.resolve(2023, 4, 31).unwrap()

    @given(years, months, integers(29, 31))
    def test_never_adjusts(self, year, month, day):
        result = STRICT.resolve(year, month, day)
        if day > days_in_month(year, month):
            assert isinstance(result, Rejected)
        else:
            assert result == Resolved(year, month, day)


class TestPreviousValid:

    @pytest.mark.parametrize(
        "ymd, expect",
        [
            ((2023, 2, 31), (2023, 2, 28)),
            ((2024, 2, 30), (2024, 2, 29)),
            ((2023, 4, 31), (2023, 4, 30)),
            ((INT32_MAX, 2, 30), (INT32_MAX, 2, 28)),
        ],
    )
    def test_clamps(self, ymd, expect):
        assert PREVIOUS_VALID.resolve(*ymd) == Resolved(*expect)

    @given(years, months, integers(1, 31))
    def test_year_and_month_unchanged(self, year, month, day):
        result = PREVIOUS_VALID.resolve(year, month, day)
        assert result.year == year
        assert result.month == month
        assert result.day == min(day, days_in_month(year, month))


class TestNextValid:

    @pytest.mark.parametrize(
        "ymd, expect",
        [
            ((2023, 2, 31), (2023, 3, 1)),
            ((2024, 2, 30), (2024, 3, 1)),
            ((2023, 4, 31), (2023, 5, 1)),
            ((2023, 6, 31), (2023, 7, 1)),
        ],
    )
    def test_advances(self, ymd, expect):
        assert NEXT_VALID.resolve(*ymd) == Resolved(*expect)

    def test_year_carry(self):
        # a month with 30 days in December, to force a carry
        def short_december(year, month):
            return 30 if month == 12 else days_in_month(year, month)

        result = NEXT_VALID.resolve(2023, 12, 31, short_december)
        assert result == Resolved(2024, 1, 1)

    def test_year_carry_overflows(self):
        with pytest.raises(Overflow):
            NEXT_VALID.resolve(INT32_MAX, 12, 31, lambda y, m: 30)


class TestPartLenient:

    @pytest.mark.parametrize(
        "ymd, expect",
        [
            ((2023, 2, 31), (2023, 3, 3)),
            ((2024, 2, 31), (2024, 3, 2)),
            ((2023, 4, 31), (2023, 5, 1)),
        ],
    )
    def test_rolls_over(self, ymd, expect):
        assert PART_LENIENT.resolve(*ymd) == Resolved(*expect)

    @given(years.filter(lambda y: y < INT32_MAX), months, integers(29, 31))
    def test_day_is_excess(self, year, month, day):
        length = days_in_month(year, month)
        result = PART_LENIENT.resolve(year, month, day)
        if day <= length:
            assert result == Resolved(year, month, day)
        else:
            assert result.day == day - length
            assert (result.year, result.month) == (
                (year + 1, 1) if month == 12 else (year, month + 1)
            )

    def test_carry_through_short_months(self):
        # excess days larger than the next month
        def tiny(year, month):
            return 10

        assert PART_LENIENT.resolve(2023, 12, 31, tiny) == Resolved(
            2024, 3, 1
        )


class TestInvalidFields:

    @pytest.mark.parametrize(
        "ymd",
        [
            (2023, 0, 1),
            (2023, 13, 1),
            (2023, 1, 0),
            (2023, 1, 32),
            (INT32_MAX + 1, 1, 1),
            (INT32_MIN - 1, 1, 1),
        ],
    )
    @pytest.mark.parametrize("resolver", list(DateResolver))
    def test_out_of_domain(self, ymd, resolver):
        with pytest.raises(InvalidFieldValue):
            resolver.resolve(*ymd)

    def test_wrong_type(self):
        with pytest.raises(TypeError):
            STRICT.resolve(2023, 1.0, 1)  # type: ignore[arg-type]


def test_resolve_date_function():
    assert resolve_date(NEXT_VALID, 2023, 2, 29) == Resolved(2023, 3, 1)


@pytest.mark.parametrize("day", [29, 30, 31])
def test_next_valid_drops_excess_days(day):
    # only PART_LENIENT carries the excess over
    assert NEXT_VALID.resolve(2023, 2, day) == Resolved(2023, 3, 1)
    assert PART_LENIENT.resolve(2023, 2, day) == Resolved(2023, 3, day - 28)


class TestOutcomes:

    def test_resolved_unwrap(self):
        assert Resolved(2023, 1, 2).unwrap() == (2023, 1, 2)

    def test_equality(self):
        assert Resolved(2023, 1, 2) == Resolved(2023, 1, 2)
        assert Resolved(2023, 1, 2) != Resolved(2023, 1, 3)
        assert Rejected("a") == Rejected("a")
        assert Rejected("a") != Rejected("b")
        assert Resolved(2023, 1, 2) != Rejected("a")
        assert hash(Resolved(2023, 1, 2)) == hash(Resolved(2023, 1, 2))

    def test_repr(self):
        assert repr(Resolved(2023, 1, 2)) == "Resolved(2023, 1, 2)"
        assert repr(Rejected("nope")) == "Rejected('nope')"
