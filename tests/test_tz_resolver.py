import pytest
from hypothesis import given
from hypothesis.strategies import composite, integers, lists

from zonecal import (
    Discontinuity,
    Instant,
    LocalDateTime,
    Offset,
    TransitionTable,
    get_offset,
    get_offset_info,
)

from .common import LONDON_2008, LONDON_GAP_2008, LONDON_OVERLAP_2008

Y2K = 946_684_800


def hours(n: int) -> Offset:
    return Offset.of_hms(n)


@composite
def tables(draw):
    """Tables around the year 2000, with transitions far enough apart that
    their local windows never overlap each other.
    """
    n = draw(integers(0, 6))
    spacing = draw(
        lists(integers(3 * 86_400, 400 * 86_400), min_size=n, max_size=n)
    )
    # offsets in quarter hours
    offsets = draw(
        lists(
            integers(-18 * 4, 18 * 4).map(lambda q: q * 900),
            min_size=n + 1,
            max_size=n + 1,
        )
    )
    transitions = []
    t = Y2K
    for step, offset in zip(spacing, offsets[1:]):
        t += step
        transitions.append((t, offset))
    return TransitionTable.from_transitions(offsets[0], transitions)


def _wall_clock(nanos: int) -> LocalDateTime:
    return Instant.from_timestamp_nanos(nanos).to_local(Offset.UTC)


local_times = integers(
    (Y2K - 10 * 86_400) * 1_000_000_000,
    (Y2K + 6 * 400 * 86_400 + 10 * 86_400) * 1_000_000_000,
).map(_wall_clock)


class TestGetOffset:

    @pytest.mark.parametrize(
        "instant, expect",
        [
            (Instant.from_utc(2008, 1, 1), 0),
            (Instant.from_utc(2008, 3, 30), 0),
            (
                Instant.from_utc(
                    2008, 3, 30, 0, 59, 59, nanosecond=999_999_999
                ),
                0,
            ),
            (LONDON_GAP_2008, 1),
            (Instant.from_utc(2008, 3, 31), 1),
            (Instant.from_utc(2008, 10, 26), 1),
            (
                Instant.from_utc(
                    2008, 10, 26, 0, 59, 59, nanosecond=999_999_999
                ),
                1,
            ),
            (LONDON_OVERLAP_2008, 0),
            (Instant.from_utc(2008, 12, 1), 0),
            (Instant.MIN, 0),
            (Instant.MAX, 0),
        ],
    )
    def test_london(self, instant, expect):
        assert get_offset(LONDON_2008, instant) == hours(expect)

    def test_wrong_type(self):
        with pytest.raises(TypeError):
            get_offset(LONDON_2008, LocalDateTime(2008, 1, 1))  # type: ignore

    @given(tables())
    def test_changes_exactly_at_transitions(self, table):
        for rule in table:
            nanos = rule.instant.timestamp_nanos()
            just_before = Instant.from_timestamp_nanos(nanos - 1)
            assert get_offset(table, just_before) == rule.offset_before
            assert get_offset(table, rule.instant) == rule.offset_after
        assert get_offset(table, Instant.MIN) == table.base_offset
        assert get_offset(table, Instant.MAX) == table.last_offset()

    @given(integers(-18 * 3600, 18 * 3600), integers(-(10**10), 10**10))
    def test_fixed(self, offset_secs, secs):
        offset = Offset.of_total_seconds(offset_secs)
        table = TransitionTable.fixed(offset)
        assert get_offset(table, Instant.from_timestamp(secs)) is offset


class TestGetOffsetInfo:

    @pytest.mark.parametrize(
        "local, expect",
        [
            (LocalDateTime(2008, 1, 1), 0),
            (LocalDateTime(2008, 3, 30), 0),
            (
                LocalDateTime(2008, 3, 30, 0, 59, 59, nanosecond=999_999_999),
                0,
            ),
            (LocalDateTime(2008, 3, 30, 2), 1),
            (LocalDateTime(2008, 3, 31), 1),
            (LocalDateTime(2008, 7, 1), 1),
            (LocalDateTime(2008, 10, 26), 1),
            (
                LocalDateTime(2008, 10, 26, 0, 59, 59, nanosecond=999_999_999),
                1,
            ),
            (LocalDateTime(2008, 10, 26, 2), 0),
            (LocalDateTime(2008, 10, 27), 0),
            (LocalDateTime.MIN, 0),
            (LocalDateTime.MAX, 0),
        ],
    )
    def test_london_unambiguous(self, local, expect):
        assert get_offset_info(LONDON_2008, local) == hours(expect)

    @pytest.mark.parametrize(
        "local",
        [
            LocalDateTime(2008, 3, 30, 1),
            LocalDateTime(2008, 3, 30, 1, 30),
            LocalDateTime(2008, 3, 30, 1, 59, 59, nanosecond=999_999_999),
        ],
    )
    def test_london_gap(self, local):
        info = get_offset_info(LONDON_2008, local)
        assert isinstance(info, Discontinuity)
        assert info.is_gap()
        assert not info.is_overlap()
        assert info.offset_before == hours(0)
        assert info.offset_after == hours(1)
        assert info.transition == Instant.from_utc(2008, 3, 30, 1)
        assert not info.contains_offset(hours(-1))
        assert info.contains_offset(hours(0))
        assert info.contains_offset(hours(1))
        assert not info.contains_offset(hours(2))
        assert not info.contains_offset(Offset.of_hms(0, 30))
        assert str(info) == "Discontinuity from Z to +01:00"

    @pytest.mark.parametrize(
        "local",
        [
            LocalDateTime(2008, 10, 26, 1),
            LocalDateTime(2008, 10, 26, 1, 30),
            LocalDateTime(2008, 10, 26, 1, 59, 59, nanosecond=999_999_999),
        ],
    )
    def test_london_overlap(self, local):
        info = get_offset_info(LONDON_2008, local)
        assert isinstance(info, Discontinuity)
        assert info.is_overlap()
        assert not info.is_gap()
        assert info.offset_before == hours(1)
        assert info.offset_after == hours(0)
        assert info.transition == Instant.from_utc(2008, 10, 26, 1)
        assert not info.contains_offset(hours(-1))
        assert info.contains_offset(hours(0))
        assert info.contains_offset(hours(1))
        assert not info.contains_offset(hours(2))
        assert str(info) == "Discontinuity from +01:00 to Z"

    def test_wrong_type(self):
        with pytest.raises(TypeError):
            get_offset_info(LONDON_2008, Instant.MIN)  # type: ignore

    @given(tables(), local_times)
    def test_discontinuity_iff_in_window(self, table, local):
        info = get_offset_info(table, local)
        in_window = [
            r for r in table if r.local_start() <= local < r.local_end()
        ]
        if isinstance(info, Discontinuity):
            assert len(in_window) == 1
            assert info == Discontinuity._from_rule(in_window[0])
            assert info.is_gap() != info.is_overlap()
        else:
            assert not in_window
            # the offset is consistent with the instant it implies
            assert get_offset(table, local.assume_offset(info)) == info

    @given(integers(-18 * 3600, 18 * 3600), local_times)
    def test_fixed(self, offset_secs, local):
        offset = Offset.of_total_seconds(offset_secs)
        table = TransitionTable.fixed(offset)
        assert get_offset_info(table, local) is offset


class TestDiscontinuity:

    def test_equal_offsets(self):
        with pytest.raises(ValueError):
            Discontinuity(hours(1), hours(1), LONDON_GAP_2008)

    def test_equality(self):
        a = Discontinuity(hours(0), hours(1), LONDON_GAP_2008)
        same = Discontinuity(
            Offset.UTC, Offset.of_total_seconds(3600), LONDON_GAP_2008
        )
        assert a == same
        assert hash(a) == hash(same)
        assert a != Discontinuity(hours(1), hours(0), LONDON_GAP_2008)
        assert a != Discontinuity(hours(0), hours(1), LONDON_OVERLAP_2008)
        assert a != hours(0)

    def test_repr(self):
        gap = Discontinuity(hours(0), hours(1), LONDON_GAP_2008)
        assert repr(gap) == (
            "Discontinuity(Gap at 2008-03-30T01:00:00Z, Z -> +01:00)"
        )
        overlap = Discontinuity(hours(1), hours(0), LONDON_OVERLAP_2008)
        assert repr(overlap) == (
            "Discontinuity(Overlap at 2008-10-26T01:00:00Z, +01:00 -> Z)"
        )
