"""Mapping instants and local times to UTC offsets.

Every instant has exactly one offset. A local time, however, may fall in a
gap (it never occurs) or an overlap (it occurs twice). These are reported
as a :class:`Discontinuity` instead of being resolved implicitly.
"""

from __future__ import annotations

from .._offset import Offset
from .._timeline import Instant, LocalDateTime
from .common import Discontinuity, OffsetInfo
from .table import TransitionTable


def get_offset(table: TransitionTable, instant: Instant) -> Offset:
    """The offset in effect at the given instant"""
    if type(instant) is not Instant:
        raise TypeError(f"Expected Instant, got {type(instant)!r}")
    rule = table.rule_applicable_at(instant)
    return table.base_offset if rule is None else rule.offset_after


def get_offset_info(
    table: TransitionTable, local: LocalDateTime
) -> OffsetInfo:
    """The offset for the given local time, or the discontinuity it falls in.

    Example
    -------
    >>> get_offset_info(london_2008, LocalDateTime(2008, 3, 30, 0, 30))
    Offset(Z)
    >>> get_offset_info(london_2008, LocalDateTime(2008, 3, 30, 1, 30))
    Discontinuity(Gap at 2008-03-30T01:00:00Z, Z -> +01:00)
    """
    if type(local) is not LocalDateTime:
        raise TypeError(f"Expected LocalDateTime, got {type(local)!r}")
    rule = table.rule_near(local)
    if rule is None:
        # Past the last window (or there are no transitions at all)
        return table.last_offset()

    start, _ = rule._local_window()
    if (local._local_secs(), local._nanos) < start:
        return rule.offset_before
    # Not before the window, and rule_near guarantees we're not after it
    return Discontinuity._from_rule(rule)
