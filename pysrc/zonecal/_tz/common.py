from __future__ import annotations

from typing import Union

from .._common import _ImmutableBase, final
from .._math import safe_add
from .._offset import Offset
from .._timeline import EpochSecs, Instant, LocalDateTime, Nanos


@final
class TransitionRule(_ImmutableBase):
    """A scheduled change of UTC offset at a specific instant"""

    __slots__ = ("instant", "offset_before", "offset_after")

    instant: Instant
    offset_before: Offset
    offset_after: Offset

    def __init__(
        self, instant: Instant, offset_before: Offset, offset_after: Offset
    ):
        if type(instant) is not Instant:
            raise TypeError(f"Expected Instant, got {type(instant)!r}")
        if not (type(offset_before) is type(offset_after) is Offset):
            raise TypeError("offsets must be Offset instances")
        if offset_before == offset_after:
            raise ValueError(
                f"Transition at {instant} doesn't change the offset"
            )
        self.instant = instant
        self.offset_before = offset_before
        self.offset_after = offset_after

    def is_gap(self) -> bool:
        return self.offset_after > self.offset_before

    def is_overlap(self) -> bool:
        return self.offset_after < self.offset_before

    def local_start(self) -> LocalDateTime:
        """The first wall-clock time affected by this transition"""
        low = min(self.offset_before, self.offset_after)
        return self.instant.to_local(low)

    def local_end(self) -> LocalDateTime:
        """The first wall-clock time after the gap or overlap"""
        high = max(self.offset_before, self.offset_after)
        return self.instant.to_local(high)

    # Same as local_start/local_end, but as (local epoch secs, nanos) pairs
    # without range checks.
    def _local_window(
        self,
    ) -> tuple[tuple[EpochSecs, Nanos], tuple[EpochSecs, Nanos]]:
        low, high = sorted((self.offset_before, self.offset_after))
        secs, nanos = self.instant._key()
        return (
            (safe_add(secs, low.total_seconds), nanos),
            (safe_add(secs, high.total_seconds), nanos),
        )

    def __eq__(self, other: object) -> bool:
        if type(other) is TransitionRule:
            return (
                self.instant == other.instant
                and self.offset_before == other.offset_before
                and self.offset_after == other.offset_after
            )
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.instant, self.offset_before, self.offset_after))

    def __repr__(self) -> str:
        return (
            f"TransitionRule({self.instant.format_common_iso()}, "
            f"{self.offset_before} -> {self.offset_after})"
        )


@final
class Discontinuity(_ImmutableBase):
    """A gap or overlap in the local timeline, caused by a transition.

    In a gap, the local times in the window never occur. In an overlap,
    they occur twice: once under each offset. Which one is meant is for
    the caller to decide.
    """

    __slots__ = ("offset_before", "offset_after", "transition")

    offset_before: Offset
    offset_after: Offset
    transition: Instant
    """The instant at which the offset changes"""

    def __init__(
        self, offset_before: Offset, offset_after: Offset, transition: Instant
    ):
        if offset_before == offset_after:
            raise ValueError("A discontinuity requires two distinct offsets")
        self.offset_before = offset_before
        self.offset_after = offset_after
        self.transition = transition

    @classmethod
    def _from_rule(cls, rule: TransitionRule) -> Discontinuity:
        return cls(rule.offset_before, rule.offset_after, rule.instant)

    def is_gap(self) -> bool:
        return self.offset_after > self.offset_before

    def is_overlap(self) -> bool:
        return self.offset_after < self.offset_before

    def contains_offset(self, offset: Offset, /) -> bool:
        """Whether the offset is one of the two bounding this discontinuity.
        Offsets in between are never valid.
        """
        return offset == self.offset_before or offset == self.offset_after

    def __eq__(self, other: object) -> bool:
        if type(other) is Discontinuity:
            return (
                self.offset_before == other.offset_before
                and self.offset_after == other.offset_after
                and self.transition == other.transition
            )
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.offset_before, self.offset_after, self.transition))

    def __str__(self) -> str:
        return (
            f"Discontinuity from {self.offset_before} to {self.offset_after}"
        )

    def __repr__(self) -> str:
        kind = "Gap" if self.is_gap() else "Overlap"
        return (
            f"Discontinuity({kind} at {self.transition.format_common_iso()}, "
            f"{self.offset_before} -> {self.offset_after})"
        )


OffsetInfo = Union[Offset, Discontinuity]
