from __future__ import annotations

from typing import Iterable, Iterator, Optional, Sequence

from .._common import _ImmutableBase, final
from .._offset import Offset
from .._timeline import (
    EPOCH_SECS_MAX,
    EPOCH_SECS_MIN,
    EpochSecs,
    Instant,
    LocalDateTime,
    Nanos,
)
from .common import TransitionRule

# Instants and local times are compared as (seconds, nanoseconds) pairs,
# so lookups don't need to build intermediate objects.
_Key = tuple[EpochSecs, Nanos]


@final
class TransitionTable(_ImmutableBase):
    """The ordered offset transitions of one timezone.

    The table starts with a base offset, which applies before the first rule
    (or always, if there are no rules). Each rule's ``offset_before`` must
    equal the previous rule's ``offset_after``.

    Example
    -------
    >>> gap = Instant.from_utc(2008, 3, 30, 1)
    >>> overlap = Instant.from_utc(2008, 10, 26, 1)
    >>> utc, bst = Offset.UTC, Offset.of_hms(1)
    >>> TransitionTable(
    ...     utc,
    ...     [
    ...         TransitionRule(gap, utc, bst),
    ...         TransitionRule(overlap, bst, utc),
    ...     ],
    ... )
    TransitionTable(base=Z, 2 transitions)
    """

    __slots__ = ("base_offset", "rules", "_utc_keys", "_local_ends")

    base_offset: Offset
    rules: tuple[TransitionRule, ...]

    # The instant of each transition
    _utc_keys: tuple[_Key, ...]
    # Per transition, the local time at which its gap or overlap ends.
    # Read as: "UNTIL this local time, the transition hasn't fully happened".
    _local_ends: tuple[_Key, ...]

    def __init__(
        self, base_offset: Offset, rules: Iterable[TransitionRule] = ()
    ):
        if type(base_offset) is not Offset:
            raise TypeError(f"Expected Offset, got {type(base_offset)!r}")
        rules = tuple(rules)
        prev_offset = base_offset
        prev_instant: Optional[Instant] = None
        for rule in rules:
            if type(rule) is not TransitionRule:
                raise TypeError(f"Expected TransitionRule, got {rule!r}")
            if prev_instant is not None and rule.instant <= prev_instant:
                raise ValueError(
                    f"Transitions must be strictly ordered: {rule!r} "
                    f"is not after {prev_instant}"
                )
            if rule.offset_before != prev_offset:
                raise ValueError(
                    f"Discontinuous transition {rule!r}: "
                    f"offset before it should be {prev_offset}"
                )
            prev_instant = rule.instant
            prev_offset = rule.offset_after

        self.base_offset = base_offset
        self.rules = rules
        self._utc_keys = tuple(r.instant._key() for r in rules)
        self._local_ends = tuple(r._local_window()[1] for r in rules)

    @classmethod
    def fixed(cls, offset: Offset, /) -> TransitionTable:
        """A table without transitions"""
        return cls(offset)

    @classmethod
    def from_transitions(
        cls,
        base_offset: int,
        transitions: Iterable[tuple[EpochSecs, int]],
    ) -> TransitionTable:
        """Build a table from raw zone data: (epoch seconds, offset seconds
        from then on) pairs, sorted by time. Entries that don't change the
        offset, that aren't in order, or that lie outside the supported range
        are skipped, since zone data routinely contains them.
        """
        base = Offset.of_total_seconds(base_offset)
        current = base
        prev_secs: Optional[EpochSecs] = None
        rules: list[TransitionRule] = []
        for secs, offset_secs in transitions:
            offset = Offset.of_total_seconds(offset_secs)
            if secs < EPOCH_SECS_MIN:
                # Happened before the range: it only affects the base
                base = current = offset
                continue
            elif secs > EPOCH_SECS_MAX:
                break
            elif offset == current or (
                prev_secs is not None and secs <= prev_secs
            ):
                continue
            rules.append(
                TransitionRule(
                    Instant._from_secs_unchecked(secs, 0), current, offset
                )
            )
            current = offset
            prev_secs = secs
        return cls(base, rules)

    def is_fixed(self) -> bool:
        return not self.rules

    def last_offset(self) -> Offset:
        """The offset in effect after the last transition"""
        return self.rules[-1].offset_after if self.rules else self.base_offset

    def rule_applicable_at(
        self, instant: Instant, /
    ) -> Optional[TransitionRule]:
        """The last rule that took effect at or before the given instant.
        ``None`` if the instant precedes all rules.
        """
        idx = bisect(self._utc_keys, instant._key())
        if idx is None:
            idx = len(self.rules)
        return self.rules[idx - 1] if idx else None

    def rule_near(self, local: LocalDateTime, /) -> Optional[TransitionRule]:
        """The first rule whose gap or overlap hasn't ended yet at the given
        local time. The local time is either before that rule's window or
        inside it. ``None`` if all windows lie in the past.
        """
        idx = bisect(self._local_ends, (local._local_secs(), local._nanos))
        return None if idx is None else self.rules[idx]

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[TransitionRule]:
        return iter(self.rules)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(other) is TransitionTable:
            return (
                self.base_offset == other.base_offset
                and self.rules == other.rules
            )
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.base_offset, self.rules))

    def __repr__(self) -> str:
        return (
            f"TransitionTable(base={self.base_offset}, "
            f"{len(self.rules)} transitions)"
        )


def bisect(arr: Sequence[_Key], x: _Key) -> Optional[int]:
    """Bisect the sorted keys to find the INDEX of the first entry after ``x``.
    Return None if there is no such entry.
    """
    size = len(arr)
    left = 0
    right = size

    while left < right:
        mid = left + size // 2

        if x >= arr[mid]:
            left = mid + 1
        else:
            right = mid
        size = right - left

    return left if left != len(arr) else None
