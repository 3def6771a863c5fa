import struct
from typing import Optional, Sequence

from zonecal import Instant, Offset, TransitionRule, TransitionTable

# The POSIX TZ string for the London timezone.
LONDON_TZ_POSIX = "GMT0BST,M3.5.0/1,M10.5.0"

UTC = Offset.UTC
PLUS_ONE = Offset.of_hms(1)

# Clocks go forward at 01:00 UTC, and back at 01:00 UTC
LONDON_GAP_2008 = Instant.from_utc(2008, 3, 30, 1)
LONDON_OVERLAP_2008 = Instant.from_utc(2008, 10, 26, 1)

LONDON_2008 = TransitionTable(
    UTC,
    [
        TransitionRule(LONDON_GAP_2008, UTC, PLUS_ONE),
        TransitionRule(LONDON_OVERLAP_2008, PLUS_ONE, UTC),
    ],
)


class AlwaysEqual:
    def __eq__(self, _):
        return True


class NeverEqual:
    def __eq__(self, _):
        return False


class AlwaysLarger:
    def __lt__(self, _):
        return False

    def __le__(self, _):
        return False

    def __gt__(self, _):
        return True

    def __ge__(self, _):
        return True


class AlwaysSmaller:
    def __lt__(self, _):
        return True

    def __le__(self, _):
        return True

    def __gt__(self, _):
        return False

    def __ge__(self, _):
        return False


def make_tzif(
    transitions: Sequence[tuple[int, int]],
    utoffs: Sequence[int],
    footer: Optional[str] = None,
    version: int = 2,
) -> bytes:
    """Build TZif file contents from (epoch secs, type index) transitions
    and the UT offset of each type. Other fields are filled with dummies.
    """
    chars = b"".join(b"T%d\x00" % i for i in range(len(utoffs)))

    def header() -> bytes:
        version_byte = b"\x00" if version == 1 else str(version).encode()
        return (
            b"TZif"
            + version_byte
            + bytes(15)
            + struct.pack(
                ">6l", 0, 0, 0, len(transitions), len(utoffs), len(chars)
            )
        )

    def block(time_fmt: str) -> bytes:
        data = b"".join(struct.pack(time_fmt, t) for t, _ in transitions)
        data += bytes(i for _, i in transitions)
        abbr = 0
        for i, utoff in enumerate(utoffs):
            data += struct.pack(">lbB", utoff, 0, abbr)
            abbr += len(b"T%d\x00" % i)
        return data + chars

    if version == 1:
        return header() + block(">l")
    v1_transitions = [(t, i) for t, i in transitions if -(2**31) <= t < 2**31]
    v1 = make_tzif(v1_transitions, utoffs, version=1)
    return (
        b"TZif"
        + str(version).encode()
        + v1[5:]
        + header()
        + block(">q")
        + b"\n"
        + (footer or "").encode()
        + b"\n"
    )
