"""Reading compiled TZif files (RFC 8536) into transition tables.

Only the UT offsets matter for resolution. Abbreviations, DST flags and leap
second records are skipped.
"""

from __future__ import annotations

import struct
from io import BytesIO
from typing import IO, Optional, Sequence

from .._timeline import EPOCH_SECS_MAX, EPOCH_SECS_MIN, EpochSecs
from .posix import RULES_UNTIL_YEAR, TzStr, year_for_epoch
from .table import TransitionTable

OffsetSecs = int


class Header:
    """TZif file header"""

    __slots__ = (
        "version",
        "isutcnt",
        "isstdcnt",
        "leapcnt",
        "timecnt",
        "typecnt",
        "charcnt",
    )

    version: int
    isutcnt: int
    isstdcnt: int
    leapcnt: int
    timecnt: int
    typecnt: int
    charcnt: int

    def __init__(
        self,
        version: int,
        isutcnt: int,
        isstdcnt: int,
        leapcnt: int,
        timecnt: int,
        typecnt: int,
        charcnt: int,
    ):
        self.version = version
        self.isutcnt = isutcnt
        self.isstdcnt = isstdcnt
        self.leapcnt = leapcnt
        self.timecnt = timecnt
        self.typecnt = typecnt
        self.charcnt = charcnt

    def data_size(self, time_size: int) -> int:
        """Size of the data block following this header"""
        return (
            self.timecnt * (time_size + 1)
            + self.typecnt * 6
            + self.charcnt
            + self.leapcnt * (time_size + 4)
            + self.isstdcnt
            + self.isutcnt
        )


def parse_tzif(
    data: bytes, until_year: int = RULES_UNTIL_YEAR
) -> TransitionTable:
    """Parse TZif file data into a transition table. Yearly rules from the
    footer are expanded up to ``until_year``.
    """
    read = BytesIO(data)
    header = _parse_header(read)
    if header.version >= 2:
        # The v1 block is only there for old readers
        read.read(header.data_size(4))
        header = _parse_header(read)
        times = _parse_transition_times(header, read, ">{}q", 8)
    else:
        times = _parse_transition_times(header, read, ">{}i", 4)

    indices = list(read.read(header.timecnt))
    offsets = _parse_offsets(header.typecnt, read)
    if not offsets:
        raise ValueError("No offsets in TZif data")

    footer = None
    if header.version >= 2:
        # Skip to the newline-enclosed footer
        read.read(
            header.charcnt
            + header.leapcnt * 12
            + header.isstdcnt
            + header.isutcnt
            + 1
        )
        tz_string, *_ = read.read().split(b"\n", 1)
        if tz_string:
            footer = TzStr.parse(tz_string.decode("ascii"))

    try:
        explicit = [(t, offsets[i]) for t, i in zip(times, indices)]
    except IndexError:
        raise ValueError("Invalid offset index in TZif data") from None

    if not explicit and footer is not None:
        return footer.to_table(until_year=until_year)

    transitions = list(explicit)
    if footer is not None:
        last = transitions[-1][0]
        transitions.extend(
            (t, off)
            for t, off in footer.expand(
                year_for_epoch(clamp_epoch_secs(last)), until_year
            )
            if t > last
        )
    return TransitionTable.from_transitions(offsets[0], transitions)


def _parse_header(data: IO[bytes]) -> Header:
    if data.read(4) != b"TZif":
        raise ValueError("Invalid header value")

    version_byte = data.read(1)
    if version_byte == b"\x00":
        version = 1
    elif version_byte.isdigit():
        version = int(version_byte)
    else:
        raise ValueError("Invalid header value")

    data.read(15)  # reserved

    counts = data.read(24)
    if len(counts) != 24:
        raise ValueError("Truncated TZif header")
    return Header(version, *struct.unpack(">6l", counts))


def _parse_transition_times(
    header: Header, data: IO[bytes], fmt: str, size: int
) -> Sequence[EpochSecs]:
    raw = data.read(size * header.timecnt)
    if len(raw) != size * header.timecnt:
        raise ValueError("Truncated TZif data")
    return struct.unpack(fmt.format(header.timecnt), raw)


def _parse_offsets(typecnt: int, data: IO[bytes]) -> Sequence[OffsetSecs]:
    raw = data.read(6 * typecnt)
    if len(raw) != 6 * typecnt:
        raise ValueError("Truncated TZif data")
    return [utoff for utoff, *_ in struct.iter_unpack(">lbB", raw)]


def clamp_epoch_secs(value: int) -> EpochSecs:
    return max(EPOCH_SECS_MIN, min(EPOCH_SECS_MAX, value))


def is_tzif(data: Optional[bytes]) -> bool:
    return data is not None and data.startswith(b"TZif")
