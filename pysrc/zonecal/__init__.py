"""Calendar date resolution and timezone offset lookup."""

from __future__ import annotations

import os as _os
import sysconfig as _sysconfig
from importlib.resources import files as _resource_files
from pathlib import Path as _Path
from typing import Iterable as _Iterable, Iterator as _Iterator

from ._common import InvalidFieldValue, InvalidOffset, Overflow
from ._date import Date
from ._math import safe_add, safe_multiply, safe_subtract
from ._offset import Offset
from ._resolve import (
    DateResolver,
    Rejected,
    Resolution,
    Resolved,
    resolve_date,
)
from ._timeline import Instant, LocalDateTime
from ._tz.common import Discontinuity, OffsetInfo, TransitionRule
from ._tz.resolver import get_offset, get_offset_info
from ._tz.store import (
    TimeZoneNotFoundError,
    _clear_tz_cache,
    _clear_tz_cache_by_keys,
    _set_tzpath,
    get_tz,
)
from ._tz.table import TransitionTable
from ._tz.zone import TimeZone
from ._zoned import ZonedDate

__version__ = "0.1.0"

__all__ = [
    # Arithmetic
    "safe_add",
    "safe_subtract",
    "safe_multiply",
    # Dates and field resolution
    "Date",
    "ZonedDate",
    "DateResolver",
    "Resolved",
    "Rejected",
    "Resolution",
    "resolve_date",
    # Timeline
    "Offset",
    "Instant",
    "LocalDateTime",
    # Zones
    "TimeZone",
    "TransitionRule",
    "TransitionTable",
    "Discontinuity",
    "OffsetInfo",
    "get_offset",
    "get_offset_info",
    "get_tz",
    # Configuration
    "TZPATH",
    "reset_tzpath",
    "clear_tzcache",
    "available_timezones",
    # Exceptions
    "Overflow",
    "InvalidFieldValue",
    "InvalidOffset",
    "TimeZoneNotFoundError",
]

TZPATH: tuple[str, ...] = ()
"""The paths in which ``zonecal`` searches for timezone data.
By default, this is determined the same way as :data:`zoneinfo.TZPATH`.
Use :func:`reset_tzpath` to change it.
"""


def reset_tzpath(target: _Iterable[str | _os.PathLike[str]] | None = None, /):
    """Reset or set the paths in which ``zonecal`` searches for timezone data.

    It does not affect the :mod:`zoneinfo` module or other libraries.

    Note
    ----
    Zones already in the cache aren't reloaded from the new path.
    Call :func:`clear_tzcache` for that.
    """
    global TZPATH

    if target is not None:
        # A common mistake, so we raise a descriptive error
        if isinstance(target, (str, bytes)):
            raise TypeError("tzpath must be an iterable of paths")

        target = list(target)
        if not all(map(_os.path.isabs, target)):
            raise ValueError("tzpaths must be absolute paths")
        TZPATH = tuple(str(_Path(p)) for p in target)
    else:
        TZPATH = _tzpath_from_env()
    _set_tzpath(TZPATH)


def _tzpath_from_env() -> tuple[str, ...]:
    try:
        env_var = _os.environ["PYTHONTZPATH"]
    except KeyError:
        env_var = _sysconfig.get_config_var("TZPATH")

    if not env_var:
        return ()

    # invalid paths are silently ignored, like zoneinfo does
    return tuple(filter(_os.path.isabs, env_var.split(_os.pathsep)))


def clear_tzcache(*, only_keys: _Iterable[str] | None = None) -> None:
    """Clear the timezone cache. If ``only_keys`` is provided, only the cache
    for those keys is cleared.

    Caution
    -------
    Zones loaded after clearing are new instances. They compare equal to the
    old ones if their data is unchanged, but aren't identical to them.
    """
    if only_keys is None:
        _clear_tz_cache()
    else:
        _clear_tz_cache_by_keys(tuple(only_keys))


def available_timezones() -> set[str]:
    """Gather the set of all available IANA timezone IDs.

    Recalculated on each call, from the currently configured ``TZPATH``
    and the ``tzdata`` package. The fixed-offset ``UTC+HH:MM`` IDs
    aren't included.
    """
    zones = set()
    try:
        with _resource_files("tzdata").joinpath("zones").open("r") as f:
            zones.update(map(str.strip, f))
    except (ImportError, FileNotFoundError):
        pass

    for base in TZPATH:
        zones.update(_find_all_tznames(_Path(base)))

    zones.discard("posixrules")  # a special file, not a zone
    zones.discard("")
    return zones


def _find_all_tznames(base: _Path) -> _Iterator[str]:
    if not base.is_dir():
        return
    for entry in base.iterdir():
        if entry.is_dir():
            # "right" and "posix" hold variants of the regular zones
            if entry.name in ("right", "posix"):
                continue
            for p in _find_nested_tzfiles(entry):
                yield p.relative_to(base).as_posix()
        elif _is_tzifile(entry):
            yield entry.name


def _find_nested_tzfiles(path: _Path) -> _Iterator[_Path]:
    for entry in path.iterdir():
        if entry.is_dir():
            yield from _find_nested_tzfiles(entry)
        elif _is_tzifile(entry):
            yield entry


def _is_tzifile(p: _Path) -> bool:
    try:
        with p.open("rb") as f:
            return f.read(4) == b"TZif"
    except OSError:
        return False


reset_tzpath()  # populate the tzpath once at startup
