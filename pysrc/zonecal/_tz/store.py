"""Zone lookup by ID, with caching."""

from __future__ import annotations

import logging
import os.path
import sys
from collections import OrderedDict
from typing import TYPE_CHECKING, NewType, Optional
from weakref import WeakValueDictionary

from .._common import InvalidOffset
from .._offset import Offset
from .tzif import is_tzif
from .zone import TimeZone

__all__ = [
    "TimeZoneNotFoundError",
    "get_tz",
    "_clear_tz_cache",
    "_clear_tz_cache_by_keys",
    "_set_tzpath",
]

logger = logging.getLogger(__name__)

_NOGIL = hasattr(sys, "_is_gil_enabled") and not sys._is_gil_enabled()

_TZPATH: tuple[str, ...] = ()

# Loaded zones stay available as long as they're referenced somewhere.
# The few most recently used ones are kept alive by the LRU as well.
_TZCACHE_LRU_SIZE = 8
_tzcache_lru: OrderedDict[str, TimeZone] = OrderedDict()
_tzcache_lookup: WeakValueDictionary[str, TimeZone] = WeakValueDictionary()

# OrderedDict is thread-unsafe in Python < 3.14 under free-threading.
if TYPE_CHECKING or (
    _NOGIL and sys.version_info < (3, 14)
):  # pragma: no cover
    from threading import Lock as _Lock
else:

    class _Lock:
        def __enter__(self) -> None:
            pass

        def __exit__(self, *args) -> None:
            pass


_tzcache_lru_lock = _Lock()

# Prefix of IDs for zones with a constant offset, e.g. "UTC+01:30"
_FIXED_PREFIX = "UTC"


def _set_tzpath(to: tuple[str, ...]) -> None:
    global _TZPATH
    _TZPATH = to


def _clear_tz_cache() -> None:
    logger.debug("Clearing the time zone cache")
    _tzcache_lookup.clear()
    with _tzcache_lru_lock:
        _tzcache_lru.clear()


def _clear_tz_cache_by_keys(keys: tuple[str, ...]) -> None:
    logger.debug("Clearing time zone cache entries: %s", keys)
    with _tzcache_lru_lock:
        for k in keys:
            _tzcache_lookup.pop(k, None)
            _tzcache_lru.pop(k, None)


def get_tz(key: str, /) -> TimeZone:
    """Look up a zone by its ID.

    ``UTC`` optionally followed by an offset (``UTC+01:30``, ``UTCZ``) gives
    a fixed-offset zone. Any other ID is looked up in the IANA database:
    first in the ``TZPATH`` directories, then in the ``tzdata`` package.

    Example
    -------
    >>> get_tz("Europe/London")
    TimeZone(Europe/London)
    >>> get_tz("UTC+0130")
    TimeZone(UTC+01:30)
    >>> get_tz("UTC-00:00") is TimeZone.UTC
    True
    """
    if type(key) is not str:
        raise TypeError(f"Time zone key must be a str, got {key!r}")
    # Aliases of a fixed offset share one cache entry
    key = _canonical_key(key)
    instance = _tzcache_lookup.get(key)
    if instance is None:
        # Multiple threads may load the same zone concurrently. Zones are
        # immutable, so whichever instance is stored first is returned.
        instance = _tzcache_lookup.setdefault(key, _load_tz(key))

    with _tzcache_lru_lock:
        _tzcache_lru[key] = _tzcache_lru.pop(key, instance)
        if len(_tzcache_lru) > _TZCACHE_LRU_SIZE:
            try:
                _tzcache_lru.popitem(last=False)
            except KeyError:  # pragma: no cover
                pass  # other threads may be clearing too

    return instance


def validate_tzid(key: str) -> SafeTzId:
    """Checks for invalid characters and path traversal in the key."""
    if (
        key.isascii()
        # There's no standard limit on IANA tz IDs, but we have to draw
        # the line somewhere to prevent abuse.
        and 0 < len(key) < 100
        and all(b.isalnum() or b in "-_+/." for b in key)
        and ".." not in key
        and "//" not in key
        and "/./" not in key
        and key[0] not in ".-+/"
        and key[-1] != "/"
    ):
        return SafeTzId(key)
    else:
        raise TimeZoneNotFoundError.for_key(key)


# A key that has been confirmed not to be a path traversal
# or contain other "bad" characters.
SafeTzId = NewType("SafeTzId", str)


def _canonical_key(key: str) -> str:
    if not key.startswith(_FIXED_PREFIX) or key == _FIXED_PREFIX:
        return key
    try:
        offset = Offset.parse(key[len(_FIXED_PREFIX) :])
    except InvalidOffset:
        raise TimeZoneNotFoundError.for_key(key) from None
    if offset == Offset.UTC:
        return _FIXED_PREFIX
    return f"{_FIXED_PREFIX}{offset}"


def _fixed_tz(key: str) -> Optional[TimeZone]:
    # Expects a canonical key
    if not key.startswith(_FIXED_PREFIX):
        return None
    elif key == _FIXED_PREFIX:
        return TimeZone.UTC
    return TimeZone.fixed(Offset.parse(key[len(_FIXED_PREFIX) :]))


def _try_tzif_from_path(key: SafeTzId) -> Optional[bytes]:
    for search_path in _TZPATH:
        target = os.path.join(search_path, key)
        if os.path.isfile(target):
            logger.debug("Loading time zone %r from %s", key, target)
            with open(target, "rb") as f:
                return f.read()
    return None


def _tzif_from_tzdata(key: SafeTzId) -> bytes:
    try:
        tzdata_path = __import__("tzdata.zoneinfo").zoneinfo.__path__[0]
        # Check before reading, since the resulting exceptions vary
        # between platforms
        relpath = os.path.join(tzdata_path, *key.split("/"))
        if os.path.isfile(relpath):
            logger.debug("Loading time zone %r from tzdata", key)
            with open(relpath, "rb") as f:
                return f.read()
        else:
            raise FileNotFoundError()
    # Several exceptions amount to "can't find the key"
    except (
        ImportError,
        FileNotFoundError,
        UnicodeEncodeError,
    ):
        raise TimeZoneNotFoundError.for_key(key) from None


def _load_tz(key: str) -> TimeZone:
    fixed = _fixed_tz(key)
    if fixed is not None:
        return fixed

    safe_key = validate_tzid(key)
    tzif = _try_tzif_from_path(safe_key) or _tzif_from_tzdata(safe_key)
    if not is_tzif(tzif):
        # A file exists, but it isn't TZif data
        raise TimeZoneNotFoundError.for_key(key)
    try:
        return TimeZone.parse_tzif(tzif, key)
    except ValueError as e:
        raise TimeZoneNotFoundError(
            f"Invalid TZif data for key {key!r}: {e}"
        ) from e


class TimeZoneNotFoundError(ValueError):
    """A timezone with the given ID was not found"""

    @classmethod
    def for_key(cls, key: str) -> TimeZoneNotFoundError:
        return cls(f"No time zone found for key: {key!r}")
