from .common import Discontinuity, OffsetInfo, TransitionRule
from .store import TimeZoneNotFoundError, get_tz
from .table import TransitionTable
from .zone import TimeZone

__all__ = [
    "TimeZone",
    "TransitionRule",
    "TransitionTable",
    "Discontinuity",
    "OffsetInfo",
    "TimeZoneNotFoundError",
    "get_tz",
]
