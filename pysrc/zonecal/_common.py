from __future__ import annotations

from typing import TYPE_CHECKING, no_type_check

_object_new = object.__new__


class _ImmutableBase:
    __slots__ = ()

    # Immutable classes don't need to be copied
    @no_type_check
    def __copy__(self):
        return self

    @no_type_check
    def __deepcopy__(self, _):
        return self


if TYPE_CHECKING:
    from typing import final
else:

    def final(cls):

        def init_subclass_not_allowed(cls, **kwargs):  # pragma: no cover
            raise TypeError("Subclassing not allowed")

        cls.__init_subclass__ = init_subclass_not_allowed
        return cls


class Overflow(OverflowError):
    """An arithmetic result doesn't fit in the representable range"""

    @classmethod
    def _for_op(cls, op: str, a: int, b: int, bits: int) -> Overflow:
        return cls(f"{a} {op} {b} overflows a signed {bits}-bit integer")


class InvalidFieldValue(ValueError):
    """A date field is outside its valid range"""


class InvalidOffset(ValueError):
    """A UTC offset is out of range or has an invalid format"""
