"""Special TALES values and the truth / sequence rules applied to data."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from numbers import Number
from typing import Any


class Sentinel(Enum):
    """Markers that carry control meaning rather than data.

    ``DEFAULT`` asks a command to leave the original template output alone.
    ``NOT_FOUND`` is what an unresolvable path evaluates to before it is
    turned into ``None`` for the caller.
    """

    DEFAULT = "default"
    NOT_FOUND = "not found"

    def __repr__(self) -> str:
        return self.name


DEFAULT = Sentinel.DEFAULT
NOT_FOUND = Sentinel.NOT_FOUND

_TEXT_TYPES = (str, bytes, bytearray)


def is_sequence(value: Any) -> bool:
    """True if ``value`` can drive a ``tal:repeat``.

    Lists, tuples, ranges and other ordered sequences qualify. Strings and
    mappings do not.
    """
    return isinstance(value, Sequence) and not isinstance(value, _TEXT_TYPES)


def true_or_false(value: Any) -> bool:
    """Truth of a TALES value.

    False for ``None``, not-found, ``False``, zero numbers (any
    :class:`numbers.Number`, including ``Decimal`` and ``Fraction``), empty
    strings and empty sequences. Everything else is true, including ``DEFAULT`` and
    mappings (even empty ones).
    """
    if value is None or value is NOT_FOUND:
        return False
    if value is DEFAULT:
        return True
    if isinstance(value, (Number, *_TEXT_TYPES)):
        return bool(value)
    if is_sequence(value):
        return len(value) > 0
    return True


def to_text(value: Any) -> str:
    """Text form of a value for output; ``None`` and sentinels give ``""``."""
    if value is None or isinstance(value, Sentinel):
        return ""
    if isinstance(value, str):
        return value
    return str(value)
