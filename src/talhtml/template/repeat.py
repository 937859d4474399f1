"""Iteration metadata for ``tal:repeat``, reached through ``repeat/<name>/...``."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from talhtml.tales.resolution import resolve_property

_ROMAN_NUMERALS = (
    ("m", 1000),
    ("cm", 900),
    ("d", 500),
    ("cd", 400),
    ("c", 100),
    ("xc", 90),
    ("l", 50),
    ("xl", 40),
    ("x", 10),
    ("ix", 9),
    ("v", 5),
    ("iv", 4),
    ("i", 1),
)

MAX_ROMAN = 3999

# Path names exposed under repeat/<name>/, mapped to attribute names.
_PROPERTIES = {
    "index": "index",
    "number": "number",
    "even": "even",
    "odd": "odd",
    "start": "start",
    "end": "end",
    "length": "length",
    "letter": "letter",
    "Letter": "letter_upper",
    "roman": "roman",
    "Roman": "roman_upper",
}


def to_letters(index: int) -> str:
    """0 -> "a", 25 -> "z", 26 -> "aa" (bijective base 26)."""
    result = ""
    while index >= 0:
        index, column = divmod(index, 26)
        result = chr(ord("a") + column) + result
        index -= 1
    return result


def to_roman(number: int) -> str:
    """Lower-case roman numeral for 1..3999; empty string outside that range."""
    if not 0 < number <= MAX_ROMAN:
        return ""
    parts = []
    for numeral, value in _ROMAN_NUMERALS:
        count, number = divmod(number, value)
        parts.append(numeral * count)
    return "".join(parts)


class RepeatCursor:
    """Position within the sequence of one active ``tal:repeat``.

    Properties:
        index: 0-based position
        number: 1-based position
        even / odd: parity of ``index``
        start / end: True on the first / last item
        length: Number of items
        letter / Letter: a, b, ... z, aa, ab (upper case for ``Letter``)
        roman / Roman: i, ii, iii ... (upper case for ``Roman``)

    Any other name is looked up on the current item, so
    ``repeat/row/title`` is the same as ``row/title``.
    """

    __slots__ = ("_items", "_length", "_position", "repeat_id")

    def __init__(self, repeat_id: int, items: Sequence[Any]) -> None:
        self.repeat_id = repeat_id
        self._items = items
        self._length = len(items)
        self._position = 0

    def __repr__(self) -> str:
        return f"<RepeatCursor id={self.repeat_id} {self.number}/{self._length}>"

    @property
    def item(self) -> Any:
        """The current item."""
        return self._items[self._position]

    def advance(self) -> bool:
        """Move to the next item; False once the sequence is exhausted."""
        self._position += 1
        return self._position < self._length

    def tales_value(self, name: str) -> Any:
        attribute = _PROPERTIES.get(name)
        if attribute is not None:
            return getattr(self, attribute)
        return resolve_property(self.item, name)

    @property
    def index(self) -> int:
        return self._position

    @property
    def number(self) -> int:
        return self._position + 1

    @property
    def even(self) -> bool:
        return self._position % 2 == 0

    @property
    def odd(self) -> bool:
        return self._position % 2 == 1

    @property
    def start(self) -> bool:
        return self._position == 0

    @property
    def end(self) -> bool:
        return self._position == self._length - 1

    @property
    def length(self) -> int:
        return self._length

    @property
    def letter(self) -> str:
        return to_letters(self._position)

    @property
    def letter_upper(self) -> str:
        return self.letter.upper()

    @property
    def roman(self) -> str:
        return to_roman(self._position + 1)

    @property
    def roman_upper(self) -> str:
        return self.roman.upper()
