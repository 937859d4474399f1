"""Token types produced by the talhtml lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Kinds of HTML token fed to the compiler."""

    START_TAG = auto()
    END_TAG = auto()
    SELF_CLOSING_TAG = auto()
    TEXT = auto()
    COMMENT = auto()
    DOCTYPE = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """A single HTML token.

    Attributes:
        type: Token kind
        value: Lower-cased tag name for tags, otherwise the token text
        raw: Source text of the token (used in error messages)
        lineno: 1-based line of the token start
        col_offset: 0-based column of the token start
        offset: Character offset of the token start in the source
        attributes: Ordered ``(name, value)`` pairs; ``value`` is None for
            bare attributes such as ``<input disabled>``
        raw_text: True for text inside ``<script>``/``<style>`` and for
            markup passed through unparsed (must not be escaped)
    """

    type: TokenType
    value: str
    raw: str
    lineno: int = 1
    col_offset: int = 0
    offset: int = 0
    attributes: tuple[tuple[str, str | None], ...] = ()
    raw_text: bool = False

    @property
    def end_offset(self) -> int:
        """Character offset just past the token."""
        return self.offset + len(self.raw)
