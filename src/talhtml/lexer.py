"""HTML tokenizer for talhtml templates.

Adapts the standard library ``html.parser.HTMLParser`` (a push parser) into a
pull-style token stream for the compiler:

    >>> from talhtml.lexer import Lexer
    >>> [t.type.name for t in Lexer("<b>Hi</b>").tokens()]
    ['START_TAG', 'TEXT', 'END_TAG']

Every token records where it starts in the source. A token's ``raw`` text
runs up to the start of the following token, so ``raw`` and ``offset`` are
enough to quote the input around a compile error without re-scanning.

Tokens are produced lazily: the source is fed to the parser in chunks and
the tokens completed by each chunk are yielded before the next chunk is fed.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterator
from html.parser import HTMLParser
from typing import IO

from talhtml._types import Token, TokenType
from talhtml.utils.constants import RAW_TEXT_ELEMENTS

CHUNK_SIZE = 8192


def read_source(source: str | bytes | IO[str] | IO[bytes]) -> str:
    """Return template source text from a string, bytes or readable stream.

    Bytes are decoded as UTF-8. I/O errors raised by ``read()`` propagate.
    """
    if hasattr(source, "read"):
        source = source.read()
    if isinstance(source, (bytes, bytearray)):
        return bytes(source).decode("utf-8")
    if not isinstance(source, str):
        raise TypeError(
            f"template source must be str, bytes or a readable stream, not {type(source).__name__}"
        )
    return source


class Lexer(HTMLParser):
    """Turns template source into a stream of :class:`Token` objects."""

    def __init__(self, source: str):
        super().__init__(convert_charrefs=True)
        self.source = source
        # Offsets of the first character of every line, for getpos() -> offset.
        self._line_starts = [0]
        for index, char in enumerate(source):
            if char == "\n":
                self._line_starts.append(index + 1)
        self._ready: list[Token] = []
        self._pending: dict | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def tokens(self) -> Iterator[Token]:
        """Yield tokens in document order."""
        for start in range(0, len(self.source), CHUNK_SIZE):
            self.feed(self.source[start : start + CHUNK_SIZE])
            yield from self._drain()
        self.close()
        self._complete(len(self.source))
        yield from self._drain()

    def trailing(self, token: Token | None, limit: int) -> str:
        """Return up to ``limit`` characters of source following ``token``."""
        start = token.end_offset if token is not None else 0
        return self.source[start : start + limit]

    def offset_of(self, lineno: int, col_offset: int) -> int:
        return self._line_starts[lineno - 1] + col_offset

    def position_of(self, offset: int) -> tuple[int, int]:
        """Map a character offset back to ``(lineno, col_offset)``."""
        index = bisect_right(self._line_starts, offset) - 1
        return index + 1, offset - self._line_starts[index]

    # ------------------------------------------------------------------
    # Token assembly
    # ------------------------------------------------------------------

    def _drain(self) -> Iterator[Token]:
        ready, self._ready = self._ready, []
        yield from ready

    def _complete(self, end: int) -> None:
        """Finish the pending token now that the next one starts at ``end``."""
        pending = self._pending
        if pending is None:
            return
        self._pending = None
        offset = pending.pop("offset")
        lineno, col = self.position_of(offset)
        self._ready.append(
            Token(
                raw=self.source[offset:end],
                lineno=lineno,
                col_offset=col,
                offset=offset,
                **pending,
            )
        )

    def _push(self, type: TokenType, value: str, **extra: object) -> None:
        offset = self.offset_of(*self.getpos())
        self._complete(offset)
        self._pending = {"type": type, "value": value, "offset": offset, **extra}

    # ------------------------------------------------------------------
    # HTMLParser callbacks
    # ------------------------------------------------------------------

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._push(TokenType.START_TAG, tag, attributes=tuple(attrs))

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._push(TokenType.SELF_CLOSING_TAG, tag, attributes=tuple(attrs))

    def handle_endtag(self, tag: str) -> None:
        self._push(TokenType.END_TAG, tag)

    def handle_data(self, data: str) -> None:
        raw_text = self.cdata_elem in RAW_TEXT_ELEMENTS
        self._push(TokenType.TEXT, data, raw_text=raw_text)

    def handle_comment(self, data: str) -> None:
        self._push(TokenType.COMMENT, data)

    def handle_decl(self, decl: str) -> None:
        self._push(TokenType.DOCTYPE, decl)

    def handle_pi(self, data: str) -> None:
        self._push(TokenType.TEXT, f"<?{data}>", raw_text=True)

    def unknown_decl(self, data: str) -> None:
        self._push(TokenType.TEXT, f"<![{data}]>", raw_text=True)
