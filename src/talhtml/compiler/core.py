"""talhtml Compiler Core: main Compiler class.

The Compiler walks the lexer's token stream once and produces a flat list of
instructions for the rendering engine. Uses a mixin-based design: the core
owns the element stack and instruction list, the command mixins translate
``tal:*`` / ``metal:*`` attributes.

Design Principles:
1. **Single pass**: No DOM is built; each token is handled as it arrives
2. **Plain output coalescing**: Literal markup is buffered and emitted as one
   ``RenderData`` instruction per run
3. **Deferred end actions**: Commands that need to know where their element
   ends register callbacks on the element's frame; the callbacks patch
   relative offsets when the matching end tag arrives
4. **O(1) dispatch**: Dict-based token type → handler lookup

Offsets:
All jumps are relative. The engine adds an instruction's offset to the
instruction pointer and then advances by one, so a ``Condition`` at index
``i`` whose element ends before index ``m`` carries ``m - i - 1``.

Element Compilation:
    ```
    <li tal:define="x item/name" tal:repeat="item items" tal:content="x">

    0: DefineVariable(x)
    1: Repeat(item, end_offset=3)
    2: StartTag(li, content=x, end_offset=1)
    3: EndTag(li)
    4: EndRepeat(item, offset=-3)
    5: RemoveLocalVariable
    ```

"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from functools import partial
from typing import TYPE_CHECKING

from talhtml._types import Token, TokenType
from talhtml.compiler.commands import (
    COMMAND_PREFIXES,
    COMMAND_PRIORITY,
    CommandCompilationMixin,
)
from talhtml.compiler.state import Frame, MacroUse, TagState
from talhtml.exceptions import CompileError, CompileErrorKind
from talhtml.instructions import EndTag, RenderData
from talhtml.lexer import Lexer
from talhtml.template.core import Template
from talhtml.utils.constants import ERROR_CONTEXT_LIMIT, VOID_ELEMENTS
from talhtml.utils.html import escape_text, format_start_tag

if TYPE_CHECKING:
    from talhtml.instructions import Instruction

logger = logging.getLogger(__name__)


class Compiler(CommandCompilationMixin):
    """Compile template source to a :class:`Template`.

    A Compiler may be reused; each call to :meth:`compile` starts from a
    clean state, so compiling the same source twice yields equal
    instruction lists.

    Attributes:
        _name: Template name for error messages
        _code: Instruction list being built (shared by macros and slots)
        _pending: Literal output not yet emitted as ``RenderData``
        _frames: Stack of open elements
        _macros: Macro name → macro Template
        _next_repeat_id: Counter giving each ``tal:repeat`` a unique id
        _token: Token being compiled (for error context)
        _tag: Start tag being assembled, while commands run
        _use_macro: Innermost open ``metal:use-macro``
        _enclosing_use_macro: ``_use_macro`` as it was when the current
            element started

    Token Dispatch:
        Uses O(1) dict lookup for token type → handler:
            ```python
            dispatch = {
                TokenType.START_TAG: self._compile_start_tag,
                TokenType.TEXT: self._compile_text,
                ...
            }
            handler = dispatch[token.type]
            ```

    """

    __slots__ = (
        "_code",
        "_command_dispatch",
        "_enclosing_use_macro",
        "_frames",
        "_lexer",
        "_macros",
        "_name",
        "_next_repeat_id",
        "_pending",
        "_tag",
        "_token",
        "_token_dispatch",
        "_use_macro",
    )

    def __init__(self, name: str | None = None):
        self._name = name
        self._token_dispatch: dict[TokenType, Callable[[Token], None]] | None = None
        self._command_dispatch: dict[str, Callable[[str, Frame], None]] | None = None
        self._reset(Lexer(""))

    def _reset(self, lexer: Lexer) -> None:
        self._lexer = lexer
        self._code: list[Instruction] = []
        self._pending: list[str] = []
        self._frames: list[Frame] = []
        self._macros: dict[str, Template] = {}
        self._next_repeat_id = 0
        self._token: Token | None = None
        self._tag: TagState | None = None
        self._use_macro: MacroUse | None = None
        self._enclosing_use_macro: MacroUse | None = None

    def compile(self, source: str) -> Template:
        """Compile template source text.

        Raises:
            CompileError: On the first structural error in the source
        """
        self._reset(Lexer(source))
        dispatch = self._get_token_dispatch()
        for token in self._lexer.tokens():
            self._token = token
            dispatch[token.type](token)

        # Elements still open at the end of input are closed implicitly,
        # innermost first. Plain elements get no end tag.
        while self._frames:
            self._frames.pop().run()
        self._flush()

        code = self._code
        return Template(code, 0, len(code), self._macros, self._name)

    # ─────────────────────────────────────────────────────────────────────────
    # Instruction list
    # ─────────────────────────────────────────────────────────────────────────

    def _emit(self, text: str) -> None:
        """Queue literal output."""
        self._pending.append(text)

    def _flush(self) -> None:
        if self._pending:
            self._code.append(RenderData("".join(self._pending)))
            self._pending.clear()

    def _mark(self) -> int:
        """Index the next instruction will get, after pending output."""
        self._flush()
        return len(self._code)

    def _append(self, instruction: Instruction) -> int:
        index = self._mark()
        self._code.append(instruction)
        return index

    def _patch(self, index: int, **changes: object) -> None:
        self._code[index] = replace(self._code[index], **changes)

    def _error(self, kind: CompileErrorKind) -> CompileError:
        token = self._token
        if token is None:
            return CompileError(kind, name=self._name, source=self._lexer.source)
        return CompileError(
            kind,
            last_token=token.raw,
            next_data=self._lexer.trailing(token, ERROR_CONTEXT_LIMIT),
            lineno=token.lineno,
            col_offset=token.col_offset,
            name=self._name,
            source=self._lexer.source,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Token handlers
    # ─────────────────────────────────────────────────────────────────────────

    def _get_token_dispatch(self) -> dict[TokenType, Callable[[Token], None]]:
        if self._token_dispatch is None:
            self._token_dispatch = {
                TokenType.START_TAG: self._compile_start_tag,
                TokenType.SELF_CLOSING_TAG: self._compile_start_tag,
                TokenType.END_TAG: self._compile_end_tag,
                TokenType.TEXT: self._compile_text,
                TokenType.COMMENT: self._compile_comment,
                TokenType.DOCTYPE: self._compile_doctype,
            }
        return self._token_dispatch

    def _get_command_dispatch(self) -> dict[str, Callable[[str, Frame], None]]:
        if self._command_dispatch is None:
            self._command_dispatch = {
                "metal:define-macro": self._metal_define_macro,
                "metal:use-macro": self._metal_use_macro,
                "metal:define-slot": self._metal_define_slot,
                "metal:fill-slot": self._metal_fill_slot,
                "tal:define": self._tal_define,
                "tal:condition": self._tal_condition,
                "tal:repeat": self._tal_repeat,
                "tal:content": self._tal_content,
                "tal:replace": self._tal_replace,
                "tal:attributes": self._tal_attributes,
                "tal:omit-tag": self._tal_omit_tag,
            }
        return self._command_dispatch

    def _compile_text(self, token: Token) -> None:
        self._emit(token.value if token.raw_text else escape_text(token.value))

    def _compile_comment(self, token: Token) -> None:
        self._emit(f"<!--{token.value}-->")

    def _compile_doctype(self, token: Token) -> None:
        self._emit(f"<!{token.value}>")

    def _compile_start_tag(self, token: Token) -> None:
        tag = token.value
        self_closing = token.type is TokenType.SELF_CLOSING_TAG
        void = self_closing or tag in VOID_ELEMENTS

        commands: list[tuple[int, str, str]] = []
        attributes: list[tuple[str, str | None]] = []
        for name, value in token.attributes:
            if not name.startswith(COMMAND_PREFIXES):
                attributes.append((name, value))
            elif name in COMMAND_PRIORITY:
                commands.append((COMMAND_PRIORITY[name], name, value or ""))
            else:
                raise self._error(CompileErrorKind.UNKNOWN_COMMAND)

        if not commands:
            self._emit(format_start_tag(tag, attributes, self_closing))
            if not void:
                self._frames.append(Frame(tag, plain=True))
            return

        frame = Frame(tag)
        state = TagState(
            tag, tuple(attributes), self._mark(), void=void, self_closing=self_closing
        )
        self._tag = state
        self._enclosing_use_macro = self._use_macro
        dispatch = self._get_command_dispatch()
        for _, name, value in sorted(commands):
            dispatch[name](value, frame)
        index = self._append(state.build())
        self._tag = None

        if void:
            # Nothing can come between a void element's start and end.
            frame.run()
            return
        frame.close = partial(self._close_element, index, tag, state.omit is not None)
        self._frames.append(frame)

    def _close_element(self, index: int, tag: str, check_omit: bool) -> None:
        end = self._append(EndTag(tag, check_omit=check_omit))
        self._patch(index, end_offset=end - index)

    def _compile_end_tag(self, token: Token) -> None:
        tag = token.value
        if not self._frames:
            raise self._error(CompileErrorKind.UNEXPECTED_CLOSE_TAG)
        frame = self._frames.pop()
        if frame.tag != tag:
            logger.warning("Mismatched tags %s and %s", frame.tag, tag)
            raise self._error(CompileErrorKind.UNEXPECTED_CLOSE_TAG)
        if frame.plain:
            self._emit(f"</{tag}>")
        frame.run()
