"""TAL command compilation for the talhtml compiler.

Provides a mixin for the ``tal:*`` commands. Each handler receives the
attribute value and the element's frame; it may emit instructions, update
the start tag being assembled, and register end actions on the frame.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from talhtml.compiler.utils import split_clauses, split_content_value
from talhtml.exceptions import CompileErrorKind
from talhtml.instructions import (
    Condition,
    DefineVariable,
    EndRepeat,
    RemoveLocalVariable,
    Repeat,
)

if TYPE_CHECKING:
    from talhtml.compiler.state import Frame, TagState
    from talhtml.exceptions import CompileError
    from talhtml.instructions import Instruction


class TalCommandsMixin:
    """Mixin for compiling ``tal:*`` commands."""

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        _tag: TagState | None
        _next_repeat_id: int

        def _append(self, instruction: Instruction) -> int: ...
        def _mark(self) -> int: ...
        def _patch(self, index: int, **changes: object) -> None: ...
        def _error(self, kind: CompileErrorKind) -> CompileError: ...

    def _tal_define(self, value: str, frame: Frame) -> None:
        """``tal:define="[local|global] name expression; ..."``"""
        tag = self._tag
        for clause in split_clauses(value):
            is_global = False
            scope, *rest = clause.split(None, 1)
            if scope in ("local", "global") and rest:
                is_global = scope == "global"
                clause = rest[0]
            parts = clause.split(None, 1)
            if len(parts) != 2:
                raise self._error(CompileErrorKind.EXPRESSION_MISSING)
            name, expression = parts
            self._append(
                DefineVariable(name, expression, is_global=is_global, attributes=tag.attributes)
            )
            if not is_global:
                frame.actions.append(partial(self._append, RemoveLocalVariable()))

    def _tal_condition(self, value: str, frame: Frame) -> None:
        expression = value.strip()
        if not expression:
            raise self._error(CompileErrorKind.EXPRESSION_MISSING)
        index = self._append(Condition(expression, attributes=self._tag.attributes))
        frame.actions.append(partial(self._end_condition, index))

    def _end_condition(self, index: int) -> None:
        # Skip to just past the element's last instruction.
        self._patch(index, end_offset=self._mark() - index - 1)

    def _tal_repeat(self, value: str, frame: Frame) -> None:
        """``tal:repeat="name expression"``"""
        parts = value.split()
        if len(parts) != 2:
            raise self._error(CompileErrorKind.EXPRESSION_MALFORMED)
        name, expression = parts
        repeat_id = self._next_repeat_id
        self._next_repeat_id += 1
        index = self._append(
            Repeat(name, expression, repeat_id, attributes=self._tag.attributes)
        )
        frame.actions.append(partial(self._end_repeat, index, name, repeat_id))

    def _end_repeat(self, index: int, name: str, repeat_id: int) -> None:
        end = self._mark()
        self._append(EndRepeat(name, repeat_id, offset=index - end))
        self._patch(index, end_offset=end - index)

    def _tal_content(self, value: str, frame: Frame) -> None:
        self._set_content(value, replace=False)

    def _tal_replace(self, value: str, frame: Frame) -> None:
        self._set_content(value, replace=True)

    def _set_content(self, value: str, replace: bool) -> None:
        value = value.strip()
        if not value:
            raise self._error(CompileErrorKind.EXPRESSION_MISSING)
        tag = self._tag
        tag.content, tag.structure = split_content_value(value)
        tag.replace = replace

    def _tal_attributes(self, value: str, frame: Frame) -> None:
        """``tal:attributes="name expression; ..."``, applied in order."""
        for clause in split_clauses(value):
            parts = clause.split(None, 1)
            if len(parts) != 2:
                raise self._error(CompileErrorKind.EXPRESSION_MISSING)
            self._tag.attribute_expressions.append((parts[0], parts[1]))

    def _tal_omit_tag(self, value: str, frame: Frame) -> None:
        # An empty expression omits the tag unconditionally.
        self._tag.omit = value.strip()
