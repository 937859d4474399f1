"""METAL command compilation for the talhtml compiler.

Provides a mixin for the ``metal:*`` commands: macro definition and use,
slot definition and filling.

Macros and slot fillings are not copied out of the instruction list. Each is
a :class:`Template` view over the range of instructions its element compiled
to, sharing the list with the document that defines it.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from functools import partial
from types import MappingProxyType
from typing import TYPE_CHECKING

from talhtml.compiler.state import MacroUse
from talhtml.exceptions import CompileErrorKind
from talhtml.instructions import DefineSlot, UseMacro
from talhtml.template.core import Template

if TYPE_CHECKING:
    from talhtml.compiler.state import Frame, TagState
    from talhtml.exceptions import CompileError
    from talhtml.instructions import Instruction


class MetalCommandsMixin:
    """Mixin for compiling ``metal:*`` commands."""

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        _code: list[Instruction]
        _macros: dict[str, Template]
        _tag: TagState | None
        _use_macro: MacroUse | None
        _enclosing_use_macro: MacroUse | None

        def _append(self, instruction: Instruction) -> int: ...
        def _mark(self) -> int: ...
        def _patch(self, index: int, **changes: object) -> None: ...
        def _error(self, kind: CompileErrorKind) -> CompileError: ...

    def _metal_name(self, value: str) -> str:
        name = value.strip()
        if not name:
            raise self._error(CompileErrorKind.EXPRESSION_MISSING)
        return name

    def _metal_define_macro(self, value: str, frame: Frame) -> None:
        name = self._metal_name(value)
        frame.actions.append(partial(self._end_define_macro, name, self._tag.start))

    def _end_define_macro(self, name: str, start: int) -> None:
        self._macros[name] = Template(self._code, start, self._mark(), self._macros, name)

    def _metal_use_macro(self, value: str, frame: Frame) -> None:
        expression = self._metal_name(value)
        index = self._append(UseMacro(expression, attributes=self._tag.attributes))
        self._use_macro = MacroUse(index, outer=self._use_macro)
        frame.actions.append(partial(self._end_use_macro, self._use_macro))

    def _end_use_macro(self, use: MacroUse) -> None:
        self._patch(
            use.index,
            end_offset=self._mark() - use.index - 1,
            filled_slots=MappingProxyType(dict(use.filled_slots)),
        )
        self._use_macro = use.outer

    def _metal_define_slot(self, value: str, frame: Frame) -> None:
        index = self._append(DefineSlot(self._metal_name(value)))
        frame.actions.append(partial(self._end_define_slot, index))

    def _end_define_slot(self, index: int) -> None:
        self._patch(index, end_offset=self._mark() - index - 1)

    def _metal_fill_slot(self, value: str, frame: Frame) -> None:
        name = self._metal_name(value)
        # The macro being filled is the one around this element, even when
        # the element also uses a macro of its own.
        enclosing = self._enclosing_use_macro
        if enclosing is None:
            raise self._error(CompileErrorKind.SLOT_OUTSIDE_MACRO)
        frame.actions.append(partial(self._end_fill_slot, enclosing, name, self._tag.start))

    def _end_fill_slot(self, use: MacroUse, name: str, start: int) -> None:
        use.filled_slots[name] = Template(self._code, start, self._mark(), self._macros, name)
