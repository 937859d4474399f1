"""Render instructions produced by the talhtml compiler.

A compiled template is a flat sequence of these instructions. Control flow
is expressed with relative offsets: an instruction at index ``i`` with
offset ``n`` makes the renderer continue at ``i + n + 1``. Offsets never
refer to absolute positions, so any contiguous slice that covers whole
elements (a macro, a slot filling) can be replayed on its own.

All instructions are immutable. The compiler fills in offsets by replacing
an instruction with an updated copy once the matching end tag is seen.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from talhtml.template.core import Template

Attributes = tuple[tuple[str, str | None], ...]

_EMPTY_SLOTS: Mapping[str, Template] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class Instruction:
    """Base class for all render instructions."""


@dataclass(frozen=True, slots=True)
class RenderData(Instruction):
    """Plain output: text, comments and tags without commands."""

    data: str

    def __str__(self) -> str:
        data = self.data if len(self.data) <= 60 else self.data[:60] + "..."
        return "[Output] " + data.replace("\n", "\\n")


@dataclass(frozen=True, slots=True)
class StartTag(Instruction):
    """Start tag of an element carrying TAL or METAL commands.

    Attributes:
        tag: Element name
        attributes: Original (non-command) attributes in source order
        void: True for void and self-closing elements (no end tag)
        self_closing: Written as ``<tag />`` in the source
        content: ``tal:content`` / ``tal:replace`` expression
        structure: Insert the content value without escaping
        replace: The content replaces the whole element
        omit: ``tal:omit-tag`` expression (empty string omits always)
        attribute_expressions: ``tal:attributes`` clauses in declaration order
        end_offset: Distance to the matching :class:`EndTag`
    """

    tag: str
    attributes: Attributes = ()
    void: bool = False
    self_closing: bool = False
    content: str | None = None
    structure: bool = False
    replace: bool = False
    omit: str | None = None
    attribute_expressions: tuple[tuple[str, str], ...] = ()
    end_offset: int = 0

    def __str__(self) -> str:
        desc = f"[Start Tag] {self.tag}"
        if self.content is not None:
            if self.structure:
                desc += " structure"
            action = "replace with" if self.replace else "content of"
            desc += f" {action} '{self.content}'"
        if self.attribute_expressions:
            desc += f" attributes set to {list(self.attribute_expressions)}"
        if self.omit is not None:
            desc += f" omit tag if '{self.omit}'"
        return desc + f" (end tag offset {self.end_offset} void element {self.void})"


@dataclass(frozen=True, slots=True)
class EndTag(Instruction):
    """End tag of an element carrying commands."""

    tag: str
    check_omit: bool = False

    def __str__(self) -> str:
        return f"[End Tag] {self.tag} (check omit flag: {self.check_omit})"


@dataclass(frozen=True, slots=True)
class DefineVariable(Instruction):
    """``tal:define`` clause: bind ``name`` locally or globally."""

    name: str
    expression: str
    is_global: bool = False
    attributes: Attributes = ()

    def __str__(self) -> str:
        scope = "global" if self.is_global else "local"
        return f"[Define Variable] {scope} {self.name} to '{self.expression}'"


@dataclass(frozen=True, slots=True)
class RemoveLocalVariable(Instruction):
    """Drop the most recent local binding, restoring whatever it shadowed."""

    def __str__(self) -> str:
        return "[Remove Local Variable]"


@dataclass(frozen=True, slots=True)
class Condition(Instruction):
    expression: str
    end_offset: int = 0
    attributes: Attributes = ()

    def __str__(self) -> str:
        return f"[Condition] '{self.expression}' (to offset {self.end_offset})"


@dataclass(frozen=True, slots=True)
class Repeat(Instruction):
    """Start of a ``tal:repeat`` body.

    ``repeat_id`` is unique per compiled repeat so that an :class:`EndRepeat`
    only advances the loop it belongs to.
    """

    name: str
    expression: str
    repeat_id: int
    end_offset: int = 0
    attributes: Attributes = ()

    def __str__(self) -> str:
        return (
            f"[Repeat] {self.name} condition '{self.expression}' "
            f"(id {self.repeat_id} end offset {self.end_offset})"
        )


@dataclass(frozen=True, slots=True)
class EndRepeat(Instruction):
    """End of a ``tal:repeat`` body; ``offset`` jumps back past the Repeat."""

    name: str
    repeat_id: int
    offset: int = 0

    def __str__(self) -> str:
        return (
            f"[End Repeat] {self.name} "
            f"(id {self.repeat_id} loop start offset {self.offset})"
        )


@dataclass(frozen=True, slots=True)
class DefineSlot(Instruction):
    name: str
    end_offset: int = 0

    def __str__(self) -> str:
        return f"[Define Slot] {self.name} (end offset {self.end_offset})"


@dataclass(frozen=True, slots=True)
class UseMacro(Instruction):
    """``metal:use-macro``: render another template in place of the element.

    ``filled_slots`` maps slot names to the templates compiled from the
    ``metal:fill-slot`` elements inside this one.
    """

    expression: str
    end_offset: int = 0
    filled_slots: Mapping[str, Template] = field(default_factory=lambda: _EMPTY_SLOTS)
    attributes: Attributes = ()

    def __str__(self) -> str:
        desc = f"[Use Macro] {self.expression} (end offset {self.end_offset})"
        if self.filled_slots:
            desc += f" filling {', '.join(self.filled_slots)}"
        return desc
