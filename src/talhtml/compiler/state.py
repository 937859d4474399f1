"""Working state of the compiler while it walks the token stream."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from talhtml.instructions import Attributes, StartTag

if TYPE_CHECKING:
    from talhtml.template.core import Template

EndAction = Callable[[], None]


@dataclass(slots=True)
class Frame:
    """An open element waiting for its end tag.

    ``close`` emits the element's end tag; ``actions`` are registered by the
    element's commands. When the element ends, ``close`` runs first and then
    the actions run most-recently-registered first, so the instructions of a
    later (inner) command are complete before an earlier one measures them.

    A ``plain`` frame belongs to an element without commands; its end tag is
    copied to the output as literal text.
    """

    tag: str
    close: EndAction | None = None
    actions: list[EndAction] = field(default_factory=list)
    plain: bool = False

    def run(self) -> None:
        if self.close is not None:
            self.close()
        for action in reversed(self.actions):
            action()


@dataclass(slots=True)
class TagState:
    """Start tag being assembled by the commands of one element."""

    tag: str
    attributes: Attributes
    start: int
    void: bool = False
    self_closing: bool = False
    content: str | None = None
    structure: bool = False
    replace: bool = False
    omit: str | None = None
    attribute_expressions: list[tuple[str, str]] = field(default_factory=list)

    def build(self) -> StartTag:
        return StartTag(
            tag=self.tag,
            attributes=self.attributes,
            void=self.void,
            self_closing=self.self_closing,
            content=self.content,
            structure=self.structure,
            replace=self.replace,
            omit=self.omit,
            attribute_expressions=tuple(self.attribute_expressions),
        )


@dataclass(slots=True)
class MacroUse:
    """An open ``metal:use-macro`` element collecting its slot fillings."""

    index: int
    filled_slots: dict[str, Template] = field(default_factory=dict)
    outer: MacroUse | None = None
