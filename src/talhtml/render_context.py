"""Per-render state for the instruction interpreter."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from talhtml.container import VariableContainer
from talhtml.tales.evaluator import DebugFunc, Tales, no_debug


@dataclass(slots=True)
class RenderContext:
    """State owned by one running template.

    A top-level render creates one context. Each macro or slot expansion
    runs in a child context with its own instruction pointer and omit-tag
    flags, sharing everything else with its parent.

    Attributes:
        write: Output sink; receives each chunk of rendered text
        tales: Expression evaluator and variable state
        slots: Slot fillings visible to ``metal:define-slot``
        debug: Trace function (``logging.Logger.debug`` signature)
        ip: Index of the instruction being executed
        omit_flags: ``tal:omit-tag`` results waiting for their end tag
    """

    write: Callable[[str], Any]
    tales: Tales
    slots: VariableContainer = field(default_factory=VariableContainer)
    debug: DebugFunc = no_debug
    ip: int = 0
    omit_flags: list[bool] = field(default_factory=list)

    def push_omit_flag(self, flag: bool) -> None:
        self.omit_flags.append(flag)

    def pop_omit_flag(self) -> bool:
        """Return the flag pushed by the matching start tag.

        Raises:
            RuntimeError: If no flag is waiting (a compiler bug)
        """
        if not self.omit_flags:
            raise RuntimeError("end tag checked an omit-tag flag that was never set")
        return self.omit_flags.pop()

    def child(self) -> RenderContext:
        """Context for rendering a macro or slot filling inside this one."""
        return RenderContext(
            write=self.write,
            tales=self.tales,
            slots=self.slots,
            debug=self.debug,
        )
