"""TAL and METAL command compilation.

Provides mixins that turn command attributes into instructions:
- tal: define, condition, repeat, content, replace, attributes, omit-tag
- metal: define-macro, use-macro, define-slot, fill-slot

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from talhtml.compiler.commands.metal import MetalCommandsMixin
from talhtml.compiler.commands.tal import TalCommandsMixin

# Order in which commands on one element are applied. METAL before TAL, and
# condition before repeat before content, so a false condition never starts
# a loop and content is evaluated once per iteration.
COMMAND_PRIORITY: dict[str, int] = {
    "metal:define-macro": 0,
    "metal:use-macro": 1,
    "metal:define-slot": 2,
    "metal:fill-slot": 3,
    "tal:define": 4,
    "tal:condition": 5,
    "tal:repeat": 6,
    "tal:content": 7,
    "tal:replace": 8,
    "tal:attributes": 9,
    "tal:omit-tag": 10,
}

COMMAND_PREFIXES = ("tal:", "metal:")


class CommandCompilationMixin(MetalCommandsMixin, TalCommandsMixin):
    """Combined mixin for compiling all TAL and METAL commands."""


__all__ = [
    "COMMAND_PREFIXES",
    "COMMAND_PRIORITY",
    "CommandCompilationMixin",
    "MetalCommandsMixin",
    "TalCommandsMixin",
]
