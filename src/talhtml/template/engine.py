"""Instruction interpreter.

Executes a template's instructions in order against a :class:`RenderContext`.
After each instruction the pointer advances by one; instructions that
transfer control add their relative offset first.

Each instruction type has one handler, looked up in ``_HANDLERS`` by exact
type (O(1) dispatch).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from talhtml.container import VariableContainer
from talhtml.instructions import (
    Condition,
    DefineSlot,
    DefineVariable,
    EndRepeat,
    EndTag,
    Instruction,
    RemoveLocalVariable,
    RenderData,
    Repeat,
    StartTag,
    UseMacro,
)
from talhtml.render_context import RenderContext
from talhtml.tales.evaluator import DebugFunc, Tales, no_debug
from talhtml.tales.values import DEFAULT, is_sequence, to_text, true_or_false
from talhtml.template.core import Template
from talhtml.template.repeat import RepeatCursor
from talhtml.utils.constants import BOOLEAN_ATTRIBUTES
from talhtml.utils.html import format_start_tag, html_escape


def render_template(
    template: Template,
    data: Any,
    write: Callable[[str], Any],
    debug: DebugFunc | None = None,
) -> None:
    """Render ``template`` against ``data``, passing output chunks to ``write``."""
    debug = debug or no_debug
    tales = Tales(data, debug)
    ctx = RenderContext(write=write, tales=tales, slots=VariableContainer(), debug=debug)
    # Every template sees its own macros as ``macros``.
    tales.globals.set_value("macros", template)
    execute(template, ctx)


def render_subtemplate(template: Template, parent: RenderContext) -> None:
    """Render a macro or slot filling in place, inside ``parent``'s render.

    Globals defined by the sub-template are discarded when it finishes.
    """
    ctx = parent.child()
    globals_ = ctx.tales.globals
    globals_.save_all()
    try:
        globals_.set_value("macros", template)
        execute(template, ctx)
    finally:
        globals_.restore_all()


def execute(template: Template, ctx: RenderContext) -> None:
    code, start, stop = template._code, template._start, template._stop
    debug = ctx.debug
    ctx.ip = start
    while ctx.ip < stop:
        instruction = code[ctx.ip]
        debug("Executing instruction %d: %s", ctx.ip - start, instruction)
        handler = _HANDLERS.get(type(instruction))
        if handler is None:
            raise RuntimeError(f"No handler for instruction {instruction!r}")
        handler(instruction, ctx)
        ctx.ip += 1


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _render_data(instruction: RenderData, ctx: RenderContext) -> None:
    ctx.write(instruction.data)


def _start_tag(instruction: StartTag, ctx: RenderContext) -> None:
    tales = ctx.tales
    attributes = instruction.attributes

    omit = False
    if instruction.omit is not None:
        omit = instruction.omit == "" or true_or_false(
            tales.evaluate(instruction.omit, attributes)
        )
        ctx.debug("Omit tag flag %s (void %s)", omit, instruction.void)

    content = DEFAULT
    if instruction.content is not None:
        content = tales.evaluate(instruction.content, attributes)
        ctx.debug("Start tag content is %r", content)
    replacing = instruction.replace and content is not DEFAULT

    # The end tag only consults the flag if it is going to be reached.
    if instruction.omit is not None and not instruction.void and not replacing:
        ctx.push_omit_flag(omit)

    if not omit and not replacing:
        ctx.write(_format_start_tag(instruction, tales))

    if content is DEFAULT:
        return

    if content is not None:
        text = to_text(content)
        ctx.write(text if instruction.structure else html_escape(text))

    if instruction.void:
        return
    if instruction.replace:
        ctx.debug("Replaced element, jumping to +%d", instruction.end_offset)
        ctx.ip += instruction.end_offset
    else:
        ctx.ip += instruction.end_offset - 1


def _format_start_tag(instruction: StartTag, tales: Tales) -> str:
    if not instruction.attribute_expressions:
        return format_start_tag(
            instruction.tag, instruction.attributes, instruction.self_closing
        )

    current: list[tuple[str, str | None]] = list(instruction.attributes)
    for name, expression in instruction.attribute_expressions:
        value = tales.evaluate(expression, instruction.attributes)
        if value is DEFAULT:
            continue
        if value is None:
            _remove_attribute(current, name)
        elif name in BOOLEAN_ATTRIBUTES:
            if true_or_false(value):
                _set_attribute(current, name, name)
            else:
                _remove_attribute(current, name)
        else:
            _set_attribute(current, name, to_text(value))
    return format_start_tag(instruction.tag, current, instruction.self_closing)


def _set_attribute(attributes: list[tuple[str, str | None]], name: str, value: str) -> None:
    """Update the first attribute called ``name``, or append it.

    Repeated attributes are kept as written; like ``attrs/name``, updates and
    removals only see the first occurrence.
    """
    for index, (key, _) in enumerate(attributes):
        if key == name:
            attributes[index] = (name, value)
            return
    attributes.append((name, value))


def _remove_attribute(attributes: list[tuple[str, str | None]], name: str) -> None:
    for index, (key, _) in enumerate(attributes):
        if key == name:
            del attributes[index]
            return


def _end_tag(instruction: EndTag, ctx: RenderContext) -> None:
    if instruction.check_omit and ctx.pop_omit_flag():
        ctx.debug("Rendering of end tag suppressed")
        return
    ctx.write(f"</{instruction.tag}>")


def _define_variable(instruction: DefineVariable, ctx: RenderContext) -> None:
    tales = ctx.tales
    value = tales.evaluate(instruction.expression, instruction.attributes)
    if instruction.is_global:
        tales.globals.set_value(instruction.name, value)
    else:
        tales.locals.add_value(instruction.name, value)


def _remove_local_variable(instruction: RemoveLocalVariable, ctx: RenderContext) -> None:
    ctx.tales.locals.remove_value()


def _condition(instruction: Condition, ctx: RenderContext) -> None:
    value = ctx.tales.evaluate(instruction.expression, instruction.attributes)
    if not true_or_false(value):
        ctx.ip += instruction.end_offset


def _repeat(instruction: Repeat, ctx: RenderContext) -> None:
    tales = ctx.tales
    value = tales.evaluate(instruction.expression, instruction.attributes)
    if value is DEFAULT:
        # Keep the body, rendered once, with no repeat variable.
        return
    if not is_sequence(value) or not value:
        ctx.ip += instruction.end_offset
        return
    cursor = RepeatCursor(instruction.repeat_id, value)
    tales.repeats.add_value(instruction.name, cursor)
    tales.locals.add_value(instruction.name, cursor.item)


def _end_repeat(instruction: EndRepeat, ctx: RenderContext) -> None:
    tales = ctx.tales
    cursor, found = tales.repeats.get_value(instruction.name)
    if not found or cursor.repeat_id != instruction.repeat_id:
        # Not looping (the repeat evaluated to default).
        return
    if not cursor.advance():
        tales.repeats.remove_value()
        tales.locals.remove_value()
        return
    tales.locals.set_value(instruction.name, cursor.item)
    ctx.ip += instruction.offset


def _define_slot(instruction: DefineSlot, ctx: RenderContext) -> None:
    filling, found = ctx.slots.get_value(instruction.name)
    if not found:
        return
    ctx.debug("Filling slot %s", instruction.name)
    render_subtemplate(filling, ctx)
    ctx.ip += instruction.end_offset


def _use_macro(instruction: UseMacro, ctx: RenderContext) -> None:
    value = ctx.tales.evaluate(instruction.expression, instruction.attributes)
    if value is None:
        ctx.ip += instruction.end_offset
        return
    if not isinstance(value, Template):
        # DEFAULT, or something that is not a macro: keep the element as written.
        return

    slots = ctx.slots
    slots.save_all()
    try:
        for name, filling in instruction.filled_slots.items():
            slots.set_value(name, filling)
        render_subtemplate(value, ctx)
    finally:
        slots.restore_all()
    ctx.ip += instruction.end_offset


_HANDLERS: dict[type[Instruction], Callable[[Any, RenderContext], None]] = {
    RenderData: _render_data,
    StartTag: _start_tag,
    EndTag: _end_tag,
    DefineVariable: _define_variable,
    RemoveLocalVariable: _remove_local_variable,
    Condition: _condition,
    Repeat: _repeat,
    EndRepeat: _end_repeat,
    DefineSlot: _define_slot,
    UseMacro: _use_macro,
}
