"""Template: a compiled TAL/METAL document, ready to render.

A Template is a view onto a contiguous range of a compiled instruction list.
The top-level template covers the whole list; each macro (and each slot
filling) covers just the instructions of its element. All of them share one
backing list and one macro table, so no instructions are copied.

Templates never change after compilation, so a single Template may be
rendered by any number of threads at once.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, BinaryIO, TextIO

if TYPE_CHECKING:
    from talhtml.instructions import Instruction
    from talhtml.tales.evaluator import DebugFunc


class Template:
    """Compiled template.

    Example:
        >>> from talhtml import compile_template
        >>> t = compile_template('<h1 tal:content="name">X</h1>')
        >>> t.render(name="Alice")
        '<h1>Alice</h1>'
    """

    __slots__ = ("_code", "_macros", "_name", "_start", "_stop")

    def __init__(
        self,
        code: list[Instruction],
        start: int = 0,
        stop: int | None = None,
        macros: dict[str, Template] | None = None,
        name: str | None = None,
    ):
        self._code = code
        self._start = start
        self._stop = len(code) if stop is None else stop
        self._macros = {} if macros is None else macros
        self._name = name

    @property
    def name(self) -> str | None:
        """Template name (macro name for macros)."""
        return self._name

    @property
    def macros(self) -> Mapping[str, Template]:
        """Read-only table of the macros defined by this template."""
        return MappingProxyType(self._macros)

    @property
    def instructions(self) -> tuple[Instruction, ...]:
        return tuple(self._code[self._start : self._stop])

    def __len__(self) -> int:
        return self._stop - self._start

    def tales_value(self, name: str) -> Template | None:
        """Path lookup hook: ``some_template/footer`` is the macro ``footer``."""
        return self._macros.get(name)

    def render(
        self,
        context: Any = None,
        /,
        *,
        debug: DebugFunc | None = None,
        **kwargs: Any,
    ) -> str:
        """Render the template and return the output.

        Args:
            context: Mapping or object whose attributes are the data
            debug: Trace function with the ``logging.Logger.debug``
                signature, e.g. ``logging.getLogger("tal").debug``
            **kwargs: Extra data, merged over a mapping ``context``

        Example:
            >>> t.render({"name": "World"})
            >>> t.render(name="World")
        """
        buf: list[str] = []
        self._render(buf.append, context, debug, kwargs)
        return "".join(buf)

    def render_to(
        self,
        out: TextIO | BinaryIO,
        context: Any = None,
        /,
        *,
        debug: DebugFunc | None = None,
        encoding: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Render the template, writing each chunk to ``out``.

        With ``encoding`` the chunks are encoded before writing, for binary
        streams. Exceptions raised by ``out.write`` stop the render and
        propagate unchanged; output already written stays written.
        """
        write: Callable[[str], Any] = out.write
        if encoding is not None:
            raw_write = out.write

            def write(chunk: str) -> Any:
                return raw_write(chunk.encode(encoding))

        self._render(write, context, debug, kwargs)

    def _render(
        self,
        write: Callable[[str], Any],
        context: Any,
        debug: DebugFunc | None,
        kwargs: dict[str, Any],
    ) -> None:
        from talhtml.template.engine import render_template

        if kwargs:
            if context is None:
                context = kwargs
            elif isinstance(context, Mapping):
                context = {**context, **kwargs}
            else:
                raise TypeError(
                    "keyword arguments can only be combined with a mapping context, "
                    f"not {type(context).__name__}"
                )
        render_template(self, context, write, debug)

    def __str__(self) -> str:
        """One line per instruction, for debugging compiled output."""
        return "\n".join(
            f"{index}: {instruction}" for index, instruction in enumerate(self.instructions)
        )

    def __repr__(self) -> str:
        return f"<Template {self._name or '(inline)'} ({len(self)} instructions)>"
