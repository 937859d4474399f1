"""Template compilation: source text to a :class:`~talhtml.Template`."""

from __future__ import annotations

from typing import IO

from talhtml.compiler.core import Compiler
from talhtml.lexer import read_source
from talhtml.template.core import Template


def compile_template(
    source: str | bytes | IO[str] | IO[bytes],
    *,
    name: str | None = None,
) -> Template:
    """Compile a template from a string, UTF-8 bytes or a readable stream.

    Args:
        source: Template source
        name: Template name shown in error messages

    Raises:
        CompileError: If the template is structurally invalid
        OSError: If reading ``source`` fails

    Example:
        >>> t = compile_template('<p tal:content="msg">x</p>', name="hello.html")
        >>> t.render(msg="Hi")
        '<p>Hi</p>'
    """
    return Compiler(name).compile(read_source(source))


__all__ = ["Compiler", "compile_template"]
