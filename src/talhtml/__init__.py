"""talhtml: TAL/METAL HTML templates for Python.

Templates are plain HTML documents. Behaviour is attached to elements with
``tal:*`` and ``metal:*`` attributes whose values are TALES path
expressions, so a template still opens in a browser or an HTML editor.

Quickstart:
    >>> from talhtml import compile_template
    >>> template = compile_template('<h1 tal:content="title">Title</h1>')
    >>> template.render(title="Hello")
    '<h1>Hello</h1>'

Streaming to a file:
    >>> with open("out.html", "wb") as out:
    ...     template.render_to(out, page, encoding="utf-8")

Architecture:
Template Source → Lexer → Compiler → Instructions → Engine → output

Pipeline stages:
1. **Lexer**: Tokenizes HTML into start/end tag, text, comment and doctype tokens
2. **Compiler**: Turns TAL/METAL attributes into a flat instruction list
3. **Template**: Wraps the instruction list with the render() interface
4. **Engine**: Executes instructions, evaluating TALES against the data

Commands:
- ``tal:define``, ``tal:condition``, ``tal:repeat``, ``tal:content``,
  ``tal:replace``, ``tal:attributes``, ``tal:omit-tag``
- ``metal:define-macro``, ``metal:use-macro``, ``metal:define-slot``,
  ``metal:fill-slot``

Thread-Safety:
- Compilation is idempotent (same input → same instructions)
- Compiled templates are immutable; every render has its own state

Free-Threading (PEP 703):
Declares GIL-independence via `_Py_mod_gil = 0` attribute.

"""

from talhtml.compiler import compile_template
from talhtml.exceptions import (
    CompileError,
    CompileErrorKind,
    ErrorCode,
    SourceSnippet,
    TemplateError,
    build_source_snippet,
)
from talhtml.tales import DEFAULT, TalesValue
from talhtml.template import RepeatCursor, Template
from talhtml.utils.html import html_escape

__version__ = "0.1.0"

__all__ = [
    "DEFAULT",
    "CompileError",
    "CompileErrorKind",
    "ErrorCode",
    "RepeatCursor",
    "SourceSnippet",
    "TalesValue",
    "Template",
    "TemplateError",
    "__version__",
    "build_source_snippet",
    "compile_template",
    "html_escape",
]


# Free-threading declaration (PEP 703)
def __getattr__(name: str) -> object:
    if name == "_Py_mod_gil":
        # 0 = Py_MOD_GIL_NOT_USED
        return 0
    raise AttributeError(f"module 'talhtml' has no attribute {name!r}")
