"""Exceptions for the talhtml template system.

Exception Hierarchy:
TemplateError (base)
└── CompileError              # Structural problem found while compiling

Rendering never raises for bad data: unresolvable paths degrade to "not
found" and render as nothing. The only errors a render propagates are the
ones raised by the output sink itself.

Example:
    ```
    T-CMP-002: Compile Error (unknown TAL/METAL command) at "<b tal:contnet="x">" prior to "Hi</b>"
      --> page.html:3:4
         |
    >  3 |     <b tal:contnet="x">Hi</b>
         |     ^
         |
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from talhtml.utils import terminal
from talhtml.utils.constants import ERROR_CONTEXT_LIMIT

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Searchable error codes for talhtml errors.

    Format: T-{CATEGORY}-{NUMBER}
    Categories: CMP (compiler)
    """

    UNEXPECTED_CLOSE_TAG = "T-CMP-001"
    UNKNOWN_COMMAND = "T-CMP-002"
    EXPRESSION_MALFORMED = "T-CMP-003"
    EXPRESSION_MISSING = "T-CMP-004"
    SLOT_OUTSIDE_MACRO = "T-CMP-005"

    @property
    def category(self) -> str:
        prefix = self.value.split("-")[1]
        return {"CMP": "compiler"}.get(prefix, "unknown")


class CompileErrorKind(Enum):
    """The structural problems the compiler reports."""

    UNEXPECTED_CLOSE_TAG = "unexpected close tag"
    UNKNOWN_COMMAND = "unknown TAL/METAL command"
    EXPRESSION_MALFORMED = "expression malformed"
    EXPRESSION_MISSING = "expression missing"
    SLOT_OUTSIDE_MACRO = "slot outside of a use-macro"

    @property
    def code(self) -> ErrorCode:
        return ErrorCode[self.name]


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source context around an error line.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional column offset for caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        """Format the snippet with line numbers, highlighting the error line."""
        parts: list[str] = [terminal.dim_text("     |")]
        for lineno, content in self.lines:
            is_error = lineno == self.error_line
            parts.append(terminal.format_source_line(lineno, content, is_error=is_error))
            if is_error and self.column is not None:
                caret = " " * self.column + "^"
                parts.append(f"{terminal.dim_text('     |')} {terminal.error_code(caret)}")
        parts.append(terminal.dim_text("     |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet from template source.

    Args:
        source: Full template source text.
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.
        column: Optional column offset for caret pointer.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class TemplateError(Exception):
    """Base exception for all talhtml errors.

        >>> try:
        ...     compile_template(source)
        ... except TemplateError as e:
        ...     log.error("Template error: %s", e)

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a short, human-readable summary with its code."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class CompileError(TemplateError):
    """Structural error found while compiling a template.

    Compilation stops at the first error; no partial template is returned.

    Attributes:
        kind: Which structural problem was found
        last_token: Raw source text of the last token read
        next_data: Unparsed input following that token (at most 100 chars)
        lineno: 1-based line of the last token
        col_offset: 0-based column of the last token
        name: Template name given to ``compile_template``
        source: Full template source, when available, for snippets
    """

    def __init__(
        self,
        kind: CompileErrorKind,
        last_token: str = "",
        next_data: str = "",
        *,
        lineno: int | None = None,
        col_offset: int | None = None,
        name: str | None = None,
        source: str | None = None,
    ):
        self.kind = kind
        self.last_token = last_token
        self.next_data = next_data[:ERROR_CONTEXT_LIMIT]
        self.lineno = lineno
        self.col_offset = col_offset
        self.name = name
        self.source = source
        super().__init__(self._format_message())

    @property
    def code(self) -> ErrorCode:  # type: ignore[override]
        return self.kind.code

    @property
    def location(self) -> str:
        location = self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
            if self.col_offset is not None:
                location += f":{self.col_offset}"
        return location

    def _format_message(self) -> str:
        return (
            f'Compile Error ({self.kind.value}) at "{self.last_token}" '
            f'prior to "{self.next_data}"\n  --> {self.location}'
        )

    def format_compact(self) -> str:
        """Format the error as a coloured terminal diagnostic with source snippet."""
        parts = [
            f"{terminal.error_code(self.code.value)}: Compile Error ({self.kind.value}) "
            f'at "{self.last_token}" prior to "{self.next_data}"',
            f"  --> {terminal.location(self.location)}",
        ]
        if self.source and self.lineno:
            snippet = build_source_snippet(self.source, self.lineno, column=self.col_offset)
            parts.append(snippet.format())
        return "\n".join(parts)
