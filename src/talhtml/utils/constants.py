"""Static HTML5 lookup tables used by the compiler and renderer."""

from __future__ import annotations

# Elements that never have a closing tag.
# Source: WHATWG HTML Living Standard, "void elements"
VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Attributes whose presence alone means "true".
# tal:attributes renders these as name="name" or drops them.
BOOLEAN_ATTRIBUTES: frozenset[str] = frozenset(
    {
        "allowfullscreen",
        "async",
        "autofocus",
        "autoplay",
        "checked",
        "compact",
        "controls",
        "declare",
        "default",
        "defaultchecked",
        "defaultmuted",
        "defaultselected",
        "defer",
        "disabled",
        "draggable",
        "enabled",
        "formnovalidate",
        "hidden",
        "indeterminate",
        "inert",
        "ismap",
        "itemscope",
        "loop",
        "multiple",
        "muted",
        "nohref",
        "noresize",
        "noshade",
        "novalidate",
        "nowrap",
        "open",
        "pauseonexit",
        "readonly",
        "required",
        "reversed",
        "scoped",
        "seamless",
        "selected",
        "sortable",
        "spellcheck",
        "translate",
        "truespeed",
        "typemustmatch",
        "visible",
    }
)

# Elements whose text content is not HTML-escaped.
RAW_TEXT_ELEMENTS: frozenset[str] = frozenset({"script", "style"})

# Longest stretch of following input quoted in a CompileError.
ERROR_CONTEXT_LIMIT = 100
