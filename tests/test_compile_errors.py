"""Tests for compile errors and their diagnostics."""

import logging

import pytest

from talhtml import CompileError, CompileErrorKind, ErrorCode, TemplateError, compile_template
from talhtml.exceptions import build_source_snippet
from talhtml.utils import terminal


def compile_error(source: str, **kwargs) -> CompileError:
    with pytest.raises(CompileError) as exc_info:
        compile_template(source, **kwargs)
    return exc_info.value


class TestKinds:
    @pytest.mark.parametrize(
        ("source", "kind"),
        [
            ("<div></p>", CompileErrorKind.UNEXPECTED_CLOSE_TAG),
            ("</div>", CompileErrorKind.UNEXPECTED_CLOSE_TAG),
            ('<p tal:contents="x">', CompileErrorKind.UNKNOWN_COMMAND),
            ('<p metal:use-slot="x">', CompileErrorKind.UNKNOWN_COMMAND),
            ('<p tal:repeat="items">', CompileErrorKind.EXPRESSION_MALFORMED),
            ('<p tal:repeat="">', CompileErrorKind.EXPRESSION_MALFORMED),
            ('<p tal:repeat="item a b">x</p>', CompileErrorKind.EXPRESSION_MALFORMED),
            ('<p tal:define="x">', CompileErrorKind.EXPRESSION_MISSING),
            ('<p tal:define="local x">', CompileErrorKind.EXPRESSION_MISSING),
            ('<p tal:attributes="href">', CompileErrorKind.EXPRESSION_MISSING),
            ('<p tal:content="">', CompileErrorKind.EXPRESSION_MISSING),
            ('<p tal:replace=" ">', CompileErrorKind.EXPRESSION_MISSING),
            ("<p tal:condition>", CompileErrorKind.EXPRESSION_MISSING),
            ('<p metal:define-macro="">', CompileErrorKind.EXPRESSION_MISSING),
            ('<p metal:use-macro="">', CompileErrorKind.EXPRESSION_MISSING),
            ('<p metal:define-slot="">', CompileErrorKind.EXPRESSION_MISSING),
            ('<p metal:fill-slot="">', CompileErrorKind.EXPRESSION_MISSING),
            ('<p metal:fill-slot="s">x</p>', CompileErrorKind.SLOT_OUTSIDE_MACRO),
        ],
    )
    def test_kind(self, source, kind):
        assert compile_error(source).kind is kind

    def test_fill_slot_after_macro_closed(self):
        source = '<div metal:use-macro="m"></div><p metal:fill-slot="s">x</p>'
        assert compile_error(source).kind is CompileErrorKind.SLOT_OUTSIDE_MACRO

    def test_unknown_command_checked_before_others(self):
        err = compile_error('<p tal:define="x" tal:bogus="y">')
        assert err.kind is CompileErrorKind.UNKNOWN_COMMAND

    def test_mismatch_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="talhtml.compiler.core"):
            compile_error("<div><b></i></div>")
        assert "Mismatched tags b and i" in caplog.text

    def test_is_template_error(self):
        assert isinstance(compile_error("</p>"), TemplateError)


class TestContext:
    def test_last_token_and_next_data(self):
        err = compile_error('<div><p tal:repeat="x">rest of the input</p></div>')
        assert err.last_token == '<p tal:repeat="x">'
        assert err.next_data == "rest of the input</p></div>"

    def test_next_data_is_truncated(self):
        err = compile_error("</p>" + "x" * 500)
        assert err.next_data == "x" * 100

    def test_position(self):
        err = compile_error("<div>\n  <p>\n  </div>", name="page.html")
        assert (err.lineno, err.col_offset) == (3, 2)
        assert err.location == "page.html:3:2"

    def test_message(self):
        err = compile_error("<div></p>tail", name="t.html")
        assert str(err) == (
            'Compile Error (unexpected close tag) at "</p>" prior to "tail"\n  --> t.html:1:5'
        )

    def test_unnamed_location(self):
        assert compile_error("</p>").location == "<template>:1:0"


class TestCodes:
    def test_every_kind_has_a_code(self):
        for kind in CompileErrorKind:
            assert kind.code is ErrorCode[kind.name]
            assert kind.code.category == "compiler"

    def test_error_code(self):
        assert compile_error("</p>").code is ErrorCode.UNEXPECTED_CLOSE_TAG

    def test_code_format(self):
        assert [code.value for code in ErrorCode] == [f"T-CMP-00{n}" for n in range(1, 6)]


class TestFormatCompact:
    def test_includes_snippet(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        err = compile_error('<ul>\n<li tal:repeat="x">\n</ul>', name="list.html")
        text = err.format_compact()
        assert text.startswith("T-CMP-003: Compile Error (expression malformed)")
        assert "--> list.html:2:0" in text
        assert '  2 | <li tal:repeat="x">' in text
        assert "^" in text

    def test_base_class_format(self):
        assert TemplateError("plain").format_compact() == "plain"

    def test_base_class_format_with_code(self):
        err = TemplateError("plain")
        err.code = ErrorCode.UNKNOWN_COMMAND
        assert err.format_compact() == "T-CMP-002: plain"


class TestSourceSnippet:
    def test_context_window(self):
        source = "\n".join(f"line {n}" for n in range(1, 11))
        snippet = build_source_snippet(source, 5, context_lines=1)
        assert snippet.lines == ((4, "line 4"), (5, "line 5"), (6, "line 6"))

    def test_window_clipped_at_edges(self):
        snippet = build_source_snippet("a\nb", 1)
        assert snippet.lines == ((1, "a"), (2, "b"))
