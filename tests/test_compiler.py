"""Tests for the instruction lists the compiler produces."""

import pytest
from hypothesis import given, settings

from talhtml import compile_template
from talhtml.compiler import Compiler
from talhtml.compiler.utils import split_clauses, split_content_value
from talhtml.instructions import (
    Condition,
    DefineSlot,
    DefineVariable,
    EndRepeat,
    EndTag,
    RemoveLocalVariable,
    RenderData,
    Repeat,
    StartTag,
    UseMacro,
)

from .strategies import plain_document


def instructions(source: str):
    return compile_template(source).instructions


class TestPlainOutput:
    def test_plain_markup_is_one_instruction(self):
        assert instructions("<div><p class='x'>a &amp; b</p></div>") == (
            RenderData('<div><p class="x">a &amp; b</p></div>'),
        )

    def test_empty_source(self):
        assert instructions("") == ()

    def test_comment_and_doctype(self):
        assert instructions("<!DOCTYPE html><!--c-->") == (RenderData("<!DOCTYPE html><!--c-->"),)


class TestOffsets:
    def test_content(self):
        assert instructions('<p tal:content="x">old</p>') == (
            StartTag("p", content="x", end_offset=2),
            RenderData("old"),
            EndTag("p"),
        )

    def test_condition_spans_element(self):
        code = instructions('<a><b tal:condition="c">x</b></a>')
        assert code[1] == Condition("c", end_offset=3)
        assert code[-1] == RenderData("</a>")

    def test_define_repeat_content(self):
        code = instructions('<li tal:define="x item/name" tal:repeat="item items" tal:content="x"></li>')
        assert [type(i) for i in code] == [
            DefineVariable,
            Repeat,
            StartTag,
            EndTag,
            EndRepeat,
            RemoveLocalVariable,
        ]
        assert code[1].end_offset == 3
        assert code[2].end_offset == 1
        assert code[4].offset == -3

    def test_condition_lands_on_local_removal(self):
        code = instructions('<p tal:define="x 1" tal:condition="x">y</p>')
        condition = code[1]
        assert isinstance(code[1 + condition.end_offset + 1], RemoveLocalVariable)

    def test_void_element(self):
        code = instructions('<img tal:condition="c" src="a">')
        assert code == (
            Condition("c", end_offset=1),
            StartTag("img", attributes=(("src", "a"),), void=True),
        )

    def test_omit_tag_marks_end_tag(self):
        code = instructions('<p tal:omit-tag="">x</p>')
        assert code[0].omit == ""
        assert code[-1] == EndTag("p", check_omit=True)

    def test_repeat_ids_are_unique(self):
        code = instructions('<i tal:repeat="a xs"></i><i tal:repeat="a xs"></i>')
        ids = [i.repeat_id for i in code if isinstance(i, Repeat)]
        assert ids == [0, 1]


class TestMacros:
    def test_macro_is_a_view_of_the_document(self):
        template = compile_template('<x>a</x><p metal:define-macro="m" tal:content="v">b</p>')
        macro = template.macros["m"]
        assert macro.instructions == template.instructions[1:]
        assert len(macro) == 3

    def test_use_macro_records_fillings(self):
        code = instructions(
            '<div metal:use-macro="m/x"><b metal:fill-slot="s">f</b><i>skip</i></div>'
        )
        use = code[0]
        assert isinstance(use, UseMacro)
        assert list(use.filled_slots) == ["s"]
        filling = use.filled_slots["s"]
        assert [type(i) for i in filling.instructions] == [StartTag, RenderData, EndTag]
        assert filling.name == "s"
        assert use.end_offset == len(code) - 1

    def test_use_macro_without_fillings(self):
        use = UseMacro("m/x")
        assert dict(use.filled_slots) == {}
        with pytest.raises(TypeError):
            use.filled_slots["s"] = None  # type: ignore[index]

    def test_define_slot(self):
        code = instructions('<b metal:define-slot="s">x</b>')
        assert code[0] == DefineSlot("s", end_offset=3)


class TestDeterminism:
    def test_compiler_reuse(self):
        source = '<div metal:define-macro="m"><i tal:repeat="x xs" tal:content="x"></i></div>'
        compiler = Compiler()
        first = compiler.compile(source)
        second = compiler.compile(source)
        assert first.instructions == second.instructions
        assert str(first) == str(second)

    @given(source=plain_document)
    @settings(max_examples=100)
    def test_idempotent(self, source):
        assert str(compile_template(source)) == str(compile_template(source))


class TestDebugListing:
    def test_str_lists_instructions(self):
        text = str(compile_template('<p tal:condition="c">x</p>'))
        lines = text.splitlines()
        assert lines[0] == "0: [Condition] 'c' (to offset 3)"
        assert lines[1].startswith("1: [Start Tag] p")

    def test_repr(self):
        template = compile_template("<p>x</p>", name="page.html")
        assert repr(template) == "<Template page.html (1 instructions)>"


class TestSplitting:
    def test_split_clauses(self):
        assert split_clauses("a x; b y") == ["a x", "b y"]
        assert split_clauses("a string:1;;2; b y") == ["a string:1;2", "b y"]
        assert split_clauses(" ; ;") == []
        assert split_clauses("a x;") == ["a x"]
        assert split_clauses("a string:;;") == ["a string:;"]

    def test_split_content_value(self):
        assert split_content_value("text x") == ("x", False)
        assert split_content_value("structure x") == ("x", True)
        assert split_content_value("structure") == ("structure", False)
        assert split_content_value("x/y") == ("x/y", False)
