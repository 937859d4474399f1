"""Property-based rendering tests.

Uses hypothesis to check invariants that must hold for all inputs:

- Markup without commands renders back to itself
- Content values are always escaped exactly once
- tal:repeat renders its element once per item
- Nested tal:define bindings are visible only inside their element
- Alternation stops at the first path that is found
"""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from talhtml import compile_template, html_escape

from .strategies import plain_document, safe_identifier, safe_text, text_sequences


class TestRenderingProperties:
    @given(source=plain_document)
    @settings(max_examples=200)
    def test_plain_markup_round_trips(self, source: str) -> None:
        assert compile_template(source).render() == source

    @given(value=st.text(max_size=50))
    @settings(max_examples=200)
    def test_content_is_escaped(self, value: str) -> None:
        result = compile_template('<p tal:content="v">x</p>').render(v=value)
        assert result == f"<p>{html_escape(value)}</p>"

    @given(value=st.text(max_size=50))
    @settings(max_examples=100)
    def test_structure_is_not_escaped(self, value: str) -> None:
        result = compile_template('<p tal:content="structure v">x</p>').render(v=value)
        assert result == f"<p>{value}</p>"

    @given(items=text_sequences)
    @settings(max_examples=100)
    def test_repeat_once_per_item(self, items: list[str]) -> None:
        result = compile_template('<li tal:repeat="i items" tal:content="i"></li>').render(items=items)
        assert result == "".join(f"<li>{html_escape(i)}</li>" for i in items)

    @given(name=safe_identifier, outer=safe_text, inner=safe_text, depth=st.integers(1, 4))
    @settings(max_examples=100)
    def test_define_scoping(self, name: str, outer: str, inner: str, depth: int) -> None:
        nested = f'<b tal:define="{name} inner" tal:content="{name}"></b>'
        for _ in range(depth):
            nested = f'<i tal:define="{name} inner">{nested}</i>'
        source = f'{nested}<u tal:content="{name}"></u>'
        result = compile_template(source).render(outer=outer, inner=inner, **{name: outer})
        assert result.endswith(f"<u>{html_escape(outer)}</u>")
        assert f"<b>{html_escape(inner)}</b>" in result

    @given(found=st.integers(0, 3))
    @settings(max_examples=50)
    def test_alternation_short_circuits(self, found: int) -> None:
        calls: list[int] = []

        def make(n: int):
            def value():
                calls.append(n)
                return f"v{n}" if n == found else None

            return value

        # Missing names are not found; p0..p3 exist but only p<found> resolves
        # to a value, the others to mappings without the key.
        data = {f"p{n}": ({"k": make(n)} if n == found else {}) for n in range(4)}
        source = '<p tal:content="p0/k|p1/k|p2/k|p3/k">x</p>'
        result = compile_template(source).render(data)
        assert result == f"<p>v{found}</p>"
        assert calls == [found]
