"""Repeat -- loop over a sequence with ``tal:repeat``.

Inside the loop, ``repeat/<name>`` gives the loop's position: ``number``
(1-based), ``index`` (0-based), ``odd``/``even``, ``start``/``end``,
``length``, and letter and roman numeral counters.

Run:
    python app.py
"""

from talhtml import compile_template

template = compile_template(
    "<table>"
    '<tr tal:repeat="item items" tal:attributes="data-row repeat/item/number">'
    '<td tal:content="repeat/item/roman">i</td>'
    '<td tal:content="item">Item</td>'
    '<td><b tal:condition="repeat/item/start">first</b>'
    '<b tal:condition="repeat/item/end">last</b></td>'
    "</tr>"
    "</table>"
    '<p tal:condition="not:items">No items.</p>'
)

output = template.render(items=["Alpha", "Beta", "Gamma", "Delta"])
empty_output = template.render(items=[])


def main() -> None:
    print(output)
    print()
    print(empty_output)


if __name__ == "__main__":
    main()
