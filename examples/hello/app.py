"""Hello World -- the simplest talhtml example.

Compile a template from a string and render it with context variables.
The element text is a placeholder that the data replaces.

Run:
    python app.py
"""

from talhtml import compile_template

# Compile from string
template = compile_template('<p>Hello, <b tal:content="name">Nobody</b>!</p>')

# Render with context
output = template.render(name="World")


def main() -> None:
    print(output)
    print()

    # Multiple renders with different context
    for name in ["TAL", "METAL", "<Python>"]:
        print(template.render(name=name))


if __name__ == "__main__":
    main()
