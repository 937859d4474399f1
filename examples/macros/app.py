"""Macros and slots -- page layout shared between templates.

``layout.html`` defines a ``page`` macro with two slots. Each page uses the
macro and fills the slots it wants to change; unfilled slots keep the
layout's default content.

The layout template is passed to the pages as data, so
``layout/page`` finds the macro.

Run:
    python app.py
"""

from pathlib import Path

from talhtml import compile_template

templates_dir = Path(__file__).parent / "templates"


def load(name: str):
    with open(templates_dir / name, encoding="utf-8") as f:
        return compile_template(f, name=name)


layout = load("layout.html")
home = load("home.html")
about = load("about.html")

home_output = home.render(layout=layout, title="Welcome")
about_output = about.render(layout=layout, title="About Us", team=["Ada", "Grace", "Linus"])


def main() -> None:
    print("=== home.html ===")
    print(home_output)
    print()
    print("=== about.html ===")
    print(about_output)


if __name__ == "__main__":
    main()
