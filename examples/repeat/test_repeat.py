"""Tests for the repeat example."""


class TestRepeatApp:
    """Verify repeat/<name> properties inside a tal:repeat loop."""

    def test_all_items_present(self, example_app) -> None:
        for item in ["Alpha", "Beta", "Gamma", "Delta"]:
            assert f"<td>{item}</td>" in example_app.output

    def test_row_numbers(self, example_app) -> None:
        assert '<tr data-row="1">' in example_app.output
        assert '<tr data-row="4">' in example_app.output
        assert 'data-row="5"' not in example_app.output

    def test_roman_counter(self, example_app) -> None:
        assert "<td>i</td><td>Alpha</td>" in example_app.output
        assert "<td>iv</td><td>Delta</td>" in example_app.output

    def test_first_and_last_markers(self, example_app) -> None:
        assert example_app.output.count("<b>first</b>") == 1
        assert example_app.output.count("<b>last</b>") == 1
        assert "<td>Alpha</td><td><b>first</b></td>" in example_app.output
        assert "<td>Delta</td><td><b>last</b></td>" in example_app.output

    def test_empty_sequence(self, example_app) -> None:
        assert example_app.empty_output == "<table></table><p>No items.</p>"

    def test_no_empty_message_with_items(self, example_app) -> None:
        assert "No items." not in example_app.output
