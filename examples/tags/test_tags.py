"""Tests for the tags example."""


class TestTagsApp:
    """Verify the tags example renders correctly."""

    def test_output(self, example_app) -> None:
        assert example_app.output == "<p>Hello Ada (fr)</p>"

    def test_equivalent_to_template(self, example_app) -> None:
        assert example_app.output == example_app.template_equivalent

    def test_async_tag(self, example_app) -> None:
        assert example_app.output_async == "[A|B]"

    def test_tag_is_reusable(self, example_app) -> None:
        assert example_app.html(["", "!"], "user.name") == "Ada!"
