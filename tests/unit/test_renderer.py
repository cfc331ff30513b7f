"""
Unit tests for VariantRenderer.
"""
import pytest
from selectolax.parser import HTMLParser

from webapi_controls.config import ControlSettings
from webapi_controls.controls.common import ConfigurationError, ShapeError, VariantRenderer
from webapi_controls.controls.common.renderer import NOT_AN_ARRAY_MESSAGE
from webapi_controls.shared.models import DisplayVariant, PageMode, SortOrder


@pytest.fixture
def renderer() -> VariantRenderer:
    return VariantRenderer(ControlSettings())


class TestLabel:
    """Tests for the Label variant."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("hello", "hello"),
            (42, "42"),
            (True, "true"),
            (False, "false"),
            (3.14, ""),
            ({"a": 1}, ""),
            (["a"], ""),
            (None, ""),
        ],
    )
    def test_label_text(self, renderer, value, expected):
        """Test label text and outcome for each value type."""
        output = renderer.render(value, DisplayVariant.LABEL)

        assert output.presentation.kind == "label"
        assert output.presentation.text == expected
        assert output.outcome == expected

    def test_label_html_is_escaped(self, renderer):
        """Test label text is escaped in HTML."""
        output = renderer.render("<b>bold</b>", DisplayVariant.LABEL)
        html = output.presentation.to_html()

        assert "&lt;b&gt;" in html
        node = HTMLParser(html).css_first("div.webapi-control")
        assert node.text() == "<b>bold</b>"


class TestDropdown:
    """Tests for the Dropdown variant."""

    def test_new_mode_has_placeholder_only_selected(self, renderer):
        """Test New mode selects only the placeholder."""
        output = renderer.render(
            ["red", "green"],
            DisplayVariant.DROPDOWN,
            page_mode=PageMode.NEW,
            current_outcome="green",
            default_message="Pick a colour",
        )
        options = output.presentation.options

        assert output.presentation.kind == "dropdown"
        assert [o.label for o in options] == ["Pick a colour", "red", "green"]
        assert options[0].disabled and options[0].selected
        assert not any(o.selected for o in options[1:])

    def test_edit_mode_preselects_outcome(self, renderer):
        """Test Edit mode preselects the option matching the outcome."""
        output = renderer.render(
            ["red", "green", "blue"],
            DisplayVariant.DROPDOWN,
            page_mode=PageMode.EDIT,
            current_outcome="green",
        )
        selected = [o.label for o in output.presentation.options if o.selected]

        assert "green" in selected
        assert "red" not in selected
        assert output.outcome == "green"

    def test_edit_mode_loose_equality(self, renderer):
        """Test numeric items match a textual outcome."""
        output = renderer.render(
            [1, 2, 3],
            DisplayVariant.DROPDOWN,
            page_mode=PageMode.EDIT,
            current_outcome="2",
        )
        option = next(o for o in output.presentation.options if o.label == "2")

        assert option.selected

    def test_display_mode_renders_label(self, renderer):
        """Test Display mode shows the current outcome as a label."""
        output = renderer.render(
            ["red", "green"],
            DisplayVariant.DROPDOWN,
            page_mode=PageMode.DISPLAY,
            current_outcome="green",
        )

        assert output.presentation.kind == "label"
        assert output.presentation.text == "green"
        assert output.presentation.options == []

    def test_string_is_wrapped(self, renderer):
        """Test a bare string becomes a one-item list."""
        output = renderer.render("only", DisplayVariant.DROPDOWN, page_mode=PageMode.NEW)

        assert [o.label for o in output.presentation.options[1:]] == ["only"]

    @pytest.mark.parametrize("value", [42, {"a": 1}, None, True])
    def test_non_array_is_shape_error(self, renderer, value):
        """Test a non-array value raises a shape error."""
        with pytest.raises(ShapeError) as exc_info:
            renderer.render(value, DisplayVariant.DROPDOWN, page_mode=PageMode.NEW)

        assert exc_info.value.message == NOT_AN_ARRAY_MESSAGE

    def test_sort_order_applied(self, renderer):
        """Test options follow the sort order."""
        output = renderer.render(
            ["b", "c", "a"],
            DisplayVariant.DROPDOWN,
            page_mode=PageMode.NEW,
            sort_order=SortOrder.DESC,
        )

        assert [o.label for o in output.presentation.options[1:]] == ["c", "b", "a"]

    def test_placeholder_fallback(self, renderer):
        """Test an empty default message falls back to the configured placeholder."""
        output = renderer.render(["a"], DisplayVariant.DROPDOWN, page_mode=PageMode.NEW, default_message="")

        assert output.presentation.options[0].label == "Select an option"

    def test_dropdown_html(self, renderer):
        """Test dropdown HTML structure."""
        output = renderer.render(
            ["red", "green"],
            DisplayVariant.DROPDOWN,
            page_mode=PageMode.EDIT,
            current_outcome="red",
            default_message="Pick",
        )
        tree = HTMLParser(output.presentation.to_html())
        options = tree.css("select.webapi-control option")

        assert len(options) == 3
        assert "disabled" in options[0].attributes
        assert options[0].text() == "Pick"
        assert "selected" in options[1].attributes
        assert options[1].attributes["value"] == "red"
        assert "selected" not in options[2].attributes


class TestLabelWithTemplate:
    """Tests for the Label using Mustache Template variant."""

    def test_scalar_template(self, renderer):
        """Test a scalar value renders through the template."""
        output = renderer.render(42, DisplayVariant.LABEL_WITH_TEMPLATE, template="<b>{{.}}</b>")

        assert output.presentation.kind == "template"
        assert output.presentation.markup == "<b>42</b>"
        assert output.outcome == "42"

    def test_array_template(self, renderer):
        """Test arrays are passed to the template unmodified."""
        value = [{"name": "Ada"}, {"name": "Bob"}]
        output = renderer.render(
            value,
            DisplayVariant.LABEL_WITH_TEMPLATE,
            template="<ul>{{#.}}<li>{{name}}</li>{{/.}}</ul>",
        )

        assert output.presentation.markup == "<ul><li>Ada</li><li>Bob</li></ul>"
        assert output.outcome == value

    def test_markup_inserted_unescaped(self, renderer):
        """Test the template's markup is inserted as-is."""
        output = renderer.render("x", DisplayVariant.LABEL_WITH_TEMPLATE, template="<i>{{.}}</i>")
        tree = HTMLParser(output.presentation.to_html())

        assert tree.css_first("div.webapi-control i").text() == "x"

    def test_values_are_escaped_by_template(self, renderer):
        """Test double-brace values are escaped by the template engine."""
        output = renderer.render("<script>", DisplayVariant.LABEL_WITH_TEMPLATE, template="{{.}}")

        assert output.presentation.markup == "&lt;script&gt;"
        assert output.outcome == "<script>"

    def test_unsupported_value_is_empty(self, renderer):
        """Test objects and non-integral numbers render as empty text."""
        output = renderer.render({"a": 1}, DisplayVariant.LABEL_WITH_TEMPLATE, template="[{{.}}]")

        assert output.presentation.markup == "[]"
        assert output.outcome == ""

    def test_empty_template(self, renderer):
        """Test an empty template renders nothing."""
        output = renderer.render("x", DisplayVariant.LABEL_WITH_TEMPLATE, template="")

        assert output.presentation.markup == ""
        assert output.outcome == "x"

    @pytest.mark.parametrize(
        "template",
        [
            "{{#a}}x{{/b}}",
            "{{/items}}",
        ],
    )
    def test_malformed_template_is_configuration_error(self, renderer, template):
        """Test template syntax errors surface as configuration errors."""
        with pytest.raises(ConfigurationError, match="Invalid Mustache template"):
            renderer.render("x", DisplayVariant.LABEL_WITH_TEMPLATE, template=template)
