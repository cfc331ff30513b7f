"""Render an extracted value as one of the control's display variants."""

from typing import Any

import chevron
from pydantic import BaseModel
import structlog

from webapi_controls.config import ControlSettings, get_settings
from webapi_controls.shared.models import (
    DisplayVariant,
    OptionView,
    PageMode,
    Presentation,
    SortOrder,
)
from .errors import ConfigurationError, ShapeError
from .transformers import coerce_value, item_text, sort_items

logger = structlog.get_logger()

NOT_AN_ARRAY_MESSAGE = "WebApi response not in array. Check WebApi Configuration"


class RenderOutput(BaseModel):
    """A presentation plus the outcome it implies."""

    presentation: Presentation
    outcome: Any = None


class VariantRenderer:
    """Turn an extraction result into a Label, Dropdown or templated Label."""

    def __init__(self, settings: ControlSettings | None = None):
        self.settings = settings or get_settings().control

    def render(
        self,
        value: Any,
        variant: DisplayVariant,
        *,
        page_mode: PageMode = PageMode.NEW,
        current_outcome: Any = None,
        sort_order: SortOrder | None = None,
        template: str = "",
        default_message: str = "",
    ) -> RenderOutput:
        """Render ``value`` for ``variant``.

        Raises:
            ShapeError: Dropdown value is not an array
        """
        variant = DisplayVariant(variant)
        logger.debug("Rendering value", variant=variant.value, page_mode=page_mode.value)

        if variant == DisplayVariant.LABEL:
            return self.render_label(value)

        if variant == DisplayVariant.DROPDOWN:
            return self.render_dropdown(
                value,
                page_mode=page_mode,
                current_outcome=current_outcome,
                sort_order=sort_order,
                default_message=default_message,
            )

        if variant == DisplayVariant.LABEL_WITH_TEMPLATE:
            return self.render_template(value, template)

        raise ValueError(f"Unsupported display variant: {variant}")

    def render_label(self, value: Any) -> RenderOutput:
        text = coerce_value(value) or ""
        return RenderOutput(presentation=Presentation.label(text), outcome=text)

    def render_dropdown(
        self,
        value: Any,
        *,
        page_mode: PageMode,
        current_outcome: Any = None,
        sort_order: SortOrder | None = None,
        default_message: str = "",
    ) -> RenderOutput:
        items = [value] if isinstance(value, str) else value

        if isinstance(items, list):
            items = sort_items(items, sort_order)

        if page_mode == PageMode.DISPLAY:
            return self.render_label(current_outcome)

        if not isinstance(items, list):
            raise ShapeError(NOT_AN_ARRAY_MESSAGE)

        options = [
            OptionView(
                label=default_message or self.settings.dropdown_placeholder,
                value="",
                disabled=True,
                selected=True,
            )
        ]
        for item in items:
            text = item_text(item)
            options.append(
                OptionView(
                    label=text,
                    value=text,
                    selected=page_mode == PageMode.EDIT and _loosely_equal(item, text, current_outcome),
                )
            )

        return RenderOutput(presentation=Presentation.dropdown(options), outcome=current_outcome)

    def render_template(self, value: Any, template: str) -> RenderOutput:
        if isinstance(value, list):
            raw_value: Any = value
        else:
            raw_value = coerce_value(value) or ""

        try:
            markup = chevron.render(template or "", raw_value)
        except chevron.ChevronError as e:
            raise ConfigurationError(f"Invalid Mustache template: {e}") from e
        return RenderOutput(presentation=Presentation.template(markup), outcome=raw_value)


def _loosely_equal(item: Any, text: str, outcome: Any) -> bool:
    """Item matches the outcome by value or by its displayed text."""
    if outcome is None:
        return False
    if item == outcome:
        return True
    return text == (outcome if isinstance(outcome, str) else item_text(outcome))
