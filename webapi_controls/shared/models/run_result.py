"""Run result models - what a control shows and reports after a run."""

import json
from datetime import datetime
from html import escape
from typing import Any, Literal

from pydantic import BaseModel, Field, computed_field

from .events import ValueChangeEvent

CONTROL_CLASS = "form-control webapi-control"


class OptionView(BaseModel):
    """A single dropdown option."""

    label: str = Field(..., description="Option text")
    value: str = Field(default="", description="Value submitted when selected")
    selected: bool = False
    disabled: bool = False


class Presentation(BaseModel):
    """Inline content rendered by a control."""

    kind: Literal["message", "label", "dropdown", "template", "json"] = Field(
        ..., description="Presentation type"
    )
    text: str = Field(default="", description="Plain text for message, label and json kinds")
    options: list[OptionView] = Field(default_factory=list, description="Dropdown options")
    markup: str = Field(default="", description="Trusted markup for the template kind")

    @classmethod
    def message(cls, text: str) -> "Presentation":
        return cls(kind="message", text=text)

    @classmethod
    def label(cls, text: str) -> "Presentation":
        return cls(kind="label", text=text)

    @classmethod
    def dropdown(cls, options: list[OptionView]) -> "Presentation":
        return cls(kind="dropdown", options=options)

    @classmethod
    def template(cls, markup: str) -> "Presentation":
        return cls(kind="template", markup=markup)

    @classmethod
    def json_document(cls, document: Any) -> "Presentation":
        return cls(kind="json", text=json.dumps(document, indent=2, ensure_ascii=False))

    def to_html(self) -> str:
        """Render as HTML. Only template markup is inserted unescaped."""
        if self.kind == "label":
            return f'<div class="{CONTROL_CLASS}">{escape(self.text)}</div>'

        if self.kind == "template":
            return f'<div class="{CONTROL_CLASS}">{self.markup}</div>'

        if self.kind == "json":
            return f"<pre>{escape(self.text)}</pre>"

        if self.kind == "dropdown":
            rendered = []
            for option in self.options:
                attributes = f' value="{escape(option.value)}"'
                if option.disabled:
                    attributes += " disabled"
                if option.selected:
                    attributes += " selected"
                rendered.append(f"<option{attributes}>{escape(option.label)}</option>")
            return f'<select class="{CONTROL_CLASS}">{"".join(rendered)}</select>'

        return escape(self.text)


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    status: str | None = Field(default=None, description="HTTP status for request failures")
    context: dict = Field(default_factory=dict, description="Error context data")

    class Codes:
        CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
        TRANSPORT_ERROR = "TRANSPORT_ERROR"
        PARSE_ERROR = "PARSE_ERROR"
        SHAPE_ERROR = "SHAPE_ERROR"


class RunResult(BaseModel):
    """Outcome of one control or pipeline run."""

    control: str = Field(..., description="Control that produced the result")
    status: Literal["success", "failed"] = Field(..., description="Run status")
    presentation: Presentation = Field(..., description="Rendered content")
    outcome: Any = Field(default=None, description="Value published to the form")
    event: ValueChangeEvent | None = Field(default=None, description="Emitted change event")
    errors: list[ErrorDetail] = Field(default_factory=list, description="List of errors")
    started_at: datetime = Field(..., description="Run start time")
    completed_at: datetime = Field(..., description="Run completion time")

    @computed_field
    @property
    def html(self) -> str:
        return self.presentation.to_html()

    @computed_field
    @property
    def duration_ms(self) -> int:
        return int((self.completed_at - self.started_at).total_seconds() * 1000)

    @property
    def is_success(self) -> bool:
        return self.status == "success"

    @property
    def emitted(self) -> bool:
        return self.event is not None
