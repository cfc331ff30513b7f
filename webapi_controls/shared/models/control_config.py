"""Control property models - what the form designer configures on each control."""

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from webapi_controls.config import get_settings

_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?Infinity")
_RADIX_DIGITS = {
    "0x": (16, re.compile(r"[0-9a-fA-F]+")),
    "0o": (8, re.compile(r"[0-7]+")),
    "0b": (2, re.compile(r"[01]+")),
}


def _js_number(text: str) -> float | None:
    """Numeric value of a string as a browser converts it, or None for NaN."""
    stripped = text.strip()
    if not stripped:
        return 0.0

    prefix = stripped[:2].lower()
    if prefix in _RADIX_DIGITS:
        radix, digits = _RADIX_DIGITS[prefix]
        if not digits.fullmatch(stripped[2:]):
            return None
        return float(int(stripped[2:], radix))

    if not _DECIMAL.fullmatch(stripped):
        return None
    return float(stripped.replace("Infinity", "inf"))


class DisplayVariant(str, Enum):
    """How the Parse JSON control presents the extracted value."""

    LABEL = "Label"
    DROPDOWN = "Dropdown"
    LABEL_WITH_TEMPLATE = "Label using Mustache Template"


class SortOrder(str, Enum):
    """Ordering applied to array results."""

    AS_IS = "As Is"
    ASC = "Asc"
    DESC = "Desc"


class PageMode(str, Enum):
    """Form page mode, read from the host page's ``mode`` query parameter."""

    NEW = "New"
    EDIT = "Edit"
    DISPLAY = "Display"

    @classmethod
    def from_mode_index(cls, value: str | None) -> "PageMode":
        """Map the ``mode`` query parameter to a page mode.

        Comparison is numeric and loose: a blank value counts as ``0`` and
        ``0x1`` as ``1``.
        Anything that is neither 0 nor 1 (including a missing parameter)
        is display mode.
        """
        if value is None:
            return cls.DISPLAY

        index = _js_number(value)
        if index is None:
            return cls.DISPLAY

        if index == 0:
            return cls.NEW
        if index == 1:
            return cls.EDIT
        return cls.DISPLAY


def _default_json_path() -> str:
    return get_settings().control.default_json_path


def _default_headers() -> str:
    return get_settings().control.default_headers


def _default_message() -> str:
    return get_settings().control.default_message


class ParseJsonConfig(BaseModel):
    """Properties of the Parse JSON control."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "jsonResponse": '{"colours": ["red", "green", "blue"]}',
                "jsonPath": "$.colours.",
                "displayAs": "Dropdown",
                "sortOrder": "Asc",
                "defaultMessage": "Pick a colour",
            }
        },
    )

    json_response: str = Field(default="", alias="jsonResponse", description="JSON data to parse")
    json_path: str = Field(
        default_factory=_default_json_path,
        alias="jsonPath",
        description="JSON Path used to filter the data",
    )
    display_as: DisplayVariant = Field(
        default=DisplayVariant.LABEL, alias="displayAs", description="Display type of the control"
    )
    mustache_template: str = Field(
        default="", alias="mustacheTemplate", description="Mustache template for templated labels"
    )
    default_message: str = Field(
        default_factory=_default_message,
        alias="defaultMessage",
        description="Placeholder option text for dropdowns",
    )
    sort_order: SortOrder | None = Field(
        default=None, alias="sortOrder", description="Sorting order for array results"
    )
    outcome: Any = Field(default=None, description="Current value of the control")

    @field_validator("json_path", mode="before")
    @classmethod
    def default_blank_path(cls, v: Any) -> Any:
        """A blank path means the whole document."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return _default_json_path()
        return v

    @field_validator("sort_order", mode="before")
    @classmethod
    def blank_sort_order(cls, v: Any) -> Any:
        """An empty sort order is the same as leaving it unspecified."""
        if v == "":
            return None
        return v


class WebApiRequestConfig(BaseModel):
    """Properties of the WebApi Request control."""

    model_config = ConfigDict(populate_by_name=True)

    web_api_url: str = Field(default="", alias="webApiUrl", description="Web API URL")
    headers: str = Field(
        default_factory=_default_headers,
        description="Request headers as a JSON object",
    )
    is_integrated_auth: bool = Field(
        default=False,
        alias="isIntegratedAuth",
        description="Send ambient credentials (Windows Integrated Auth)",
    )
    outcome: Any = Field(default=None, description="Current value of the control")

    @field_validator("headers", mode="before")
    @classmethod
    def default_blank_headers(cls, v: Any) -> Any:
        """Blank headers fall back to the JSON Accept header."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return _default_headers()
        return v


class PipelineConfig(ParseJsonConfig):
    """Full pipeline configuration: a data source plus Parse JSON properties.

    ``json_response`` and ``web_api_url`` are mutually exclusive sources.
    """

    web_api_url: str = Field(default="", alias="webApiUrl", description="Remote JSON source")
    headers: str = Field(default_factory=_default_headers)
    is_integrated_auth: bool = Field(default=False, alias="isIntegratedAuth")

    @field_validator("headers", mode="before")
    @classmethod
    def default_blank_headers(cls, v: Any) -> Any:
        """Blank headers fall back to the JSON Accept header."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return _default_headers()
        return v

    @property
    def is_remote(self) -> bool:
        """Whether data comes from a Web API rather than inline JSON."""
        return bool(self.web_api_url)
