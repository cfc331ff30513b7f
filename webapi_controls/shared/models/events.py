"""Change notification published by controls."""

from typing import Any

from pydantic import BaseModel, Field

VALUE_CHANGE_EVENT = "ntx-value-change"


class ValueChangeEvent(BaseModel):
    """Carries a control's current outcome up to the form container."""

    type: str = Field(default=VALUE_CHANGE_EVENT, description="Event name")
    detail: Any = Field(default=None, description="Current outcome value")
    source: str | None = Field(default=None, description="Emitting control")
    bubbles: bool = True
    cancelable: bool = False
    composed: bool = True
