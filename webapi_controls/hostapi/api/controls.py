"""API endpoints for rendering controls outside a form runtime."""

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from webapi_controls.controls.common import ChangeEmitter
from webapi_controls.controls.parse_json.control import ParseJsonControl
from webapi_controls.controls.pipeline import JsonPipeline
from webapi_controls.controls.webapi_request.control import WebApiRequestControl
from webapi_controls.shared.models import (
    HostEnvironment,
    ParseJsonConfig,
    PipelineConfig,
    RunResult,
    ValueChangeEvent,
    WebApiRequestConfig,
)

router = APIRouter(prefix="/controls", tags=["Controls"])


class HostPage(BaseModel):
    """The form page a control is rendered on."""

    page_url: str = Field(
        default="https://forms.example.com/form?mode=0",
        description="Full URL of the host page, including its query string",
    )
    cookies: dict[str, str] = Field(default_factory=dict, description="Ambient credentials")

    def environment(self) -> HostEnvironment:
        return HostEnvironment.from_url(self.page_url, cookies=self.cookies)


class ParseJsonRenderRequest(HostPage):
    config: ParseJsonConfig


class ParseJsonSelectRequest(ParseJsonRenderRequest):
    value: str = Field(..., description="Text of the option the user picked")


class WebApiRequestRenderRequest(HostPage):
    config: WebApiRequestConfig


class PipelineRunRequest(HostPage):
    config: PipelineConfig


class ControlResponse(BaseModel):
    """A run result plus every change event the form container received."""

    result: RunResult | None = None
    events: list[ValueChangeEvent] = Field(default_factory=list)


def _form() -> tuple[ChangeEmitter, list[ValueChangeEvent]]:
    form = ChangeEmitter("form")
    events: list[ValueChangeEvent] = []
    form.subscribe(events.append)
    return form, events


@router.post("/parse-json/render", response_model=ControlResponse)
async def render_parse_json(request: ParseJsonRenderRequest) -> dict[str, Any]:
    """Render a Parse JSON control.

    Runs the control exactly as the form would on first load.
    """
    form, events = _form()
    control = ParseJsonControl(request.config, request.environment(), form=form)
    result = control.connect()
    return {"result": result, "events": events}


@router.post("/parse-json/select", response_model=ControlResponse)
async def select_parse_json(request: ParseJsonSelectRequest) -> dict[str, Any]:
    """Render a Parse JSON dropdown, then apply a user selection."""
    form, events = _form()
    control = ParseJsonControl(request.config, request.environment(), form=form)
    result = control.connect()
    control.select(request.value)
    if result is not None:
        result = result.model_copy(update={"outcome": control.outcome, "presentation": control.presentation})
    return {"result": result, "events": events}


@router.post("/webapi-request/render", response_model=ControlResponse)
async def render_webapi_request(request: WebApiRequestRenderRequest) -> dict[str, Any]:
    """Render a WebApi Request control, fetching its URL."""
    form, events = _form()
    control = WebApiRequestControl(request.config, request.environment(), form=form)
    result = await control.connect()
    return {"result": result, "events": events}


@router.post("/pipeline/run", response_model=ControlResponse)
async def run_pipeline(request: PipelineRunRequest) -> dict[str, Any]:
    """Run the full pipeline: fetch or parse, extract, render and emit."""
    form, events = _form()
    pipeline = JsonPipeline(
        request.environment(),
        emitter=form.child("pipeline"),
        outcome=request.config.outcome,
    )
    result = await pipeline.run(request.config)
    return {"result": result, "events": events}
