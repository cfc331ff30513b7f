"""JSON pipeline: fetch or parse, extract, render, emit."""

from typing import Any

import structlog

from webapi_controls.controls.common import (
    ChangeEmitter,
    ConfigurationError,
    ControlError,
    JsonPathExtractor,
    ParseError,
    RequestDispatcher,
    RunResultBuilder,
    TransportError,
    VariantRenderer,
)
from webapi_controls.controls.common.dispatcher import parse_headers
from webapi_controls.controls.common.transformers import load_json
from webapi_controls.shared.models import (
    FailureKind,
    HostEnvironment,
    ParseJsonConfig,
    PipelineConfig,
    Presentation,
    RequestFailure,
    RequestResult,
    RunResult,
    ValueChangeEvent,
)

logger = structlog.get_logger()

INVALID_JSON_MESSAGE = "Please provide valid jsonResponse"


def parse_inline_json(text: str) -> Any:
    """Parse a jsonResponse property."""
    if not text:
        raise ConfigurationError(INVALID_JSON_MESSAGE)
    try:
        return load_json(text)
    except ValueError as e:
        raise ParseError(INVALID_JSON_MESSAGE) from e


def document_from_result(result: RequestResult) -> Any:
    """Unwrap a request result, raising the matching error on failure."""
    if isinstance(result, RequestFailure):
        if result.reason == FailureKind.PARSE:
            raise ParseError(result.display_message, status=result.status)
        raise TransportError(result.display_message, status=result.status)
    return result.body


class JsonPipeline:
    """Runs a configuration through to a rendered control and a change event.

    Holds the current presentation and outcome. Each run overwrites both, so
    when runs overlap the last one to finish wins.
    """

    def __init__(
        self,
        environment: HostEnvironment,
        emitter: ChangeEmitter | None = None,
        dispatcher: RequestDispatcher | None = None,
        extractor: JsonPathExtractor | None = None,
        renderer: VariantRenderer | None = None,
        outcome: Any = None,
        name: str = "pipeline",
    ):
        self.environment = environment
        self.name = name
        self.emitter = emitter or ChangeEmitter(name)
        self.dispatcher = dispatcher or RequestDispatcher(environment)
        self.extractor = extractor or JsonPathExtractor()
        self.renderer = renderer or VariantRenderer()
        self.page_mode = environment.page_mode
        self.outcome: Any = outcome
        self.presentation: Presentation = Presentation.message("Loading...")

    async def run(self, config: PipelineConfig) -> RunResult:
        """Run from whichever source the configuration names."""
        builder = RunResultBuilder(self.name)

        try:
            document = await self.load_document(config)
        except ControlError as e:
            return self._fail(builder, e)

        return self._render(builder, document, config)

    def run_inline(self, config: ParseJsonConfig) -> RunResult:
        """Run on the inline jsonResponse. Never suspends."""
        builder = RunResultBuilder(self.name)

        try:
            document = parse_inline_json(config.json_response)
        except ControlError as e:
            return self._fail(builder, e)

        return self._render(builder, document, config)

    async def load_document(self, config: PipelineConfig) -> Any:
        if config.web_api_url and config.json_response:
            raise ConfigurationError("Provide either jsonResponse or webApiUrl, not both")

        if not config.is_remote:
            return parse_inline_json(config.json_response)

        try:
            headers = parse_headers(config.headers)
        except ValueError as e:
            raise ConfigurationError("Invalid Headers") from e

        result = await self.dispatcher.dispatch(
            config.web_api_url,
            headers=headers,
            integrated_auth=config.is_integrated_auth,
        )
        return document_from_result(result)

    def report(self, error: ControlError) -> RunResult:
        """Show an error raised outside a run, e.g. by control validation."""
        return self._fail(RunResultBuilder(self.name), error)

    def select(self, value: str) -> ValueChangeEvent | None:
        """Apply a dropdown selection and publish it."""
        if self.presentation.kind != "dropdown":
            logger.warning("Selection ignored, no dropdown rendered", source=self.name)
            return None

        self.outcome = value
        self.presentation = Presentation.dropdown(
            [
                option.model_copy(update={"selected": not option.disabled and option.value == value})
                for option in self.presentation.options
            ]
        )
        return self.emitter.emit(self.outcome)

    def _render(self, builder: RunResultBuilder, document: Any, config: ParseJsonConfig) -> RunResult:
        try:
            value = self.extractor.extract(document, config.json_path)
            output = self.renderer.render(
                value,
                config.display_as,
                page_mode=self.page_mode,
                current_outcome=self.outcome,
                sort_order=config.sort_order,
                template=config.mustache_template,
                default_message=config.default_message,
            )
        except ControlError as e:
            return self._fail(builder, e)

        self.outcome = output.outcome
        self.presentation = output.presentation
        event = self.emitter.emit(self.outcome)

        logger.info(
            "Control rendered",
            source=self.name,
            variant=config.display_as.value,
            presentation=self.presentation.kind,
        )
        return (
            builder.set_presentation(self.presentation)
            .set_outcome(self.outcome)
            .set_event(event)
            .build_success()
        )

    def _fail(self, builder: RunResultBuilder, error: ControlError) -> RunResult:
        logger.warning("Control run failed", source=self.name, code=error.code, error=error.message)
        self.presentation = Presentation.message(error.message)
        return builder.add_error(error.to_detail()).set_outcome(self.outcome).build_failed()
