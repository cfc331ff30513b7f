"""WebApi Request control - fetches JSON and publishes it as the control value."""

import json
from typing import Any

import structlog

from webapi_controls.controls.common import (
    ChangeEmitter,
    ConfigurationError,
    ControlError,
    RequestDispatcher,
    RunResultBuilder,
)
from webapi_controls.controls.common.dispatcher import parse_headers
from webapi_controls.controls.pipeline import document_from_result
from webapi_controls.shared.models import (
    HostEnvironment,
    Presentation,
    RunResult,
    WebApiRequestConfig,
)

logger = structlog.get_logger()


class WebApiRequestControl:
    """WebApi Request control lifecycle: connect once, re-fetch when the URL changes."""

    name = "webapi-request"

    def __init__(
        self,
        config: WebApiRequestConfig,
        environment: HostEnvironment,
        form: ChangeEmitter | None = None,
        dispatcher: RequestDispatcher | None = None,
    ):
        self.config = config
        self.environment = environment
        self.emitter = form.child(self.name) if form else ChangeEmitter(self.name)
        self.dispatcher = dispatcher or RequestDispatcher(environment)
        self.presentation: Presentation = Presentation.message("Loading...")
        self.outcome: Any = config.outcome
        self.loaded = False
        self.last_result: RunResult | None = None

    async def connect(self) -> RunResult | None:
        """First attachment to the form. Later calls are no-ops."""
        if self.loaded:
            return None
        self.loaded = True

        if self.environment.is_designer:
            return self._fail(RunResultBuilder(self.name), ConfigurationError("Please configure control"))

        if not self.config.web_api_url:
            return self._fail(RunResultBuilder(self.name), ConfigurationError("Invalid WebApi Url"))

        return await self.call_api()

    async def call_api(self) -> RunResult:
        """Fetch the configured URL, show the JSON and emit it."""
        builder = RunResultBuilder(self.name)

        try:
            headers = parse_headers(self.config.headers)
        except ValueError:
            return self._fail(builder, ConfigurationError("Invalid Headers"))

        result = await self.dispatcher.dispatch(
            self.config.web_api_url,
            headers=headers,
            integrated_auth=self.config.is_integrated_auth,
        )

        try:
            document = document_from_result(result)
        except ControlError as e:
            return self._fail(builder, e)

        self.presentation = Presentation.json_document(document)
        self.outcome = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
        event = self.emitter.emit(self.outcome)

        logger.info("WebApi response published", url=self.config.web_api_url, status=result.status)
        self.last_result = (
            builder.set_presentation(self.presentation)
            .set_outcome(self.outcome)
            .set_event(event)
            .build_success()
        )
        return self.last_result

    async def update(self, **changes: Any) -> RunResult | None:
        """Apply property changes by field name. Re-fetches if the URL changed."""
        previous = self.config.web_api_url
        self.config = WebApiRequestConfig.model_validate({**self.config.model_dump(), **changes})

        if self.config.web_api_url != previous:
            return await self.call_api()
        return None

    def _fail(self, builder: RunResultBuilder, error: ControlError) -> RunResult:
        logger.warning("Control run failed", source=self.name, code=error.code, error=error.message)
        self.presentation = Presentation.message(error.message)
        self.last_result = builder.add_error(error.to_detail()).set_outcome(self.outcome).build_failed()
        return self.last_result
