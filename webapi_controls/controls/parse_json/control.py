"""Parse JSON control - renders a value picked out of inline JSON."""

from typing import Any

import structlog

from webapi_controls.controls.common import ChangeEmitter, ConfigurationError
from webapi_controls.controls.pipeline import JsonPipeline
from webapi_controls.shared.models import (
    HostEnvironment,
    PageMode,
    ParseJsonConfig,
    Presentation,
    RunResult,
    ValueChangeEvent,
)

logger = structlog.get_logger()


class ParseJsonControl:
    """Parse JSON control lifecycle: connect once, re-run when the JSON changes."""

    name = "parse-json"

    def __init__(
        self,
        config: ParseJsonConfig,
        environment: HostEnvironment,
        form: ChangeEmitter | None = None,
        pipeline: JsonPipeline | None = None,
    ):
        self.config = config
        self.environment = environment
        self.emitter = form.child(self.name) if form else ChangeEmitter(self.name)
        self.pipeline = pipeline or JsonPipeline(
            environment,
            emitter=self.emitter,
            outcome=config.outcome,
            name=self.name,
        )
        self.loaded = False
        self.last_result: RunResult | None = None

    @property
    def page_mode(self) -> PageMode:
        return self.pipeline.page_mode

    @property
    def presentation(self) -> Presentation:
        return self.pipeline.presentation

    @property
    def outcome(self) -> Any:
        return self.pipeline.outcome

    def connect(self) -> RunResult | None:
        """First attachment to the form. Later calls are no-ops."""
        if self.loaded:
            return None
        self.loaded = True

        logger.debug("Connecting control", control=self.name, page_mode=self.page_mode.value)

        if not (self.config.json_response and self.config.json_path and self.config.display_as):
            self.last_result = self.pipeline.report(ConfigurationError("Please configure control"))
            return self.last_result

        return self.run()

    def run(self) -> RunResult:
        self.last_result = self.pipeline.run_inline(self.config)
        return self.last_result

    def update(self, **changes: Any) -> RunResult | None:
        """Apply property changes by field name. Re-runs if the JSON changed."""
        previous = self.config.json_response
        self.config = ParseJsonConfig.model_validate({**self.config.model_dump(), **changes})

        if self.config.json_response != previous:
            return self.run()
        return None

    def select(self, value: str) -> ValueChangeEvent | None:
        """User picked a dropdown option."""
        return self.pipeline.select(value)
