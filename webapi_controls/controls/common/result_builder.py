"""Result builder for control runs."""

from datetime import datetime, timezone
from typing import Any

from webapi_controls.shared.models import (
    ErrorDetail,
    Presentation,
    RunResult,
    ValueChangeEvent,
)


class RunResultBuilder:
    """Builder for constructing run results."""

    def __init__(self, control: str):
        self.control = control
        self._started_at: datetime = datetime.now(timezone.utc)
        self._presentation: Presentation = Presentation.message("Loading...")
        self._outcome: Any = None
        self._event: ValueChangeEvent | None = None
        self._errors: list[ErrorDetail] = []

    def set_presentation(self, presentation: Presentation) -> "RunResultBuilder":
        self._presentation = presentation
        return self

    def set_outcome(self, outcome: Any) -> "RunResultBuilder":
        self._outcome = outcome
        return self

    def set_event(self, event: ValueChangeEvent) -> "RunResultBuilder":
        """Record the change event emitted by this run."""
        self._event = event
        return self

    def add_error(self, error: ErrorDetail) -> "RunResultBuilder":
        """Add an error and show its message in place of the control."""
        self._errors.append(error)
        self._presentation = Presentation.message(error.message)
        return self

    def build_success(self) -> RunResult:
        return self._build("success")

    def build_failed(self) -> RunResult:
        return self._build("failed")

    def _build(self, status: str) -> RunResult:
        return RunResult(
            control=self.control,
            status=status,
            presentation=self._presentation,
            outcome=self._outcome,
            event=self._event,
            errors=self._errors,
            started_at=self._started_at,
            completed_at=datetime.now(timezone.utc),
        )
