"""Shared Pydantic models for control configuration and results."""

from .control_config import (
    DisplayVariant,
    PageMode,
    ParseJsonConfig,
    PipelineConfig,
    SortOrder,
    WebApiRequestConfig,
)
from .events import VALUE_CHANGE_EVENT, ValueChangeEvent
from .host_environment import HostEnvironment
from .request_result import FailureKind, RequestFailure, RequestResult, RequestSuccess
from .run_result import ErrorDetail, OptionView, Presentation, RunResult

__all__ = [
    # Control configuration
    "DisplayVariant",
    "PageMode",
    "SortOrder",
    "ParseJsonConfig",
    "WebApiRequestConfig",
    "PipelineConfig",
    "HostEnvironment",
    # Requests
    "FailureKind",
    "RequestSuccess",
    "RequestFailure",
    "RequestResult",
    # Results
    "OptionView",
    "Presentation",
    "ErrorDetail",
    "RunResult",
    "ValueChangeEvent",
    "VALUE_CHANGE_EVENT",
]
