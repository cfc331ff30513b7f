"""Normalised outcome of a Web API request."""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Why a request did not produce a JSON document."""

    TRANSPORT = "transport"
    HTTP = "http"
    PARSE = "parse"


class RequestSuccess(BaseModel):
    """A 200 response whose body parsed as JSON."""

    kind: Literal["success"] = "success"
    status: int = Field(default=200, description="HTTP status code")
    body: Any = Field(default=None, description="Parsed JSON body")


class RequestFailure(BaseModel):
    """A request that failed in transport, returned a non-200 status or invalid JSON."""

    kind: Literal["failure"] = "failure"
    status: str = Field(..., description="HTTP status, or '500' for transport failures")
    message: str = Field(default="", description="Failure cause or status text")
    reason: FailureKind = Field(..., description="Failure category")

    @property
    def display_message(self) -> str:
        """User-facing text for this failure."""
        if self.reason == FailureKind.PARSE:
            return "Invalid JSON response"
        return f"WebApi request failed: {self.status} - {self.message or 'Error!'}"


RequestResult = Annotated[Union[RequestSuccess, RequestFailure], Field(discriminator="kind")]
