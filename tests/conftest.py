"""
Pytest configuration and shared fixtures.
"""
import json
import pytest
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

from webapi_controls.controls.common import ChangeEmitter
from webapi_controls.controls.common.dispatcher import ProxyResponse
from webapi_controls.shared.models import HostEnvironment, ValueChangeEvent


HOST_WEB_URL = "https://host/site"
APP_WEB_URL = "https://apphost/app"


# Host environment fixtures
@pytest.fixture
def new_environment() -> HostEnvironment:
    """Host page opened for a new form."""
    return HostEnvironment.from_url("https://forms.example.com/fill?mode=0")


@pytest.fixture
def edit_environment() -> HostEnvironment:
    """Host page opened to edit an existing submission."""
    return HostEnvironment.from_url("https://forms.example.com/fill?mode=1")


@pytest.fixture
def display_environment() -> HostEnvironment:
    """Host page showing a submission read-only."""
    return HostEnvironment.from_url("https://forms.example.com/fill?mode=2")


@pytest.fixture
def proxy_environment() -> HostEnvironment:
    """Host page running as an app web with host and app web URLs in the query string."""
    return HostEnvironment(
        query_string=f"?mode=0&amp;SPHostUrl={HOST_WEB_URL}&amp;SPAppWebUrl={APP_WEB_URL}",
        pathname="/app/Pages/Form.aspx",
        cookies={"FedAuth": "token-123"},
    )


@pytest.fixture
def designer_environment() -> HostEnvironment:
    """Form designer preview, served from the site root."""
    return HostEnvironment.from_url("https://forms.example.com/")


# Form container fixture
@pytest.fixture
def form() -> ChangeEmitter:
    """Form container emitter."""
    return ChangeEmitter("form")


@pytest.fixture
def captured_events(form) -> list[ValueChangeEvent]:
    """Every change event that bubbles up to the form container."""
    events: list[ValueChangeEvent] = []
    form.subscribe(events.append)
    return events


# Mock fixtures
@pytest.fixture
def mock_http_session() -> Callable[..., MagicMock]:
    """Factory for a mocked aiohttp session.

    ``session.get(...)`` is used as an async context manager yielding a
    response with the given status, reason and body. Bodies that are not
    already str or bytes are serialised to JSON.
    """

    def factory(
        status: int = 200,
        body: Any = None,
        reason: str = "OK",
        error: Exception | None = None,
    ) -> MagicMock:
        response = MagicMock()
        response.status = status
        response.reason = reason
        payload = body if isinstance(body, (str, bytes)) else json.dumps(body)
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        response.read = AsyncMock(return_value=payload)

        context = MagicMock()
        context.__aenter__ = AsyncMock(return_value=response)
        context.__aexit__ = AsyncMock(return_value=False)

        session = MagicMock()
        if error is not None:
            session.get = MagicMock(side_effect=error)
        else:
            session.get = MagicMock(return_value=context)
        return session

    return factory


@pytest.fixture
def mock_proxy_executor() -> Callable[..., MagicMock]:
    """Factory for a mocked app-context proxy executor."""

    def factory(
        status_code: int = 200,
        body: Any = None,
        status_text: str = "OK",
        error: Exception | None = None,
    ) -> MagicMock:
        executor = MagicMock()
        if error is not None:
            executor.execute = AsyncMock(side_effect=error)
        else:
            text = body if isinstance(body, str) or body is None else json.dumps(body)
            executor.execute = AsyncMock(
                return_value=ProxyResponse(status_code=status_code, status_text=status_text, body=text)
            )
        return executor

    return factory


# JSON fixtures
@pytest.fixture
def colours_json() -> dict:
    """Document with a list of colours and a nested owner."""
    return {
        "colours": ["red", "green", "blue"],
        "owner": {"name": "Ada", "age": 36, "active": True},
    }


@pytest.fixture
def people_json() -> dict:
    """Document with a list of people."""
    return {
        "people": [
            {"name": "Charlie", "age": 41},
            {"name": "Alice", "age": 29},
            {"name": "Bob", "age": 35},
        ]
    }
