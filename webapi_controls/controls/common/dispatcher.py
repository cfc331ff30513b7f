"""Web API request dispatch: direct fetch or app-context proxy."""

import asyncio
from enum import Enum
from typing import Any, Protocol

import aiohttp
from pydantic import BaseModel, Field
import structlog

from webapi_controls.config import HttpSettings, get_settings
from webapi_controls.shared.models import (
    FailureKind,
    HostEnvironment,
    RequestFailure,
    RequestResult,
    RequestSuccess,
)
from .transformers import load_json

logger = structlog.get_logger()

# Site and web REST endpoints live behind the host site boundary
SITE_API_MARKERS = ("/_api/web/", "/_api/site/")
API_SEGMENT = "/_api/"
PROXIED_API_SEGMENT = "/_api/SP.AppContextSite(@target)/"

DIRECT_ACCEPT = "application/json"
PROXY_ACCEPT = "application/json; odata=verbose"

DIRECT_FAILURE_HINT = "Try checking authentication"
PROXY_FAILURE_HINT = "Try checking end point"


class TransportMode(str, Enum):
    """How a request reaches its endpoint."""

    DIRECT = "direct"
    PROXY = "proxy"


class ProxyRequest(BaseModel):
    """Request handed to the app-context proxy executor."""

    url: str
    method: str = "GET"
    headers: dict[str, str] = Field(default_factory=dict)


class ProxyResponse(BaseModel):
    """Response returned by the app-context proxy executor."""

    status_code: int
    status_text: str = ""
    body: str | bytes | None = None


class ProxyExecutor(Protocol):
    """Executes a request in the app web's context on behalf of the host web."""

    async def execute(self, app_web_url: str, request: ProxyRequest) -> ProxyResponse: ...


def resolve_mode(target_url: str) -> TransportMode:
    """Site/web REST endpoints go through the proxy, everything else is direct."""
    if any(marker in target_url for marker in SITE_API_MARKERS):
        return TransportMode.PROXY
    return TransportMode.DIRECT


def rewrite_proxy_url(target_url: str, host_web_url: str | None, app_web_url: str | None) -> str:
    """Rewrite a host web API URL into its app-context equivalent.

    ``https://host/site/_api/web/lists`` with host ``https://host/site`` and
    app web ``https://apphost/app`` becomes
    ``https://apphost/app/_api/SP.AppContextSite(@target)/web/lists?@target='https://host/site'``.
    """
    relative = target_url.replace(host_web_url or "", "", 1)
    proxied = (app_web_url or "") + relative.replace(API_SEGMENT, PROXIED_API_SEGMENT, 1)
    separator = "&" if "?" in target_url else "?"
    return f"{proxied}{separator}@target='{host_web_url or ''}'"


def describe_error(error: BaseException) -> str:
    """Render an exception as ``Name: message``."""
    message = str(error)
    name = type(error).__name__
    return f"{name}: {message}" if message else name


def normalize_response(status: int, status_text: str, body: str | bytes | None) -> RequestResult:
    """Accept only a 200 response with a JSON body.

    Bytes are decoded as JSON text, so a body that is not valid UTF-8 is an
    invalid JSON response rather than an error.
    """
    if status != 200 or body is None:
        return RequestFailure(status=str(status), message=status_text, reason=FailureKind.HTTP)

    try:
        document = load_json(body)
    except ValueError:
        return RequestFailure(
            status=str(status),
            message="Invalid JSON response",
            reason=FailureKind.PARSE,
        )

    return RequestSuccess(status=status, body=document)


class HttpProxyExecutor:
    """Proxy executor that issues the rewritten request over HTTP."""

    def __init__(self, session: aiohttp.ClientSession | None = None, verify_ssl: bool = True):
        self._session = session
        self.verify_ssl = verify_ssl

    async def execute(self, app_web_url: str, request: ProxyRequest) -> ProxyResponse:
        logger.debug("Executing via app context", app_web_url=app_web_url, url=request.url)

        if self._session is not None:
            return await self._send(self._session, request)

        async with aiohttp.ClientSession() as session:
            return await self._send(session, request)

    async def _send(self, session: aiohttp.ClientSession, request: ProxyRequest) -> ProxyResponse:
        async with session.request(
            request.method,
            request.url,
            headers=request.headers,
            ssl=self.verify_ssl,
        ) as response:
            body = await response.read()
            if response.status != 200:
                raise aiohttp.ClientResponseError(
                    response.request_info,
                    response.history,
                    status=response.status,
                    message=response.reason or "",
                )
            return ProxyResponse(status_code=response.status, status_text=response.reason or "", body=body)


class RequestDispatcher:
    """Fetch JSON from a Web API, choosing direct or proxy transport."""

    def __init__(
        self,
        environment: HostEnvironment,
        session: aiohttp.ClientSession | None = None,
        proxy_executor: ProxyExecutor | None = None,
        settings: HttpSettings | None = None,
    ):
        self.environment = environment
        self.settings = settings or get_settings().http
        self._session = session
        self._proxy_executor = proxy_executor or HttpProxyExecutor(
            session=session, verify_ssl=self.settings.verify_ssl
        )

    async def dispatch(
        self,
        target_url: str,
        headers: dict[str, str] | None = None,
        integrated_auth: bool = False,
    ) -> RequestResult:
        """Issue a single GET and normalise the outcome.

        Never raises for network problems; they come back as RequestFailure.
        """
        mode = resolve_mode(target_url)
        logger.info("Dispatching request", mode=mode.value, url=target_url)

        if mode == TransportMode.PROXY:
            result = await self._dispatch_proxy(target_url)
        else:
            result = await self._dispatch_direct(target_url, headers, integrated_auth)

        if isinstance(result, RequestFailure):
            logger.warning(
                "Request failed",
                url=target_url,
                status=result.status,
                reason=result.reason.value,
                error=result.message,
            )
        return result

    async def _dispatch_direct(
        self,
        url: str,
        headers: dict[str, str] | None,
        integrated_auth: bool,
    ) -> RequestResult:
        request_headers = {**(headers or {}), "Accept": DIRECT_ACCEPT}
        cookies = self.environment.cookies if integrated_auth else None

        try:
            if self._session is not None:
                return await self._fetch(self._session, url, request_headers, cookies)

            async with aiohttp.ClientSession() as session:
                return await self._fetch(session, url, request_headers, cookies)

        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            return RequestFailure(
                status="500",
                message=f"{describe_error(e)}, {DIRECT_FAILURE_HINT}",
                reason=FailureKind.TRANSPORT,
            )

    async def _fetch(
        self,
        session: aiohttp.ClientSession,
        url: str,
        headers: dict[str, str],
        cookies: dict[str, str] | None,
    ) -> RequestResult:
        async with session.get(
            url,
            headers=headers,
            cookies=cookies,
            ssl=self.settings.verify_ssl,
        ) as response:
            body = await response.read() if response.status == 200 else None
            return normalize_response(response.status, response.reason or "", body)

    async def _dispatch_proxy(self, target_url: str) -> RequestResult:
        host_web_url = self.environment.host_web_url
        app_web_url = self.environment.app_web_url
        proxied_url = rewrite_proxy_url(target_url, host_web_url, app_web_url)

        request = ProxyRequest(url=proxied_url, headers={"Accept": PROXY_ACCEPT})
        try:
            response = await self._proxy_executor.execute(app_web_url or "", request)
        except Exception as e:
            return RequestFailure(
                status="500",
                message=f"{describe_error(e)}, {PROXY_FAILURE_HINT}",
                reason=FailureKind.TRANSPORT,
            )

        return normalize_response(response.status_code, response.status_text, response.body)


def parse_headers(headers: str) -> dict[str, str]:
    """Parse a headers property. Raises ValueError unless it is a JSON object."""
    parsed: Any = load_json(headers)
    if not isinstance(parsed, dict):
        raise ValueError("Headers must be a JSON object")
    return {str(name): str(value) for name, value in parsed.items()}
