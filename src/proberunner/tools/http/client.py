"""HTTP client used to deliver probe requests."""

import time
from dataclasses import dataclass
from typing import Protocol

import httpx

from proberunner.modules.probe.models import ProbeRequest

DEFAULT_USER_AGENT = "proberunner/0.1"


@dataclass
class HTTPResponse:
    """Represents an HTTP response."""

    url: str
    status_code: int
    headers: dict[str, str]
    body: str
    response_time: float
    content_type: str = ""
    server: str = ""


class HTTPTransport(Protocol):
    """Anything that can deliver a probe request and return its response."""

    async def send(self, request: ProbeRequest, deadline: float) -> HTTPResponse:
        """Send ``request`` and give up after ``deadline`` seconds."""
        ...


class HTTPClient:
    """Async HTTP client backed by httpx."""

    def __init__(
        self,
        timeout: float = 30.0,
        follow_redirects: bool = False,
        verify_ssl: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent
        self.transport = transport
        self.client: httpx.AsyncClient | None = None

    async def __aenter__(self):
        self.client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=self.follow_redirects,
            verify=self.verify_ssl,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            await self.client.aclose()
            self.client = None

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        content: str | bytes | None = None,
        timeout: float | None = None,
    ) -> HTTPResponse:
        """Make an HTTP request."""
        if not self.client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        start = time.perf_counter()

        response = await self.client.request(
            method=method,
            url=url,
            headers=headers,
            content=content,
            timeout=timeout if timeout is not None else self.timeout,
        )

        elapsed = time.perf_counter() - start

        return HTTPResponse(
            url=str(response.url),
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.text,
            response_time=elapsed,
            content_type=response.headers.get("content-type", ""),
            server=response.headers.get("server", ""),
        )

    async def send(self, request: ProbeRequest, deadline: float) -> HTTPResponse:
        """Deliver a probe request with a per-request timeout."""
        return await self.request(
            request.method,
            request.url,
            headers=request.headers,
            content=request.body,
            timeout=deadline,
        )
