"""HTTP transports.

Everything above this module talks to the proxy through `Transport.send`, a
single "execute request, get response" call, so tests can substitute a fake.
Two implementations are provided: `RequestsTransport` (the default, backed by
a requests.Session) and `HTTPXTransport` (backed by an httpx.Client, which
also accepts a FastAPI/Starlette TestClient).
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx
import requests

from .errors import TransportError
from .observability import logger, metrics

# Per request, connect and read. Applies to every round-trip, including each
# fetch made by wait_for; None disables it.
DEFAULT_REQUEST_TIMEOUT = 30.0


@dataclass(frozen=True)
class HTTPRequest:
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None


@dataclass(frozen=True)
class HTTPResponse:
    status_code: int
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)


class Transport:
    """Abstract interface for transports."""

    def send(self, request: HTTPRequest) -> HTTPResponse:
        """Perform the request and return the fully read response.

        Implementations raise TransportError when no response could be read.
        Non-success statuses are returned, not raised.
        """
        raise NotImplementedError()

    def close(self) -> None:
        pass


class RequestsTransport(Transport):
    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(self, request: HTTPRequest) -> HTTPResponse:
        try:
            resp = self.session.request(
                request.method,
                request.url,
                headers=request.headers,
                data=request.body,
                timeout=self.timeout,
            )
            body = resp.content
        except requests.RequestException as e:
            raise TransportError(f"{request.method} {request.url}: {e}") from e
        return HTTPResponse(
            status_code=resp.status_code, body=body, headers=dict(resp.headers)
        )

    def close(self) -> None:
        self.session.close()


class HTTPXTransport(Transport):
    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT,
    ):
        self._client = client or httpx.Client(timeout=timeout)

    def send(self, request: HTTPRequest) -> HTTPResponse:
        try:
            resp = self._client.request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.body,
            )
            body = resp.content
        except httpx.HTTPError as e:
            raise TransportError(f"{request.method} {request.url}: {e}") from e
        return HTTPResponse(
            status_code=resp.status_code, body=body, headers=dict(resp.headers)
        )

    def close(self) -> None:
        self._client.close()


def execute(transport: Transport, request: HTTPRequest) -> HTTPResponse:
    """Send `request` once, logging and timing the round trip."""
    logger.debug("request_sent", method=request.method, url=request.url)
    metrics.inc("proxy_requests")
    started = time.monotonic()
    try:
        response = transport.send(request)
    except TransportError as e:
        metrics.inc("proxy_request_failures")
        logger.warning(
            "request_failed", method=request.method, url=request.url, error=str(e)
        )
        raise
    finally:
        metrics.timing("proxy_request_seconds", time.monotonic() - started)
    logger.debug(
        "response_received",
        method=request.method,
        url=request.url,
        status=response.status_code,
    )
    return response
